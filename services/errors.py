# services/errors.py
from __future__ import annotations
from typing import Dict, Mapping, get_args

from pydantic_core.core_schema import ErrorType

# pydantic reports its own checks in English
_BUILTIN_ERROR_TYPES = frozenset(get_args(ErrorType))
_BUILTIN_MESSAGES: Dict[str, str] = {
    "missing": "Campo obrigatório",
    "string_type": "Campo obrigatório",
    "int_type": "Informe um número inteiro",
    "int_parsing": "Informe um número inteiro",
    "int_from_float": "Informe um número inteiro",
    "float_type": "Informe um número",
    "float_parsing": "Informe um número",
    "bool_type": "Escolha sim ou não",
    "bool_parsing": "Escolha sim ou não",
}
INVALID_VALUE = "Valor inválido"


class PlannerError(Exception):
    """Base class for recoverable errors shown next to the control that triggered them."""


class ValidationError(PlannerError):
    """
    One or more fields were rejected. `errors` maps field name → user-facing
    message; `field`/`message` expose the first one.
    """

    def __init__(self, errors: Mapping[str, str]) -> None:
        if not errors:
            raise ValueError("ValidationError needs at least one field error")
        self.errors: Dict[str, str] = dict(errors)
        self.field, self.message = next(iter(self.errors.items()))
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: message})

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        errors: Dict[str, str] = {}
        for err in exc.errors():
            loc = err.get("loc") or ()
            field = ".".join(str(p) for p in loc) or "__root__"
            errors.setdefault(field, _message_for(err))
        return cls(errors)


class ConflictError(PlannerError):
    """The gift is already reserved."""


class AuthFailure(PlannerError):
    """Admin passphrase did not match."""


class AuthorizationError(PlannerError):
    """A guest tried to release a reservation held by someone else."""


class GiftNotFoundError(PlannerError, LookupError):
    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Presente não encontrado: {item_id}")


def _message_for(err) -> str:
    kind = err.get("type", "")
    if kind in _BUILTIN_ERROR_TYPES:
        return _BUILTIN_MESSAGES.get(kind, INVALID_VALUE)
    return err.get("msg") or INVALID_VALUE
