# services/base_service.py
from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from services.app_state import AppState
from services.errors import ValidationError
from utils.storage import KeyValueStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now().astimezone()


class BaseService(ABC):
    """
    A component of the core: owns one slice of `AppState` and is the only
    writer of that slice to the store. Holds no state of its own.
    """

    def __init__(
        self,
        *,
        name: str,
        state: AppState,
        store: KeyValueStore,
        clock: Optional[Clock] = None,
    ) -> None:
        self.name = name
        self.state = state
        self.store = store
        self.now: Clock = clock or local_now

    @abstractmethod
    def hydrate(self) -> None:
        """Load this component's slice of state from the store (or its defaults)."""
        ...

    def _validate(self, model: Type[M], payload: Any) -> M:
        if isinstance(payload, model):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            err = ValidationError.from_pydantic(e)
            logger.info("[%s] rejected %s: %s", self.name, model.__name__, err)
            raise err from None

    def _load_one(self, key: str, model: Type[M]) -> Optional[M]:
        raw = self.store.get_json(key)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning("[%s] stored %r is not a valid %s, ignoring: %s", self.name, key, model.__name__, e)
            return None

    def _load_many(self, key: str, model: Type[M], default: Callable[[], List[M]]) -> List[M]:
        raw = self.store.get_json(key)
        if raw is None:
            return default()
        if not isinstance(raw, list):
            logger.warning("[%s] stored %r is not a list, using defaults", self.name, key)
            return default()
        try:
            return [model.model_validate(x) for x in raw]
        except PydanticValidationError as e:
            logger.warning("[%s] stored %r has invalid entries, using defaults: %s", self.name, key, e)
            return default()

    def _write_many(self, key: str, items: List[Any]) -> None:
        self.store.set_json(key, [i.to_storage() for i in items])
