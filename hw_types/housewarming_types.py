from __future__ import annotations
import re
from typing import Any, Dict, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

# (11) 91234-5678
PHONE_PATTERN = re.compile(r"^\(\d{2}\) \d{5}-\d{4}$")

MAX_ADULTS = 10
MAX_CHILDREN = 10

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def is_valid_contact(value: Any) -> bool:
    return isinstance(value, str) and bool(PHONE_PATTERN.match(value))


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_url(value: Optional[str], code: str, message: str) -> Optional[str]:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        _HTTP_URL.validate_python(value)
    except PydanticValidationError:
        raise PydanticCustomError(code, message)
    return value


def _check_min_length(value: str, minimum: int, code: str, message: str) -> str:
    value = value.strip()
    if len(value) < minimum:
        raise PydanticCustomError(code, message)
    return value


# ───────────────────────── Stored entities ─────────────────────────
class _StoredModel(BaseModel):
    """Entities are persisted with camelCase keys; Python code uses snake_case."""

    model_config = ConfigDict(populate_by_name=True)

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class GuestIdentity(_StoredModel):
    name: str
    contact: str = Field(alias="phone")
    is_admin: bool = Field(False, alias="isAdmin")
    # Set by the resolver when the contact already had an RSVP; never persisted.
    recognized: bool = Field(False, exclude=True)


class GiftItem(_StoredModel):
    id: str
    name: str
    description: str
    image_url: str = Field("", alias="imageUrl")
    link: Optional[str] = None
    price_estimate: Optional[float] = Field(None, alias="priceEstimate")
    is_reserved: bool = Field(False, alias="isReserved")
    reserved_by: Optional[str] = Field(None, alias="reservedBy")

    @model_validator(mode="after")
    def _reservation_consistent(self) -> "GiftItem":
        if self.is_reserved != (self.reserved_by is not None):
            raise ValueError("isReserved and reservedBy must agree")
        return self


class AttendanceRecord(_StoredModel):
    contact: str
    name: str
    attending: bool
    adults_count: int = Field(0, alias="adultsCount")
    children_count: int = Field(0, alias="childrenCount")
    total_guests: int = Field(0, alias="totalGuests")
    submitted_at: str = Field(alias="submittedAt")


class EventConfig(_StoredModel):
    event_date: str = Field(alias="eventDate")
    event_time: str = Field(alias="eventTime")
    rsvp_deadline: str = Field(alias="rsvpDeadline")
    location: str
    location_link: Optional[str] = Field(None, alias="locationLink")
    google_calendar_link: str = Field("", alias="googleCalendarLink")


# ───────────────────────── Requests (validated at the boundary) ─────────────────────────
class ContactRequest(BaseModel):
    contact: str

    @field_validator("contact")
    @classmethod
    def _contact_mask(cls, v: str) -> str:
        v = v.strip()
        if not PHONE_PATTERN.match(v):
            raise PydanticCustomError("contact_format", "Formato inválido: (00) 00000-0000")
        return v


class IdentityRequest(ContactRequest):
    name: str

    @field_validator("name")
    @classmethod
    def _name_length(cls, v: str) -> str:
        return _check_min_length(v, 3, "name_length", "O nome deve ter pelo menos 3 caracteres")


class AttendanceRequest(ContactRequest):
    name: str
    attending: bool
    adults: int = 1
    children: int = 0

    @field_validator("name")
    @classmethod
    def _name_present(cls, v: str) -> str:
        return _check_min_length(v, 1, "name_required", "Nome é obrigatório")

    # Party size only matters for guests who are coming.
    @field_validator("adults")
    @classmethod
    def _adults_range(cls, v: int, info: ValidationInfo) -> int:
        if not info.data.get("attending", True):
            return v
        if v < 1:
            raise PydanticCustomError("adults_min", "Mínimo 1 adulto")
        if v > MAX_ADULTS:
            raise PydanticCustomError("adults_max", "Máximo 10 adultos")
        return v

    @field_validator("children")
    @classmethod
    def _children_range(cls, v: int, info: ValidationInfo) -> int:
        if not info.data.get("attending", True):
            return v
        if v < 0:
            raise PydanticCustomError("children_min", "Mínimo 0")
        if v > MAX_CHILDREN:
            raise PydanticCustomError("children_max", "Máximo 10 crianças")
        return v


class GiftRequest(BaseModel):
    name: str
    description: str
    image_url: Optional[str] = None
    link: Optional[str] = None
    price_estimate: Optional[float] = None

    @field_validator("name")
    @classmethod
    def _name_length(cls, v: str) -> str:
        return _check_min_length(v, 2, "name_length", "Nome muito curto")

    @field_validator("description")
    @classmethod
    def _description_length(cls, v: str) -> str:
        return _check_min_length(v, 5, "description_length", "Descrição muito curta")

    @field_validator("image_url")
    @classmethod
    def _image_optional(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("link")
    @classmethod
    def _link_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v, "link_url", "Link da loja inválido")


class EventConfigRequest(BaseModel):
    event_date: str
    event_time: str
    rsvp_deadline: str
    location: str
    location_link: Optional[str] = None
    google_calendar_link: Optional[str] = None

    @field_validator("event_date")
    @classmethod
    def _date_required(cls, v: str) -> str:
        return _check_min_length(v, 1, "event_date_required", "Data é obrigatória")

    @field_validator("event_time")
    @classmethod
    def _time_required(cls, v: str) -> str:
        return _check_min_length(v, 1, "event_time_required", "Hora é obrigatória")

    @field_validator("rsvp_deadline")
    @classmethod
    def _deadline_required(cls, v: str) -> str:
        return _check_min_length(v, 1, "rsvp_deadline_required", "Prazo é obrigatório")

    @field_validator("location")
    @classmethod
    def _location_length(cls, v: str) -> str:
        return _check_min_length(v, 5, "location_length", "Endereço muito curto")

    @field_validator("location_link")
    @classmethod
    def _location_link_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v, "location_link_url", "Link inválido")

    def to_config(self) -> EventConfig:
        return EventConfig(
            event_date=self.event_date,
            event_time=self.event_time,
            rsvp_deadline=self.rsvp_deadline,
            location=self.location,
            location_link=self.location_link,
            google_calendar_link=(self.google_calendar_link or "").strip(),
        )


# Convenience: build request payloads from UI widget values
def make_gift_request(
    *,
    name: str,
    description: str,
    image_url: Optional[str] = None,
    link: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "image_url": image_url,
        "link": link,
    }


def make_config_request(
    *,
    event_date: str,
    event_time: str,
    rsvp_deadline: str,
    location: str,
    location_link: Optional[str] = None,
    google_calendar_link: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "event_date": event_date,
        "event_time": event_time,
        "rsvp_deadline": rsvp_deadline,
        "location": location,
        "location_link": location_link,
        "google_calendar_link": google_calendar_link,
    }
