# seeds/config_seed.py
from __future__ import annotations
from typing import Dict

from hw_types.housewarming_types import EventConfig

DEFAULT_CONFIG: Dict[str, str] = {
    "eventDate": "2024-12-15",
    "eventTime": "18:00",
    "location": "Rua das Flores, 123 - Apt 42, São Paulo",
    "locationLink": "https://maps.app.goo.gl/3fX3B7F1V8C2D5E6",
    "rsvpDeadline": "2024-12-01",
    "googleCalendarLink": (
        "https://calendar.google.com/calendar/render?action=TEMPLATE"
        "&text=Chá+de+Casa+Nova+-+Nosso+Novo+Lar"
        "&dates=20241215T210000Z/20241216T010000Z"
        "&details=Esperamos+vocês+para+celebrar+nossa+conquista!"
        "&location=Rua+das+Flores,+123+-+Apt+42,+São+Paulo"
    ),
}


def default_event_config() -> EventConfig:
    return EventConfig.model_validate(DEFAULT_CONFIG)
