# services/app_state.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from hw_types.housewarming_types import AttendanceRecord, EventConfig, GiftItem, GuestIdentity
from seeds.config_seed import default_event_config

ANONYMOUS = "anonymous"
GUEST = "guest"
ADMIN = "admin"


@dataclass
class AppState:
    """Everything the page knows about, owned by the composing layer and shared by the services."""

    guest: Optional[GuestIdentity] = None
    is_admin: bool = False
    gifts: List[GiftItem] = field(default_factory=list)
    records: List[AttendanceRecord] = field(default_factory=list)
    config: EventConfig = field(default_factory=default_event_config)
    last_gift_id: int = 0

    @property
    def principal(self) -> str:
        if self.is_admin:
            return ADMIN
        if self.guest is not None:
            return GUEST
        return ANONYMOUS
