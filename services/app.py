# services/app.py
from __future__ import annotations
from typing import Optional

from utils.settings import Settings, load_settings
from utils.storage import JsonFileStore, KeyValueStore
from .admin_service import AdminService
from .app_state import AppState
from .attendance_service import AttendanceService
from .base_service import Clock
from .config_service import ConfigService
from .gift_service import GiftService
from .identity_service import IdentityService


class HousewarmingApp:
    """Wires the services around one AppState and one store."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        admin_passphrase: str,
        clock: Optional[Clock] = None,
        state: Optional[AppState] = None,
    ) -> None:
        self.store = store
        self.state = state or AppState()
        common = {"state": self.state, "store": store, "clock": clock}
        self.attendance = AttendanceService(**common)
        self.identity = IdentityService(**common)
        self.gifts = GiftService(**common)
        self.config = ConfigService(**common)
        self.admin = AdminService(passphrase=admin_passphrase, **common)

    def hydrate(self) -> "HousewarmingApp":
        for service in (self.attendance, self.gifts, self.config, self.identity, self.admin):
            service.hydrate()
        return self


def build_app(
    store: Optional[KeyValueStore] = None,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> HousewarmingApp:
    settings = settings or load_settings()
    store = store or JsonFileStore(settings.data_dir)
    return HousewarmingApp(store, admin_passphrase=settings.admin_password, clock=clock).hydrate()
