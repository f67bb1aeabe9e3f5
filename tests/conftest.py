from __future__ import annotations
from datetime import datetime, timedelta, timezone

import pytest

from hw_types.housewarming_types import GuestIdentity
from services.app import HousewarmingApp
from utils.storage import MemoryStore

ADMIN_PASSPHRASE = "segredo-da-casa"


class FixedClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 11, 20, 15, 30, tzinfo=timezone.utc))


@pytest.fixture
def admin_passphrase() -> str:
    return ADMIN_PASSPHRASE


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_app(store, clock):
    def _make() -> HousewarmingApp:
        return HousewarmingApp(store, admin_passphrase=ADMIN_PASSPHRASE, clock=clock).hydrate()
    return _make


@pytest.fixture
def app(make_app) -> HousewarmingApp:
    return make_app()


@pytest.fixture
def maria(app) -> GuestIdentity:
    return app.identity.submit_identity("Maria Clara", "(11) 91234-5678")


@pytest.fixture
def joao() -> GuestIdentity:
    # a second guest from another session; does not replace the current one
    return GuestIdentity(name="João Pedro", contact="(21) 99876-5432")
