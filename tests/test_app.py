from seeds.storage_keys import (
    ADMIN_STORAGE_KEY,
    CONFIG_STORAGE_KEY,
    GIFTS_STORAGE_KEY,
    RSVP_STORAGE_KEY,
    USER_STORAGE_KEY,
)
from services.app import build_app
from utils.settings import Settings
from utils.storage import JsonFileStore


def test_fresh_start_writes_nothing(app, store):
    assert app.state.principal == "anonymous"
    assert len(app.gifts.items) == 4
    assert app.attendance.records == []
    assert store.keys() == []


def test_full_guest_journey_on_disk(tmp_path):
    settings = Settings(admin_password="chave", data_dir=tmp_path / "data")
    app = build_app(settings=settings)

    guest = app.identity.submit_identity("Maria Clara", "(11) 91234-5678")
    app.gifts.reserve("1", guest)
    app.attendance.submit(guest.contact, guest.name, True, 2, 0)
    app.admin.login("chave")
    app.config.update({
        "event_date": "2025-01-10",
        "event_time": "20:00",
        "rsvp_deadline": "2025-01-05",
        "location": "Rua Nova, 45, Santos",
    })

    files = sorted(p.stem for p in (tmp_path / "data").glob("*.json"))
    assert files == sorted([
        USER_STORAGE_KEY, ADMIN_STORAGE_KEY, GIFTS_STORAGE_KEY, RSVP_STORAGE_KEY, CONFIG_STORAGE_KEY,
    ])

    reopened = build_app(store=JsonFileStore(tmp_path / "data"), settings=settings)
    assert reopened.identity.current.name == "Maria Clara"
    assert reopened.admin.is_admin is True
    assert reopened.gifts.get("1").reserved_by == "Maria Clara"
    assert reopened.attendance.summary().total_attendees == 2
    assert reopened.config.current.location == "Rua Nova, 45, Santos"
