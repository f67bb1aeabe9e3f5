import json

import pytest

from seeds.storage_keys import GIFT_SEQUENCE_STORAGE_KEY, GIFTS_STORAGE_KEY
from services.errors import AuthorizationError, ConflictError, GiftNotFoundError, ValidationError


def test_cold_start_uses_the_four_seed_gifts(app):
    items = app.gifts.items

    assert [g.id for g in items] == ["1", "2", "3", "4"]
    assert not any(g.is_reserved for g in items)


def test_reserve_sets_holder_and_writes_whole_catalog(app, store, maria):
    gift = app.gifts.reserve("2", maria)

    assert gift.is_reserved and gift.reserved_by == "Maria Clara"
    stored = json.loads(store.get_raw(GIFTS_STORAGE_KEY))
    assert len(stored) == 4
    assert stored[1]["isReserved"] is True
    assert stored[1]["reservedBy"] == "Maria Clara"
    assert "reservedBy" not in stored[0]


def test_second_guest_cannot_take_a_reserved_gift(app, maria, joao):
    app.gifts.reserve("1", maria)

    with pytest.raises(ConflictError):
        app.gifts.reserve("1", joao)

    assert app.gifts.get("1").reserved_by == "Maria Clara"


def test_reserving_twice_is_a_conflict_even_for_the_holder(app, store, maria):
    app.gifts.reserve("1", maria)
    before = store.get_raw(GIFTS_STORAGE_KEY)

    with pytest.raises(ConflictError):
        app.gifts.reserve("1", maria)

    assert store.get_raw(GIFTS_STORAGE_KEY) == before


def test_reserve_without_identity_does_nothing(app, store):
    assert app.gifts.reserve("1", None) is None
    assert not app.gifts.get("1").is_reserved
    assert store.get_raw(GIFTS_STORAGE_KEY) is None


def test_cancel_then_reserve_by_someone_else(app, maria, joao):
    app.gifts.reserve("3", maria)
    assert app.gifts.cancel("3") is True

    app.gifts.reserve("3", joao)

    assert app.gifts.get("3").reserved_by == "João Pedro"


def test_guest_cancel_checks_ownership(app, maria, joao):
    app.gifts.reserve("3", maria)

    with pytest.raises(AuthorizationError):
        app.gifts.cancel("3", by_guest=joao)
    assert app.gifts.get("3").reserved_by == "Maria Clara"

    assert app.gifts.cancel("3", by_guest=maria) is True
    assert not app.gifts.get("3").is_reserved


def test_cancel_on_available_item_is_a_noop(app, store):
    assert app.gifts.cancel("4") is False
    assert store.get_raw(GIFTS_STORAGE_KEY) is None


def test_unknown_item(app, maria):
    with pytest.raises(GiftNotFoundError):
        app.gifts.reserve("nope", maria)
    with pytest.raises(GiftNotFoundError):
        app.gifts.remove_item("nope")


def test_admin_adds_a_gift(app, clock):
    gift = app.gifts.add_item({"name": "Liquidificador", "description": "Liquidificador de alta potência"})

    assert len(app.gifts.items) == 5
    assert gift.is_reserved is False
    assert gift.id == str(int(clock().timestamp() * 1000))
    assert gift.image_url == f"https://picsum.photos/seed/{gift.id}/600/400"


def test_added_ids_are_unique_even_within_the_same_millisecond(app):
    first = app.gifts.add_item({"name": "Cafeteira", "description": "Cafeteira italiana"})
    second = app.gifts.add_item({"name": "Chaleira", "description": "Chaleira elétrica"})

    assert int(second.id) > int(first.id)


def test_removed_id_is_never_issued_again(app):
    first = app.gifts.add_item({"name": "Cafeteira", "description": "Cafeteira italiana"})
    app.gifts.remove_item(first.id)

    second = app.gifts.add_item({"name": "Chaleira", "description": "Chaleira elétrica"})

    assert int(second.id) > int(first.id)
    assert second.image_url != first.image_url


def test_issued_ids_survive_a_restart(app, store, make_app, clock):
    first = app.gifts.add_item({"name": "Cafeteira", "description": "Cafeteira italiana"})
    app.gifts.remove_item(first.id)
    assert store.get_json(GIFT_SEQUENCE_STORAGE_KEY) == int(first.id)

    clock.advance(minutes=-5)
    second = make_app().gifts.add_item({"name": "Chaleira", "description": "Chaleira elétrica"})

    assert int(second.id) == int(first.id) + 1


def test_unreadable_sequence_falls_back_to_catalog_ids(store, make_app):
    store.set_raw(GIFT_SEQUENCE_STORAGE_KEY, '"abc"')

    app = make_app()

    assert app.state.last_gift_id == 4


def test_add_keeps_supplied_image_and_link(app):
    gift = app.gifts.add_item({
        "name": "Panela",
        "description": "Panela de pressão",
        "image_url": "data:image/png;base64,AAAA",
        "link": "https://loja.example.com/panela",
    })

    assert gift.image_url == "data:image/png;base64,AAAA"
    assert gift.link == "https://loja.example.com/panela"


@pytest.mark.parametrize("payload, field", [
    ({"name": "P", "description": "Panela de pressão"}, "name"),
    ({"name": "Panela", "description": "abc"}, "description"),
    ({"name": "Panela", "description": "Panela de pressão", "link": "não é link"}, "link"),
])
def test_add_rejects_bad_fields_without_changes(app, store, payload, field):
    with pytest.raises(ValidationError) as exc:
        app.gifts.add_item(payload)

    assert field in exc.value.errors
    assert len(app.gifts.items) == 4
    assert store.get_raw(GIFTS_STORAGE_KEY) is None


def test_remove_deletes_even_reserved_items(app, maria):
    app.gifts.reserve("2", maria)

    app.gifts.remove_item("2")

    assert [g.id for g in app.gifts.items] == ["1", "3", "4"]
    assert app.gifts.reserved_by("Maria Clara") == []


def test_reservations_survive_a_restart(app, make_app, maria):
    app.gifts.reserve("1", maria)

    reopened = make_app()

    assert reopened.gifts.get("1").reserved_by == "Maria Clara"


def test_corrupt_catalog_falls_back_to_seed(store, make_app):
    store.set_raw(GIFTS_STORAGE_KEY, json.dumps([{"id": "9", "name": "x", "description": "y", "isReserved": True}]))

    assert [g.id for g in make_app().gifts.items] == ["1", "2", "3", "4"]


def test_empty_stored_catalog_stays_empty(store, make_app):
    store.set_raw(GIFTS_STORAGE_KEY, "[]")

    app = make_app()

    assert app.gifts.items == []
    assert app.gifts.progress().percent == 0


def test_progress_and_my_gifts(app, maria, joao):
    app.gifts.reserve("1", maria)
    app.gifts.reserve("4", maria)
    app.gifts.reserve("2", joao)

    progress = app.gifts.progress()

    assert (progress.reserved, progress.total, progress.percent) == (3, 4, 75)
    assert [g.id for g in app.gifts.reserved_by("Maria Clara")] == ["1", "4"]
    assert app.gifts.reserved_by(None) == []
