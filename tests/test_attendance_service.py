import json

import pytest

from seeds.storage_keys import RSVP_STORAGE_KEY
from services.attendance_service import summarize
from services.errors import ValidationError

MARIA = "(11) 91234-5678"
JOAO = "(21) 99876-5432"
ANA = "(31) 98888-7777"


def test_first_submit_appends_a_record(app, clock):
    record = app.attendance.submit(MARIA, "Maria Clara", True, 2, 1)

    assert record.total_guests == 3
    assert record.submitted_at == clock().isoformat()
    assert app.attendance.records == [record]


def test_resubmitting_replaces_in_place(app, clock):
    app.attendance.submit(MARIA, "Maria Clara", True, 2, 1)
    app.attendance.submit(JOAO, "João Pedro", True, 1, 0)
    clock.advance(days=1)

    updated = app.attendance.submit(MARIA, "Maria Clara", False)

    records = app.attendance.records
    assert [r.contact for r in records] == [MARIA, JOAO]
    assert records[0] == updated
    assert records[0].submitted_at == clock().isoformat()


def test_many_submissions_keep_one_record_per_contact(app):
    answers = [
        (MARIA, True, 1, 0),
        (JOAO, True, 2, 2),
        (MARIA, True, 3, 1),
        (ANA, False, 0, 0),
        (JOAO, False, 0, 0),
        (MARIA, True, 2, 0),
    ]
    for contact, attending, adults, children in answers:
        app.attendance.submit(contact, "Convidado", attending, adults, children)

    contacts = [r.contact for r in app.attendance.records]
    assert sorted(contacts) == sorted(set(contacts))
    last_maria = app.attendance.find(MARIA)
    assert (last_maria.attending, last_maria.adults_count, last_maria.children_count) == (True, 2, 0)
    assert app.attendance.find(JOAO).attending is False


def test_writes_full_list_with_camel_case_keys(app, store):
    app.attendance.submit(MARIA, "Maria Clara", True, 2, 1)

    stored = json.loads(store.get_raw(RSVP_STORAGE_KEY))
    assert stored == [{
        "contact": MARIA,
        "name": "Maria Clara",
        "attending": True,
        "adultsCount": 2,
        "childrenCount": 1,
        "totalGuests": 3,
        "submittedAt": stored[0]["submittedAt"],
    }]


@pytest.mark.parametrize("adults, message", [(0, "Mínimo 1 adulto"), (11, "Máximo 10 adultos")])
def test_adult_bounds_when_attending(app, store, adults, message):
    with pytest.raises(ValidationError) as exc:
        app.attendance.submit(MARIA, "Maria Clara", True, adults, 0)

    assert exc.value.field == "adults"
    assert exc.value.message == message
    assert app.attendance.records == []
    assert store.get_raw(RSVP_STORAGE_KEY) is None


@pytest.mark.parametrize("children", [-1, 11])
def test_children_bounds_when_attending(app, children):
    with pytest.raises(ValidationError) as exc:
        app.attendance.submit(MARIA, "Maria Clara", True, 1, children)

    assert exc.value.field == "children"


def test_boundaries_are_inclusive(app):
    assert app.attendance.submit(MARIA, "Maria Clara", True, 10, 10).total_guests == 20
    assert app.attendance.submit(MARIA, "Maria Clara", True, 1, 0).total_guests == 1


def test_declining_skips_party_size_checks_and_stores_zeros(app):
    record = app.attendance.submit(MARIA, "Maria Clara", False, 0, 42)

    assert (record.adults_count, record.children_count, record.total_guests) == (0, 0, 0)


def test_rejects_malformed_contact(app):
    with pytest.raises(ValidationError) as exc:
        app.attendance.submit("11912345678", "Maria Clara", True, 1, 0)

    assert exc.value.field == "contact"


def test_contact_is_trimmed_like_the_identity_prompt(app):
    record = app.attendance.submit(f"  {MARIA} ", "Maria Clara", True, 1, 0)

    assert record.contact == MARIA
    assert app.identity.lookup(MARIA) == "Maria Clara"


@pytest.mark.parametrize("attending, adults, field, message", [
    (True, None, "adults", "Informe um número inteiro"),
    (True, "dois", "adults", "Informe um número inteiro"),
    (None, 1, "attending", "Escolha sim ou não"),
])
def test_type_errors_are_reported_in_portuguese(app, attending, adults, field, message):
    with pytest.raises(ValidationError) as exc:
        app.attendance.submit(MARIA, "Maria Clara", attending, adults, 0)

    assert exc.value.errors[field] == message


def test_missing_name_is_reported_in_portuguese(app):
    with pytest.raises(ValidationError) as exc:
        app.attendance.submit(MARIA, None, True, 1, 0)

    assert exc.value.errors == {"name": "Campo obrigatório"}


def test_summary_counts_only_attending_party_sizes(app):
    app.attendance.submit(MARIA, "Maria Clara", True, 2, 1)
    app.attendance.submit(JOAO, "João Pedro", True, 1, 0)
    app.attendance.submit(ANA, "Ana Luiza", False)

    summary = app.attendance.summary()

    assert summary.total_attendees == 4
    assert summary.total_adults == 3
    assert summary.total_children == 1
    assert summary.total_declines == 1
    assert summary.total_responses == 3


def test_summary_of_nothing():
    assert summarize([]).total_attendees == 0


def test_records_survive_a_restart(app, make_app):
    app.attendance.submit(MARIA, "Maria Clara", True, 2, 0)

    assert make_app().attendance.find(MARIA).adults_count == 2


def test_malformed_rsvp_document_hydrates_as_empty(store, make_app):
    store.set_raw(RSVP_STORAGE_KEY, "[{")

    assert make_app().attendance.records == []
