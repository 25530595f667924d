from datetime import datetime

from scheduling import models, schemas
from scheduling.validators import parse_timestamp


def _appointment(**overrides):
    values = dict(
        id="abc123",
        title="Checkup",
        description=None,
        start_time=datetime(2024, 1, 1, 10, 0),
        end_time=datetime(2024, 1, 1, 11, 0, 0, 250000),
        status=None,
        client_name="Jane Doe",
        client_email="jane@example.com",
        location=None,
        notes=None,
        created_at=datetime(2023, 12, 31, 8, 0),
        updated_at=datetime(2023, 12, 31, 9, 0),
    )
    values.update(overrides)
    return models.Appointment(**values)


def test_appointment_dto_fills_defaults_for_missing_fields():
    dto = schemas.to_appointment_dto(_appointment())

    assert dto.model_dump() == {
        "id": "abc123",
        "title": "Checkup",
        "description": "",
        "start_time": "2024-01-01T10:00:00.000000Z",
        "end_time": "2024-01-01T11:00:00.250000Z",
        "status": schemas.AppointmentStatus.scheduled,
        "client_name": "Jane Doe",
        "client_email": "jane@example.com",
        "location": "",
        "notes": "",
        "created_at": "2023-12-31T08:00:00.000000Z",
        "updated_at": "2023-12-31T09:00:00.000000Z",
    }


def test_timestamp_serialization_round_trips():
    instant = datetime(2024, 2, 29, 23, 59, 59, 123456)
    assert parse_timestamp(schemas.format_timestamp(instant)) == instant


def test_timestamp_serialization_pads_early_years():
    instant = datetime(999, 1, 1, 10, 0)
    text = schemas.format_timestamp(instant)

    assert text == "0999-01-01T10:00:00.000000Z"
    assert parse_timestamp(text) == instant


def test_user_dto_omits_password_hash():
    user = models.User(
        id="u1",
        email="user@example.com",
        password_hash="$2b$12$secret",
        name=None,
        role="admin",
        created_at=datetime(2024, 1, 1),
    )
    dto = schemas.to_user_dto(user)

    assert dto.model_dump() == {
        "id": "u1",
        "email": "user@example.com",
        "name": None,
        "role": "admin",
        "created_at": "2024-01-01T00:00:00.000000Z",
    }


def test_dto_mapping_of_none_is_none():
    assert schemas.to_user_dto(None) is None
    assert schemas.to_appointment_dto(None) is None
