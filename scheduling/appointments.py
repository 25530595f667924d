"""
Appointment service.

Every write goes through the same sequence: parse timestamps, check the
time range, validate the full record, then persist. A failure at any step
raises before the store is touched.
"""
import logging
from typing import Any, Dict, List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, models, schemas
from .errors import InvalidRange, NotFound, PersistenceError
from .validators import merge_update, parse_timestamp, validate_appointment_fields, validate_time_range

logger = logging.getLogger(__name__)

WRITABLE_FIELDS = (
    "title",
    "description",
    "start_time",
    "end_time",
    "status",
    "client_name",
    "client_email",
    "location",
    "notes",
)


def _stored_fields(appointment: models.Appointment) -> Dict[str, Any]:
    return {field: getattr(appointment, field) for field in WRITABLE_FIELDS}


def _check_range(start_time, end_time) -> None:
    is_valid, error_message = validate_time_range(start_time, end_time)
    if not is_valid:
        logger.warning(f"Rejected appointment window {start_time} -> {end_time}")
        raise InvalidRange(error_message)


def list_appointments(db: Session) -> List[schemas.Appointment]:
    return [schemas.to_appointment_dto(a) for a in crud.get_appointments(db)]


def get_appointment(db: Session, appointment_id: str) -> schemas.Appointment:
    appointment = crud.get_appointment(db, appointment_id)
    if appointment is None:
        raise NotFound()
    return schemas.to_appointment_dto(appointment)


def create_appointment(db: Session, fields: Dict[str, Any]) -> schemas.Appointment:
    """
    Validate and store a new appointment.
    
    Args:
        db: Database session
        fields: Appointment fields keyed by column name; timestamps may be strings
    
    Returns:
        The stored appointment
    
    Raises:
        InvalidDate: If either timestamp cannot be parsed
        InvalidRange: If end_time is not after start_time
        ValidationError: If a required field is missing or empty
        PersistenceError: If the record cannot be read back after the write
    """
    start_time = parse_timestamp(fields.get("start_time"))
    end_time = parse_timestamp(fields.get("end_time"))
    _check_range(start_time, end_time)

    record = dict(fields, start_time=start_time, end_time=end_time)
    if record.get("status") is None:
        record["status"] = schemas.AppointmentStatus.scheduled
    record = validate_appointment_fields(record)

    now = models.utcnow()
    record.update(created_at=now, updated_at=now)
    try:
        appointment = crud.create_appointment(db, record)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to insert appointment: {e}")
        raise PersistenceError()

    # Confirm the write is visible before reporting success
    saved = crud.get_appointment(db, appointment.id)
    if saved is None:
        logger.error(f"Appointment {appointment.id} missing after insert")
        raise PersistenceError()

    logger.info(f"Created appointment {saved.id}")
    return schemas.to_appointment_dto(saved)


def update_appointment(db: Session, appointment_id: str, fields: Dict[str, Any]) -> schemas.Appointment:
    """
    Apply a partial update to an appointment.
    
    Only keys present in ``fields`` change. When just one bound of the time
    window is supplied, the range is checked against the stored other bound.
    
    Raises:
        NotFound: If no appointment has this id
        InvalidDate: If a supplied timestamp cannot be parsed
        InvalidRange: If the effective end_time is not after the effective start_time
        ValidationError: If the merged record breaks a field constraint
    """
    appointment = crud.get_appointment(db, appointment_id)
    if appointment is None:
        raise NotFound()

    changes = {key: value for key, value in fields.items() if key in WRITABLE_FIELDS}
    if "start_time" in changes:
        changes["start_time"] = parse_timestamp(changes["start_time"], "Invalid startTime format")
    if "end_time" in changes:
        changes["end_time"] = parse_timestamp(changes["end_time"], "Invalid endTime format")

    _check_range(
        changes.get("start_time", appointment.start_time),
        changes.get("end_time", appointment.end_time),
    )

    record = validate_appointment_fields(merge_update(_stored_fields(appointment), changes))
    record["updated_at"] = models.utcnow()
    try:
        appointment = crud.update_appointment(db, appointment, record)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update appointment {appointment_id}: {e}")
        raise PersistenceError()

    logger.info(f"Updated appointment {appointment_id}: {', '.join(sorted(changes)) or 'no fields'}")
    return schemas.to_appointment_dto(appointment)


def delete_appointment(db: Session, appointment_id: str) -> bool:
    if not crud.delete_appointment(db, appointment_id):
        raise NotFound()
    logger.info(f"Deleted appointment {appointment_id}")
    return True
