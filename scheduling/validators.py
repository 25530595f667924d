"""
Validation utilities for the Scheduling service.

These run explicitly before every appointment write: timestamp parsing,
the end-after-start rule, and field-level constraints on the full record.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Tuple
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from . import schemas
from .errors import InvalidDate, ValidationError

logger = logging.getLogger(__name__)

_timestamp_adapter = TypeAdapter(datetime)
_NUMERIC = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)\s*$")


def parse_timestamp(value: Any, message: str = InvalidDate.default_message) -> datetime:
    """
    Parse a client-supplied timestamp into a naive UTC datetime.
    
    Args:
        value: ISO-8601 string (offset optional, "Z" accepted) or datetime;
            purely numeric strings are rejected
        message: Error message to raise with if parsing fails
    
    Returns:
        The instant as a naive datetime in UTC
    
    Raises:
        InvalidDate: If the value is empty or not a recognizable timestamp
    """
    if value is None or value == "":
        raise InvalidDate(message)
    # Bare numbers would otherwise be read as Unix seconds
    if isinstance(value, str) and _NUMERIC.match(value):
        raise InvalidDate(message)
    try:
        parsed = _timestamp_adapter.validate_python(value)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    except (PydanticValidationError, OverflowError):
        raise InvalidDate(message)
    return parsed


def validate_time_range(start_time: datetime, end_time: datetime) -> Tuple[bool, str]:
    """
    Validate that an appointment ends strictly after it starts.
    
    Args:
        start_time: Effective start of the appointment
        end_time: Effective end of the appointment
    
    Returns:
        Tuple of (is_valid, error_message)
    """
    if end_time <= start_time:
        return False, "End time must be after start time"
    return True, ""


def validate_appointment_fields(record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check a complete appointment record against its field constraints.
    
    Args:
        record: Every writable field of the appointment, keyed by column name
    
    Returns:
        The normalized record, ready to be written
    
    Raises:
        ValidationError: If a required field is missing or empty, or status is unknown
    """
    try:
        validated = schemas.AppointmentRecord.model_validate(record)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        logger.warning(f"Appointment rejected: {problems}")
        raise ValidationError(f"Validation error: {problems}")
    return validated.model_dump()


def merge_update(existing: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Overlay the supplied changes on a stored record without touching either input.
    
    Keys absent from ``changes`` keep their stored value; keys present in it,
    including ones explicitly set to None, replace it.
    """
    merged = dict(existing)
    merged.update(changes)
    return merged
