"""
Pydantic schemas for the Scheduling service.

Holds the validated shape of an appointment record before it is written,
the wire-format DTOs returned to API callers, and the pure functions that
map stored records onto those DTOs.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Optional
from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator

from . import models

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
RequiredEmail = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1)]


class AppointmentStatus(str, Enum):
    """Lifecycle status of an appointment. Any value may be set at any time."""
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class AppointmentRecord(BaseModel):
    """
    Field-level constraints every appointment must satisfy before it is saved.

    Strings are normalized on the way through: required text is trimmed,
    the client email is lowercased and missing optional text becomes "".
    """
    model_config = ConfigDict(use_enum_values=True)

    title: RequiredText
    description: Optional[str] = ""
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus = AppointmentStatus.scheduled
    client_name: RequiredText
    client_email: RequiredEmail
    location: Optional[str] = ""
    notes: Optional[str] = ""

    @field_validator("description", "location", "notes", mode="after")
    @classmethod
    def _empty_when_missing(cls, value: Optional[str]) -> str:
        return value if value is not None else ""


class User(BaseModel):
    """Schema for user responses. The password hash is never part of it."""
    id: str
    email: str
    name: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[str] = None


class AuthPayload(BaseModel):
    """Schema for register/login responses."""
    token: str
    user: User


class Appointment(BaseModel):
    """
    Schema for appointment responses.

    All timestamps are strings produced by format_timestamp.
    """
    id: str
    title: str
    description: str = ""
    start_time: str
    end_time: str
    status: AppointmentStatus = AppointmentStatus.scheduled
    client_name: str
    client_email: str
    location: str = ""
    notes: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a naive UTC datetime, e.g. ``2024-01-01T10:00:00.000000Z``."""
    if value is None:
        return None
    return value.isoformat(timespec="microseconds") + "Z"


def to_user_dto(user: Optional[models.User]) -> Optional[User]:
    if user is None:
        return None
    return User(
        id=str(user.id),
        email=user.email,
        name=user.name,
        role=user.role,
        created_at=format_timestamp(user.created_at),
    )


def to_appointment_dto(appointment: Optional[models.Appointment]) -> Optional[Appointment]:
    if appointment is None:
        return None
    return Appointment(
        id=str(appointment.id),
        title=appointment.title,
        description=appointment.description or "",
        start_time=format_timestamp(appointment.start_time),
        end_time=format_timestamp(appointment.end_time),
        status=appointment.status or AppointmentStatus.scheduled,
        client_name=appointment.client_name,
        client_email=appointment.client_email,
        location=appointment.location or "",
        notes=appointment.notes or "",
        created_at=format_timestamp(appointment.created_at),
        updated_at=format_timestamp(appointment.updated_at),
    )
