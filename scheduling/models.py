"""
SQLAlchemy ORM models for the Scheduling service.

Defines the database schema for users and appointments.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text
from .database import Base


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the storage convention for all timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """
    User model representing an account that can log in.
    
    Attributes:
        id (str): Primary key, opaque identifier
        email (str): User's email address (unique, login key)
        password_hash (str): Bcrypt password hash
        name (str): Optional display name
        role (str): Optional role classification
        created_at (datetime): Timestamp when the user was created
    """
    __tablename__ = "users"
    
    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, default="user", nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Appointment(Base):
    """
    Appointment model representing a scheduled meeting with a client.
    
    Attributes:
        id (str): Primary key, opaque identifier
        title (str): Short title (required)
        description (str): Free-text description
        start_time (datetime): When the appointment starts (UTC)
        end_time (datetime): When the appointment ends (UTC), always after start_time
        status (str): One of "scheduled", "completed", "cancelled"
        client_name (str): Client's name (required)
        client_email (str): Client's email, stored lowercase (required)
        location (str): Free-text location
        notes (str): Free-text notes
        created_at (datetime): Timestamp when the appointment was created
        updated_at (datetime): Timestamp of the last successful change
    """
    __tablename__ = "appointments"
    
    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default="scheduled")
    client_name = Column(String, nullable=False)
    client_email = Column(String, nullable=False)
    location = Column(String, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
