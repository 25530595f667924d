"""
CRUD (Create, Read, Update, Delete) operations for the Scheduling service.

This module contains all database operations for users and appointments.
Business rules live in the service modules; these functions only read and write.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from . import models


def get_user(db: Session, user_id: str) -> Optional[models.User]:
    """
    Retrieve a single user by ID.
    
    Args:
        db: Database session
        user_id: ID of the user to retrieve
        
    Returns:
        User object or None if not found
    """
    return db.query(models.User).filter(models.User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    """
    Retrieve a user by email address.
    
    Args:
        db: Database session
        email: Email address to search for
        
    Returns:
        User object or None if not found
    """
    return db.query(models.User).filter(models.User.email == email).first()

def create_user(db: Session, email: str, password_hash: str, name: Optional[str] = None) -> models.User:
    """
    Create a new user in the database.
    
    Args:
        db: Database session
        email: Login email
        password_hash: Already-hashed password
        name: Optional display name
        
    Returns:
        Created User object
    """
    db_user = models.User(email=email, password_hash=password_hash, name=name)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def get_appointment(db: Session, appointment_id: str) -> Optional[models.Appointment]:
    """
    Retrieve a single appointment by ID.
    
    Args:
        db: Database session
        appointment_id: ID of the appointment to retrieve
        
    Returns:
        Appointment object or None if not found
    """
    return db.query(models.Appointment).filter(models.Appointment.id == appointment_id).first()

def get_appointments(db: Session) -> List[models.Appointment]:
    """
    Retrieve every appointment, earliest start first.
    
    Args:
        db: Database session
        
    Returns:
        List of Appointment objects ordered by start_time ascending
    """
    return (
        db.query(models.Appointment)
        .order_by(models.Appointment.start_time.asc(), models.Appointment.created_at.asc())
        .all()
    )

def create_appointment(db: Session, fields: Dict[str, Any]) -> models.Appointment:
    """
    Insert an appointment from already-validated fields.
    
    Args:
        db: Database session
        fields: Column values keyed by column name
        
    Returns:
        Created Appointment object
    """
    db_appointment = models.Appointment(**fields)
    db.add(db_appointment)
    db.commit()
    db.refresh(db_appointment)
    return db_appointment

def update_appointment(db: Session, db_appointment: models.Appointment, fields: Dict[str, Any]) -> models.Appointment:
    """
    Write already-validated fields onto an existing appointment.
    
    Args:
        db: Database session
        db_appointment: Appointment to update
        fields: Column values to set
        
    Returns:
        Updated Appointment object
    """
    for key, value in fields.items():
        setattr(db_appointment, key, value)
    
    db.commit()
    db.refresh(db_appointment)
    return db_appointment

def delete_appointment(db: Session, appointment_id: str) -> bool:
    """
    Delete an appointment from the database.
    
    Args:
        db: Database session
        appointment_id: ID of the appointment to delete
        
    Returns:
        True if the appointment was deleted, False if not found
    """
    db_appointment = get_appointment(db, appointment_id)
    if db_appointment is None:
        return False
    
    db.delete(db_appointment)
    db.commit()
    return True
