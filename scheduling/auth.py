"""
Authentication utilities and the Auth service.

Provides password hashing, JWT token creation/validation, and the register
and login operations exposed through the GraphQL API.
"""
from datetime import timedelta
from typing import Optional
import logging
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud, models, schemas
from .config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from .errors import DuplicateEmail, InvalidCredentials

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.
    
    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against
        
    Returns:
        True if the password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password for secure storage.
    
    Args:
        password: The plain text password to hash
        
    Returns:
        The hashed password
    """
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.
    
    Args:
        data: Dictionary containing the claims to encode in the token
        expires_delta: Optional custom expiration time delta
        
    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": models.utcnow() + expires_delta})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """
    Verify a token's signature and expiry.
    
    Returns:
        The token claims, or None if the token is invalid or expired
    """
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT validation error: {e}")
        return None


def get_user_from_token(db: Session, token: Optional[str]) -> Optional[models.User]:
    """
    Resolve the user a bearer token was issued to.
    
    Args:
        db: Database session
        token: Raw bearer token, or None when the request carried none
        
    Returns:
        The User, or None for a missing, invalid or expired token or an unknown subject
    """
    if not token:
        return None
    payload = decode_access_token(token)
    if payload is None:
        return None
    user_id = payload.get("sub")
    if user_id is None:
        logger.warning("No 'sub' claim in token")
        return None
    return crud.get_user(db, str(user_id))


def _issue(user: models.User) -> schemas.AuthPayload:
    token = create_access_token(data={"sub": str(user.id)})
    return schemas.AuthPayload(token=token, user=schemas.to_user_dto(user))


def register(db: Session, email: str, password: str, name: Optional[str] = None) -> schemas.AuthPayload:
    """
    Register a new account and log it in.
    
    Args:
        db: Database session
        email: Login email, must not already be registered
        password: Plain text password
        name: Optional display name
        
    Returns:
        Token and user DTO
        
    Raises:
        DuplicateEmail: If an account with this email exists
    """
    if crud.get_user_by_email(db, email):
        raise DuplicateEmail()
    
    password_hash = get_password_hash(password)
    try:
        user = crud.create_user(db, email=email, password_hash=password_hash, name=name)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise DuplicateEmail()
    
    logger.info(f"Registered user {user.id}")
    return _issue(user)


def login(db: Session, email: str, password: str) -> schemas.AuthPayload:
    """
    Authenticate by email and password.
    
    Raises:
        InvalidCredentials: For an unknown email or a wrong password alike
    """
    user = crud.get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        raise InvalidCredentials()
    
    logger.info(f"User {user.id} logged in")
    return _issue(user)
