"""
Configuration for the Scheduling service.

All settings are read from environment variables at import time.
"""
import os

# Database connection string (any SQLAlchemy URL)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./scheduling.db")

# JWT settings
SECRET_KEY = os.getenv("JWT_SECRET", "09d25e094faa6ca2556c818166b7a9563b93f7099f6f0f4caa6cf63b88e8d3e7")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
