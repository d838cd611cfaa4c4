import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:8501"


class Settings(BaseModel):
    """Process configuration, built once at start-up and handed to create_app()."""

    database_url: str = Field(..., min_length=1, description="SQLAlchemy database URL")
    jwt_secret: str = Field(..., min_length=1, description="Session token signing secret")
    jwt_algorithm: str = "HS256"
    token_expire_minutes: Optional[int] = Field(
        None,
        gt=0,
        description="Session token lifetime; tokens carry no expiry when unset",
    )
    upload_dir: str = "uploads"
    cors_origins: List[str] = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.split(","))
    log_level: str = "INFO"
    sql_echo: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def load_settings() -> Settings:
    """
    Read settings from the environment (and a .env file if present).
    Exits the process when the database URL or the signing secret is missing.
    """
    load_dotenv()

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        logger.critical("DATABASE_URL environment variable is not defined")
        sys.exit(1)

    jwt_secret = os.getenv("JWT_SECRET")
    if not jwt_secret:
        logger.critical("JWT_SECRET environment variable is not defined")
        sys.exit(1)

    expire = os.getenv("TOKEN_EXPIRE_MINUTES")

    return Settings(
        database_url=database_url,
        jwt_secret=jwt_secret,
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        token_expire_minutes=int(expire) if expire else None,
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        sql_echo=os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes"),
    )
