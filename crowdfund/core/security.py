from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

from crowdfund.core.config import Settings

# Salted hashes with a fixed cost; every stored hash uses the same parameters
pwd_context = CryptContext(
    schemes=["argon2"],
    default="argon2",
    deprecated="auto",
    argon2__rounds=3,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: Dict[str, Any], settings: Settings) -> str:
    """
    Sign a session token carrying `data`.
    An `exp` claim is only added when a token lifetime is configured.
    """
    to_encode = data.copy()
    if settings.token_expire_minutes:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.token_expire_minutes)
        to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    """Verify the signature and return the payload. Raises JWTError when verification fails."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


__all__ = ["JWTError", "create_access_token", "decode_token", "hash_password", "verify_password"]
