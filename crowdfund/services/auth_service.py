import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crowdfund.core.config import Settings
from crowdfund.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from crowdfund.core.security import JWTError, create_access_token, decode_token, hash_password, verify_password
from crowdfund.models.user import User
from crowdfund.schemas.user import Identity, UserRegister
from crowdfund.stores import user_store

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, credential checks and session token handling."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def register(self, data: UserRegister) -> User:
        if user_store.get_user_by_email(self.db, data.email):
            raise ValidationError("Email address is already registered")

        try:
            db_user = user_store.create_user(
                self.db,
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                password_hash=hash_password(data.password),
                avatar=data.avatar,
            )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            self.db.rollback()
            raise ValidationError("Email address is already registered")

        logger.info(f"Registered user {db_user.id} ({db_user.email})")
        return db_user

    def login(self, email: str, password: str) -> Tuple[str, User]:
        db_user = user_store.get_user_by_email(self.db, email)
        if not db_user:
            logger.warning(f"Login attempt for unknown email {email}")
            raise NotFoundError("User not found")

        if not verify_password(password, db_user.password):
            logger.warning(f"Wrong password for user {db_user.id}")
            raise ValidationError("Password not correct")

        token = create_access_token({"email": db_user.email, "id": db_user.id}, self.settings)
        logger.info(f"User {db_user.id} logged in")
        return token, db_user

    def authenticate(self, token: Optional[str]) -> Identity:
        """
        Verify a session token and return the caller identity.

        A missing token is 401; a token that fails verification, or whose
        payload lacks the identity claims, is 403.
        """
        if not token:
            raise UnauthorizedError("Access denied. No token provided.")

        try:
            payload = decode_token(token, self.settings)
            return Identity(id=payload["id"], email=payload["email"])
        except (JWTError, KeyError, TypeError, ValueError):
            logger.warning("Rejected session token that failed verification")
            raise ForbiddenError("Invalid token.")

    def get_profile(self, identity: Identity) -> User:
        db_user = user_store.get_user_by_id(self.db, identity.id)
        if not db_user:
            raise NotFoundError("User not found")
        return db_user
