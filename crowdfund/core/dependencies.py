from typing import Optional

from fastapi import Cookie, Depends, Request
from sqlalchemy.orm import Session

from crowdfund.core.config import Settings
from crowdfund.database import get_db
from crowdfund.schemas.user import Identity
from crowdfund.services.auth_service import AuthService
from crowdfund.services.event_service import EventService
from crowdfund.services.storage_service import StorageService

TOKEN_COOKIE = "token"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings)


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    return EventService(db)


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage


def get_current_identity(
    token: Optional[str] = Cookie(None, alias=TOKEN_COOKIE),
    auth: AuthService = Depends(get_auth_service),
) -> Identity:
    """
    Dependency that verifies the session cookie and returns the caller identity.
    Raises UnauthorizedError (401) without a token and ForbiddenError (403) for a bad one.
    """
    return auth.authenticate(token)
