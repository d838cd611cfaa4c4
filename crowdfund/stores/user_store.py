"""Credential store: persistence of user identity and password hashes."""
from typing import Optional

from sqlalchemy.orm import Session

from crowdfund.models.user import User


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    # Exact match: emails are case-sensitive identity keys
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def create_user(
    db: Session,
    first_name: str,
    last_name: str,
    email: str,
    password_hash: str,
    avatar: Optional[str] = None,
) -> User:
    db_user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password_hash,
        avatar=avatar,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user
