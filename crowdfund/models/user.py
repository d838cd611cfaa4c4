from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from crowdfund.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # Case-sensitive identity key
    password = Column(String(255), nullable=False)  # Salted hash, never plaintext
    avatar = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
