from typing import Iterable, List

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from crowdfund.database import Base


class Event(Base):
    """A fundraising campaign with a goal and a running contributed total."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    amount_to_raise = Column(Float, nullable=False)
    uploaded_image = Column(String(500), nullable=True)  # Relative path of a locally stored upload
    image_url = Column(String(1000), nullable=True)  # External image link
    # No ON DELETE rule: removing a user leaves their events in place
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    current_amount = Column(Float, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    owner = relationship("User", lazy="joined")
    tag_rows = relationship(
        "EventTag",
        back_populates="event",
        order_by="EventTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self) -> List[str]:
        return [row.name for row in self.tag_rows]

    @tags.setter
    def tags(self, names: Iterable[str]) -> None:
        self.tag_rows = [EventTag(position=i, name=name) for i, name in enumerate(names)]


class EventTag(Base):
    """One free-text tag of an event; `position` keeps the tag order."""
    __tablename__ = "event_tags"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False, index=True)

    event = relationship("Event", back_populates="tag_rows")
