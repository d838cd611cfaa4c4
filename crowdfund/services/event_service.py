import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from crowdfund.core.exceptions import BadRequestError, ForbiddenError, NotFoundError, ValidationError
from crowdfund.models.events import Event
from crowdfund.schemas.events import EventCreate, EventUpdate, normalize_tags
from crowdfund.schemas.user import Identity
from crowdfund.stores import event_store, user_store

logger = logging.getLogger(__name__)

CONTRIBUTION_MESSAGE = "Donation recorded successfully"


def parse_tag_filter(raw: Optional[str]) -> List[str]:
    """Split a comma-separated ``tags`` query value into tag names."""
    if not raw:
        return []
    return normalize_tags(raw.split(","))


def progress_percent(current_amount: float, amount_to_raise: float) -> float:
    """Share of the goal raised so far, in percent. Not capped at 100."""
    if not amount_to_raise:
        return 0.0
    return current_amount / amount_to_raise * 100


class EventService:
    """Campaign CRUD, ownership enforcement and contribution accounting."""

    def __init__(self, db: Session):
        self.db = db

    def _get_or_404(self, event_id: int) -> Event:
        event = event_store.get_event(self.db, event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def _require_owner(self, event: Event, identity: Identity, action: str) -> None:
        if event.created_by != identity.id:
            logger.warning(f"User {identity.id} tried to {action} event {event.id} owned by {event.created_by}")
            raise ForbiddenError(f"Not authorized to {action} this event")

    def create(self, identity: Identity, data: EventCreate, uploaded_image: Optional[str] = None) -> Event:
        # The owner always comes from the verified identity, never from client input
        if not user_store.get_user_by_id(self.db, identity.id):
            raise ValidationError("Owner account no longer exists")

        event = Event(
            title=data.title,
            description=data.description,
            amount_to_raise=data.amount_to_raise,
            tags=data.tags,
            image_url=data.image_url,
            uploaded_image=uploaded_image,
            created_by=identity.id,
            current_amount=0,
            is_active=True,
        )
        event = event_store.add_event(self.db, event)
        logger.info(f"Event {event.id} created by user {identity.id}")
        return event

    def list_page(
        self,
        page: int = 1,
        limit: int = 10,
        tags: Optional[str] = None,
        is_active: bool = True,
    ) -> Tuple[List[Event], int, int, int]:
        """
        One page of events, newest first.

        Returns (events, total_pages, current_page, total). Pages below 1 are
        treated as page 1.
        """
        current_page = max(page, 1)
        events, total = event_store.list_events(
            self.db,
            is_active=is_active,
            tags=parse_tag_filter(tags),
            offset=(current_page - 1) * limit,
            limit=limit,
        )
        total_pages = math.ceil(total / limit)
        return events, total_pages, current_page, total

    def get(self, event_id: int) -> Event:
        return self._get_or_404(event_id)

    def list_mine(self, identity: Identity) -> List[Event]:
        return event_store.list_events_by_owner(self.db, identity.id)

    def update(self, identity: Identity, event_id: int, data: EventUpdate) -> Event:
        event = self._get_or_404(event_id)
        self._require_owner(event, identity, "update")

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(event, field, value)

        event = event_store.save_event(self.db, event)
        logger.info(f"Event {event.id} updated by user {identity.id}")
        return event

    def delete(self, identity: Identity, event_id: int) -> None:
        event = self._get_or_404(event_id)
        self._require_owner(event, identity, "delete")

        # Uploaded image files stay on disk
        event_store.delete_event(self.db, event)
        logger.info(f"Event {event_id} deleted by user {identity.id}")

    def contribute(self, event_id: int, amount: Optional[float]) -> Tuple[Event, float]:
        """
        Add `amount` to the event's running total.

        Open to any caller. The total is read, incremented and written back
        without a lock or version check, so concurrent contributions to the
        same event can overwrite each other.
        """
        if amount is None or not math.isfinite(amount) or amount <= 0:
            raise BadRequestError("Invalid contribution amount")

        event = self._get_or_404(event_id)
        event.current_amount = (event.current_amount or 0) + amount
        event = event_store.save_event(self.db, event)

        logger.info(f"Recorded contribution of {amount} to event {event.id}, total now {event.current_amount}")
        return event, progress_percent(event.current_amount, event.amount_to_raise)
