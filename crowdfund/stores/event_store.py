"""Campaign store: persistence of events, their tags and running totals."""
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Query, Session

from crowdfund.models.events import Event, EventTag


def _newest_first(query: Query) -> Query:
    # id breaks ties between events created within the same timestamp
    return query.order_by(Event.created_at.desc(), Event.id.desc())


def add_event(db: Session, event: Event) -> Event:
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def get_event(db: Session, event_id: int) -> Optional[Event]:
    return db.query(Event).filter(Event.id == event_id).first()


def list_events(
    db: Session,
    is_active: bool,
    tags: Optional[Sequence[str]],
    offset: int,
    limit: int,
) -> Tuple[List[Event], int]:
    """Return one page of events plus the total number of matching events."""
    query = db.query(Event).filter(Event.is_active == is_active)
    if tags:
        # any-of: the event carries at least one of the requested tags
        query = query.filter(Event.tag_rows.any(EventTag.name.in_(list(tags))))

    total = query.count()
    events = _newest_first(query).offset(offset).limit(limit).all()
    return events, total


def list_events_by_owner(db: Session, owner_id: int) -> List[Event]:
    return _newest_first(db.query(Event).filter(Event.created_by == owner_id)).all()


def save_event(db: Session, event: Event) -> Event:
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, event: Event) -> None:
    db.delete(event)
    db.commit()
