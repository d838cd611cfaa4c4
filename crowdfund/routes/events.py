from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile, status

from crowdfund.core.dependencies import get_current_identity, get_event_service, get_storage_service
from crowdfund.schemas.events import (
    ContributionRequest,
    ContributionResponse,
    EventCreate,
    EventPageResponse,
    EventResponse,
    EventUpdate,
    MessageResponse,
    parse_tags_field,
    serialize_event,
)
from crowdfund.schemas.user import Identity
from crowdfund.services.event_service import CONTRIBUTION_MESSAGE, EventService
from crowdfund.services.storage_service import StorageService

router = APIRouter()


@router.get("/events", response_model=EventPageResponse)
def get_all_events(
    page: int = Query(1, description="1-based page number; values below 1 are treated as 1"),
    limit: int = Query(10, ge=1, description="Events per page"),
    tags: Optional[str] = Query(None, description="Comma-separated tags, matches events carrying any of them"),
    is_active: bool = Query(True, alias="isActive"),
    events: EventService = Depends(get_event_service),
):
    """Public, paginated campaign listing, newest first"""
    rows, total_pages, current_page, total = events.list_page(
        page=page, limit=limit, tags=tags, is_active=is_active
    )
    return EventPageResponse(
        events=[serialize_event(event) for event in rows],
        total_pages=total_pages,
        current_page=current_page,
        total=total,
    )


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event_by_id(event_id: int, events: EventService = Depends(get_event_service)):
    return serialize_event(events.get(event_id))


@router.get("/my-events", response_model=List[EventResponse])
def get_my_events(
    identity: Identity = Depends(get_current_identity),
    events: EventService = Depends(get_event_service),
):
    """Campaigns owned by the logged-in user - requires authentication"""
    return [serialize_event(event) for event in events.list_mine(identity)]


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    identity: Identity = Depends(get_current_identity),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    amount_to_raise: Optional[str] = Form(None, alias="amountToRaise"),
    tags: Optional[str] = Form(None, description="JSON array of tag strings"),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    uploaded_image: Optional[UploadFile] = File(None, alias="uploadedImage"),
    events: EventService = Depends(get_event_service),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Create a campaign from a multipart form - requires authentication.

    The owner is taken from the session; any createdBy field sent by the client is ignored.
    An optional image file goes in the ``uploadedImage`` field.
    """
    fields = {
        "title": title,
        "description": description,
        "amountToRaise": amount_to_raise,
        "imageUrl": image_url,
    }
    # Missing form fields are left out so the model reports them as required
    data = EventCreate(
        tags=parse_tags_field(tags),
        **{name: value for name, value in fields.items() if value is not None},
    )

    stored_path = None
    if uploaded_image is not None and uploaded_image.filename:
        stored_path = await storage.save_upload(uploaded_image)

    return serialize_event(events.create(identity, data, uploaded_image=stored_path))


@router.put("/events/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    payload: EventUpdate,
    identity: Identity = Depends(get_current_identity),
    events: EventService = Depends(get_event_service),
):
    """Replace the fields present in the body - owner only"""
    return serialize_event(events.update(identity, event_id, payload))


@router.delete("/events/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: int,
    identity: Identity = Depends(get_current_identity),
    events: EventService = Depends(get_event_service),
):
    """Hard delete - owner only"""
    events.delete(identity, event_id)
    return MessageResponse(message="Event deleted successfully")


@router.patch("/events/{event_id}/contribute", response_model=ContributionResponse)
def contribute_to_event(
    event_id: int,
    payload: Optional[ContributionRequest] = Body(None),
    events: EventService = Depends(get_event_service),
):
    """Add to a campaign's running total. No session is required."""
    event, progress = events.contribute(event_id, payload.amount if payload else None)
    return ContributionResponse(
        message=CONTRIBUTION_MESSAGE,
        current_amount=event.current_amount,
        progress=progress,
    )
