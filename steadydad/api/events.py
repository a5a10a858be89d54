"""
Event log + milestone endpoints.

Routes:
  POST /events                      - Log a feed / diaper / sleep_start / sleep_end / mood
  GET  /events                      - Timeline, newest first
  GET  /events/last/{event_type}    - Most recent event of a type
  POST /milestones                  - Add a milestone
  GET  /milestones                  - Milestones, newest first
  POST /guidance/{guidance_id}/viewed - Mark a daily guidance card as read
"""

import json
import logging
from fastapi import APIRouter, HTTPException, status

from .models import (
    EventCreate,
    EventResponse,
    EventsListResponse,
    MilestoneCreate,
    MilestoneResponse,
    MilestonesListResponse,
)
from ..db.models import BabyEvent, EventType
from ..services.caregiving_session import get_caregiving_session
from ..utils.labels import get_event_summary, get_event_type_label

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


def _event_response(event: BabyEvent) -> EventResponse:
    return EventResponse(
        **event.model_dump(),
        label=get_event_type_label(event.type),
        summary=get_event_summary(event),
    )


def _require_profile_id() -> str:
    session = get_caregiving_session()
    if session.profile is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No baby profile yet")
    return session.profile.id


# Used by: Dashboard quick-log buttons
@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def log_event(request: EventCreate):
    session = get_caregiving_session()
    _require_profile_id()
    event = await session.log_event(
        request.type,
        metadata_json=json.dumps(request.metadata),
        timestamp=request.timestamp,
    )
    return _event_response(event)


# Used by: Timeline tab
@router.get("/events", response_model=EventsListResponse)
async def list_events():
    baby_id = _require_profile_id()
    session = get_caregiving_session()
    events = sorted(session.events, key=lambda e: (e.timestamp, e.id), reverse=True)
    return EventsListResponse(baby_id=baby_id, events=[_event_response(e) for e in events])


# Used by: Dashboard cards ("last feed", "last diaper")
@router.get("/events/last/{event_type}", response_model=EventResponse)
async def get_last_event(event_type: EventType):
    _require_profile_id()
    event = get_caregiving_session().get_last_event_by_type(event_type)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No {event_type.value} events yet")
    return _event_response(event)


# Used by: Milestones tab, add
@router.post("/milestones", response_model=MilestoneResponse, status_code=status.HTTP_201_CREATED)
async def add_milestone(request: MilestoneCreate):
    _require_profile_id()
    if not request.title.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title cannot be empty")
    milestone = await get_caregiving_session().add_milestone(
        title=request.title.strip(),
        timestamp=request.timestamp,
        note=request.note,
        photo_uri=request.photo_uri,
    )
    return MilestoneResponse(**milestone.model_dump())


# Used by: Milestones tab, list
@router.get("/milestones", response_model=MilestonesListResponse)
async def list_milestones():
    baby_id = _require_profile_id()
    milestones = get_caregiving_session().milestones
    return MilestonesListResponse(
        baby_id=baby_id,
        milestones=[MilestoneResponse(**m.model_dump()) for m in milestones],
    )


# Used by: Guidance tab, card opened
@router.post("/guidance/{guidance_id}/viewed", status_code=status.HTTP_204_NO_CONTENT)
async def mark_guidance_viewed(guidance_id: str):
    await get_caregiving_session().data_manager.mark_guidance_viewed(guidance_id)
