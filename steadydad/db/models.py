"""Pydantic models for the records kept in the key-value store."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class EventType(str, Enum):
    FEED = "feed"
    DIAPER = "diaper"
    SLEEP_START = "sleep_start"
    SLEEP_END = "sleep_end"
    MOOD = "mood"


SLEEP_EVENT_TYPES = (EventType.SLEEP_START, EventType.SLEEP_END)


# Used by: babies_data.py, caregiving_session.py, dashboard_snapshot.py
class BabyProfile(BaseModel):
    id: str
    name: str
    birth_date: str  # normalized YYYY-MM-DD
    created_at: int  # epoch ms


# Used by: babies_data.py, caregiving_session.py, dashboard_snapshot.py
class BabyEvent(BaseModel):
    """Immutable caregiving fact. metadata_json is type-specific and opaque to the snapshot."""

    id: str
    baby_id: str
    type: EventType
    timestamp: int  # epoch ms
    metadata_json: str = "{}"

    class Config:
        frozen = True


# Used by: babies_data.py, caregiving_session.py
class Milestone(BaseModel):
    id: str
    baby_id: str
    title: str
    timestamp: int
    note: Optional[str] = None
    photo_uri: Optional[str] = None
