"""Pydantic request/response models for all API endpoints."""

from pydantic import BaseModel, field_validator
from typing import Any, Dict, List, Optional

from ..db.models import EventType


# Dashboard / profile models

class DashboardResponse(BaseModel):
    baby_name: str
    baby_age_label: Optional[str] = None
    last_feed_at: Optional[int] = None
    last_diaper_at: Optional[int] = None
    last_sleep_at: Optional[int] = None
    sleep_started_at: Optional[int] = None
    is_sleeping: bool
    sleep_status: str
    day_index: Optional[int] = None


class ProfileCreate(BaseModel):
    name: str
    birth_date: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    birth_date: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    name: str
    birth_date: str
    created_at: int
    onboarding_done: bool


class DadGoalsRequest(BaseModel):
    goals: List[str]


class DadGoalsResponse(BaseModel):
    goals: List[str]


class ResetResponse(BaseModel):
    success: bool
    message: str


# Event log models

class EventCreate(BaseModel):
    type: EventType
    metadata: Dict[str, Any] = {}
    timestamp: Optional[int] = None  # epoch ms, defaults to now


class EventResponse(BaseModel):
    id: str
    baby_id: str
    type: EventType
    timestamp: int
    metadata_json: str
    label: str
    summary: str


class EventsListResponse(BaseModel):
    baby_id: str
    events: List[EventResponse]


class MilestoneCreate(BaseModel):
    title: str
    timestamp: int
    note: Optional[str] = None
    photo_uri: Optional[str] = None


class MilestoneResponse(BaseModel):
    id: str
    baby_id: str
    title: str
    timestamp: int
    note: Optional[str] = None
    photo_uri: Optional[str] = None


class MilestonesListResponse(BaseModel):
    baby_id: str
    milestones: List[MilestoneResponse]


# Glanceable models

class GlanceableSyncResponse(BaseModel):
    action: str  # "synced" | "cleared"
    attempted: bool
    failed_surfaces: List[str]


class GlanceableStatusResponse(BaseModel):
    enabled: bool
    platform: str
    last_synced_key: Optional[str] = None
    widget_active: Optional[bool] = None
    live_activity_running: Optional[bool] = None
    scheduler: Dict[str, Any]
