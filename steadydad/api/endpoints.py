"""
Dashboard + profile endpoints.

Routes (no prefix):
  GET   /dashboard            - Current dashboard snapshot (same data the widget shows)
  GET   /profile              - Baby profile + onboarding status
  POST  /profile              - Create the baby profile (onboarding: baby info)
  PATCH /profile              - Rename / fix birth date
  POST  /onboarding/complete  - Finish onboarding; glanceables start syncing after this
  GET   /dad-goals            - Selected dad goals
  PUT   /dad-goals            - Replace dad goals
  GET   /export               - Everything stored, as JSON
  POST  /reset                - Wipe all data and clear glanceables
"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, HTTPException, status

from .models import (
    DadGoalsRequest,
    DadGoalsResponse,
    DashboardResponse,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
    ResetResponse,
)
from ..services.caregiving_session import CaregivingSession, get_caregiving_session
from ..utils.age import get_day_index

logger = logging.getLogger(__name__)

router = APIRouter()


def _profile_response(session: CaregivingSession) -> ProfileResponse:
    profile = session.profile
    return ProfileResponse(
        id=profile.id,
        name=profile.name,
        birth_date=profile.birth_date,
        created_at=profile.created_at,
        onboarding_done=session.onboarding_done,
    )


# Used by: Dashboard tab
@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard():
    session = get_caregiving_session()
    snapshot = session.snapshot()
    return DashboardResponse(
        **snapshot.to_dict(),
        day_index=get_day_index(session.profile.birth_date) if session.profile else None,
    )


# Used by: Settings tab, app launch routing (onboarding vs tabs)
@router.get("/profile", response_model=ProfileResponse)
async def get_profile():
    session = get_caregiving_session()
    if session.profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No baby profile yet")
    return _profile_response(session)


# Used by: Onboarding, baby info step
@router.post("/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(request: ProfileCreate):
    session = get_caregiving_session()
    try:
        await session.save_profile(request.name, request.birth_date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.info(f"Created profile for {request.name}")
    return _profile_response(session)


# Used by: Settings tab, edit baby info
@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(request: ProfileUpdate):
    session = get_caregiving_session()
    updates = request.model_dump(exclude_none=True)
    if "name" in updates and not updates["name"].strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name cannot be empty")
    try:
        profile = await session.update_profile(updates)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No baby profile yet")
    return _profile_response(session)


# Used by: Onboarding, finish step
@router.post("/onboarding/complete", response_model=ProfileResponse)
async def complete_onboarding():
    session = get_caregiving_session()
    if session.profile is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Create a baby profile before finishing onboarding"
        )
    await session.complete_onboarding()
    return _profile_response(session)


# Used by: Onboarding, dad goals step
@router.get("/dad-goals", response_model=DadGoalsResponse)
async def get_dad_goals():
    session = get_caregiving_session()
    return DadGoalsResponse(goals=await session.data_manager.get_dad_goals())


@router.put("/dad-goals", response_model=DadGoalsResponse)
async def save_dad_goals(request: DadGoalsRequest):
    session = get_caregiving_session()
    await session.data_manager.save_dad_goals(request.goals)
    return DadGoalsResponse(goals=request.goals)


# Used by: Settings tab, export data
@router.get("/export")
async def export_data() -> Dict[str, Any]:
    session = get_caregiving_session()
    return await session.data_manager.export_all_data()


# Used by: Settings tab, reset all data
@router.post("/reset", response_model=ResetResponse)
async def reset_all():
    session = get_caregiving_session()
    await session.reset_all()
    return ResetResponse(success=True, message="All data removed")
