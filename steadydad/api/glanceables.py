"""
Glanceable endpoints: manual control of the iOS widget and sleep live activity.

Routes (/glanceables):
  GET  /status  - Feature gate, last synced key, surface state, refresh job
  POST /sync    - Push the current snapshot now (clears instead when there is no active profile)
  POST /clear   - Clear the widget and end the live activity
"""

import logging
from fastapi import APIRouter, HTTPException, status

from .models import GlanceableStatusResponse, GlanceableSyncResponse
from ..services.caregiving_session import get_caregiving_session
from ..services.scheduler import get_scheduler_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/glanceables", tags=["glanceables"])


def _require_enabled():
    controller = get_caregiving_session().glanceables
    if not controller.is_enabled():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="iOS glanceables disabled. Set ENABLE_IOS_GLANCEABLES=true to enable sync."
        )
    return controller


# Used by: Settings tab, glanceables row
@router.get("/status", response_model=GlanceableStatusResponse)
async def get_status():
    session = get_caregiving_session()
    controller = session.glanceables
    enabled = controller.is_enabled()

    widget_active = None
    live_activity_running = None
    if enabled:
        try:
            widget_active = await controller.widget.is_active()
            live_activity_running = await controller.live_activity.is_running()
        except Exception as e:
            logger.warning(f"Could not read glanceable surface state: {e}")

    return GlanceableStatusResponse(
        enabled=enabled,
        platform=controller.platform,
        last_synced_key=session.last_synced_key,
        widget_active=widget_active,
        live_activity_running=live_activity_running,
        scheduler=get_scheduler_status(),
    )


# Used by: Settings tab, "Sync iOS Glanceables" button
@router.post("/sync", response_model=GlanceableSyncResponse)
async def sync_glanceables():
    _require_enabled()
    session = get_caregiving_session()
    action = "synced" if session.has_active_profile else "cleared"
    result = await session.force_sync_glanceables()
    if result.failed_surfaces:
        logger.warning(f"Manual glanceable {action} had failures: {result.failed_surfaces}")
    return GlanceableSyncResponse(
        action=action,
        attempted=result.attempted,
        failed_surfaces=result.failed_surfaces,
    )


@router.post("/clear", response_model=GlanceableSyncResponse)
async def clear_glanceables():
    _require_enabled()
    result = await get_caregiving_session().clear_glanceables()
    return GlanceableSyncResponse(
        action="cleared",
        attempted=result.attempted,
        failed_surfaces=result.failed_surfaces,
    )
