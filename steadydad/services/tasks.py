"""Scheduled task: re-pushes glanceables so relative labels ("12m ago") don't go stale."""

import logging
from typing import Any, Dict

from .caregiving_session import CaregivingSession

logger = logging.getLogger(__name__)


# Used by: scheduler.py, called every GLANCEABLES_REFRESH_MINUTES
async def refresh_glanceables_task(session: CaregivingSession) -> Dict[str, Any]:
    if session.is_loading:
        logger.debug("Session still loading - skipping glanceable refresh")
        return {"refreshed": False, "reason": "loading"}

    if not session.glanceables.is_enabled():
        logger.debug("Glanceables disabled - skipping refresh")
        return {"refreshed": False, "reason": "disabled"}

    # Clearing is left to the session's change-driven path, which only clears after a sync
    if not session.has_active_profile:
        logger.debug("No active profile - skipping glanceable refresh")
        return {"refreshed": False, "reason": "no_active_profile"}

    try:
        result = await session.force_sync_glanceables()
    except Exception as e:
        logger.error(f"Fatal error in glanceable refresh task: {e}", exc_info=True)
        return {"refreshed": False, "error": str(e)}

    logger.info(f"Glanceable refresh complete: failed={result.failed_surfaces}")
    return {"refreshed": True, "failed": result.failed_surfaces}
