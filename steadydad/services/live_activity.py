"""
Sleep live activity lifecycle.

The OS can end an activity on its own (user dismissal, expiry), so the handle we
persisted may point at nothing. Every write path heals instead of failing:

  Absent --start--> Active
  Active --update fails--> handle cleared --start--> Active
  Active/Stale --end--> Absent  (handle cleared whatever the stop calls did)
"""

import logging
from typing import Any, Dict, Optional

from steadydad.core.constants import (
    DASHBOARD_DEEP_LINK,
    DISMISSAL_DEFAULT,
    SLEEP_ACTIVITY_ID_KEY,
    SLEEP_LIVE_ACTIVITY_NAME,
)
from steadydad.services.dashboard_snapshot import DashboardSnapshot
from steadydad.services.glanceable_client import LiveActivityPrimitives
from steadydad.services.glanceable_content import build_sleep_live_activity_content
from steadydad.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

_UNLOADED = object()


class ActivityHandleStore:
    """Persisted live activity id, cached in-process after the first read."""

    def __init__(self, store: Optional[KeyValueStore] = None, key: str = SLEEP_ACTIVITY_ID_KEY):
        self.store = store or KeyValueStore()
        self.key = key
        self._cached: Any = _UNLOADED

    # Used by: SleepLiveActivity.update_or_start(), SleepLiveActivity.end()
    async def get(self) -> Optional[str]:
        if self._cached is not _UNLOADED:
            return self._cached
        stored = await self.store.get_item(self.key)
        self._cached = stored
        return stored

    # Used by: SleepLiveActivity._start()
    async def set(self, activity_id: str) -> None:
        self._cached = activity_id
        await self.store.set_item(self.key, activity_id)

    # Used by: SleepLiveActivity.update_or_start() (stale handle), SleepLiveActivity.end()
    async def remove(self) -> None:
        self._cached = None
        await self.store.remove_item(self.key)


class SleepLiveActivity:
    def __init__(self, primitives: LiveActivityPrimitives, handle_store: ActivityHandleStore):
        self.primitives = primitives
        self.handle_store = handle_store

    # Used by: update_or_start()
    async def is_running(self) -> bool:
        return await self.primitives.is_live_activity_active(SLEEP_LIVE_ACTIVITY_NAME)

    async def _start(self, content: Dict[str, Any]) -> Optional[str]:
        activity_id = await self.primitives.start_live_activity(
            content,
            activity_name=SLEEP_LIVE_ACTIVITY_NAME,
            deep_link_url=DASHBOARD_DEEP_LINK,
        )
        if activity_id:
            await self.handle_store.set(activity_id)
            logger.info(f"Started sleep live activity {activity_id}")
        else:
            logger.warning("Sleep live activity started without an id; nothing persisted")
        return activity_id

    async def start(self, snapshot: DashboardSnapshot) -> Optional[str]:
        """Failures propagate; the handle is left untouched."""
        return await self._start(build_sleep_live_activity_content(snapshot))

    # Used by: glanceable_sync.py (sync while sleeping)
    async def update_or_start(self, snapshot: DashboardSnapshot) -> None:
        content = build_sleep_live_activity_content(snapshot)
        persisted_id = await self.handle_store.get()

        if not persisted_id and not await self.is_running():
            await self._start(content)
            return

        activity_id = persisted_id or SLEEP_LIVE_ACTIVITY_NAME
        try:
            await self.primitives.update_live_activity(activity_id, content)
            logger.debug(f"Updated sleep live activity {activity_id}")
        except Exception as e:
            logger.info(f"Sleep live activity {activity_id} could not be updated ({e}); restarting")
            # Cleared before restarting so a failed restart still leaves a clean Absent state
            await self.handle_store.remove()
            await self._start(content)

    # Used by: glanceable_sync.py (sync while awake, clear)
    async def end(self, dismissal_policy: str = DISMISSAL_DEFAULT) -> None:
        persisted_id = await self.handle_store.get()
        candidates = [c for c in (persisted_id, SLEEP_LIVE_ACTIVITY_NAME) if c]

        stopped = False
        try:
            for candidate in candidates:
                try:
                    await self.primitives.stop_live_activity(candidate, dismissal_policy)
                    stopped = True
                except Exception as e:
                    logger.debug(f"Stopping live activity {candidate} failed: {e}")

            if not stopped:
                await self.primitives.end_all_live_activities(dismissal_policy)
        finally:
            await self.handle_store.remove()
