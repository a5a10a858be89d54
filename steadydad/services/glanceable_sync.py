"""
Glanceable sync controller: mirrors the dashboard snapshot to the iOS widget and
the sleep live activity.

Best-effort side channel: both surfaces are pushed concurrently, a failure on
one never blocks the other, and nothing is raised to the caller. Deduplication
is the caller's job (see CaregivingSession), sync() always pushes.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from steadydad.core.constants import DISMISSAL_IMMEDIATE, GLANCEABLES_SUPPORTED_PLATFORM
from steadydad.core.settings import settings
from steadydad.core.utils import is_truthy_flag
from steadydad.services.dashboard_snapshot import DashboardSnapshot
from steadydad.services.glanceable_client import HttpGlanceableBridge
from steadydad.services.live_activity import ActivityHandleStore, SleepLiveActivity
from steadydad.services.widget import DashboardWidget

logger = logging.getLogger(__name__)


@dataclass
class GlanceableSyncResult:
    attempted: bool
    failed_surfaces: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_surfaces


class GlanceableSyncController:
    def __init__(
        self,
        widget: DashboardWidget,
        live_activity: SleepLiveActivity,
        platform: Optional[str] = None,
        enabled_flag: Optional[str] = None,
    ):
        self.widget = widget
        self.live_activity = live_activity
        self.platform = platform if platform is not None else settings.APP_PLATFORM
        self.enabled_flag = enabled_flag if enabled_flag is not None else settings.ENABLE_IOS_GLANCEABLES

    # Used by: sync(), clear(), api/glanceables.py
    def is_enabled(self) -> bool:
        if self.platform.lower() != GLANCEABLES_SUPPORTED_PLATFORM:
            return False
        return is_truthy_flag(self.enabled_flag)

    async def _settle(self, action: str, tasks: dict) -> GlanceableSyncResult:
        results = await asyncio.gather(*tasks.values(), return_exceptions=True)

        failed = []
        for surface, result in zip(tasks.keys(), results):
            if isinstance(result, BaseException):
                failed.append(surface)
                logger.warning(f"Failed to {action} glanceable {surface}: {result}")
        return GlanceableSyncResult(attempted=True, failed_surfaces=failed)

    # Used by: caregiving_session.py (glanceable effect), tasks.py (refresh job), api/glanceables.py
    async def sync(self, snapshot: DashboardSnapshot) -> GlanceableSyncResult:
        if not self.is_enabled():
            return GlanceableSyncResult(attempted=False)

        if snapshot.is_sleeping:
            sleep_task = self.live_activity.update_or_start(snapshot)
        else:
            sleep_task = self.live_activity.end(dismissal_policy=DISMISSAL_IMMEDIATE)

        result = await self._settle("sync", {
            "widget": self.widget.update(snapshot),
            "live_activity": sleep_task,
        })
        logger.info(
            f"Synced glanceables for {snapshot.baby_name} "
            f"(sleep_status={snapshot.sleep_status.value}, failed={result.failed_surfaces})"
        )
        return result

    # Used by: caregiving_session.py (no profile / onboarding / reset), api/glanceables.py
    async def clear(self) -> GlanceableSyncResult:
        if not self.is_enabled():
            return GlanceableSyncResult(attempted=False)

        result = await self._settle("clear", {
            "widget": self.widget.clear(),
            "live_activity": self.live_activity.end(dismissal_policy=DISMISSAL_IMMEDIATE),
        })
        logger.info(f"Cleared glanceables (failed={result.failed_surfaces})")
        return result


_glanceable_sync_controller: Optional[GlanceableSyncController] = None


# Used by: caregiving_session.py, api/glanceables.py
def get_glanceable_sync_controller() -> GlanceableSyncController:
    global _glanceable_sync_controller
    if _glanceable_sync_controller is None:
        bridge = HttpGlanceableBridge(
            base_url=settings.GLANCEABLES_BRIDGE_URL,
            timeout_seconds=settings.GLANCEABLES_TIMEOUT_SECONDS,
        )
        _glanceable_sync_controller = GlanceableSyncController(
            widget=DashboardWidget(bridge),
            live_activity=SleepLiveActivity(bridge, ActivityHandleStore()),
        )
    return _glanceable_sync_controller
