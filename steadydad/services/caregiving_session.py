"""
Caregiving session: owns the in-memory profile/events state, exposes the logging
mutators, and drives glanceable sync after every committed change.

Glanceable work runs as detached tasks so logging never waits on the OS. The
last successfully synced key suppresses redundant pushes; a generation counter
keeps a superseded in-flight sync from overwriting the key of a newer one.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from steadydad.core.settings import settings
from steadydad.core.utils import now_ms
from steadydad.db.models import SLEEP_EVENT_TYPES, BabyEvent, BabyProfile, EventType, Milestone
from steadydad.services.babies_data import BabyDataManager
from steadydad.services.dashboard_snapshot import (
    DashboardSnapshot,
    build_dashboard_snapshot,
    get_dashboard_snapshot_sync_key,
)
from steadydad.services.glanceable_sync import (
    GlanceableSyncController,
    GlanceableSyncResult,
    get_glanceable_sync_controller,
)
from steadydad.utils.age import get_baby_age

logger = logging.getLogger(__name__)

SessionObserver = Callable[["CaregivingSession"], Any]


class CaregivingSession:
    def __init__(
        self,
        data_manager: Optional[BabyDataManager] = None,
        glanceables: Optional[GlanceableSyncController] = None,
        age_formatter: Callable[[str], str] = get_baby_age,
    ):
        self.data_manager = data_manager or BabyDataManager()
        self.glanceables = glanceables or get_glanceable_sync_controller()
        self.age_formatter = age_formatter

        self.profile: Optional[BabyProfile] = None
        self.events: List[BabyEvent] = []
        self.milestones: List[Milestone] = []
        self.onboarding_done = False
        self.is_loading = True

        # Scoped to this session; reset explicitly on reset_all(), never persisted
        self.last_synced_key: Optional[str] = None
        self._pending_key: Optional[str] = None
        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()

        self._observers: List[SessionObserver] = []
        self._notifying = False
        self._notify_again = False
        self.subscribe(self._glanceable_effect)

    # ── observers ───────────────────────────────────────────────────────────

    def subscribe(self, observer: SessionObserver) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: SessionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _commit(self) -> None:
        """Notify observers after a committed change. A notify from inside an observer is deferred, not nested."""
        if self.is_loading:
            return
        if self._notifying:
            self._notify_again = True
            return

        self._notifying = True
        try:
            while True:
                self._notify_again = False
                for observer in list(self._observers):
                    try:
                        observer(self)
                    except Exception as e:
                        logger.error(f"Session observer {observer!r} failed: {e}", exc_info=True)
                if not self._notify_again:
                    break
        finally:
            self._notifying = False

    # ── state loading + mutators ────────────────────────────────────────────

    # Used by: main.py lifespan (startup)
    async def load_initial_data(self) -> None:
        try:
            self.profile = await self.data_manager.get_baby_profile()
            self.onboarding_done = await self.data_manager.is_onboarding_done()
            if self.profile:
                self.events = await self.data_manager.get_events(self.profile.id, limit=settings.EVENTS_LIST_LIMIT)
                self.milestones = await self.data_manager.get_milestones(self.profile.id)
        except Exception as e:
            logger.error(f"Failed to load caregiving data: {e}", exc_info=True)
        finally:
            self.is_loading = False
        logger.info(
            f"Session loaded: profile={'yes' if self.profile else 'no'}, "
            f"events={len(self.events)}, onboarding_done={self.onboarding_done}"
        )
        self._commit()

    async def save_profile(self, name: str, birth_date: str) -> BabyProfile:
        """Raises ValueError on an invalid birth date."""
        self.profile = await self.data_manager.save_baby_profile(name, birth_date)
        self.events = await self.data_manager.get_events(self.profile.id, limit=settings.EVENTS_LIST_LIMIT)
        self.milestones = await self.data_manager.get_milestones(self.profile.id)
        self._commit()
        return self.profile

    async def update_profile(self, updates: Dict[str, Any]) -> Optional[BabyProfile]:
        profile = await self.data_manager.update_baby_profile(updates)
        if profile:
            self.profile = profile
            self._commit()
        return profile

    async def log_event(
        self,
        event_type: EventType,
        metadata_json: str = "{}",
        timestamp: Optional[int] = None,
    ) -> Optional[BabyEvent]:
        """Returns None when there is no profile to log against."""
        if self.profile is None:
            logger.warning(f"Ignoring {event_type} event: no baby profile")
            return None
        event = await self.data_manager.add_event(
            baby_id=self.profile.id,
            event_type=event_type,
            timestamp=timestamp if timestamp is not None else now_ms(),
            metadata_json=metadata_json,
        )
        self.events = [event, *self.events]
        self._commit()
        return event

    async def add_milestone(
        self,
        title: str,
        timestamp: int,
        note: Optional[str] = None,
        photo_uri: Optional[str] = None,
    ) -> Optional[Milestone]:
        if self.profile is None:
            return None
        milestone = await self.data_manager.add_milestone(
            baby_id=self.profile.id,
            title=title,
            timestamp=timestamp,
            note=note,
            photo_uri=photo_uri,
        )
        self.milestones = [milestone, *self.milestones]
        self._commit()
        return milestone

    async def refresh_events(self) -> None:
        if self.profile is None:
            return
        self.events = await self.data_manager.get_events(self.profile.id, limit=settings.EVENTS_LIST_LIMIT)
        self._commit()

    async def refresh_milestones(self) -> None:
        if self.profile is None:
            return
        self.milestones = await self.data_manager.get_milestones(self.profile.id)
        self._commit()

    async def complete_onboarding(self) -> None:
        await self.data_manager.set_onboarding_done()
        self.onboarding_done = True
        self._commit()

    async def reset_all(self) -> None:
        await self.data_manager.reset_all_data()
        self.profile = None
        self.events = []
        self.milestones = []
        self.onboarding_done = False

        # Clear regardless of what the change-driven path remembers
        self._generation += 1
        self.last_synced_key = None
        self._pending_key = None
        self._spawn(self.glanceables.clear())
        logger.info("Session reset; glanceables cleared")
        self._commit()

    # ── derived views ───────────────────────────────────────────────────────

    def get_last_event_by_type(self, event_type: EventType) -> Optional[BabyEvent]:
        matching = [e for e in self.events if e.type == event_type]
        return max(matching, key=lambda e: (e.timestamp, e.id)) if matching else None

    def get_last_sleep_event(self) -> Optional[BabyEvent]:
        matching = [e for e in self.events if e.type in SLEEP_EVENT_TYPES]
        return max(matching, key=lambda e: (e.timestamp, e.id)) if matching else None

    # Used by: api/endpoints.py (GET /dashboard), _glanceable_effect(), force_sync_glanceables()
    def snapshot(self) -> DashboardSnapshot:
        return build_dashboard_snapshot(self.profile, self.events, self.age_formatter)

    @property
    def has_active_profile(self) -> bool:
        return self.onboarding_done and self.profile is not None

    # ── glanceable sync ─────────────────────────────────────────────────────

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _glanceable_effect(self, _session: "CaregivingSession") -> None:
        if not self.has_active_profile:
            if self.last_synced_key is not None or self._pending_key is not None:
                self._generation += 1
                self.last_synced_key = None
                self._pending_key = None
                self._spawn(self.glanceables.clear())
            return

        snapshot = self.snapshot()
        key = get_dashboard_snapshot_sync_key(snapshot)
        if key in (self.last_synced_key, self._pending_key):
            logger.debug("Snapshot unchanged; glanceable sync skipped")
            return

        self._generation += 1
        self._pending_key = key
        self._spawn(self._sync_and_remember(snapshot, key, self._generation))

    async def _sync_and_remember(self, snapshot: DashboardSnapshot, key: str, generation: int) -> None:
        try:
            result = await self.glanceables.sync(snapshot)
        except Exception as e:
            logger.error(f"Unexpected glanceable sync error: {e}", exc_info=True)
            result = None

        if generation != self._generation:
            logger.debug(f"Discarding result of superseded glanceable sync (generation {generation})")
            return

        self._pending_key = None
        if result is None or not result.ok:
            # Key stays stale so the next change retries
            return
        self.last_synced_key = key

    # Used by: api/glanceables.py (POST /glanceables/sync), tasks.py (refresh job)
    async def force_sync_glanceables(self) -> GlanceableSyncResult:
        """Pushes the current state even if unchanged; clears when there is no active profile."""
        self._generation += 1
        generation = self._generation
        self._pending_key = None
        if not self.has_active_profile:
            self.last_synced_key = None
            return await self.glanceables.clear()

        snapshot = self.snapshot()
        result = await self.glanceables.sync(snapshot)
        if result.ok and generation == self._generation:
            self.last_synced_key = get_dashboard_snapshot_sync_key(snapshot)
        return result

    # Used by: api/glanceables.py (POST /glanceables/clear)
    async def clear_glanceables(self) -> GlanceableSyncResult:
        self._generation += 1
        self.last_synced_key = None
        self._pending_key = None
        return await self.glanceables.clear()

    # Used by: main.py lifespan (shutdown), tests
    async def wait_for_glanceables(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


_caregiving_session: Optional[CaregivingSession] = None


# Used by: main.py, api/*.py, tasks.py
def get_caregiving_session() -> CaregivingSession:
    global _caregiving_session
    if _caregiving_session is None:
        _caregiving_session = CaregivingSession()
    return _caregiving_session
