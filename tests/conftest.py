from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio

from steadydad.core import database as core_database
from steadydad.core.database import DatabaseManager
from steadydad.db.models import BabyEvent, BabyProfile, EventType
from steadydad.services.babies_data import BabyDataManager
from steadydad.services.caregiving_session import CaregivingSession
from steadydad.services.glanceable_client import GlanceableBridgeError
from steadydad.services.glanceable_sync import GlanceableSyncController
from steadydad.services.kv_store import KeyValueStore
from steadydad.services.live_activity import ActivityHandleStore, SleepLiveActivity
from steadydad.services.widget import DashboardWidget


class FakeGlanceableBridge:
    """Records every primitive call; methods listed in `fail` raise GlanceableBridgeError."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, tuple]] = []
        self.fail: set[str] = set()
        self.activities: Dict[str, Dict[str, Any]] = {}
        self.running_names: set[str] = set()
        self.widgets: Dict[str, Dict[str, Any]] = {}
        self._next_id = 0

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail:
            raise GlanceableBridgeError(f"{name} failed")

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    @property
    def primitive_calls(self) -> List[str]:
        return [call for call, _ in self.calls]

    async def start_live_activity(
        self, content: Dict[str, Any], activity_name: str, deep_link_url: str
    ) -> Optional[str]:
        self._record("start_live_activity", content, activity_name, deep_link_url)
        self._next_id += 1
        activity_id = f"activity-{self._next_id}"
        self.activities[activity_id] = content
        self.running_names.add(activity_name)
        return activity_id

    async def update_live_activity(self, activity_id: str, content: Dict[str, Any]) -> None:
        self._record("update_live_activity", activity_id, content)
        if activity_id not in self.activities and activity_id not in self.running_names:
            raise GlanceableBridgeError(f"unknown activity {activity_id}")
        self.activities[activity_id] = content

    async def stop_live_activity(self, activity_id: str, dismissal_policy: str) -> None:
        self._record("stop_live_activity", activity_id, dismissal_policy)
        if activity_id in self.activities:
            del self.activities[activity_id]
        elif activity_id in self.running_names:
            self.activities.clear()
        else:
            raise GlanceableBridgeError(f"unknown activity {activity_id}")
        if not self.activities:
            self.running_names.clear()

    async def end_all_live_activities(self, dismissal_policy: str) -> None:
        self._record("end_all_live_activities", dismissal_policy)
        self.activities.clear()
        self.running_names.clear()

    async def is_live_activity_active(self, activity_name: str) -> bool:
        self._record("is_live_activity_active", activity_name)
        return activity_name in self.running_names

    async def update_widget(self, widget_id: str, content: Dict[str, Any], deep_link_url: str) -> None:
        self._record("update_widget", widget_id, content, deep_link_url)
        self.widgets[widget_id] = content

    async def clear_widget(self, widget_id: str) -> None:
        self._record("clear_widget", widget_id)
        self.widgets.pop(widget_id, None)

    async def get_active_widgets(self) -> List[Dict[str, Any]]:
        self._record("get_active_widgets")
        return [{"name": widget_id} for widget_id in self.widgets]


def make_event(event_type: EventType | str, timestamp: int, event_id: str | None = None,
               baby_id: str = "baby-1", metadata_json: str = "{}") -> BabyEvent:
    return BabyEvent(
        id=event_id or f"{event_type}-{timestamp}",
        baby_id=baby_id,
        type=EventType(event_type),
        timestamp=timestamp,
        metadata_json=metadata_json,
    )


def make_profile(name: str = "Noa", birth_date: str = "2026-10-01") -> BabyProfile:
    return BabyProfile(id="baby-1", name=name, birth_date=birth_date, created_at=0)


@pytest_asyncio.fixture
async def database(tmp_path: Path, monkeypatch):
    db = DatabaseManager()
    await db.connect(f"sqlite+aiosqlite:///{tmp_path / 'steadydad.db'}")
    await db.create_schema()
    monkeypatch.setattr(core_database, "_db", db)
    try:
        yield db
    finally:
        await db.disconnect()


@pytest.fixture
def kv_store(database) -> KeyValueStore:
    return KeyValueStore()


@pytest.fixture
def bridge() -> FakeGlanceableBridge:
    return FakeGlanceableBridge()


@pytest.fixture
def handle_store(kv_store) -> ActivityHandleStore:
    return ActivityHandleStore(kv_store)


@pytest.fixture
def live_activity(bridge, handle_store) -> SleepLiveActivity:
    return SleepLiveActivity(bridge, handle_store)


@pytest.fixture
def controller(bridge, live_activity) -> GlanceableSyncController:
    return GlanceableSyncController(
        widget=DashboardWidget(bridge),
        live_activity=live_activity,
        platform="ios",
        enabled_flag="true",
    )


@pytest.fixture
def session(kv_store, controller) -> CaregivingSession:
    return CaregivingSession(
        data_manager=BabyDataManager(kv_store),
        glanceables=controller,
        age_formatter=lambda birth_date: "2 weeks old",
    )
