"""
Dashboard snapshot: reduces the event log to the current caregiving state.

build_dashboard_snapshot() is pure and total: it never inspects event metadata,
never assumes the events are sorted, and never raises for an empty list or a
missing profile. Callers pass events already filtered to one baby.
"""

import json
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from steadydad.core.constants import DEFAULT_BABY_NAME
from steadydad.db.models import SLEEP_EVENT_TYPES, BabyEvent, BabyProfile, EventType
from steadydad.utils.age import get_baby_age


class SleepStatus(str, Enum):
    SLEEPING = "sleeping"
    AWAKE = "awake"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class DashboardSnapshot:
    baby_name: str
    baby_age_label: Optional[str]
    last_feed_at: Optional[int]
    last_diaper_at: Optional[int]
    last_sleep_at: Optional[int]
    sleep_started_at: Optional[int]
    is_sleeping: bool
    sleep_status: SleepStatus

    def to_dict(self) -> dict:
        data = asdict(self)
        data["sleep_status"] = self.sleep_status.value
        return data


def _is_later(candidate: BabyEvent, current: Optional[BabyEvent]) -> bool:
    # Total order (timestamp, id) so duplicate timestamps resolve the same way regardless of list order
    if current is None:
        return True
    return (candidate.timestamp, candidate.id) > (current.timestamp, current.id)


# Used by: caregiving_session.py (glanceable effect), api/endpoints.py (GET /dashboard)
def build_dashboard_snapshot(
    profile: Optional[BabyProfile],
    events: Iterable[BabyEvent],
    age_formatter: Callable[[str], str] = get_baby_age,
) -> DashboardSnapshot:
    last_feed: Optional[BabyEvent] = None
    last_diaper: Optional[BabyEvent] = None
    last_sleep: Optional[BabyEvent] = None

    for event in events:
        if event.type == EventType.FEED:
            if _is_later(event, last_feed):
                last_feed = event
        elif event.type == EventType.DIAPER:
            if _is_later(event, last_diaper):
                last_diaper = event
        elif event.type in SLEEP_EVENT_TYPES:
            if _is_later(event, last_sleep):
                last_sleep = event

    is_sleeping = last_sleep is not None and last_sleep.type == EventType.SLEEP_START

    if last_sleep is None:
        sleep_status = SleepStatus.NO_DATA
    elif is_sleeping:
        sleep_status = SleepStatus.SLEEPING
    else:
        sleep_status = SleepStatus.AWAKE

    baby_name = profile.name if profile and profile.name else DEFAULT_BABY_NAME
    baby_age_label = age_formatter(profile.birth_date) if profile and profile.birth_date else None

    return DashboardSnapshot(
        baby_name=baby_name,
        baby_age_label=baby_age_label,
        last_feed_at=last_feed.timestamp if last_feed else None,
        last_diaper_at=last_diaper.timestamp if last_diaper else None,
        last_sleep_at=last_sleep.timestamp if last_sleep else None,
        sleep_started_at=last_sleep.timestamp if is_sleeping else None,
        is_sleeping=is_sleeping,
        sleep_status=sleep_status,
    )


# Used by: caregiving_session.py (change suppression)
def get_dashboard_snapshot_sync_key(snapshot: DashboardSnapshot) -> str:
    """Equal keys iff every snapshot field is equal. Never persisted."""
    return json.dumps(snapshot.to_dict(), sort_keys=True, separators=(",", ":"))
