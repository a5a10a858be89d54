"""Content payloads pushed to the widget and the sleep live activity. The device renders them."""

from typing import Any, Dict, Optional

from steadydad.services.dashboard_snapshot import DashboardSnapshot, SleepStatus
from steadydad.utils.labels import (
    format_time_label,
    get_compact_relative_label,
    get_relative_time,
    get_sleep_duration,
)


def _sleep_headline(snapshot: DashboardSnapshot) -> str:
    if snapshot.sleep_status == SleepStatus.SLEEPING:
        return "Sleep in progress"
    if snapshot.sleep_status == SleepStatus.AWAKE:
        return "Awake"
    return "No sleep logged yet"


def _sleep_subline(snapshot: DashboardSnapshot) -> str:
    if snapshot.sleep_started_at:
        return f"Started {format_time_label(snapshot.sleep_started_at)}"
    if snapshot.last_sleep_at:
        return f"Last sleep {format_time_label(snapshot.last_sleep_at)}"
    return "Track sleep from dashboard"


# Used by: live_activity.py (start, update)
def build_sleep_live_activity_content(snapshot: DashboardSnapshot) -> Dict[str, Any]:
    """Timer counts up on-device from timer_start_ms, so the payload stays stable while sleeping."""
    if snapshot.sleep_started_at:
        compact = None
    elif snapshot.sleep_status == SleepStatus.AWAKE:
        compact = "Awake"
    else:
        compact = "--"

    return {
        "baby_name": snapshot.baby_name,
        "headline": _sleep_headline(snapshot),
        "subline": _sleep_subline(snapshot),
        "timer_start_ms": snapshot.sleep_started_at,
        "compact_label": compact,
    }


def _sleep_presentation(snapshot: DashboardSnapshot, now: Optional[int]) -> Dict[str, str]:
    if snapshot.sleep_started_at:
        duration = get_sleep_duration(snapshot.sleep_started_at, now)
        return {
            "title": "Sleeping",
            "detail": f"Sleeping for {duration}",
            "compact_value": "Asleep",
            "duration_value": duration,
            "icon": "moon.stars.fill",
        }

    if snapshot.last_sleep_at:
        return {
            "title": "Awake",
            "detail": f"Last sleep {get_relative_time(snapshot.last_sleep_at, now)}",
            "compact_value": "Awake",
            "duration_value": get_compact_relative_label(snapshot.last_sleep_at, "--", now),
            "icon": "sun.max.fill",
        }

    return {
        "title": "No sleep data",
        "detail": "Log sleep from dashboard",
        "compact_value": "--",
        "duration_value": "--",
        "icon": "moon.zzz.fill",
    }


# Used by: widget.py (DashboardWidget.update)
def build_dashboard_widget_content(
    snapshot: DashboardSnapshot,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    feed_label = get_relative_time(snapshot.last_feed_at, now) if snapshot.last_feed_at else "No feeds yet"
    diaper_label = get_relative_time(snapshot.last_diaper_at, now) if snapshot.last_diaper_at else "No diapers yet"

    return {
        "baby_name": snapshot.baby_name,
        "header_subline": snapshot.baby_age_label or "Dashboard snapshot",
        "feed": {
            "label": feed_label,
            "compact": get_compact_relative_label(snapshot.last_feed_at, "--", now),
        },
        "diaper": {
            "label": diaper_label,
            "compact": get_compact_relative_label(snapshot.last_diaper_at, "--", now),
        },
        "sleep": _sleep_presentation(snapshot, now),
        "now_tone": snapshot.sleep_status.value,
    }
