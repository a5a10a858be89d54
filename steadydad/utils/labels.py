"""Human-readable labels for timestamps and events (timeline, widget, live activity)."""

import json
import logging
from datetime import datetime
from typing import Optional

import pytz

from steadydad.core.constants import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE
from steadydad.core.settings import settings
from steadydad.core.utils import now_ms
from steadydad.db.models import BabyEvent, EventType

logger = logging.getLogger(__name__)

FEED_TYPE_LABELS = {
    "breast_milk": "Breast milk",
    "formula": "Formula",
    "solid": "Solid food",
}

EVENT_TYPE_LABELS = {
    EventType.FEED: "Feed",
    EventType.DIAPER: "Diaper",
    EventType.SLEEP_START: "Sleep",
    EventType.SLEEP_END: "Wake",
    EventType.MOOD: "Mood",
}


# Used by: glanceable_content.py (widget rows)
def get_relative_time(timestamp: int, now: Optional[int] = None) -> str:
    diff = (now if now is not None else now_ms()) - timestamp
    minutes = diff // MS_PER_MINUTE
    hours = diff // MS_PER_HOUR
    days = diff // MS_PER_DAY

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days == 1:
        return "Yesterday"
    return f"{days}d ago"


# Used by: glanceable_content.py (small widget tiles)
def get_compact_relative_label(
    timestamp: Optional[int],
    fallback: str,
    now: Optional[int] = None,
) -> str:
    if not timestamp:
        return fallback

    diff = (now if now is not None else now_ms()) - timestamp
    minutes = diff // MS_PER_MINUTE
    hours = diff // MS_PER_HOUR
    days = diff // MS_PER_DAY

    if minutes < 1:
        return "Now"
    if minutes < 60:
        return f"{minutes}m"
    if hours < 24:
        return f"{hours}h"
    if days <= 1:
        return "1d"
    return f"{days}d"


# Used by: glanceable_content.py (sleeping presentation)
def get_sleep_duration(start_timestamp: int, now: Optional[int] = None) -> str:
    diff = (now if now is not None else now_ms()) - start_timestamp
    hours = diff // MS_PER_HOUR
    minutes = (diff % MS_PER_HOUR) // MS_PER_MINUTE
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


# Used by: glanceable_content.py (live activity subline)
def format_time_label(timestamp: int) -> str:
    """12-hour clock in the app timezone, e.g. '3:05 PM'."""
    local = datetime.fromtimestamp(timestamp / 1000, tz=pytz.timezone(settings.APP_TIMEZONE))
    hour = local.hour % 12 or 12
    ampm = "PM" if local.hour >= 12 else "AM"
    return f"{hour}:{local.minute:02d} {ampm}"


# Used by: api/events.py (timeline rows)
def get_event_type_label(event_type: str) -> str:
    try:
        return EVENT_TYPE_LABELS[EventType(event_type)]
    except ValueError:
        return event_type


# Used by: api/events.py (timeline rows)
def get_event_summary(event: BabyEvent) -> str:
    """Empty string when the metadata can't be read."""
    try:
        meta = json.loads(event.metadata_json)
        if event.type == EventType.FEED:
            label = FEED_TYPE_LABELS.get(meta.get("type"), "Solid food")
            amount = meta.get("amount_ml") or meta.get("amountMl")
            return f"{label} ({amount}ml)" if amount else label
        if event.type == EventType.DIAPER:
            kind = meta["kind"]
            return "Wet & dirty" if kind == "both" else kind.capitalize()
        if event.type == EventType.SLEEP_START:
            return "Fell asleep"
        if event.type == EventType.SLEEP_END:
            return "Woke up"
        if event.type == EventType.MOOD:
            return meta["mood"].capitalize()
        return ""
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.debug(f"Unreadable metadata on event {event.id}: {e}")
        return ""
