"""Birth date parsing and the age labels shown on the dashboard and widget."""

import re
from datetime import date, datetime
from typing import Optional

import pytz

from steadydad.core.constants import AGE_MONTHS_LABEL_LIMIT, AGE_WEEKS_LABEL_LIMIT, DAYS_PER_MONTH
from steadydad.core.settings import settings

ISO_BIRTH_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
SLASH_BIRTH_DATE_PATTERN = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2}|\d{4})$")


# Used by: get_age_in_days(), get_baby_age()
def local_today() -> date:
    return datetime.now(pytz.timezone(settings.APP_TIMEZONE)).date()


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


# Used by: normalize_birth_date_input(), get_age_in_days()
def parse_birth_date(value: str) -> Optional[date]:
    """Accepts YYYY-MM-DD or M/D/YY(YY) (dashes allowed). Two-digit years are 20xx."""
    text = (value or "").strip()
    if not text:
        return None

    match = ISO_BIRTH_DATE_PATTERN.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _build_date(year, month, day)

    match = SLASH_BIRTH_DATE_PATTERN.match(text)
    if match:
        month = int(match.group(1))
        day = int(match.group(2))
        raw_year = match.group(3)
        year = 2000 + int(raw_year) if len(raw_year) == 2 else int(raw_year)
        return _build_date(year, month, day)

    return None


# Used by: babies_data.py (save/update profile)
def normalize_birth_date_input(value: str) -> Optional[str]:
    parsed = parse_birth_date(value)
    if parsed is None:
        return None
    return parsed.isoformat()


def get_age_in_days(birth_date: str, today: Optional[date] = None) -> Optional[int]:
    parsed = parse_birth_date(birth_date)
    if parsed is None:
        return None
    today = today or local_today()
    return (today - parsed).days


# Used by: dashboard_snapshot.py (default age formatter)
def get_baby_age(birth_date: str, today: Optional[date] = None) -> str:
    days = get_age_in_days(birth_date, today)
    if days is None:
        return "Age unavailable"

    if days < 0:
        return "Not born yet"
    if days == 0:
        return "Newborn"
    if days == 1:
        return "1 day old"
    if days < 7:
        return f"{days} days old"

    weeks, remain_days = divmod(days, 7)
    if weeks < AGE_WEEKS_LABEL_LIMIT:
        if remain_days == 0:
            return f"{weeks} week{'s' if weeks > 1 else ''} old"
        return f"{weeks}w {remain_days}d old"

    months = int(days // DAYS_PER_MONTH)
    if months < AGE_MONTHS_LABEL_LIMIT:
        return f"{months} month{'s' if months > 1 else ''} old"

    years = months // 12
    return f"{years} year{'s' if years > 1 else ''} old"


# Used by: api/endpoints.py (guidance day on the dashboard)
def get_day_index(birth_date: str, today: Optional[date] = None) -> int:
    days = get_age_in_days(birth_date, today)
    return max(0, days or 0)
