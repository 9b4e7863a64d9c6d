"""
Open-now calculation from Google-style weekday text.

    ["Monday: 8:00 AM – 5:00 PM", "Tuesday: Closed", ...]

The current time is taken in the clinic's state time zone.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.controlled_vocabulary import DEFAULT_TIMEZONE, STATE_TIMEZONES

logger = logging.getLogger(__name__)

HOURS_RE = re.compile(
    r"(\d{1,2}):(\d{2})\s*(AM|PM)\s*[-–—]\s*(\d{1,2}):(\d{2})\s*(AM|PM)",
    re.IGNORECASE,
)


def _minutes(hour: str, minute: str, period: str) -> int:
    h = int(hour) % 12
    if period.upper() == "PM":
        h += 12
    return h * 60 + int(minute)


def clinic_timezone(state_code: Optional[str]) -> ZoneInfo:
    name = STATE_TIMEZONES.get((state_code or "").upper(), DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning("Time zone %s unavailable, using UTC", name)
        return ZoneInfo("UTC")


def is_open_now(
    weekday_text: Sequence[str],
    state_code: Optional[str],
    now: Optional[datetime] = None,
) -> bool:
    if not weekday_text:
        return False

    now = now or datetime.now(timezone.utc)
    local = now.astimezone(clinic_timezone(state_code))
    weekday = local.strftime("%A")
    current = local.hour * 60 + local.minute

    today = next((text for text in weekday_text if text.startswith(weekday)), None)
    if today is None or "closed" in today.lower():
        return False

    match = HOURS_RE.search(today)
    if not match:
        logger.warning("Could not parse hours: %s", today)
        return False

    open_h, open_m, open_p, close_h, close_m, close_p = match.groups()
    return _minutes(open_h, open_m, open_p) <= current < _minutes(close_h, close_m, close_p)
