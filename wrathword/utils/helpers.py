"""
Helper Functions

Contains utility functions used throughout the application.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Dict, Tuple
from zoneinfo import ZoneInfo

from flask import request


def today_iso(tz_name: str = "UTC") -> str:
    """Current calendar date in the given timezone as YYYY-MM-DD."""
    return datetime.now(ZoneInfo(tz_name)).date().isoformat()


def get_user_identity(request_obj=None, player_id: str = None) -> Dict[str, str]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    user_ip = getattr(request_obj, 'remote_addr', None) or 'unknown'

    return {
        'user_ip': user_ip,
        'player_id': player_id,
    }


# Every inhabited time zone lies within UTC-12:00 .. UTC+14:00
EARLIEST_UTC_OFFSET = timedelta(hours=-12)
LATEST_UTC_OFFSET = timedelta(hours=14)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def current_local_dates(now: datetime) -> Tuple[date, date]:
    """Earliest and latest calendar date in use anywhere at the instant now."""
    now = now.astimezone(timezone.utc)
    return (now + EARLIEST_UTC_OFFSET).date(), (now + LATEST_UTC_OFFSET).date()
