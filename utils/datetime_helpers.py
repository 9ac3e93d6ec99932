"""Timezone-aware date/time helpers for the hotel application."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Asia/Kolkata')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_now() -> datetime:
    """Get current datetime in the configured timezone."""
    return datetime.now(get_timezone())


def get_now_str() -> str:
    """Current local time as a sortable 'YYYY-MM-DD HH:MM:SS' string."""
    return get_now().strftime(TIMESTAMP_FORMAT)


def format_timestamp(value: datetime) -> str:
    """Format a datetime the way timestamps are stored."""
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """
    Parse a stored timestamp.

    Accepts the storage format and bare dates (midnight).

    Raises:
        ValueError: If the string matches neither format
    """
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return datetime.strptime(value, '%Y-%m-%d')
