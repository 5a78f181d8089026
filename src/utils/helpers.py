"""
Utility functions and helpers
"""

import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

def normalize_timestamp(value: Optional[datetime]) -> datetime:
    """Return an aware UTC datetime; naive values are taken as UTC and None means now"""
    if value is None:
        return datetime.now(timezone.utc)

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc)

def parse_timestamp(timestamp_str: str) -> datetime:
    """Parse an ISO 8601 timestamp handling the 'Z' suffix"""
    if timestamp_str.endswith('Z'):
        timestamp_str = timestamp_str[:-1] + '+00:00'

    return normalize_timestamp(datetime.fromisoformat(timestamp_str))
