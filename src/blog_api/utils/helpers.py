"""
Utility functions and helpers
"""

import logging
import uuid
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps coming back from a driver as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_document_id() -> str:
    return str(uuid.uuid4())


def short_trace_id() -> str:
    return str(uuid.uuid4())[:8]
