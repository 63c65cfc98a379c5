"""ID Generation - Prefixed identifiers for churches, notifications and requests"""
import uuid

from .time import utc_now

CHURCH_PREFIX = "CHR"
NOTIFICATION_PREFIX = "NTF"
CORRELATION_PREFIX = "COR"


def generate_id(prefix: str = "", length: int = 12) -> str:
    """
    Random hex id, optionally prefixed

    Examples:
        >>> generate_id("CHR")
        'CHR-a1b2c3d4e5f6'
    """
    token = uuid.uuid4().hex[:length]
    return f"{prefix}-{token}" if prefix else token


def generate_church_id() -> str:
    return generate_id(CHURCH_PREFIX)


def generate_notification_id() -> str:
    return generate_id(NOTIFICATION_PREFIX)


def generate_correlation_id() -> str:
    """Request tracing id; the UTC second it was minted is embedded for log grepping"""
    return f"{CORRELATION_PREFIX}-{utc_now():%Y%m%d%H%M%S}-{generate_id(length=8)}"
