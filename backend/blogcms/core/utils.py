"""Identifier and timestamp helpers shared by models and services."""

import re
import secrets
import time
from datetime import datetime, timezone

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    """Return a 24-hex identifier: 4-byte epoch seconds followed by 8 random bytes."""
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{secrets.token_hex(8)}"


def is_object_id(value: str) -> bool:
    return bool(value) and OBJECT_ID_PATTERN.match(value) is not None


def utcnow() -> datetime:
    """Naive UTC now, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
