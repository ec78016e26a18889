from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Stable error families returned to the caller."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMITED = "RATE_LIMITED"
    INVALID_INPUT = "INVALID_INPUT"
    STORE_CONFLICT = "STORE_CONFLICT"


class StoreBackend(str, Enum):
    MYSQL = "mysql"
    MEMORY = "memory"
