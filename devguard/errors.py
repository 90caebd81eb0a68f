"""Exception types raised by the store and service layers."""

from __future__ import annotations


class DevGuardError(Exception):
    """Base class for devguard failures."""


class DeveloperNotFound(DevGuardError, LookupError):
    """Raised when a developer id does not exist."""

    def __init__(self, developer_id: int) -> None:
        super().__init__(f"Developer {developer_id} not found")
        self.developer_id = developer_id


class RecordNotFound(DevGuardError, LookupError):
    """Raised when deleting an activity or insight that does not exist."""

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class StoreUnavailable(DevGuardError):
    """Raised when the relational store cannot be reached or times out."""


class InvalidRecord(DevGuardError, ValueError):
    """Raised when the store rejects a write (constraint or bad reference)."""


__all__ = ["DevGuardError", "DeveloperNotFound", "RecordNotFound", "StoreUnavailable", "InvalidRecord"]
