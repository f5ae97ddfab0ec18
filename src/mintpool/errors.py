"""
Typed errors raised by the premint store and everything built on it.

The API layer maps these onto HTTP status codes; nothing in the store
retries or swallows them.
"""

from __future__ import annotations

from typing import Optional


class PremintStoreError(Exception):
    """Base class for every error the store surfaces to callers."""


class ConflictError(PremintStoreError):
    """A premint with the same ``(kind, id)`` already exists."""

    def __init__(self, kind: str, id: str):
        super().__init__(f"premint {kind}/{id} already exists")
        self.kind = kind
        self.id = id

    def __reduce__(self):
        return (self.__class__, (self.kind, self.id))


class NotFoundError(PremintStoreError, LookupError):
    """No premint is stored under ``(kind, id)``."""

    def __init__(self, kind: str, id: str):
        super().__init__(f"premint {kind}/{id} not found")
        self.kind = kind
        self.id = id

    def __reduce__(self):
        return (self.__class__, (self.kind, self.id))


class ValidationError(PremintStoreError, ValueError):
    """Missing required field, malformed document or bad key."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []

    def __reduce__(self):
        return (self.__class__, (self.args[0], self.errors))


class StorageError(PremintStoreError):
    """The underlying engine failed (I/O, lost connection, aborted transaction)."""
