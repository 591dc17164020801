from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from devblog.services.snippet_sync import SyncResult


class DevblogError(Exception):
    """Base class for errors raised by repositories and services."""


class ConstraintViolationError(DevblogError):
    """A uniqueness or foreign-key rule was broken by a write."""


class NotFoundError(DevblogError):
    """The row targeted by an update does not exist."""


class TransportFailureError(DevblogError):
    """The store could not be reached or failed to run a statement."""


class SnippetSyncError(DevblogError):
    """A snippet reconciliation step failed after ``result`` had been applied."""

    def __init__(self, result: "SyncResult", cause: DevblogError, post_id: Optional[int] = None) -> None:
        super().__init__(str(cause))
        self.result = result
        self.cause = cause
        self.post_id = post_id
