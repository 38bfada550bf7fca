from __future__ import annotations

from .constants import CYCLE_REJECTED_REASON


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class CycleRejected(ValidationError):
    """Raised when a new supervision edge would close a cycle."""

    def __init__(self, source: str, target: str, reason: str = CYCLE_REJECTED_REASON):
        super().__init__(f"Cannot connect {source} -> {target}: {reason}")
        self.source = source
        self.target = target
        self.reason = reason


class GraphIntegrityError(DomainError):
    """Raised when the in-memory graph holds data it should never hold."""


class PersistenceFailure(DomainError):
    """Raised when saving or loading a workflow fails."""

    def __init__(self, message: str = "Unknown error"):
        super().__init__(message or "Unknown error")
        self.message = message or "Unknown error"


class SaveInProgress(PersistenceFailure):
    """Raised when a save is requested while another one is still running."""



class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
