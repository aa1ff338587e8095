"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations


class DomainError(Exception):
    """Base for all domain errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Invalid input or state."""


class ConflictError(DomainError):
    """Resource conflict (e.g., duplicate id or an already reviewed request)."""


class AuthenticationError(DomainError):
    """Session could not be established or resolved to a user."""


class PermissionDeniedError(DomainError):
    """Authenticated user lacks the role required for the operation."""


class RecordStoreError(DomainError):
    """The record store failed (network, constraint violation, timeout)."""
