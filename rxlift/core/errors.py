"""
Error taxonomy.

Validation errors block a wizard step without touching state; collaborator
errors wrap failures from reference data or record stores and keep the
underlying message. Neither is retried here.
"""

from typing import Optional


class RxLiftError(Exception):
    """Base class for engine errors."""


class TargetingValidationError(RxLiftError, ValueError):
    """User input is incomplete or invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class CollaboratorError(RxLiftError, RuntimeError):
    """An external collaborator (reference data, record store) failed."""

    def __init__(self, collaborator: str, message: str):
        super().__init__(f"{collaborator}: {message}")
        self.collaborator = collaborator
        self.message = message

    @classmethod
    def wrap(cls, collaborator: str, exc: Exception) -> "CollaboratorError":
        return cls(collaborator, str(exc) or exc.__class__.__name__)
