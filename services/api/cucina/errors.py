"""Domain errors raised by the catalog command layer and the session registry.

The conversion and deduction engines never raise: a missing conversion edge is
reported as ``None`` and an unsatisfied deduction leaves ``remaining > 0``.
"""


class CucinaError(Exception):
    """Base class for domain errors."""


class ValidationError(CucinaError):
    """Input rejected at the boundary (empty name, non-positive quantity, ...)."""


class NotFoundError(CucinaError):
    """A referenced entity does not exist."""


class SessionStateError(CucinaError):
    """A cooking session transition is not allowed."""


class SessionClosedError(SessionStateError):
    """The session is already completed or cancelled."""


class DuplicateActiveSessionError(SessionStateError):
    """More than one active session exists for a (recipe, user) pair."""
