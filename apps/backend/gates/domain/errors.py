"""
Error taxonomy for gate persistence and gate operations.

Repository errors derive from GateRepositoryError. BusinessHoursConflictError,
OperationNotPermittedError and InvalidInputError are orthogonal to it: the
repository itself never raises them.
"""


class GateRepositoryError(Exception):
    """Base class for failures surfaced by a GateRepository."""


class GateNotFoundError(GateRepositoryError):
    """Raised when an existence precondition (gate, or gate and comment) fails."""


class GateAlreadyExistsError(GateRepositoryError):
    """Raised when inserting a gate whose key is already taken."""


class GateDecodeError(GateRepositoryError):
    """Raised when a stored record cannot be decoded into a Gate."""


class GateStorageError(GateRepositoryError):
    """Raised for transport or unknown backend failures (possibly retryable)."""


class OperationNotPermittedError(Exception):
    """Raised by the read-only repository for refused mutations."""


class BusinessHoursConflictError(Exception):
    """Raised when a state change is vetoed outside of business hours."""


class InvalidInputError(ValueError):
    """Raised when a use case receives input it cannot act on."""
