"""
Domain Layer - Gates, Comments and Business Hours

CRITICAL RULES:
- ZERO framework dependencies (no boto3, no HTTP)
- Pure Python only (stdlib + typing)
- Entities are immutable (frozen dataclasses); mutations return new instances
"""

from apps.backend.gates.domain.gate import (
    Comment,
    Gate,
    GateKey,
    GateState,
)
from apps.backend.gates.domain.business_hours import (
    BusinessHoursSwitch,
    BusinessTimes,
    BusinessWeek,
    close_if_time,
    is_closed,
)
from apps.backend.gates.domain.errors import (
    BusinessHoursConflictError,
    GateAlreadyExistsError,
    GateDecodeError,
    GateNotFoundError,
    GateRepositoryError,
    GateStorageError,
    InvalidInputError,
    OperationNotPermittedError,
)

__all__ = [
    # Gates
    "Comment",
    "Gate",
    "GateKey",
    "GateState",
    # Business hours
    "BusinessHoursSwitch",
    "BusinessTimes",
    "BusinessWeek",
    "close_if_time",
    "is_closed",
    # Errors
    "BusinessHoursConflictError",
    "GateAlreadyExistsError",
    "GateDecodeError",
    "GateNotFoundError",
    "GateRepositoryError",
    "GateStorageError",
    "InvalidInputError",
    "OperationNotPermittedError",
]
