"""
Mapping from gate errors to caller-facing outcomes.

Whatever drives the use cases (an HTTP handler, a CLI) turns exceptions into
responses through error_outcome(). Anything that is not a known, distinguished
failure is an internal error; it is never reported as "not found" or
"conflict".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from apps.backend.gates.domain.errors import (
    BusinessHoursConflictError,
    GateAlreadyExistsError,
    GateNotFoundError,
    InvalidInputError,
    OperationNotPermittedError,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorOutcome:
    status: int
    code: str
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


def error_outcome(error: Exception) -> ErrorOutcome:
    if isinstance(error, GateNotFoundError):
        return ErrorOutcome(404, "gate_not_found", "no such gate")
    if isinstance(error, GateAlreadyExistsError):
        return ErrorOutcome(409, "gate_already_exists", "gate already exists")
    if isinstance(error, BusinessHoursConflictError):
        return ErrorOutcome(409, "business_hours_conflict", str(error))
    if isinstance(error, OperationNotPermittedError):
        return ErrorOutcome(403, "not_permitted", str(error))
    if isinstance(error, InvalidInputError):
        return ErrorOutcome(400, "invalid_input", str(error))

    # GateDecodeError, GateStorageError and anything unexpected
    logger.error(f"Internal error: {error!r}", exc_info=error)
    return ErrorOutcome(500, "internal_error", "internal error")
