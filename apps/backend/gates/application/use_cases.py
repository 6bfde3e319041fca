"""
Use Cases - Gate Operations

Use cases orchestrate domain logic and coordinate between ports.
They represent the application's operations (what the system can do).

Key principles:
- Each use case is a single operation with an async execute()
- Use cases depend on ports (interfaces), not adapters (implementations)
- Business hours act twice, deliberately differently:
  reads are masked (GetGate, ListGates) and never written back,
  opening a gate outside business hours is vetoed (UpdateGateState)
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from apps.backend.gates.application.ports import (
    BusinessHoursPort,
    ClockPort,
    GateRepository,
    IdProviderPort,
)
from apps.backend.gates.application.views import ConfigView, GroupView, group_gates
from apps.backend.gates.domain.errors import BusinessHoursConflictError, InvalidInputError
from apps.backend.gates.domain.gate import Comment, Gate, GateKey, GateState


logger = logging.getLogger(__name__)

OUTSIDE_BUSINESS_HOURS = "Already after business hours - rejecting attempt to change state"


def _gate_key(group: str, service: str, environment: str) -> GateKey:
    try:
        return GateKey(group=group, service=service, environment=environment)
    except ValueError as error:
        raise InvalidInputError(str(error)) from error


# ============================================================================
# Create / Delete
# ============================================================================

class CreateGateUseCase:
    """
    Create a new gate.

    New gates are CLOSED, have no comments and carry the creation time as
    last_updated.
    """

    def __init__(self, repository: GateRepository, clock: ClockPort):
        self._repository = repository
        self._clock = clock

    async def execute(
        self,
        group: str,
        service: str,
        environment: str,
        display_order: Optional[int] = None,
    ) -> Gate:
        """
        Raises:
            InvalidInputError: If a key part is empty or display_order is negative
            GateAlreadyExistsError: If the gate exists already
        """
        key = _gate_key(group, service, environment)
        try:
            gate = Gate.create(key, self._clock.now(), display_order=display_order)
        except ValueError as error:
            raise InvalidInputError(str(error)) from error

        created = await self._repository.insert(gate)
        logger.info(f"Created gate {key}")
        return created


class DeleteGateUseCase:
    """Delete a gate. Deletion is terminal."""

    def __init__(self, repository: GateRepository):
        self._repository = repository

    async def execute(self, group: str, service: str, environment: str) -> None:
        """
        Raises:
            GateNotFoundError: If the gate does not exist
        """
        key = _gate_key(group, service, environment)
        await self._repository.delete(key)
        logger.info(f"Deleted gate {key}")


# ============================================================================
# Reads (business-hours masking)
# ============================================================================

class GetGateUseCase:
    """
    Read one gate.

    Outside business hours the returned gate reports CLOSED even if storage
    holds OPEN.
    """

    def __init__(
        self,
        repository: GateRepository,
        clock: ClockPort,
        business_hours: BusinessHoursPort,
    ):
        self._repository = repository
        self._clock = clock
        self._business_hours = business_hours

    async def execute(self, group: str, service: str, environment: str) -> Optional[Gate]:
        gate = await self._repository.find_one(_gate_key(group, service, environment))
        if gate is None:
            return None
        return self._business_hours.close_if_time(self._clock.now(), gate)


class ListGatesUseCase:
    """Read all gates, masked like GetGateUseCase, grouped by group and service."""

    def __init__(
        self,
        repository: GateRepository,
        clock: ClockPort,
        business_hours: BusinessHoursPort,
    ):
        self._repository = repository
        self._clock = clock
        self._business_hours = business_hours

    async def execute(self) -> list[GroupView]:
        gates = await self._repository.find_all()
        now = self._clock.now()
        return group_gates(self._business_hours.close_if_time(now, gate) for gate in gates)


# ============================================================================
# Updates
# ============================================================================

class UpdateGateStateUseCase:
    """
    Open or close a gate.

    Opening a gate outside business hours is rejected before storage is
    touched. Closing is always allowed.
    """

    def __init__(
        self,
        repository: GateRepository,
        clock: ClockPort,
        business_hours: BusinessHoursPort,
    ):
        self._repository = repository
        self._clock = clock
        self._business_hours = business_hours

    async def execute(
        self,
        group: str,
        service: str,
        environment: str,
        state: Union[GateState, str],
    ) -> Gate:
        """
        Raises:
            InvalidInputError: If state is not "open" or "closed"
            BusinessHoursConflictError: If opening outside business hours
            GateNotFoundError: If the gate does not exist
        """
        key = _gate_key(group, service, environment)
        try:
            state = GateState(state)
        except ValueError:
            raise InvalidInputError(f"invalid gate state {state!r}") from None

        now = self._clock.now()
        if state == GateState.OPEN and self._business_hours.is_closed(now):
            logger.info(f"Rejected opening gate {key} outside business hours")
            raise BusinessHoursConflictError(OUTSIDE_BUSINESS_HOURS)

        gate = await self._repository.update_state(key, state, now)
        logger.info(f"Gate {key} is now {state.value}")
        return gate


class UpdateDisplayOrderUseCase:
    """Change where a gate is listed within its service."""

    def __init__(self, repository: GateRepository, clock: ClockPort):
        self._repository = repository
        self._clock = clock

    async def execute(
        self,
        group: str,
        service: str,
        environment: str,
        display_order: int,
    ) -> Gate:
        """
        Raises:
            InvalidInputError: If display_order is not a non-negative integer
            GateNotFoundError: If the gate does not exist
        """
        key = _gate_key(group, service, environment)
        if isinstance(display_order, bool) or not isinstance(display_order, int) or display_order < 0:
            raise InvalidInputError("display_order must be a non-negative integer")
        return await self._repository.update_display_order(key, display_order, self._clock.now())


# ============================================================================
# Comments
# ============================================================================

class AddCommentUseCase:
    """
    Attach a comment to a gate.

    The message is trimmed and must not be empty. The comment's created time
    and the gate's last_updated are the same instant.
    """

    def __init__(
        self,
        repository: GateRepository,
        clock: ClockPort,
        id_provider: IdProviderPort,
    ):
        self._repository = repository
        self._clock = clock
        self._id_provider = id_provider

    async def execute(
        self,
        group: str,
        service: str,
        environment: str,
        message: str,
    ) -> Gate:
        """
        Raises:
            InvalidInputError: If the message is empty after trimming
            GateNotFoundError: If the gate does not exist
        """
        key = _gate_key(group, service, environment)
        trimmed = (message or "").strip()
        if not trimmed:
            raise InvalidInputError("cannot add comment without message")

        now = self._clock.now()
        comment = Comment(id=self._id_provider.new_id(), message=trimmed, created=now)
        return await self._repository.upsert_comment(key, comment, now)


class DeleteCommentUseCase:
    """Remove one comment from a gate."""

    def __init__(self, repository: GateRepository, clock: ClockPort):
        self._repository = repository
        self._clock = clock

    async def execute(
        self,
        group: str,
        service: str,
        environment: str,
        comment_id: str,
    ) -> Gate:
        """
        Raises:
            GateNotFoundError: If the gate or the comment does not exist
        """
        key = _gate_key(group, service, environment)
        return await self._repository.delete_comment_by_id(key, comment_id, self._clock.now())


# ============================================================================
# Config
# ============================================================================

class GetConfigUseCase:
    """Expose server time and the business week so clients can explain masking."""

    def __init__(self, clock: ClockPort, business_hours: BusinessHoursPort):
        self._clock = clock
        self._business_hours = business_hours

    async def execute(self) -> ConfigView:
        return ConfigView(
            system_time=self._clock.now(),
            business_week=self._business_hours.week,
            business_hours_enabled=self._business_hours.enabled,
        )
