"""
Port Definitions (Interfaces)

Ports are contracts that define how the application core interacts with
external systems. They are implemented by adapters in the adapters/ directory.

All ports use Protocol (PEP 544) for structural subtyping.
"""

from datetime import datetime
from typing import Optional, Protocol

from apps.backend.gates.domain.business_hours import BusinessWeek
from apps.backend.gates.domain.gate import Comment, Gate, GateKey, GateState
from apps.backend.gates.domain.errors import (  # noqa: F401  (re-exported)
    GateAlreadyExistsError,
    GateDecodeError,
    GateNotFoundError,
    GateRepositoryError,
    GateStorageError,
    OperationNotPermittedError,
)


# ============================================================================
# Repository Port (Data Persistence)
# ============================================================================

class GateRepository(Protocol):
    """
    Repository for gates.

    Implementations:
    - DynamoDbGateRepository: Production (conditional writes on DynamoDB)
    - InMemoryGateRepository: Local development and testing
    - ReadOnlyGateRepository: Decorator for demo deployments

    Guarantees:
    - Every mutation is a single atomic conditional write against one key,
      never a client-side read-modify-write.
    - Mutations return the post-mutation gate.
    - Failures are typed (GateNotFoundError, GateAlreadyExistsError,
      GateDecodeError, GateStorageError); nothing is retried internally.
    """

    async def insert(self, gate: Gate) -> Gate:
        """
        Persist a new gate verbatim.

        Raises:
            GateAlreadyExistsError: If a record already exists for gate.key
        """
        ...

    async def find_one(self, key: GateKey) -> Optional[Gate]:
        """Return the gate stored under key, or None."""
        ...

    async def find_all(self) -> list[Gate]:
        """
        Return every stored gate, in no particular order.

        Raises:
            GateDecodeError: If any record cannot be decoded (the whole scan fails)
        """
        ...

    async def delete(self, key: GateKey) -> None:
        """
        Remove a gate.

        Raises:
            GateNotFoundError: If no record exists for key
        """
        ...

    async def update_state(self, key: GateKey, state: GateState, now: datetime) -> Gate:
        """
        Set state and last_updated.

        Raises:
            GateNotFoundError: If no record exists for key
        """
        ...

    async def update_display_order(self, key: GateKey, display_order: int, now: datetime) -> Gate:
        """
        Set display_order and last_updated.

        Raises:
            GateNotFoundError: If no record exists for key
        """
        ...

    async def upsert_comment(self, key: GateKey, comment: Comment, now: datetime) -> Gate:
        """
        Insert or overwrite the comment with comment.id and set last_updated.

        Only the gate has to exist; the comment id does not.

        Raises:
            GateNotFoundError: If no record exists for key
        """
        ...

    async def delete_comment_by_id(self, key: GateKey, comment_id: str, now: datetime) -> Gate:
        """
        Remove one comment and set last_updated.

        Raises:
            GateNotFoundError: If the gate or the comment does not exist
        """
        ...


# ============================================================================
# Business Hours Port
# ============================================================================

class BusinessHoursPort(Protocol):
    """
    Port for the business-hours evaluator.

    Implementations:
    - BusinessHoursSwitch: Configured BusinessWeek with an on/off toggle
    """

    week: BusinessWeek
    enabled: bool

    def is_closed(self, at: datetime) -> bool:
        """True when ``at`` is outside business hours (write-path veto)."""
        ...

    def close_if_time(self, at: datetime, gate: Gate) -> Gate:
        """Mask ``gate`` as closed outside business hours (read path, never persisted)."""
        ...


# ============================================================================
# Time / Clock Port (for testing)
# ============================================================================

class ClockPort(Protocol):
    """
    Port for time operations (enables time travel in tests).

    Implementations:
    - RealClock: Uses datetime.now(tz=timezone.utc)
    - FakeClock: Controllable time for testing
    """

    def now(self) -> datetime:
        """Get current time."""
        ...


# ============================================================================
# Identifier Port
# ============================================================================

class IdProviderPort(Protocol):
    """Port for generating opaque comment identifiers."""

    def new_id(self) -> str:
        ...


# ============================================================================
# Demo Quotes Port
# ============================================================================

class QuotesProviderPort(Protocol):
    """Source of canned comment messages used in demo mode."""

    def quote_for(self, comment_id: str) -> str:
        """Return a phrase for the comment; the same id yields the same phrase."""
        ...
