"""
Gate Domain Models

Pure entities for gates and their comments.
No framework dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional


# ============================================================================
# Enums
# ============================================================================

class GateState(str, Enum):
    """State of a gate. Stored lowercase."""
    OPEN = "open"
    CLOSED = "closed"


# ============================================================================
# Value Objects
# ============================================================================

@dataclass(frozen=True)
class GateKey:
    """
    Natural identity of a gate.

    The backend addresses a gate by partition key ``group`` and sort key
    ``"{service}#{environment}"``, so every repository operation hits exactly
    one record.
    """
    group: str
    service: str
    environment: str

    def __post_init__(self):
        for name in ("group", "service", "environment"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"{name} must be a non-empty string")
        if "#" in self.service:
            raise ValueError("service must not contain '#'")

    @property
    def sort_key(self) -> str:
        return f"{self.service}#{self.environment}"

    def __str__(self) -> str:
        return f"{self.group}/{self.service}/{self.environment}"


@dataclass(frozen=True)
class Comment:
    """A note attached to a gate. ``id`` is provider-generated and opaque."""
    id: str
    message: str
    created: datetime

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("comment id must be a non-empty string")
        object.__setattr__(self, "created", _as_utc(self.created))


# ============================================================================
# Gate (Aggregate)
# ============================================================================

@dataclass(frozen=True)
class Gate:
    """
    A named open/closed switch.

    Invariants:
    - comment ids are unique within the gate
    - display_order, when set, is a non-negative integer
    - timestamps are aware UTC; naive values are taken to be UTC

    Mutations return new instances; every mutation also moves ``last_updated``.
    """
    key: GateKey
    state: GateState
    last_updated: datetime
    comments: frozenset = field(default_factory=frozenset)
    display_order: Optional[int] = None

    def __post_init__(self):
        comments = frozenset(self.comments)
        ids = [comment.id for comment in comments]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate comment ids in gate {self.key}")
        object.__setattr__(self, "comments", comments)
        object.__setattr__(self, "state", GateState(self.state))
        object.__setattr__(self, "last_updated", _as_utc(self.last_updated))

        if self.display_order is not None:
            if isinstance(self.display_order, bool) or not isinstance(self.display_order, int):
                raise ValueError("display_order must be an integer")
            if self.display_order < 0:
                raise ValueError("display_order must not be negative")

    @classmethod
    def create(
        cls,
        key: GateKey,
        now: datetime,
        display_order: Optional[int] = None,
    ) -> Gate:
        """New gates start closed and without comments."""
        return cls(
            key=key,
            state=GateState.CLOSED,
            last_updated=now,
            display_order=display_order,
        )

    @property
    def is_open(self) -> bool:
        return self.state == GateState.OPEN

    def comment(self, comment_id: str) -> Optional[Comment]:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None

    def has_comment(self, comment_id: str) -> bool:
        return self.comment(comment_id) is not None

    def sorted_comments(self) -> list[Comment]:
        """Comments oldest first (ties broken by id for a stable order)."""
        return sorted(self.comments, key=lambda comment: (comment.created, comment.id))

    def with_state(self, state: GateState, now: datetime) -> Gate:
        return replace(self, state=state, last_updated=now)

    def with_display_order(self, display_order: int, now: datetime) -> Gate:
        return replace(self, display_order=display_order, last_updated=now)

    def with_comment(self, comment: Comment, now: datetime) -> Gate:
        """Insert or overwrite the comment with the same id."""
        kept = _without_id(self.comments, comment.id)
        return replace(self, comments=kept | {comment}, last_updated=now)

    def without_comment(self, comment_id: str, now: datetime) -> Gate:
        return replace(self, comments=_without_id(self.comments, comment_id), last_updated=now)

    def closed(self) -> Gate:
        """Copy with state forced to CLOSED; every other field untouched."""
        if self.state == GateState.CLOSED:
            return self
        return replace(self, state=GateState.CLOSED)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC already
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _without_id(comments: Iterable[Comment], comment_id: str) -> frozenset:
    return frozenset(comment for comment in comments if comment.id != comment_id)
