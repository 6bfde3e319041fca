"""
Business-hours evaluator.

A BusinessWeek maps each weekday to an optional wall-clock window. Outside of
that window a gate counts as closed. The evaluator is used two ways:

- read path: close_if_time() masks the returned gate as CLOSED. The override
  is never written back, so storage may still hold OPEN.
- write path: is_closed() lets the caller veto opening a gate before storage
  is touched.

Both are pure functions over a schedule and a timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Any, Mapping, Optional

from .gate import Gate

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

TIME_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class BusinessTimes:
    """Inclusive wall-clock window (no date component)."""
    start: time
    end: time

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"start {self.start} must not be after end {self.end}")

    def is_outside(self, at: time) -> bool:
        return at < self.start or at > self.end

    def to_record(self) -> dict[str, str]:
        return {
            "start": self.start.strftime(TIME_FORMAT),
            "end": self.end.strftime(TIME_FORMAT),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> BusinessTimes:
        try:
            return cls(
                start=_parse_time(record["start"]),
                end=_parse_time(record["end"]),
            )
        except (KeyError, TypeError) as error:
            raise ValueError(f"invalid business times {record!r}") from error


@dataclass(frozen=True)
class BusinessWeek:
    """Open window per weekday. ``None`` means closed all day."""
    monday: Optional[BusinessTimes] = None
    tuesday: Optional[BusinessTimes] = None
    wednesday: Optional[BusinessTimes] = None
    thursday: Optional[BusinessTimes] = None
    friday: Optional[BusinessTimes] = None
    saturday: Optional[BusinessTimes] = None
    sunday: Optional[BusinessTimes] = None

    @classmethod
    def default(cls) -> BusinessWeek:
        """Office hours used when nothing else is configured."""
        return cls(
            monday=BusinessTimes(time(7, 0), time(18, 30)),
            tuesday=BusinessTimes(time(8, 0), time(18, 0)),
            wednesday=BusinessTimes(time(8, 0), time(17, 0)),
            thursday=BusinessTimes(time(8, 0), time(18, 0)),
            friday=BusinessTimes(time(10, 0), time(16, 0)),
        )

    def times_for(self, weekday: int) -> Optional[BusinessTimes]:
        """Window for ``weekday`` as returned by ``datetime.weekday()`` (Monday == 0)."""
        return getattr(self, WEEKDAYS[weekday])

    def to_record(self) -> dict[str, dict[str, str]]:
        return {
            day: times.to_record()
            for day in WEEKDAYS
            if (times := getattr(self, day)) is not None
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> BusinessWeek:
        unknown = set(record) - set(WEEKDAYS)
        if unknown:
            raise ValueError(f"unknown weekdays in business week: {sorted(unknown)}")
        return cls(**{
            day: BusinessTimes.from_record(value) if value is not None else None
            for day, value in record.items()
        })


def _parse_time(value: str) -> time:
    return datetime.strptime(value, TIME_FORMAT).time()


def _wall_clock(at: datetime) -> datetime:
    # Aware timestamps are evaluated in UTC; naive ones are taken as-is
    if at.tzinfo is not None:
        return at.astimezone(timezone.utc)
    return at


# ============================================================================
# Evaluator
# ============================================================================

def is_closed(week: BusinessWeek, at: datetime) -> bool:
    """
    True when ``at`` falls outside the window configured for its weekday.

    A weekday without a window is closed all day. Both window bounds count as
    open.
    """
    at = _wall_clock(at)
    times = week.times_for(at.weekday())
    if times is None:
        return True
    return times.is_outside(at.time())


def close_if_time(week: BusinessWeek, at: datetime, gate: Gate) -> Gate:
    """Return ``gate`` masked as CLOSED when ``at`` is outside business hours."""
    if is_closed(week, at):
        return gate.closed()
    return gate


class BusinessHoursSwitch:
    """
    Business week plus an on/off toggle.

    When disabled the switch never reports closed, so neither read masking nor
    the write veto apply.
    """

    def __init__(self, week: BusinessWeek, enabled: bool = True):
        self.week = week
        self.enabled = enabled

    def is_closed(self, at: datetime) -> bool:
        return self.enabled and is_closed(self.week, at)

    def close_if_time(self, at: datetime, gate: Gate) -> Gate:
        if not self.enabled:
            return gate
        return close_if_time(self.week, at, gate)
