"""
System clock adapter.

Implements ClockPort with timezone-aware UTC time; tests substitute a
FakeClock with a fixed instant.
"""

from __future__ import annotations
from datetime import datetime, timezone
from apps.backend.gates.application.ports import ClockPort


class RealClock(ClockPort):
    def now(self) -> datetime:
        return datetime.now(tz=timezone.utc)
