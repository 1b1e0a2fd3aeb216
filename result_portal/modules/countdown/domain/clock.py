"""Clock abstraction for the countdown."""

from datetime import datetime
from typing import Protocol


class ClockSource(Protocol):
    """Supplies the current instant. Inject a fake in tests."""

    def now(self) -> datetime: ...


class SystemClock:
    """Device clock, timezone-aware in the local zone."""

    def now(self) -> datetime:
        return datetime.now().astimezone()
