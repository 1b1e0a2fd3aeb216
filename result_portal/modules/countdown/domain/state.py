"""Countdown domain values.

- TargetInstant: 结果发布时间，显式区分 "未加载" 与 "已设定"
- CountdownState: Pending(剩余天/时/分/秒) 或 Expired
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import ClassVar, Literal

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

EXPIRED_TEXT = "Results are out!"


def as_local(value: datetime) -> datetime:
    """Naive datetimes are read as device-local time."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


@dataclass(frozen=True)
class TargetInstant:
    """Target release instant, or the unset variant before the feed loads."""

    value: datetime | None = None

    @classmethod
    def unset(cls) -> "TargetInstant":
        return cls(None)

    @classmethod
    def at(cls, value: datetime) -> "TargetInstant":
        return cls(as_local(value))

    @property
    def is_set(self) -> bool:
        return self.value is not None

    def isoformat(self) -> str | None:
        return self.value.isoformat() if self.value is not None else None


@dataclass(frozen=True)
class Pending:
    """Time left until the target, decomposed without calendar units."""

    days: int
    hours: int
    minutes: int
    seconds: int

    kind: ClassVar[Literal["pending"]] = "pending"
    is_expired: ClassVar[bool] = False

    @property
    def text(self) -> str:
        return f"{self.days}d {self.hours}h {self.minutes}m {self.seconds}s"

    @property
    def total_seconds(self) -> int:
        return self.days * 86400 + self.hours * 3600 + self.minutes * 60 + self.seconds


@dataclass(frozen=True)
class Expired:
    """Terminal state once the target instant has passed."""

    kind: ClassVar[Literal["expired"]] = "expired"
    is_expired: ClassVar[bool] = True
    text: ClassVar[str] = EXPIRED_TEXT


EXPIRED = Expired()

CountdownState = Pending | Expired


def remaining_ms(target: datetime, now: datetime) -> int:
    """Whole milliseconds from ``now`` to ``target`` (floored, may be negative)."""
    return (as_local(target) - as_local(now)) // timedelta(milliseconds=1)


def decompose(difference_ms: int) -> Pending:
    """Split a positive millisecond difference into days/hours/minutes/seconds."""
    return Pending(
        days=difference_ms // MS_PER_DAY,
        hours=(difference_ms % MS_PER_DAY) // MS_PER_HOUR,
        minutes=(difference_ms % MS_PER_HOUR) // MS_PER_MINUTE,
        seconds=(difference_ms % MS_PER_MINUTE) // MS_PER_SECOND,
    )


def compute_state(target: datetime, now: datetime) -> CountdownState:
    difference = remaining_ms(target, now)
    if difference <= 0:
        return EXPIRED
    return decompose(difference)
