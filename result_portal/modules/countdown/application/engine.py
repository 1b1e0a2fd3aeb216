"""倒计时引擎。

在运行中的 asyncio 事件循环上以固定周期采样时钟，计算剩余时间并回调 on_tick，
到期时仅发出一次 Expired 并永久停止采样。
"""

import asyncio
from collections.abc import Callable
from datetime import datetime

from loguru import logger

from result_portal.core.config import settings
from result_portal.core.infrastructure.logging import BusinessEvents
from result_portal.modules.countdown.domain.clock import ClockSource, SystemClock
from result_portal.modules.countdown.domain.state import (
    CountdownState,
    TargetInstant,
    compute_state,
)

TickCallback = Callable[[CountdownState], None]


class CountdownHandle:
    """Cancellation handle for one tick stream, owned by the caller."""

    def __init__(self) -> None:
        self._timer: asyncio.TimerHandle | None = None
        self._active = True

    @classmethod
    def inert(cls) -> "CountdownHandle":
        handle = cls()
        handle._active = False
        return handle

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop future sampling. Safe to call repeatedly or after expiry."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._active = False

    def _schedule(self, timer: asyncio.TimerHandle) -> None:
        self._timer = timer


class CountdownEngine:
    """Drives one countdown at a time against a ClockSource."""

    def __init__(
        self,
        clock: ClockSource | None = None,
        period_sec: float | None = None,
    ) -> None:
        self.clock = clock or SystemClock()
        self.period_sec = (
            period_sec if period_sec is not None else settings.COUNTDOWN_TICK_SEC
        )
        self._handle: CountdownHandle | None = None
        self._current: CountdownState | None = None

    @property
    def current(self) -> CountdownState | None:
        """Last emitted state, ``None`` before the first tick."""
        return self._current

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self, target: TargetInstant, on_tick: TickCallback) -> CountdownHandle:
        """Start sampling against ``target``; any previous run is cancelled first.

        An unset target returns an inert handle and emits nothing.
        """
        self.cancel()
        self._current = None

        if not target.is_set or target.value is None:
            logger.debug("Countdown start skipped: target instant not loaded")
            return CountdownHandle.inert()

        loop = asyncio.get_running_loop()
        handle = CountdownHandle()
        self._handle = handle
        logger.info(f"Countdown started for {target.isoformat()}")
        self._sample(handle, target.value, on_tick, loop)
        return handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _sample(
        self,
        handle: CountdownHandle,
        target: datetime,
        on_tick: TickCallback,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        if not handle.active:
            return

        state = compute_state(target, self.clock.now())
        self._current = state

        if state.is_expired:
            handle.cancel()
            BusinessEvents.countdown_expired(target_instant=target.isoformat())
            self._emit(on_tick, state)
            return

        self._emit(on_tick, state)
        # on_tick may have cancelled the handle
        if handle.active:
            handle._schedule(
                loop.call_later(
                    self.period_sec, self._sample, handle, target, on_tick, loop
                )
            )

    @staticmethod
    def _emit(on_tick: TickCallback, state: CountdownState) -> None:
        try:
            on_tick(state)
        except Exception:
            logger.exception("Countdown tick callback failed")
