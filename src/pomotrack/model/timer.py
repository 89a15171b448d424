# -*- test-case-name: pomotrack.model.test.test_timer -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from twisted.internet.interfaces import IReactorTime
from twisted.internet.task import LoopingCall
from twisted.logger import Logger, LogLevel
from twisted.python.failure import Failure

from .boundaries import (
    CancelTick,
    Chime,
    CompletionListener,
    NoChime,
    TickScheduler,
    TimerMode,
)
from .settings import TimerSettings, nextModeFor
from .util import formatCountdown

log = Logger()


@dataclass
class ReactorTicks:
    """
    L{TickScheduler} that drives ticks from a reactor's notion of time; pass
    a L{twisted.internet.task.Clock} to drive them by hand.
    """

    clock: IReactorTime

    def scheduleTick(
        self, callback: Callable[[], None], intervalMs: int
    ) -> CancelTick:
        lc = LoopingCall(callback)
        lc.clock = self.clock

        def tickFailed(f: Failure) -> None:
            log.failure("timer tick failed", f)

        lc.start(intervalMs / 1000.0, now=False).addErrback(tickFailed)

        def cancel() -> None:
            if lc.running:
                lc.stop()

        return cancel


@dataclass(frozen=True)
class TimerState:
    """
    A snapshot of a L{TimerEngine}.
    """

    mode: TimerMode
    timeRemainingSeconds: int
    isRunning: bool
    completedFocusSessions: int


def _ignoreCompletion(mode: TimerMode, durationMinutes: int) -> None:
    ...


@dataclass
class TimerEngine:
    """
    The countdown state machine, cycling between focus sessions and breaks.

    The engine never advances on its own after a countdown completes; it moves
    to the next mode paused, and the user must start it again.
    """

    settings: TimerSettings
    scheduler: TickScheduler
    onComplete: CompletionListener = _ignoreCompletion
    chime: Chime = field(default_factory=NoChime)

    mode: TimerMode = TimerMode.Focus
    timeRemainingSeconds: int = field(init=False)
    isRunning: bool = field(default=False, init=False)
    completedFocusSessions: int = 0

    _cancelTick: CancelTick | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.timeRemainingSeconds = self.fullDurationSeconds

    @property
    def fullDurationSeconds(self) -> int:
        return self.settings.durationFor(self.mode) * 60

    @property
    def state(self) -> TimerState:
        return TimerState(
            self.mode,
            self.timeRemainingSeconds,
            self.isRunning,
            self.completedFocusSessions,
        )

    @property
    def formattedTime(self) -> str:
        return formatCountdown(self.timeRemainingSeconds)

    @property
    def progress(self) -> float:
        """
        Percentage of the current countdown that has elapsed, from 0 to 100.
        """
        total = self.fullDurationSeconds
        elapsed = (total - self.timeRemainingSeconds) / total * 100
        return min(100.0, max(0.0, elapsed))

    @property
    def title(self) -> str:
        return f"{self.formattedTime} - {self.mode.label}"

    @property
    def sessionsUntilLongBreak(self) -> int:
        interval = self.settings.longBreakInterval
        return interval - (self.completedFocusSessions % interval)

    def _stopTicking(self) -> None:
        self.isRunning = False
        cancel, self._cancelTick = self._cancelTick, None
        if cancel is not None:
            cancel()

    def _enter(self, mode: TimerMode) -> None:
        self._stopTicking()
        self.mode = mode
        self.timeRemainingSeconds = self.fullDurationSeconds

    def start(self) -> None:
        """
        Resume counting down from wherever the countdown currently is.
        """
        if self.isRunning:
            return
        self.isRunning = True
        self._cancelTick = self.scheduler.scheduleTick(self.tick, 1000)

    def pause(self) -> None:
        if not self.isRunning:
            return
        self._stopTicking()

    def reset(self) -> None:
        """
        Put the current mode's full duration back on the clock, paused.
        """
        self._enter(self.mode)

    def switchMode(self, target: TimerMode) -> None:
        """
        The user picked a different mode by hand.
        """
        self._enter(target)

    def _advance(self) -> None:
        nextMode = nextModeFor(
            self.mode, self.completedFocusSessions, self.settings
        )
        if self.mode is TimerMode.Focus:
            self.completedFocusSessions += 1
        self._enter(nextMode)

    def skip(self) -> None:
        """
        Move on to the next mode as though the current one had completed,
        without reporting a completion.
        """
        self._advance()

    def tick(self) -> None:
        """
        One second has elapsed.
        """
        if not self.isRunning:
            return
        if self.timeRemainingSeconds > 1:
            self.timeRemainingSeconds -= 1
            return
        completedMode = self.mode
        try:
            self.onComplete(
                completedMode, self.settings.durationFor(completedMode)
            )
        except Exception:
            log.failure("completion listener failed")
        try:
            self.chime.play()
        except Exception:
            log.failure("could not play completion chime", level=LogLevel.debug)
        self._advance()

    def updateSettings(self, settings: TimerSettings) -> None:
        """
        The user edited the settings.

        A paused countdown is restarted at the current mode's new duration if
        any duration changed; a running countdown keeps going as it was.

        The new settings take effect at once either way, so a running
        countdown that completes is reported with the new duration for its
        mode, not with the minutes that were actually counted down.
        """
        previous, self.settings = self.settings, settings
        if not self.isRunning and previous.durations() != settings.durations():
            self.timeRemainingSeconds = self.fullDurationSeconds
