# -*- test-case-name: pomotrack.model.test.test_settings -*-
from __future__ import annotations

from dataclasses import dataclass

from .boundaries import TimerMode
from .util import clampInput


@dataclass(frozen=True)
class Bounds:
    low: int
    high: int
    default: int

    def clamp(self, value: object) -> int:
        return clampInput(value, self.low, self.high, self.default)


focusBounds = Bounds(1, 60, 25)
breakBounds = Bounds(1, 30, 5)
longBreakBounds = Bounds(1, 60, 15)
intervalBounds = Bounds(1, 10, 4)


@dataclass(frozen=True)
class TimerSettings:
    """
    How long each kind of countdown lasts, and how often a long break comes
    around.
    """

    focusDuration: int = focusBounds.default
    "Minutes of focus."

    breakDuration: int = breakBounds.default
    "Minutes of short break."

    longBreakDuration: int = longBreakBounds.default
    "Minutes of long break."

    longBreakInterval: int = intervalBounds.default
    """
    Every C{longBreakInterval}th completed focus session is followed by a long
    break rather than a short one.
    """

    @classmethod
    def fromUserInput(
        cls,
        focusDuration: object = focusBounds.default,
        breakDuration: object = breakBounds.default,
        longBreakDuration: object = longBreakBounds.default,
        longBreakInterval: object = intervalBounds.default,
    ) -> TimerSettings:
        """
        Build settings from values typed by the user, clamping each to the
        range the settings editor allows.
        """
        return cls(
            focusDuration=focusBounds.clamp(focusDuration),
            breakDuration=breakBounds.clamp(breakDuration),
            longBreakDuration=longBreakBounds.clamp(longBreakDuration),
            longBreakInterval=intervalBounds.clamp(longBreakInterval),
        )

    def durationFor(self, mode: TimerMode) -> int:
        """
        The duration, in minutes, of a countdown in the given C{mode}.
        """
        if mode is TimerMode.Break:
            return self.breakDuration
        if mode is TimerMode.LongBreak:
            return self.longBreakDuration
        return self.focusDuration

    def durations(self) -> tuple[int, int, int]:
        return (self.focusDuration, self.breakDuration, self.longBreakDuration)


def nextModeFor(
    mode: TimerMode, completedFocusSessions: int, settings: TimerSettings
) -> TimerMode:
    """
    Determine which mode follows C{mode}.

    Long break cadence is tied to the count of completed focus sessions, not
    to the calendar: the focus session that brings the count to a multiple of
    C{longBreakInterval} is followed by a long break.
    """
    if mode is TimerMode.Focus:
        if (completedFocusSessions + 1) % settings.longBreakInterval == 0:
            return TimerMode.LongBreak
        return TimerMode.Break
    return TimerMode.Focus
