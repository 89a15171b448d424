# -*- test-case-name: pomotrack.model.test.test_progress -*-
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, TYPE_CHECKING

from twisted.logger import Logger

if TYPE_CHECKING:
    from .tasks import Task

log = Logger()


@dataclass
class DailyStat:
    """
    Focus accumulated over a single calendar day.
    """

    date: str
    focusTimeMinutes: int = 0
    pomodorosCompletedCount: int = 0


@dataclass
class UserProgress:
    """
    Everything the user has accomplished, across all days.
    """

    totalFocusTimeMinutes: int = 0
    totalPomodorosCompleted: int = 0
    currentStreak: int = 0
    lastActiveDate: str | None = None
    dailyStats: dict[str, DailyStat] = field(default_factory=dict)


@dataclass(frozen=True)
class TaskTime:
    title: str
    minutes: int
    pomodoros: int


def nextStreak(progress: UserProgress, today: date) -> int:
    """
    Compute what the streak becomes when a focus session completes C{today}.

    Consecutive days extend the streak, a gap of more than one day starts it
    over, and further sessions on the same day leave it alone.
    """
    if progress.lastActiveDate is None:
        return 1
    diffDays = (today - date.fromisoformat(progress.lastActiveDate)).days
    if diffDays == 1:
        return progress.currentStreak + 1
    if diffDays > 1:
        return 1
    if diffDays < 0:
        log.warn(
            "clock moved backwards: last active {last}, today {today}",
            last=progress.lastActiveDate,
            today=today,
        )
    return progress.currentStreak


@dataclass
class ProgressAggregator:
    """
    Folds completed focus sessions into a L{UserProgress}.
    """

    progress: UserProgress = field(default_factory=UserProgress)

    def focusCompleted(self, durationMinutes: int, today: date) -> None:
        """
        A focus session of C{durationMinutes} finished on C{today}.
        """
        progress = self.progress
        key = today.isoformat()
        progress.currentStreak = nextStreak(progress, today)
        stat = progress.dailyStats.get(key)
        if stat is None:
            stat = progress.dailyStats[key] = DailyStat(key)
        stat.focusTimeMinutes += durationMinutes
        stat.pomodorosCompletedCount += 1
        progress.totalFocusTimeMinutes += durationMinutes
        progress.totalPomodorosCompleted += 1
        progress.lastActiveDate = key

    def todayStat(self, today: date) -> DailyStat:
        """
        The statistics for C{today}; all zeroes if nothing happened yet.
        """
        key = today.isoformat()
        return self.progress.dailyStats.get(key, DailyStat(key))


def taskBreakdown(
    tasks: Iterable[Task], minutesPerPomodoro: int = 25, limit: int = 5
) -> list[TaskTime]:
    """
    The tasks that received the most focus time, most first.
    """
    breakdown = [
        TaskTime(
            task.title,
            task.actualPomodoros * minutesPerPomodoro,
            task.actualPomodoros,
        )
        for task in tasks
        if task.actualPomodoros > 0
    ]
    breakdown.sort(key=lambda each: each.minutes, reverse=True)
    return breakdown[:limit]
