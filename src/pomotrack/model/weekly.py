# -*- test-case-name: pomotrack.model.test.test_weekly -*-
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable

from dateutil.relativedelta import MO, relativedelta
from twisted.logger import Logger

log = Logger()

weeklyTarget = 10


def weekStart(day: date) -> date:
    """
    The Monday that begins the week containing C{day}.  Sundays belong to the
    week that started six days before.
    """
    return day + relativedelta(weekday=MO(-1))


@dataclass
class WeeklyProgress:
    weekStartDate: str
    completedTaskIds: set[str] = field(default_factory=set)


def _ignoreChange(progress: WeeklyProgress) -> None:
    ...


@dataclass
class WeeklyTracker:
    """
    The set of tasks completed so far this week.

    Whenever it is consulted in a week other than the one it was recording, it
    starts over, empty, for the new week.
    """

    today: Callable[[], date]
    weekly: WeeklyProgress | None = None
    onChange: Callable[[WeeklyProgress], None] = _ignoreChange

    def _current(self) -> WeeklyProgress:
        thisWeek = weekStart(self.today()).isoformat()
        weekly = self.weekly
        if weekly is None or weekly.weekStartDate != thisWeek:
            if weekly is not None:
                log.info(
                    "new week {thisWeek}; clearing {count} completions",
                    thisWeek=thisWeek,
                    count=len(weekly.completedTaskIds),
                )
            weekly = self.weekly = WeeklyProgress(thisWeek)
            self.onChange(weekly)
        return weekly

    @property
    def current(self) -> WeeklyProgress:
        return self._current()

    @property
    def weekStartDate(self) -> date:
        return date.fromisoformat(self._current().weekStartDate)

    @property
    def weekEndDate(self) -> date:
        return self.weekStartDate + timedelta(days=6)

    def completeTask(self, taskID: str) -> None:
        weekly = self._current()
        if taskID in weekly.completedTaskIds:
            return
        weekly.completedTaskIds.add(taskID)
        self.onChange(weekly)

    def uncompleteTask(self, taskID: str) -> None:
        """
        Forget that C{taskID} was completed this week, if it was.
        """
        weekly = self._current()
        if taskID not in weekly.completedTaskIds:
            return
        weekly.completedTaskIds.discard(taskID)
        self.onChange(weekly)

    def isTaskCompletedThisWeek(self, taskID: str) -> bool:
        return taskID in self._current().completedTaskIds

    def count(self) -> int:
        return len(self._current().completedTaskIds)

    def percentOfTarget(self, target: int = weeklyTarget) -> float:
        return min(self.count() * 100 / target, 100.0)

    def resetWeeklyProgress(self) -> None:
        self.weekly = WeeklyProgress(weekStart(self.today()).isoformat())
        self.onChange(self.weekly)
