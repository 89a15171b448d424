# -*- test-case-name: pomotrack.model.test.test_storage -*-
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from json import dumps, loads
from os import environ
from os.path import expanduser
from typing import Callable, TypeVar, cast

from twisted.logger import Logger
from twisted.python.filepath import FilePath

from .boundaries import JSON, KeyValueStore, Unsubscribe
from .observables import Subscribers
from .progress import DailyStat, UserProgress
from .schema import (
    SavedDailyStat,
    SavedProgress,
    SavedSettings,
    SavedTask,
    SavedWeeklyProgress,
)
from .settings import TimerSettings
from .tasks import Task, maxEstimate
from .util import clampInput
from .weekly import WeeklyProgress

log = Logger()

T = TypeVar("T")

TASKS = "pomodoro-tasks"
SETTINGS = "pomodoro-settings"
PROGRESS = "pomodoro-progress"
ACTIVE_TASK = "pomodoro-active-task"
WEEKLY_PROGRESS = "pomodoro-weekly-progress"

TEST_MODE = bool(environ.get("TEST_MODE"))

defaultBaseLocation = FilePath(expanduser("~/.local/share/pomotrack"))
if TEST_MODE:
    defaultBaseLocation = defaultBaseLocation.child("testing")


class CorruptSlice(Exception):
    """
    A stored value did not have the expected shape.
    """


def _expect(value: object, kind: type[T]) -> T:
    if not isinstance(value, kind) or isinstance(value, bool) and kind is int:
        raise CorruptSlice(f"expected {kind.__name__}, got {value!r}")
    return value


def _expectDate(value: object) -> str:
    text = _expect(value, str)
    try:
        date.fromisoformat(text)
    except ValueError as e:
        raise CorruptSlice(f"expected an ISO date, got {text!r}") from e
    return text


def settingsToJSON(settings: TimerSettings) -> SavedSettings:
    return {
        "focusDuration": settings.focusDuration,
        "breakDuration": settings.breakDuration,
        "longBreakDuration": settings.longBreakDuration,
        "longBreakInterval": settings.longBreakInterval,
    }


def settingsFromJSON(saved: JSON) -> TimerSettings:
    """
    Load settings, clamping any out-of-range values so that invalid settings
    never reach the timer.
    """
    values = _expect(saved, dict)
    return TimerSettings.fromUserInput(
        focusDuration=values["focusDuration"],
        breakDuration=values["breakDuration"],
        longBreakDuration=values["longBreakDuration"],
        longBreakInterval=values["longBreakInterval"],
    )


def tasksToJSON(tasks: list[Task]) -> list[SavedTask]:
    return [
        {
            "id": task.id,
            "title": task.title,
            "estimatedPomodoros": task.estimatedPomodoros,
            "actualPomodoros": task.actualPomodoros,
            "completed": task.completed,
            "createdAt": task.createdAt,
        }
        for task in tasks
    ]


def tasksFromJSON(saved: JSON) -> list[Task]:
    """
    Load the task list.  Counts are pulled back into the range the task editor
    allows, and a task whose title is blank is dropped.
    """
    tasks: list[Task] = []
    for each in cast(list[SavedTask], _expect(saved, list)):
        task = Task(
            id=_expect(each["id"], str),
            title=_expect(each["title"], str).strip(),
            estimatedPomodoros=clampInput(
                _expect(each["estimatedPomodoros"], int), 1, maxEstimate, 1
            ),
            actualPomodoros=clampInput(
                _expect(each["actualPomodoros"], int), 0, None, 0
            ),
            completed=_expect(each["completed"], bool),
            createdAt=float(each["createdAt"]),
        )
        if not task.title:
            log.warn("dropping untitled task {id}", id=task.id)
            continue
        tasks.append(task)
    return tasks


def progressToJSON(progress: UserProgress) -> SavedProgress:
    return {
        "totalFocusTime": progress.totalFocusTimeMinutes,
        "totalPomodorosCompleted": progress.totalPomodorosCompleted,
        "currentStreak": progress.currentStreak,
        "lastActiveDate": progress.lastActiveDate,
        "dailyStats": [
            {
                "date": stat.date,
                "focusTime": stat.focusTimeMinutes,
                "pomodorosCompleted": stat.pomodorosCompletedCount,
            }
            for stat in progress.dailyStats.values()
        ],
    }


def progressFromJSON(saved: JSON) -> UserProgress:
    values = cast(SavedProgress, _expect(saved, dict))
    lastActiveDate = values["lastActiveDate"]
    if lastActiveDate is not None:
        _expectDate(lastActiveDate)
    dailyStats: dict[str, DailyStat] = {}
    for savedStat in cast(
        list[SavedDailyStat], _expect(values["dailyStats"], list)
    ):
        stat = DailyStat(
            date=_expectDate(savedStat["date"]),
            focusTimeMinutes=_expect(savedStat["focusTime"], int),
            pomodorosCompletedCount=_expect(
                savedStat["pomodorosCompleted"], int
            ),
        )
        dailyStats[stat.date] = stat
    return UserProgress(
        totalFocusTimeMinutes=_expect(values["totalFocusTime"], int),
        totalPomodorosCompleted=_expect(
            values["totalPomodorosCompleted"], int
        ),
        currentStreak=_expect(values["currentStreak"], int),
        lastActiveDate=lastActiveDate,
        dailyStats=dailyStats,
    )


def weeklyToJSON(weekly: WeeklyProgress) -> SavedWeeklyProgress:
    return {
        "weekStartDate": weekly.weekStartDate,
        "completedTasks": sorted(weekly.completedTaskIds),
    }


def weeklyFromJSON(saved: JSON) -> WeeklyProgress:
    values = cast(SavedWeeklyProgress, _expect(saved, dict))
    return WeeklyProgress(
        weekStartDate=_expectDate(values["weekStartDate"]),
        completedTaskIds={
            _expect(each, str)
            for each in _expect(values["completedTasks"], list)
        },
    )


def activeTaskFromJSON(saved: JSON) -> str | None:
    if saved is None:
        return None
    return _expect(saved, str)


def loadSlice(
    store: KeyValueStore,
    key: str,
    load: Callable[[JSON], T],
    default: Callable[[], T],
) -> T:
    """
    Load the slice of state stored under C{key}, falling back to C{default()}
    if it's missing or can't be read.
    """
    try:
        saved = store.get(key)
        if saved is None:
            return default()
        return load(saved)
    except Exception:
        log.failure("could not load {key}; using default", key=key)
        return default()


def saveSlice(store: KeyValueStore, key: str, value: JSON) -> None:
    """
    Write C{value} under C{key}.  Failures are logged and otherwise ignored;
    the in-memory state remains authoritative.
    """
    try:
        store.set(key, value)
    except Exception:
        log.failure("could not save {key}", key=key)


@dataclass
class MemoryStore:
    """
    A L{KeyValueStore} that lives only as long as the process.
    """

    _subscribers: Subscribers[str, JSON] = field(default_factory=Subscribers)
    _values: dict[str, JSON] = field(default_factory=dict)

    def get(self, key: str) -> JSON:
        # round-trip through JSON so callers never share mutable state with
        # the store
        value = self._values.get(key)
        return None if value is None else loads(dumps(value))

    def set(self, key: str, value: JSON) -> None:
        copied = loads(dumps(value))
        with self._subscribers.changed(key, copied):
            self._values[key] = copied

    def subscribe(
        self, key: str, subscriber: Callable[[JSON], None]
    ) -> Unsubscribe:
        return self._subscribers.subscribe(key, subscriber)


@dataclass
class FileStore:
    """
    A L{KeyValueStore} keeping each key in its own JSON file in a directory.
    """

    baseLocation: FilePath = defaultBaseLocation
    _subscribers: Subscribers[str, JSON] = field(default_factory=Subscribers)

    def pathForKey(self, key: str) -> FilePath:
        childPath: FilePath = self.baseLocation.child(key + ".json")
        return childPath

    def get(self, key: str) -> JSON:
        path = self.pathForKey(key)
        if not path.isfile():
            return None
        result: JSON = loads(path.getContent())
        return result

    def set(self, key: str, value: JSON) -> None:
        if not self.baseLocation.isdir():
            self.baseLocation.makedirs(True)
        path = self.pathForKey(key)
        with self._subscribers.changed(key, value):
            # setContent writes a sibling file and moves it into place
            path.setContent(dumps(value).encode("utf-8"))

    def subscribe(
        self, key: str, subscriber: Callable[[JSON], None]
    ) -> Unsubscribe:
        return self._subscribers.subscribe(key, subscriber)


_MemoryStoreImplements: type[KeyValueStore] = MemoryStore
_FileStoreImplements: type[KeyValueStore] = FileStore
