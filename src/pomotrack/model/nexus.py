# -*- test-case-name: pomotrack.model.test.test_nexus -*-
from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from datetime import date, tzinfo
from random import Random
from typing import Callable, Sequence

from dateutil.tz import tzlocal
from twisted.internet.interfaces import IReactorTime
from twisted.logger import Logger

from .boundaries import JSON, Chime, KeyValueStore, NoChime, TimerMode
from .progress import (
    DailyStat,
    ProgressAggregator,
    TaskTime,
    UserProgress,
    taskBreakdown,
)
from .quotes import Quote, randomQuoteExcluding
from .settings import TimerSettings
from .storage import (
    ACTIVE_TASK,
    PROGRESS,
    SETTINGS,
    TASKS,
    WEEKLY_PROGRESS,
    activeTaskFromJSON,
    loadSlice,
    progressFromJSON,
    progressToJSON,
    saveSlice,
    settingsFromJSON,
    settingsToJSON,
    tasksFromJSON,
    tasksToJSON,
    weeklyFromJSON,
    weeklyToJSON,
)
from .tasks import Task, TaskStore
from .timer import ReactorTicks, TimerEngine
from .util import dayOf, interactionRoot
from .weekly import WeeklyProgress, WeeklyTracker

log = Logger()


@dataclass
class Nexus:
    """
    Nexus where all the models of the user's ongoing pomodoro practice are
    coordinated, dispatched, and written back to the store.
    """

    store: KeyValueStore
    "Where each slice of state is persisted."

    clock: IReactorTime
    "The source of time, for both ticking and the calendar."

    chime: Chime = field(default_factory=NoChime)
    zone: tzinfo = field(default_factory=tzlocal)
    "The time zone that determines where one calendar day ends."

    activeTaskID: str | None = None
    "The task that will be credited with completed focus sessions."

    rng: Random = field(default_factory=Random)
    "Where celebratory quotes are chosen from."

    initialSettings: InitVar[TimerSettings | None] = None
    initialTasks: InitVar[list[Task] | None] = None
    initialProgress: InitVar[UserProgress | None] = None
    initialWeekly: InitVar[WeeklyProgress | None] = None

    timer: TimerEngine = field(init=False)
    tasks: TaskStore = field(init=False)
    aggregator: ProgressAggregator = field(init=False)
    weekly: WeeklyTracker = field(init=False)

    def __post_init__(
        self,
        initialSettings: TimerSettings | None,
        initialTasks: list[Task] | None,
        initialProgress: UserProgress | None,
        initialWeekly: WeeklyProgress | None,
    ) -> None:
        self.timer = TimerEngine(
            initialSettings or TimerSettings(),
            ReactorTicks(self.clock),
            onComplete=self.timerCompleted,
            chime=self.chime,
        )
        self.tasks = TaskStore(self.clock.seconds, initialTasks or [])
        self.aggregator = ProgressAggregator(initialProgress or UserProgress())
        self.weekly = WeeklyTracker(
            self.today,
            initialWeekly,
            lambda weekly: self.save(WEEKLY_PROGRESS),
        )
        self.store.subscribe(SETTINGS, self._settingsStored)

    @classmethod
    def fromStore(
        cls,
        store: KeyValueStore,
        clock: IReactorTime,
        chime: Chime | None = None,
        zone: tzinfo | None = None,
    ) -> Nexus:
        """
        Load a L{Nexus} from each slice saved in C{store}; any slice that is
        missing or unreadable starts out with its default.
        """
        return cls(
            store,
            clock,
            chime=chime if chime is not None else NoChime(),
            zone=zone if zone is not None else tzlocal(),
            activeTaskID=loadSlice(
                store, ACTIVE_TASK, activeTaskFromJSON, lambda: None
            ),
            initialSettings=loadSlice(
                store, SETTINGS, settingsFromJSON, TimerSettings
            ),
            initialTasks=loadSlice(store, TASKS, tasksFromJSON, list),
            initialProgress=loadSlice(
                store, PROGRESS, progressFromJSON, UserProgress
            ),
            initialWeekly=loadSlice(
                store, WEEKLY_PROGRESS, weeklyFromJSON, lambda: None
            ),
        )

    def today(self) -> date:
        return dayOf(self.clock.seconds(), self.zone)

    @property
    def settings(self) -> TimerSettings:
        return self.timer.settings

    @property
    def progress(self) -> UserProgress:
        return self.aggregator.progress

    @property
    def activeTask(self) -> Task | None:
        return self.tasks.taskByID(self.activeTaskID)

    def _encoded(self, key: str) -> JSON:
        encoders: dict[str, Callable[[], object]] = {
            TASKS: lambda: tasksToJSON(self.tasks.tasks),
            SETTINGS: lambda: settingsToJSON(self.settings),
            PROGRESS: lambda: progressToJSON(self.progress),
            ACTIVE_TASK: lambda: self.activeTaskID,
            WEEKLY_PROGRESS: lambda: weeklyToJSON(self.weekly.current),
        }
        return encoders[key]()  # type:ignore[return-value]

    def save(self, key: str) -> None:
        """
        Write the slice of state stored under C{key} back to the store.
        """
        saveSlice(self.store, key, self._encoded(key))

    # timer

    def timerCompleted(self, mode: TimerMode, durationMinutes: int) -> None:
        """
        The timer finished a countdown in C{mode}.  Only focus sessions count
        towards progress.
        """
        log.info(
            "{mode} complete after {minutes} minutes",
            mode=mode.label,
            minutes=durationMinutes,
        )
        if mode is TimerMode.Focus:
            self.focusCompleted(durationMinutes)

    @interactionRoot(PROGRESS, TASKS)
    def focusCompleted(self, durationMinutes: int) -> None:
        """
        Credit a completed focus session to the user's progress and, if there
        is one, to the active task.
        """
        self.aggregator.focusCompleted(durationMinutes, self.today())
        if self.activeTaskID is not None:
            self.tasks.incrementPomodoros(self.activeTaskID)

    @interactionRoot(SETTINGS)
    def updateSettings(
        self,
        focusDuration: object,
        breakDuration: object,
        longBreakDuration: object,
        longBreakInterval: object,
    ) -> TimerSettings:
        """
        The user saved the settings editor.
        """
        settings = TimerSettings.fromUserInput(
            focusDuration, breakDuration, longBreakDuration, longBreakInterval
        )
        self.timer.updateSettings(settings)
        return settings

    def _settingsStored(self, saved: JSON) -> None:
        try:
            settings = settingsFromJSON(saved)
        except Exception:
            log.failure("ignoring unreadable settings")
            return
        if settings != self.settings:
            self.timer.updateSettings(settings)

    # tasks

    @interactionRoot(TASKS)
    def addTask(self, title: str, estimatedPomodoros: object = 1) -> Task | None:
        return self.tasks.addTask(title, estimatedPomodoros)

    @interactionRoot(TASKS)
    def editTask(
        self,
        taskID: str,
        title: str,
        estimatedPomodoros: object,
        actualPomodoros: object,
    ) -> Task | None:
        return self.tasks.editTask(
            taskID, title, estimatedPomodoros, actualPomodoros
        )

    @interactionRoot(ACTIVE_TASK)
    def selectTask(self, taskID: str | None) -> None:
        """
        Choose the task to credit with focus sessions, or C{None} for no task.
        Selecting a task that doesn't exist does nothing.
        """
        if taskID is not None and self.tasks.taskByID(taskID) is None:
            return
        self.activeTaskID = taskID

    @interactionRoot(TASKS)
    def toggleTaskCompletion(self, taskID: str) -> Task | None:
        """
        Mark a task complete if it was incomplete, or vice versa, keeping this
        week's completed-task count in step.
        """
        task = self.tasks.taskByID(taskID)
        if task is None:
            return None
        self.tasks.setCompleted(taskID, not task.completed)
        if task.completed:
            self.weekly.completeTask(taskID)
        else:
            self.weekly.uncompleteTask(taskID)
        return task

    def _released(self, removed: Sequence[Task]) -> None:
        for task in removed:
            self.weekly.uncompleteTask(task.id)
            if task.id == self.activeTaskID:
                self.activeTaskID = None

    @interactionRoot(TASKS, ACTIVE_TASK)
    def deleteTask(self, taskID: str) -> Task | None:
        removed = self.tasks.deleteTask(taskID)
        if removed is not None:
            self._released([removed])
        return removed

    @interactionRoot(TASKS, ACTIVE_TASK)
    def clearFinishedTasks(self) -> Sequence[Task]:
        removed = self.tasks.clearFinished()
        self._released(removed)
        return removed

    @interactionRoot(TASKS, ACTIVE_TASK)
    def clearAllTasks(self) -> Sequence[Task]:
        removed = self.tasks.clearAll()
        self._released(removed)
        self.activeTaskID = None
        return removed

    # statistics

    def todayStat(self) -> DailyStat:
        return self.aggregator.todayStat(self.today())

    @property
    def allTasksCompleted(self) -> bool:
        tasks = self.tasks
        return len(tasks) > 0 and all(task.completed for task in tasks)

    def celebrationQuote(self, previous: Quote | None = None) -> Quote | None:
        """
        A quote to show once every task on the list is done, different from
        the C{previous} one; or C{None} while there is work left (or no list).
        """
        if not self.allTasksCompleted:
            return None
        return randomQuoteExcluding(previous, self.rng)

    def taskBreakdown(self) -> list[TaskTime]:
        """
        The tasks that have received the most focus, estimated at the current
        focus duration per pomodoro.
        """
        return taskBreakdown(self.tasks, self.settings.focusDuration)
