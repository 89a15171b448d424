# -*- test-case-name: pomotrack.model.test.test_tasks -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence
from uuid import uuid4

from .util import clampInput

maxEstimate = 50


def newTaskID() -> str:
    return str(uuid4())


@dataclass
class Task:
    """
    Something the user intends to get done, and how many pomodoros it's taken
    so far.
    """

    id: str
    title: str
    estimatedPomodoros: int
    createdAt: float
    actualPomodoros: int = 0
    completed: bool = False


@dataclass
class TaskStore:
    """
    The user's list of L{Task}s, in the order they were added.
    """

    now: Callable[[], float]
    tasks: list[Task] = field(default_factory=list)
    newID: Callable[[], str] = newTaskID

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    def taskByID(self, taskID: str | None) -> Task | None:
        for task in self.tasks:
            if task.id == taskID:
                return task
        return None

    def addTask(self, title: str, estimatedPomodoros: object = 1) -> Task | None:
        """
        Add a new, incomplete task.  Returns C{None} without adding anything
        if C{title} is blank.
        """
        title = title.strip()
        if not title:
            return None
        task = Task(
            id=self.newID(),
            title=title,
            estimatedPomodoros=clampInput(estimatedPomodoros, 1, maxEstimate, 1),
            createdAt=self.now(),
        )
        self.tasks.append(task)
        return task

    def editTask(
        self,
        taskID: str,
        title: str,
        estimatedPomodoros: object,
        actualPomodoros: object,
    ) -> Task | None:
        task = self.taskByID(taskID)
        title = title.strip()
        if task is None or not title:
            return None
        task.title = title
        task.estimatedPomodoros = clampInput(
            estimatedPomodoros, 1, maxEstimate, 1
        )
        task.actualPomodoros = clampInput(actualPomodoros, 0, None, 0)
        return task

    def incrementPomodoros(self, taskID: str) -> Task | None:
        """
        Credit one more completed pomodoro to the given task.
        """
        task = self.taskByID(taskID)
        if task is not None:
            task.actualPomodoros += 1
        return task

    def setCompleted(self, taskID: str, completed: bool) -> Task | None:
        task = self.taskByID(taskID)
        if task is not None:
            task.completed = completed
        return task

    def deleteTask(self, taskID: str) -> Task | None:
        task = self.taskByID(taskID)
        if task is not None:
            self.tasks.remove(task)
        return task

    def clearFinished(self) -> Sequence[Task]:
        """
        Remove every completed task, returning the removed ones.
        """
        removed = [task for task in self.tasks if task.completed]
        self.tasks[:] = [task for task in self.tasks if not task.completed]
        return removed

    def clearAll(self) -> Sequence[Task]:
        removed, self.tasks[:] = self.tasks[:], []
        return removed

    def completionPercentage(self) -> int:
        if not self.tasks:
            return 0
        done = sum(task.completed for task in self.tasks)
        return round(done / len(self.tasks) * 100)
