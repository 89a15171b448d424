from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol, TypeAlias


class TimerMode(Enum):
    """
    The kind of countdown that the timer is running.
    """

    Focus = "focus"
    Break = "break"
    LongBreak = "longBreak"

    label: str


TimerMode.Focus.label = "Focus"
TimerMode.Break.label = "Break"
TimerMode.LongBreak.label = "Long Break"


CancelTick: TypeAlias = "Callable[[], None]"


class TickScheduler(Protocol):
    """
    The source of time for a L{TimerEngine <pomotrack.model.timer.TimerEngine>}.
    """

    def scheduleTick(
        self, callback: Callable[[], None], intervalMs: int
    ) -> CancelTick:
        """
        Call C{callback} every C{intervalMs} milliseconds until the returned
        callable is invoked.
        """


class Chime(Protocol):
    """
    A short audible cue played when a countdown completes.
    """

    def play(self) -> object:
        """
        Start playing the cue.  Must not block.
        """


class NoChime:
    """
    Silent implementation of L{Chime}.
    """

    def play(self) -> None:
        ...


CompletionListener: TypeAlias = "Callable[[TimerMode, int], None]"
"""
Called with the mode that just completed and its duration in minutes.
"""


JSON: TypeAlias = "None | str | int | float | bool | dict[str, JSON] | list[JSON]"

Unsubscribe: TypeAlias = "Callable[[], None]"


class KeyValueStore(Protocol):
    """
    The persistence contract: a namespace of JSON values.
    """

    def get(self, key: str) -> JSON:
        """
        Retrieve the value stored under C{key}, or C{None} if nothing is.
        """

    def set(self, key: str, value: JSON) -> None:
        """
        Store C{value} under C{key}, notifying any subscribers.
        """

    def subscribe(
        self, key: str, subscriber: Callable[[JSON], None]
    ) -> Unsubscribe:
        """
        Call C{subscriber} with the new value each time C{key} is set.
        """
