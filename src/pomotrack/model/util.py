# -*- test-case-name: pomotrack.model.test.test_util -*-
from __future__ import annotations

from datetime import date, datetime, tzinfo
from functools import wraps
from typing import Callable, Concatenate, ParamSpec, Protocol, TypeVar

from twisted.logger import Logger

log = Logger()

T = TypeVar("T")
P = ParamSpec("P")


def formatCountdown(seconds: int) -> str:
    """
    Format a number of seconds as a zero-padded C{MM:SS} countdown.
    """
    minutes, seconds = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"


def formatMinutes(minutes: int) -> str:
    """
    Format a number of minutes as zero-padded C{HH:MM}.
    """
    hours, minutes = divmod(max(0, minutes), 60)
    return f"{hours:02d}:{minutes:02d}"


def clampInput(value: object, low: int, high: int | None, default: int) -> int:
    """
    Interpret C{value} as user input for an integer field bounded by C{low}
    and C{high} (inclusive; C{None} for unbounded).

    Anything that isn't a number becomes C{default}; numbers outside the
    bounds are moved to the nearest one.
    """
    if isinstance(value, bool):
        return default
    try:
        number = int(value)  # type:ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return default
    number = max(low, number)
    if high is not None:
        number = min(high, number)
    return number


def dayOf(timestamp: float, zone: tzinfo) -> date:
    """
    The calendar date, in C{zone}, that contains the POSIX C{timestamp}.
    """
    return datetime.fromtimestamp(timestamp, zone).date()


class Persistent(Protocol):
    def save(self, key: str) -> None:
        """
        Write the slice of state stored under C{key}.
        """


PS = TypeVar("PS", bound=Persistent)


def interactionRoot(
    *keys: str,
) -> Callable[
    [Callable[Concatenate[PS, P], T]], Callable[Concatenate[PS, P], T]
]:
    """
    Decorator that should wrap every operation that potentially mutates the
    model, saving the slices stored under C{keys} afterwards if it completes
    without raising an exception.
    """

    def decorator(
        c: Callable[Concatenate[PS, P], T]
    ) -> Callable[Concatenate[PS, P], T]:
        @wraps(c)
        def saveAfterwards(self: PS, *args: P.args, **kwargs: P.kwargs) -> T:
            log.debug("start action: {action}", action=c.__name__)
            result = c(self, *args, **kwargs)
            for key in keys:
                self.save(key)
            return result

        return saveAfterwards

    return decorator
