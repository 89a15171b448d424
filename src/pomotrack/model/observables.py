# -*- test-case-name: pomotrack.model.test.test_observables -*-
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, TypeVar

K = TypeVar("K")
V = TypeVar("V")


@dataclass
class Subscribers(Generic[K, V]):
    """
    Callables subscribed to the values of individual keys.
    """

    _byKey: dict[K, list[Callable[[V], None]]] = field(default_factory=dict)

    def subscribe(
        self, key: K, subscriber: Callable[[V], None]
    ) -> Callable[[], None]:
        """
        Add C{subscriber} for C{key}; return a callable that removes it again.
        """
        subscribers = self._byKey.setdefault(key, [])
        subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in subscribers:
                subscribers.remove(subscriber)

        return unsubscribe

    @contextmanager
    def changed(self, key: K, new: V) -> Iterator[None]:
        """
        The value for C{key} is being changed to C{new} in the body of this
        context manager.  Subscribers are told once it completes.
        """
        yield
        # copy, since a subscriber may unsubscribe itself
        for subscriber in self._byKey.get(key, [])[:]:
            subscriber(new)
