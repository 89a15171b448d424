# -*- test-case-name: pomotrack.model.test.test_chime -*-
from __future__ import annotations

from dataclasses import dataclass
from os import environ
from typing import Callable, Sequence

from twisted.internet.defer import Deferred
from twisted.internet.interfaces import IReactorProcess
from twisted.internet.utils import getProcessValue
from twisted.logger import Logger, LogLevel
from twisted.python.failure import Failure
from twisted.python.procutils import which

log = Logger()

defaultPlayers: Sequence[Sequence[str]] = [
    ["paplay", "/usr/share/sounds/freedesktop/stereo/complete.oga"],
    ["aplay", "-q", "/usr/share/sounds/sound-icons/prompt.wav"],
    ["afplay", "/System/Library/Sounds/Glass.aiff"],
]


@dataclass
class PlayerChime:
    """
    L{Chime} that plays a short system sound with the first audio player
    found on C{PATH}.
    """

    reactor: IReactorProcess
    players: Sequence[Sequence[str]] = tuple(defaultPlayers)
    find: Callable[[str], list[str]] = which

    async def _attempt(self) -> bool:
        for name, *args in self.players:
            found = self.find(name)
            if not found:
                continue
            exitCode = await getProcessValue(
                found[0], args, env=environ, reactor=self.reactor
            )
            if exitCode == 0:
                return True
            log.debug(
                "{player} exited with {code}", player=name, code=exitCode
            )
        return False

    def play(self) -> Deferred[bool]:
        """
        Play the chime.  The result fires with whether any player succeeded;
        it never fails.
        """

        def failed(f: Failure) -> bool:
            log.failure("could not play chime", f, level=LogLevel.debug)
            return False

        return Deferred.fromCoroutine(self._attempt()).addErrback(failed)
