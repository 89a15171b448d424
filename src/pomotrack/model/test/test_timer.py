from dataclasses import dataclass, field

from twisted.internet.task import Clock
from twisted.trial.unittest import SynchronousTestCase as TC

from ..boundaries import TimerMode
from ..settings import TimerSettings
from ..timer import ReactorTicks, TimerEngine, TimerState


@dataclass
class RecordingChime:
    plays: int = 0
    broken: bool = False

    def play(self) -> None:
        self.plays += 1
        if self.broken:
            raise OSError("no audio device")


@dataclass
class Completions:
    """
    A record of the completion events emitted by a L{TimerEngine}.
    """

    events: list[tuple[TimerMode, int]] = field(default_factory=list)

    def __call__(self, mode: TimerMode, durationMinutes: int) -> None:
        self.events.append((mode, durationMinutes))


class TimerEngineTests(TC):
    """
    Tests for L{TimerEngine}.
    """

    def setUp(self) -> None:
        self.clock = Clock()
        self.completions = Completions()
        self.chime = RecordingChime()
        self.engine = TimerEngine(
            TimerSettings(
                focusDuration=25,
                breakDuration=5,
                longBreakDuration=15,
                longBreakInterval=4,
            ),
            ReactorTicks(self.clock),
            onComplete=self.completions,
            chime=self.chime,
        )

    def advance(self, seconds: int) -> None:
        """
        Let C{seconds} seconds elapse, one at a time.
        """
        self.clock.pump([1] * seconds)

    def test_initialState(self) -> None:
        """
        A new engine is paused at the start of a full focus session.
        """
        self.assertEqual(
            self.engine.state,
            TimerState(TimerMode.Focus, 25 * 60, False, 0),
        )
        self.assertEqual(self.engine.formattedTime, "25:00")
        self.assertEqual(self.engine.progress, 0.0)
        self.assertEqual(self.engine.title, "25:00 - Focus")

    def test_startCountsDown(self) -> None:
        """
        Once started, each elapsed second takes one second off the clock.
        """
        self.engine.start()
        self.advance(61)
        self.assertEqual(self.engine.timeRemainingSeconds, 25 * 60 - 61)
        self.assertEqual(self.engine.formattedTime, "23:59")
        self.assertTrue(self.engine.isRunning)

    def test_startTwice(self) -> None:
        """
        Starting a running timer does not arm a second tick loop.
        """
        self.engine.start()
        self.engine.start()
        self.advance(10)
        self.assertEqual(self.engine.timeRemainingSeconds, 25 * 60 - 10)
        self.assertEqual(len(self.clock.getDelayedCalls()), 1)

    def test_pauseStopsTicking(self) -> None:
        """
        A paused timer ignores the passage of time, and resumes where it left
        off.
        """
        self.engine.start()
        self.advance(5)
        self.engine.pause()
        self.engine.pause()
        self.advance(100)
        self.assertEqual(self.engine.timeRemainingSeconds, 25 * 60 - 5)
        self.assertEqual(self.clock.getDelayedCalls(), [])
        self.engine.start()
        self.advance(5)
        self.assertEqual(self.engine.timeRemainingSeconds, 25 * 60 - 10)

    def test_resetKeepsModeAndCount(self) -> None:
        """
        Resetting restores the full duration of the current mode, without
        changing the mode or the number of completed sessions.
        """
        self.engine.skip()
        self.engine.start()
        self.advance(30)
        self.engine.reset()
        self.assertEqual(
            self.engine.state,
            TimerState(TimerMode.Break, 5 * 60, False, 1),
        )

    def test_switchMode(self) -> None:
        """
        Switching modes by hand starts the chosen mode from the top, paused,
        and doesn't count as completing anything.
        """
        self.engine.start()
        self.advance(3)
        self.engine.switchMode(TimerMode.LongBreak)
        self.assertEqual(
            self.engine.state,
            TimerState(TimerMode.LongBreak, 15 * 60, False, 0),
        )
        self.assertEqual(self.completions.events, [])
        self.assertEqual(self.clock.getDelayedCalls(), [])

    def test_skipIntoLongBreak(self) -> None:
        """
        Skipping the fourth focus session of a cycle moves to a long break and
        counts the session, without reporting a completion.
        """
        self.engine.completedFocusSessions = 3
        self.engine.skip()
        self.assertEqual(
            self.engine.state,
            TimerState(TimerMode.LongBreak, 15 * 60, False, 4),
        )
        self.assertEqual(self.completions.events, [])
        self.assertEqual(self.chime.plays, 0)

    def test_skipBreak(self) -> None:
        """
        Skipping a break returns to focus without counting anything.
        """
        self.engine.switchMode(TimerMode.Break)
        self.engine.skip()
        self.assertEqual(
            self.engine.state, TimerState(TimerMode.Focus, 25 * 60, False, 0)
        )

    def test_completion(self) -> None:
        """
        When the final second of a focus session elapses, the engine reports
        the completion, chimes, and pauses at the start of a break.
        """
        self.engine.start()
        self.advance(25 * 60 - 1)
        self.assertEqual(self.engine.timeRemainingSeconds, 1)
        self.assertEqual(self.completions.events, [])
        self.advance(1)
        self.assertEqual(self.completions.events, [(TimerMode.Focus, 25)])
        self.assertEqual(self.chime.plays, 1)
        self.assertEqual(
            self.engine.state, TimerState(TimerMode.Break, 5 * 60, False, 1)
        )
        self.assertEqual(self.clock.getDelayedCalls(), [])
        # auto-paused; more time passing changes nothing
        self.advance(10)
        self.assertEqual(self.engine.timeRemainingSeconds, 5 * 60)

    def test_brokenChime(self) -> None:
        """
        A chime that fails to play doesn't interfere with completing the
        session.
        """
        self.chime.broken = True
        self.engine.switchMode(TimerMode.Break)
        self.engine.start()
        self.advance(5 * 60)
        self.assertEqual(self.completions.events, [(TimerMode.Break, 5)])
        self.assertEqual(len(self.flushLoggedErrors(OSError)), 1)
        self.assertEqual(
            self.engine.state, TimerState(TimerMode.Focus, 25 * 60, False, 0)
        )

    def test_longBreakCadence(self) -> None:
        """
        The session after completion number C{m} is a long break exactly when
        C{m} is a multiple of the long break interval, and every break is
        followed by focus.
        """
        for interval in [1, 2, 3, 4]:
            engine = TimerEngine(
                TimerSettings(longBreakInterval=interval),
                ReactorTicks(Clock()),
            )
            for m in range(1, 13):
                self.assertIs(engine.mode, TimerMode.Focus)
                engine.skip()
                self.assertEqual(engine.completedFocusSessions, m)
                self.assertIs(
                    engine.mode,
                    TimerMode.LongBreak if m % interval == 0 else TimerMode.Break,
                )
                engine.skip()

    def test_settingsChangeWhilePaused(self) -> None:
        """
        Changing the durations of a paused timer restarts the current mode's
        countdown at its new duration.
        """
        self.engine.start()
        self.advance(20)
        self.engine.pause()
        self.engine.updateSettings(TimerSettings(focusDuration=50))
        self.assertEqual(self.engine.timeRemainingSeconds, 50 * 60)
        self.assertEqual(self.engine.formattedTime, "50:00")

    def test_settingsChangeOnlyRescalesCurrentMode(self) -> None:
        """
        A change to the break duration made during a paused focus session
        still resets the focus countdown, and the new break duration is used
        when the break arrives.
        """
        self.engine.start()
        self.advance(20)
        self.engine.pause()
        self.engine.updateSettings(TimerSettings(breakDuration=10))
        self.assertEqual(self.engine.state.mode, TimerMode.Focus)
        self.assertEqual(self.engine.timeRemainingSeconds, 25 * 60)
        self.engine.skip()
        self.assertEqual(self.engine.timeRemainingSeconds, 10 * 60)

    def test_intervalChangeKeepsCountdown(self) -> None:
        """
        Changing only the long break interval leaves a paused countdown alone.
        """
        self.engine.start()
        self.advance(20)
        self.engine.pause()
        self.engine.updateSettings(TimerSettings(longBreakInterval=2))
        self.assertEqual(self.engine.timeRemainingSeconds, 25 * 60 - 20)
        self.assertEqual(self.engine.sessionsUntilLongBreak, 2)

    def test_settingsChangeWhileRunning(self) -> None:
        """
        A running countdown is not rescaled when the settings change.
        """
        self.engine.start()
        self.advance(20)
        self.engine.updateSettings(TimerSettings(focusDuration=10))
        self.assertEqual(self.engine.timeRemainingSeconds, 25 * 60 - 20)
        self.assertEqual(self.engine.progress, 0.0)
        self.engine.pause()
        self.assertEqual(self.engine.timeRemainingSeconds, 25 * 60 - 20)

    def test_progress(self) -> None:
        """
        Progress is the percentage of the current countdown that has elapsed.
        """
        self.engine.switchMode(TimerMode.Break)
        self.engine.start()
        self.advance(75)
        self.assertEqual(self.engine.progress, 25.0)
        self.assertEqual(self.engine.title, "03:45 - Break")

    def test_sessionsUntilLongBreak(self) -> None:
        self.assertEqual(self.engine.sessionsUntilLongBreak, 4)
        self.engine.skip()
        self.engine.skip()
        self.engine.skip()
        self.assertEqual(self.engine.sessionsUntilLongBreak, 2)

    def test_brokenListener(self) -> None:
        """
        If whoever is told about a completion fails, the failure is logged and
        the engine still moves on to the next mode, ready to start again.
        """

        def explode(mode: TimerMode, durationMinutes: int) -> None:
            raise ValueError("bad saved date")

        self.engine.onComplete = explode
        self.engine.start()
        self.advance(25 * 60)
        self.assertEqual(len(self.flushLoggedErrors(ValueError)), 1)
        self.assertEqual(self.chime.plays, 1)
        self.assertEqual(
            self.engine.state, TimerState(TimerMode.Break, 5 * 60, False, 1)
        )
        self.engine.start()
        self.advance(10)
        self.assertEqual(self.engine.timeRemainingSeconds, 5 * 60 - 10)

    def test_completionAfterRunningSettingsChange(self) -> None:
        """
        When the durations change during a running countdown, its completion
        is reported with the new duration for its mode.
        """
        self.engine.start()
        self.advance(60)
        self.engine.updateSettings(TimerSettings(focusDuration=10))
        self.advance(25 * 60 - 60)
        self.assertEqual(self.completions.events, [(TimerMode.Focus, 10)])
