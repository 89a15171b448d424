# -*- test-case-name: pomotrack.model.test.test_quotes -*-
from __future__ import annotations

from dataclasses import dataclass
from random import Random
from typing import Sequence


@dataclass(frozen=True)
class Quote:
    text: str
    author: str


motivationalQuotes: Sequence[Quote] = (
    Quote("The secret of getting ahead is getting started.", "Mark Twain"),
    Quote("Small progress is still progress.", "Unknown"),
    Quote(
        "You don't have to be great to start, but you have to start to be "
        "great.",
        "Zig Ziglar",
    ),
    Quote("Focus on being productive instead of busy.", "Tim Ferriss"),
    Quote("The only way to do great work is to love what you do.", "Steve Jobs"),
    Quote(
        "Success is the sum of small efforts, repeated day in and day out.",
        "Robert Collier",
    ),
    Quote("Don't watch the clock; do what it does. Keep going.", "Sam Levenson"),
    Quote(
        "Your future is created by what you do today, not tomorrow.",
        "Robert Kiyosaki",
    ),
    Quote(
        "The best time to plant a tree was 20 years ago. The second best time "
        "is now.",
        "Chinese Proverb",
    ),
    Quote("Believe you can and you're halfway there.", "Theodore Roosevelt"),
    Quote("It always seems impossible until it's done.", "Nelson Mandela"),
    Quote(
        "The only limit to our realization of tomorrow will be our doubts of "
        "today.",
        "Franklin D. Roosevelt",
    ),
    Quote("Action is the foundational key to all success.", "Pablo Picasso"),
    Quote("What you do today can improve all your tomorrows.", "Ralph Marston"),
    Quote("Excellence is not a skill, it's an attitude.", "Ralph Marston"),
    Quote("You've got this! Every completed task is a step forward.", "Unknown"),
    Quote("Consistency is what transforms average into excellence.", "Unknown"),
    Quote("Great job! Your dedication is inspiring.", "Unknown"),
    Quote("One step at a time, you're building something amazing.", "Unknown"),
    Quote(
        "Productivity is being able to do things that you were never able to "
        "do before.",
        "Franz Kafka",
    ),
)


def randomQuoteExcluding(
    previous: Quote | None,
    rng: Random,
    quotes: Sequence[Quote] = motivationalQuotes,
) -> Quote:
    """
    Pick a quote at random to celebrate with, other than the C{previous} one
    shown (if any), so that asking for another quote always changes it.
    """
    candidates = [quote for quote in quotes if quote != previous]
    return rng.choice(candidates or list(quotes))
