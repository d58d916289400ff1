"""
Guess evaluation.

Two passes over the guess so repeated letters are never credited more often
than they occur in the secret: exact matches first, then misplaced letters
drawn from whatever is left of the secret's letter counts.
"""

from collections import Counter
from typing import Iterable, List

from ..models.game import Feedback, LetterState


def evaluate(secret: str, guess: str) -> Feedback:
    """
    Classify each letter of guess against secret.

    Both words must have the same length and the same case.

    Examples:
        evaluate("CRANE", "STARE") -> (ABSENT, ABSENT, CORRECT, PRESENT, CORRECT)
    """
    if len(secret) != len(guess):
        raise ValueError(f"secret and guess differ in length: {len(secret)} != {len(guess)}")

    result: List[LetterState] = [LetterState.ABSENT] * len(guess)
    remaining = Counter(secret)

    # First pass: exact position matches consume their letter
    for i, (g, s) in enumerate(zip(guess, secret)):
        if g == s:
            result[i] = LetterState.CORRECT
            remaining[g] -= 1

    # Second pass: misplaced letters, only while the secret still has copies
    for i, g in enumerate(guess):
        if result[i] is LetterState.CORRECT:
            continue
        if remaining[g] > 0:
            result[i] = LetterState.PRESENT
            remaining[g] -= 1

    return tuple(result)


def is_win(feedback: Iterable[LetterState]) -> bool:
    """True iff every position is CORRECT."""
    states = list(feedback)
    return bool(states) and all(state is LetterState.CORRECT for state in states)


def to_emoji(feedback: Iterable[LetterState]) -> str:
    return "".join(state.emoji for state in feedback)
