"""
Hint position selection.
"""

import random
from typing import List, Optional, Sequence, Tuple

from ..models.game import Feedback, LetterState


def confirmed_positions(feedback: Sequence[Feedback]) -> set:
    """Columns already marked CORRECT by any submitted guess."""
    return {
        col
        for row in feedback
        for col, state in enumerate(row)
        if state is LetterState.CORRECT
    }


def open_positions(length: int, feedback: Sequence[Feedback]) -> List[int]:
    confirmed = confirmed_positions(feedback)
    return [col for col in range(length) if col not in confirmed]


def choose_hint(secret: str, feedback: Sequence[Feedback],
                rng: Optional[random.Random] = None) -> Optional[Tuple[int, str]]:
    """
    Pick a uniformly random column not yet confirmed correct.

    Returns:
        (column, letter) or None when every column is already confirmed
    """
    candidates = open_positions(len(secret), feedback)
    if not candidates:
        return None
    col = (rng or random).choice(candidates)
    return col, secret[col]
