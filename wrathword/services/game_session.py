"""
Game Session

The aggregate for one puzzle attempt. Owns the secret, the submitted
guesses with their feedback, the single-use hint and the status, and is the
only place the win/loss decision is made.

Status only moves Playing -> Won or Playing -> Lost. Every rejected call
raises before touching state.
"""

import logging
import random
from datetime import date
from typing import Dict, List, Optional, Tuple

from ..models.errors import GameOver, HintUnavailable, InvalidConfig, InvalidLength, NotAccepted
from ..models.game import Feedback, GameState, GameStatus, HintState, LetterState, PuzzleConfig
from ..models.snapshot import SessionSnapshot
from .guess_evaluator import evaluate, is_win, to_emoji
from .hint_provider import choose_hint, confirmed_positions, open_positions
from .word_catalog import WordCatalog

logger = logging.getLogger(__name__)

SHARE_TITLE = "WrathWord"


class GameSession:
    """
    One puzzle attempt.

    Attributes:
        config: the puzzle configuration
        secret: uppercase secret word, hidden from players while playing
    """

    def __init__(self, config: PuzzleConfig, secret: str, catalog: WordCatalog,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.secret = secret.strip().upper()
        self.catalog = catalog
        self._rng = rng
        self._guesses: List[str] = []
        self._feedback: List[Feedback] = []
        self._status = GameStatus.PLAYING
        self._hint = HintState()
        self._keyboard: Dict[str, LetterState] = {}

    @classmethod
    def create(cls, config: PuzzleConfig, secret: str, catalog: WordCatalog,
               rng: Optional[random.Random] = None) -> "GameSession":
        """Start an empty session in PLAYING."""
        if len(secret.strip()) != config.length or not secret.strip().isalpha():
            raise InvalidConfig(f"Secret does not fit a {config.length}-letter puzzle")
        return cls(config, secret, catalog, rng)

    # --- read-only state ---

    @property
    def guesses(self) -> Tuple[str, ...]:
        return tuple(self._guesses)

    @property
    def feedback(self) -> Tuple[Feedback, ...]:
        return tuple(self._feedback)

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def hint(self) -> HintState:
        return self._hint

    @property
    def keyboard(self) -> Dict[str, LetterState]:
        return dict(self._keyboard)

    @property
    def current_row(self) -> int:
        return len(self._guesses)

    @property
    def remaining_attempts(self) -> int:
        return self.config.max_attempts - self.current_row

    @property
    def is_over(self) -> bool:
        return self._status.is_terminal

    @property
    def date_iso(self) -> str:
        return self.config.date_iso

    @property
    def hint_available(self) -> bool:
        return (
            not self._hint.used
            and not self.is_over
            and bool(open_positions(self.config.length, self._feedback))
        )

    # --- operations ---

    def validate_guess(self, guess: str) -> str:
        """
        Check a guess without applying it.

        Returns:
            the normalized (stripped, uppercase) guess

        Raises:
            GameOver, InvalidLength, NotAccepted
        """
        if self.is_over:
            raise GameOver()

        if not isinstance(guess, str):
            raise NotAccepted("Guess must be a valid string")

        normalized = guess.strip().upper()
        if len(normalized) != self.config.length or " " in normalized:
            raise InvalidLength(f"Guess must be exactly {self.config.length} letters")

        if not normalized.isalpha() or not self.catalog.is_allowed(normalized, self.config.length):
            raise NotAccepted()

        return normalized

    def submit_guess(self, guess: str) -> Feedback:
        """Evaluate a guess, record it and advance the status."""
        normalized = self.validate_guess(guess)
        return self._apply_guess(normalized)

    def _apply_guess(self, guess: str) -> Feedback:
        result = evaluate(self.secret, guess)

        self._guesses.append(guess)
        self._feedback.append(result)

        # Keyboard only ever upgrades absent -> present -> correct
        for letter, state in zip(guess, result):
            previous = self._keyboard.get(letter)
            self._keyboard[letter] = state if previous is None else max(previous, state)

        if is_win(result):
            self._status = GameStatus.WON
        elif len(self._guesses) >= self.config.max_attempts:
            self._status = GameStatus.LOST

        return result

    def use_hint(self) -> Tuple[int, int, str]:
        """
        Reveal one letter of the secret at a column not yet confirmed.

        Returns:
            (row, col, letter) where row is the row about to be guessed

        Raises:
            HintUnavailable: hint already used, game over, or nothing left to reveal
        """
        if self._hint.used:
            raise HintUnavailable("Hint already used")
        if self.is_over:
            raise HintUnavailable("Game is already over")

        choice = choose_hint(self.secret, self._feedback, self._rng)
        if choice is None:
            raise HintUnavailable("All positions are already correct")

        col, letter = choice
        row = self.current_row
        self._hint = HintState(used=True, cell=(row, col), letter=letter)
        self._keyboard[letter] = LetterState.CORRECT
        return row, col, letter

    # --- persistence ---

    def to_snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            length=self.config.length,
            max_attempts=self.config.max_attempts,
            mode=self.config.mode.value,
            date_iso=self.config.date_iso,
            secret=self.secret,
            guesses=list(self._guesses),
            feedback=[[state.value for state in row] for row in self._feedback],
            status=self._status.value,
            hint=self._hint,
        )

    @classmethod
    def restore(cls, snapshot: SessionSnapshot, catalog: WordCatalog,
                rng: Optional[random.Random] = None) -> "GameSession":
        """
        Rebuild a session from a snapshot.

        Stored guesses are replayed against the secret, so feedback, keyboard
        and status always come from the evaluator rather than the record.
        Guesses are not rechecked against the allowed list.
        """
        config = PuzzleConfig(snapshot.length, snapshot.max_attempts, snapshot.mode, snapshot.date_iso)
        session = cls.create(config, snapshot.secret, catalog, rng)

        for guess in snapshot.guesses:
            if session.is_over:
                logger.warning(f"Snapshot for {config.seed_string()} has guesses past the end of the game")
                break
            if len(guess) != config.length:
                raise InvalidConfig(f"Stored guess {guess!r} does not fit a {config.length}-letter puzzle")
            session._apply_guess(guess)

        if snapshot.status != session.status.value:
            logger.warning(f"Stored status {snapshot.status!r} differs from replayed {session.status.value!r}")

        hint = snapshot.hint
        if hint.used:
            row, col = hint.cell
            consistent = (
                0 <= row <= session.current_row
                and 0 <= col < config.length
                and session.secret[col] == hint.letter
                # a hint never targets a column confirmed before it was taken
                and col not in confirmed_positions(session._feedback[:row])
            )
            if consistent:
                session._hint = hint
                session._keyboard[hint.letter] = LetterState.CORRECT
            else:
                logger.warning(f"Ignoring inconsistent stored hint at {hint.cell}")

        return session

    # --- views ---

    def to_state(self) -> GameState:
        """Client view; the answer is only revealed once the game is over."""
        return GameState(
            length=self.config.length,
            max_attempts=self.config.max_attempts,
            mode=self.config.mode.value,
            date_iso=self.config.date_iso,
            status=self._status.value,
            current_row=self.current_row,
            remaining_attempts=self.remaining_attempts,
            guesses=list(self._guesses),
            feedback=[[state.value for state in row] for row in self._feedback],
            keyboard={letter: state.value for letter, state in sorted(self._keyboard.items())},
            hint={
                "used": self._hint.used,
                "cell": list(self._hint.cell) if self._hint.cell else None,
                "letter": self._hint.letter,
            },
            hint_available=self.hint_available,
            answer=self.secret if self.is_over else None,
        )

    def share_text(self) -> str:
        """Emoji grid for sharing a finished game."""
        length, max_attempts = self.config.length, self.config.max_attempts
        day = date.fromisoformat(self.config.date_iso)
        score = f"{len(self._guesses)}/{max_attempts}" if self._status is GameStatus.WON else f"X/{max_attempts}"
        grid = "\n".join(to_emoji(row) for row in self._feedback)
        return f"{SHARE_TITLE} {length}×{max_attempts}\n{day:%b} {day.day}, {day.year}\n{score}\n\n{grid}"

    def result_title(self) -> str:
        if self._status is not GameStatus.WON:
            return "Better Luck Next Time"

        guesses = len(self._guesses)
        performance = guesses / self.config.max_attempts
        if guesses == 1:
            return "Incredible!"
        if performance <= 0.33:
            return "Brilliant!"
        if performance <= 0.5:
            return "Amazing!"
        if performance <= 0.67:
            return "Great Job!"
        return "Well Done!"
