"""
Session Snapshot

The persisted form of one player's active session. Field names are part of
the stored contract; readers fill in defaults for anything missing so older
or newer records still load.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .game import GameStatus, HintState


@dataclass
class SessionSnapshot:
    length: int
    max_attempts: int
    mode: str
    date_iso: str
    secret: str
    guesses: List[str] = field(default_factory=list)
    feedback: List[List[str]] = field(default_factory=list)
    status: str = GameStatus.PLAYING.value
    hint: HintState = field(default_factory=HintState)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "length": self.length,
            "maxAttempts": self.max_attempts,
            "mode": self.mode,
            "dateISO": self.date_iso,
            "secret": self.secret,
            "guesses": list(self.guesses),
            "feedback": [list(row) for row in self.feedback],
            "status": self.status,
            "hint": {
                "used": self.hint.used,
                "cell": list(self.hint.cell) if self.hint.cell is not None else None,
                "letter": self.hint.letter,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionSnapshot":
        """
        Build a snapshot from a stored record.

        Raises:
            KeyError/TypeError/ValueError: if an identifying field is missing or malformed
        """
        hint_data = data.get("hint") or {}
        cell = _parse_cell(hint_data.get("cell"))
        letter = hint_data.get("letter")
        used = bool(hint_data.get("used", False)) and cell is not None and bool(letter)

        return cls(
            length=int(data["length"]),
            max_attempts=int(data["maxAttempts"]),
            mode=str(data["mode"]),
            date_iso=str(data["dateISO"]),
            secret=str(data["secret"]).upper(),
            guesses=[str(g).upper() for g in data.get("guesses") or []],
            feedback=[list(row) for row in data.get("feedback") or []],
            status=data.get("status") or GameStatus.PLAYING.value,
            hint=HintState(used=True, cell=cell, letter=letter.upper()) if used else HintState(),
        )


def _parse_cell(raw) -> Optional[Tuple[int, int]]:
    if raw is None:
        return None
    if isinstance(raw, dict):
        return int(raw["row"]), int(raw["col"])
    row, col = raw
    return int(row), int(col)
