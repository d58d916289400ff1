"""
Engine Errors

Every rejected operation raises one of these before any state is touched,
so a caller never observes a half-applied guess or hint.
"""


class GameError(Exception):
    """Base class for all puzzle engine errors."""

    code = "game_error"
    default_message = "Game error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"code": self.code, "error": self.message}


class GameOver(GameError):
    """Guess or hint attempted after the session reached Won or Lost."""

    code = "game_over"
    default_message = "Game is already over"


class InvalidLength(GameError):
    code = "invalid_length"
    default_message = "Guess has the wrong number of letters"


class NotAccepted(GameError):
    code = "not_in_word_list"
    default_message = "Not in word list"


class HintUnavailable(GameError):
    code = "hint_unavailable"
    default_message = "No hint available"


class NoActiveGame(GameError):
    code = "no_active_game"
    default_message = "No active game"


class InvalidConfig(GameError, ValueError):
    code = "invalid_config"
    default_message = "Invalid puzzle configuration"


class EmptyCatalog(GameError):
    """Raised when selection is attempted over zero candidate words.

    The catalog is validated at startup, so reaching this in normal
    operation means the word lists were misconfigured.
    """

    code = "empty_catalog"
    default_message = "No candidate words available"


class PersistenceFailure(GameError):
    """A repository write or read against durable storage failed."""

    code = "persistence_failure"
    default_message = "Progress could not be saved"
