"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .errors import (
    EmptyCatalog, GameError, GameOver, HintUnavailable, InvalidConfig,
    InvalidLength, NoActiveGame, NotAccepted, PersistenceFailure,
)
from .game import Feedback, GameMode, GameState, GameStatus, HintState, LetterState, PuzzleConfig
from .snapshot import SessionSnapshot
from .stats import LengthStats, UsageRecord

__all__ = [
    'Feedback', 'GameMode', 'GameState', 'GameStatus', 'HintState', 'LetterState', 'PuzzleConfig',
    'SessionSnapshot', 'LengthStats', 'UsageRecord',
    'GameError', 'GameOver', 'InvalidLength', 'NotAccepted', 'HintUnavailable',
    'NoActiveGame', 'InvalidConfig', 'EmptyCatalog', 'PersistenceFailure',
]
