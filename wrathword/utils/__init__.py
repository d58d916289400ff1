"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_game_service
from .helpers import current_local_dates, get_user_identity, today_iso, utc_now
from .game_logger import game_logger

__all__ = ['require_game_service', 'get_user_identity', 'today_iso', 'utc_now', 'current_local_dates', 'game_logger']
