"""
Controllers Package

HTTP endpoints over the game service.
"""

from .game_controller import game_bp

__all__ = ['game_bp']
