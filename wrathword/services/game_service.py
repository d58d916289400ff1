"""
Game Service

Orchestrates puzzles for players: decides which secret to play, restores
or replaces the saved session, handles the daily rollover, and writes a full
snapshot after every state change.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional, Set, Tuple

from ..config.app_config import Config
from ..config.game_settings import VALID_LENGTHS
from ..models.errors import InvalidConfig, NoActiveGame, PersistenceFailure
from ..models.game import Feedback, GameMode, GameStatus, PuzzleConfig
from ..repositories.base import CompletionRepository, GameRepository, StatsRepository, UsageRepository
from ..utils.helpers import today_iso, utc_now
from .completion_ledger import CompletionLedger
from .daily_selector import select_daily, select_free
from .game_session import GameSession
from .usage_cycle import UsageCycle
from .word_catalog import WordCatalog

logger = logging.getLogger(__name__)

STALE_CHOICES = ("finish", "start_today")


@dataclass
class StartResult:
    """
    Outcome of start_game / resolve_stale.

    outcome is "new_game", "restored" or "stale_game". For "stale_game",
    session is the unfinished session from an earlier day and nothing has
    been saved or discarded yet.
    """
    outcome: str
    session: GameSession
    fell_back_to_free: bool = False
    persisted: bool = True
    today: Optional[str] = None


@dataclass
class GuessResult:
    session: GameSession
    feedback: Feedback
    persisted: bool = True


@dataclass
class HintResult:
    session: GameSession
    row: int
    col: int
    letter: str
    persisted: bool = True


class GameService:
    """
    Core game service managing one active session per player.

    The in-process session map is authoritative; storage is written after
    every change and only read when a player has no session in memory.
    A finished game leaves the map once it and its results are stored.
    """

    def __init__(self,
                 catalog: WordCatalog,
                 game_repository: GameRepository,
                 completion_repository: CompletionRepository,
                 usage_repository: UsageRepository,
                 stats_repository: StatsRepository,
                 clock: Optional[Callable[[], str]] = None,
                 rng: Optional[random.Random] = None,
                 now: Optional[Callable[[], datetime]] = None):
        self.catalog = catalog
        self.game_repository = game_repository
        self.completion_repository = completion_repository
        self.usage_repository = usage_repository
        self.stats_repository = stats_repository
        self.clock = clock or (lambda: today_iso(Config.TIMEZONE))
        self.now = now or utc_now
        self.rng = rng or random.Random()
        self.sessions: Dict[str, GameSession] = {}
        self.unsaved_players: Set[str] = set()
        self._pending_configs: Dict[str, PuzzleConfig] = {}
        # Dailies finished in this process, kept even when the ledger write fails
        self._completed_dailies: Set[Tuple[str, int, int, str]] = set()

    def ledger(self, player_id: str) -> CompletionLedger:
        return CompletionLedger(self.completion_repository, player_id)

    def usage_cycle(self, player_id: str) -> UsageCycle:
        return UsageCycle(self.usage_repository, player_id)

    # --- session lookup and persistence ---

    def _load(self, player_id: str) -> Optional[GameSession]:
        if player_id in self.sessions:
            return self.sessions[player_id]

        snapshot = self.game_repository.load(player_id)
        if snapshot is None:
            return None
        try:
            session = GameSession.restore(snapshot, self.catalog, self.rng)
        except ValueError as e:
            logger.warning(f"Discarding unusable snapshot for player {player_id}: {e}")
            return None

        self.sessions[player_id] = session
        return session

    def get_session(self, player_id: str) -> GameSession:
        session = self._load(player_id)
        if session is None:
            raise NoActiveGame()
        return session

    def _persist(self, player_id: str, session: GameSession) -> bool:
        """Write a full snapshot; on failure the in-memory session stays authoritative."""
        self.sessions[player_id] = session
        try:
            self.game_repository.save(player_id, session.to_snapshot())
        except PersistenceFailure as e:
            logger.warning(f"Progress for player {player_id} not saved: {e.message}")
            self.unsaved_players.add(player_id)
            return False
        self.unsaved_players.discard(player_id)
        return True

    def has_unsaved_progress(self, player_id: str) -> bool:
        return player_id in self.unsaved_players

    # --- starting puzzles ---

    def build_config(self, length: Optional[int] = None, max_attempts: Optional[int] = None,
                     mode: str = GameMode.DAILY.value, date_iso: Optional[str] = None) -> PuzzleConfig:
        return PuzzleConfig(
            length=Config.DEFAULT_LENGTH if length is None else length,
            max_attempts=Config.DEFAULT_MAX_ATTEMPTS if max_attempts is None else max_attempts,
            mode=mode,
            date_iso=date_iso or self.clock(),
        )

    def start_game(self, player_id: str, length: Optional[int] = None, max_attempts: Optional[int] = None,
                   mode: str = GameMode.DAILY.value, date_iso: Optional[str] = None) -> StartResult:
        """
        Restore or start the puzzle a player asked for.

        An unfinished daily from an earlier date with guesses on it is never
        dropped here: it comes back as "stale_game" and the caller decides
        through resolve_stale.
        """
        requested = self.build_config(length, max_attempts, mode, date_iso)
        saved = self._load(player_id)

        if saved is not None and self._is_stale(saved, requested.date_iso):
            if saved.current_row > 0:
                logger.info(f"Player {player_id} has an unfinished daily from {saved.date_iso}")
                self._pending_configs[player_id] = requested
                return StartResult("stale_game", saved, today=requested.date_iso)
            logger.info(f"Dropping untouched daily from {saved.date_iso} for player {player_id}")

        return self._start(player_id, requested, saved)

    def resolve_stale(self, player_id: str, choice: str, date_iso: Optional[str] = None) -> StartResult:
        """Finish the stale daily, or abandon it and start today's puzzle."""
        if choice not in STALE_CHOICES:
            raise InvalidConfig(f"choice must be one of {', '.join(STALE_CHOICES)}")

        today = date_iso or self.clock()
        saved = self._load(player_id)
        if saved is None or not self._is_stale(saved, today):
            raise NoActiveGame("No unfinished game from an earlier day")

        requested = self._pending_configs.pop(player_id, None)
        if choice == "finish":
            return StartResult("restored", saved, today=today)

        if requested is None or requested.date_iso != today:
            requested = PuzzleConfig(saved.config.length, saved.config.max_attempts, GameMode.DAILY, today)
        self._abandon(player_id, saved)
        return self._start(player_id, requested, None)

    def _is_stale(self, session: GameSession, today: str) -> bool:
        return session.config.is_daily and not session.is_over and session.date_iso != today

    def _start(self, player_id: str, requested: PuzzleConfig, saved: Optional[GameSession]) -> StartResult:
        config = requested
        fell_back = False
        if self._is_completed(player_id, requested):
            logger.info(f"Daily {requested.seed_string()} already completed by {player_id}; using free play")
            config = requested.with_mode(GameMode.FREE)
            fell_back = True

        if saved is not None and not saved.is_over and not self._is_stale(saved, config.date_iso):
            if saved.config.matches(config):
                return StartResult("restored", saved, fell_back_to_free=fell_back, today=config.date_iso)
            if saved.current_row > 0:
                self._abandon(player_id, saved)

        session = GameSession.create(config, self._choose_secret(player_id, config), self.catalog, self.rng)
        persisted = self._persist(player_id, session)
        logger.info(f"Player {player_id} started {config.mode.value} puzzle {config.seed_string()}")
        return StartResult("new_game", session, fell_back_to_free=fell_back, persisted=persisted,
                           today=config.date_iso)

    def _choose_secret(self, player_id: str, config: PuzzleConfig) -> str:
        answers = self.catalog.answers(config.length)
        if config.is_daily:
            # Full list so that every player gets the same word
            return select_daily(config.length, config.max_attempts, config.date_iso, answers)
        return select_free(self.usage_cycle(player_id).unused_words(config.length, answers), self.rng)

    # --- playing ---

    def submit_guess(self, player_id: str, guess: str) -> GuessResult:
        session = self.get_session(player_id)
        feedback = session.submit_guess(guess)
        # Playing on settles any pending stale-game choice
        self._pending_configs.pop(player_id, None)
        persisted = self._persist(player_id, session)
        if session.is_over:
            persisted = self._finish(player_id, session) and persisted
            if persisted:
                # Storage holds the finished game from here on
                self.sessions.pop(player_id, None)
        return GuessResult(session, feedback, persisted)

    def use_hint(self, player_id: str) -> HintResult:
        session = self.get_session(player_id)
        row, col, letter = session.use_hint()
        persisted = self._persist(player_id, session)
        return HintResult(session, row, col, letter, persisted)

    def _finish(self, player_id: str, session: GameSession) -> bool:
        """
        Record a terminal session: daily completion, answer usage and stats.

        Each record is written on its own so one failing write does not
        skip the others.

        Returns:
            True if every record was saved
        """
        config = session.config
        recorded = []
        if config.is_daily:
            recorded.append(self._mark_completed(player_id, config))
        recorded.append(self._record(
            player_id, "answer usage",
            lambda: self.usage_cycle(player_id).mark_used(config.length, session.secret,
                                                          self.catalog.answer_count(config.length)),
        ))
        recorded.append(self._record(player_id, "stats", lambda: self._record_stats(player_id, session)))

        logger.info(f"Player {player_id} {session.status.value} {config.seed_string()} "
                    f"in {session.current_row} guesses")
        return all(recorded)

    def _record_stats(self, player_id: str, session: GameSession) -> None:
        config = session.config
        stats = self.stats_repository.load(player_id, config.length)
        stats.record(session.status is GameStatus.WON, session.current_row, config.date_iso)
        self.stats_repository.save(player_id, config.length, stats)

    def _record(self, player_id: str, what: str, write: Callable[[], None]) -> bool:
        try:
            write()
        except PersistenceFailure as e:
            logger.warning(f"{what.capitalize()} for player {player_id} not saved: {e.message}")
            self.unsaved_players.add(player_id)
            return False
        return True

    # --- daily completion ---

    @staticmethod
    def _daily_key(player_id: str, config: PuzzleConfig) -> Tuple[str, int, int, str]:
        return player_id, config.length, config.max_attempts, config.date_iso

    def _is_completed(self, player_id: str, config: PuzzleConfig) -> bool:
        if not config.is_daily:
            return False
        return (self._daily_key(player_id, config) in self._completed_dailies
                or self.ledger(player_id).is_config_completed(config))

    def _mark_completed(self, player_id: str, config: PuzzleConfig) -> bool:
        """Mark a daily completed in this process and in the ledger."""
        self._completed_dailies.add(self._daily_key(player_id, config))
        return self._record(
            player_id, "daily completion",
            lambda: self.ledger(player_id).mark_daily_completed(config.length, config.max_attempts, config.date_iso),
        )

    def abandon_game(self, player_id: str) -> Optional[dict]:
        """
        Discard the active session. An abandoned daily counts as completed.

        Returns:
            Summary of the abandoned session, or None if there was none
        """
        session = self._load(player_id)
        if session is None:
            self.game_repository.clear(player_id)
            return None

        info = {
            "guessCount": session.current_row,
            "hintWasUsed": session.hint.used,
            "mode": session.config.mode.value,
            "dateISO": session.date_iso,
            "length": session.config.length,
            "maxAttempts": session.config.max_attempts,
        }
        self._abandon(player_id, session)
        return info

    def _abandon(self, player_id: str, session: GameSession) -> None:
        if session.config.is_daily:
            self._mark_completed(player_id, session.config)
        self.sessions.pop(player_id, None)
        self._pending_configs.pop(player_id, None)
        self._record(player_id, "game removal", lambda: self.game_repository.clear(player_id))
        logger.info(f"Player {player_id} abandoned {session.config.seed_string()} after {session.current_row} guesses")

    # --- statistics ---

    def get_stats(self, player_id: str) -> dict:
        """Per-length statistics plus totals across lengths."""
        by_length = self.stats_repository.load_all(player_id)
        played = sum(s.games_played for s in by_length.values())
        won = sum(s.games_won for s in by_length.values())
        max_streak = max((s.max_streak for s in by_length.values()), default=0)

        # current streak comes from the most recently played length
        recent = [s for s in by_length.values() if s.last_played_date]
        current_streak = max(recent, key=lambda s: s.last_played_date).current_streak if recent else 0

        return {
            "lengths": {str(length): by_length[length].to_dict() for length in VALID_LENGTHS if length in by_length},
            "totals": {
                "played": played,
                "won": won,
                "winRate": round(won / played * 100) if played else 0,
                "currentStreak": current_streak,
                "maxStreak": max_streak,
            },
        }


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(config_class=Config, catalog: Optional[WordCatalog] = None) -> GameService:
    """
    Initialize the global game service instance.

    Uses MongoDB when MONGO_URI is configured, in-memory storage otherwise.
    """
    global _game_service
    from ..repositories import memory

    catalog = catalog or WordCatalog.from_settings()

    if config_class.MONGO_URI:
        from ..repositories import mongo

        db = mongo.connect(config_class.MONGO_URI, config_class.MONGO_DB_NAME)
        repositories = (
            mongo.MongoGameRepository(db),
            mongo.MongoCompletionRepository(db),
            mongo.MongoUsageRepository(db),
            mongo.MongoStatsRepository(db),
        )
    else:
        logger.warning("MONGO_URI not configured; player state is kept in memory only")
        repositories = (
            memory.InMemoryGameRepository(),
            memory.InMemoryCompletionRepository(),
            memory.InMemoryUsageRepository(),
            memory.InMemoryStatsRepository(),
        )

    _game_service = GameService(catalog, *repositories,
                                clock=lambda: today_iso(config_class.TIMEZONE))
    return _game_service
