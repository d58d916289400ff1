"""
MongoDB Repositories

Durable storage for player state using MongoDB. Each record type lives in
its own collection with a unique index on its key, and every write is an
upsert so repeated writes of the same record are harmless.
"""

import datetime
import logging
from typing import Dict, List, Optional

from pymongo.errors import PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..models.errors import PersistenceFailure
from ..models.snapshot import SessionSnapshot
from ..models.stats import LengthStats, UsageRecord
from .base import CompletionRepository, GameRepository, StatsRepository, UsageRepository, completion_key

logger = logging.getLogger(__name__)


def connect(mongo_uri: str, db_name: str):
    """
    Open a MongoDB connection and return the database handle.

    Raises:
        PersistenceFailure: if the server cannot be reached
    """
    client = MongoClient(mongo_uri, server_api=ServerApi('1'))
    try:
        client.admin.command('ping')
    except PyMongoError as e:
        logger.error(f"MongoDB connection error: {e}")
        raise PersistenceFailure(f"Cannot reach MongoDB: {e}")
    logger.info("Successfully connected to MongoDB")
    return client[db_name]


class _MongoRepository:

    collection_name = ""

    def __init__(self, db):
        self.collection = db[self.collection_name]
        self._create_indexes()

    def _create_indexes(self) -> None:
        pass

    def _fail(self, action: str, error: Exception) -> PersistenceFailure:
        logger.warning(f"{self.collection_name}: {action} failed: {error}")
        return PersistenceFailure(f"Could not {action}: {error}")


class MongoGameRepository(_MongoRepository, GameRepository):

    collection_name = "game_sessions"

    def _create_indexes(self) -> None:
        # One active session per player
        self.collection.create_index("player_id", unique=True)

    def save(self, player_id: str, snapshot: SessionSnapshot) -> None:
        document = {
            "player_id": player_id,
            "snapshot": snapshot.to_dict(),
            "updated_at": datetime.datetime.now(datetime.timezone.utc),
        }
        try:
            self.collection.replace_one({"player_id": player_id}, document, upsert=True)
        except PyMongoError as e:
            raise self._fail("save game", e)

    def load(self, player_id: str) -> Optional[SessionSnapshot]:
        try:
            document = self.collection.find_one({"player_id": player_id})
        except PyMongoError as e:
            raise self._fail("load game", e)
        if not document or not isinstance(document.get("snapshot"), dict):
            return None
        try:
            return SessionSnapshot.from_dict(document["snapshot"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable snapshot for {player_id}: {e}")
            return None

    def clear(self, player_id: str) -> None:
        try:
            self.collection.delete_one({"player_id": player_id})
        except PyMongoError as e:
            raise self._fail("clear game", e)


class MongoCompletionRepository(_MongoRepository, CompletionRepository):

    collection_name = "daily_completions"

    def _create_indexes(self) -> None:
        self.collection.create_index([("player_id", 1), ("key", 1)], unique=True)
        self.collection.create_index([("player_id", 1), ("length", 1)])

    def is_completed(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> bool:
        try:
            document = self.collection.find_one(
                {"player_id": player_id, "key": completion_key(length, max_attempts, date_iso)}
            )
        except PyMongoError as e:
            raise self._fail("read completion", e)
        return bool(document and document.get("completed"))

    def mark_completed(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> None:
        key = completion_key(length, max_attempts, date_iso)
        try:
            self.collection.update_one(
                {"player_id": player_id, "key": key},
                {"$set": {
                    "completed": True,
                    "length": length,
                    "max_attempts": max_attempts,
                    "date_iso": date_iso,
                }},
                upsert=True,
            )
        except PyMongoError as e:
            raise self._fail("mark completion", e)

    def clear(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> None:
        try:
            self.collection.delete_one({"player_id": player_id, "key": completion_key(length, max_attempts, date_iso)})
        except PyMongoError as e:
            raise self._fail("clear completion", e)

    def completed_dates(self, player_id: str, length: int) -> List[str]:
        try:
            cursor = self.collection.find({"player_id": player_id, "length": length, "completed": True})
            return sorted({document["date_iso"] for document in cursor})
        except PyMongoError as e:
            raise self._fail("list completions", e)


class MongoUsageRepository(_MongoRepository, UsageRepository):

    collection_name = "usage_cycles"

    def _create_indexes(self) -> None:
        self.collection.create_index([("player_id", 1), ("length", 1)], unique=True)

    def load(self, player_id: str, length: int) -> UsageRecord:
        try:
            document = self.collection.find_one({"player_id": player_id, "length": length})
        except PyMongoError as e:
            raise self._fail("load usage cycle", e)
        return UsageRecord.from_dict(document or {})

    def save(self, player_id: str, length: int, record: UsageRecord) -> None:
        try:
            self.collection.replace_one(
                {"player_id": player_id, "length": length},
                {"player_id": player_id, "length": length, **record.to_dict()},
                upsert=True,
            )
        except PyMongoError as e:
            raise self._fail("save usage cycle", e)


class MongoStatsRepository(_MongoRepository, StatsRepository):

    collection_name = "player_stats"

    def _create_indexes(self) -> None:
        self.collection.create_index([("player_id", 1), ("length", 1)], unique=True)

    def load(self, player_id: str, length: int) -> LengthStats:
        try:
            document = self.collection.find_one({"player_id": player_id, "length": length})
        except PyMongoError as e:
            raise self._fail("load stats", e)
        return LengthStats.from_dict(document or {})

    def save(self, player_id: str, length: int, stats: LengthStats) -> None:
        try:
            self.collection.replace_one(
                {"player_id": player_id, "length": length},
                {"player_id": player_id, "length": length, **stats.to_dict()},
                upsert=True,
            )
        except PyMongoError as e:
            raise self._fail("save stats", e)

    def load_all(self, player_id: str) -> Dict[int, LengthStats]:
        try:
            cursor = self.collection.find({"player_id": player_id}).sort("length", 1)
            return {document["length"]: LengthStats.from_dict(document) for document in cursor}
        except PyMongoError as e:
            raise self._fail("load stats", e)
