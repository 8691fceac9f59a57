"""
Persistence interface for greetings.

Handlers never talk to a database directly: they receive a
``GreetingStore`` through dependency injection.  Two implementations are
provided:

* ``SQLiteGreetingStore`` keeps greetings in a SQLite file whose schema
  is managed by ``core.db``.
* ``MemoryGreetingStore`` keeps greetings in a dictionary.  It backs the
  demo mode (``STORAGE_BACKEND=memory``) and the test suite.

Stores are append-only: they can insert and look up greetings but offer
no way to change or remove them.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Optional

from greeting_card_api.app.core.db import get_connection, init_db
from greeting_card_api.app.core.errors import GreetingConflictError, GreetingStoreError
from greeting_card_api.app.schemas.greeting import (
    MAX_DAY_INDEX,
    MAX_MEMORY_LINE_LENGTH,
    MAX_MEMORY_LINES,
    MAX_MESSAGE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_QUOTE_LENGTH,
    MAX_SUBTITLE_LENGTH,
    GreetingRead,
    NewGreeting,
)

logger = logging.getLogger(__name__)


class GreetingStore(ABC):
    """Interface every greeting backend implements."""

    def init(self) -> None:
        """Prepare the backend (create tables, open files).  Idempotent."""

    @abstractmethod
    async def insert(self, greeting_id: str, greeting: NewGreeting) -> GreetingRead:
        """Persist a new greeting under ``greeting_id``.

        Raises ``GreetingConflictError`` if the identifier is taken and
        ``GreetingStoreError`` for any other backend failure.
        """

    @abstractmethod
    async def get(self, greeting_id: str) -> Optional[GreetingRead]:
        """Return the greeting stored under ``greeting_id`` or ``None``."""


class SQLiteGreetingStore(GreetingStore):
    """Greeting store backed by a SQLite database file."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def init(self) -> None:
        version = init_db(self.db_path)
        logger.info("Greeting database ready at %s (schema version %s)", self.db_path, version)

    async def insert(self, greeting_id: str, greeting: NewGreeting) -> GreetingRead:
        extras = greeting.extras
        try:
            conn = get_connection(self.db_path)
        except sqlite3.Error as exc:
            raise GreetingStoreError() from exc
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO greetings (id, sender, receiver, message, day_index, subtitle, quote, memories)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    greeting_id,
                    greeting.sender,
                    greeting.receiver,
                    greeting.message,
                    greeting.day_index,
                    extras.subtitle,
                    extras.quote,
                    json.dumps(extras.memories, ensure_ascii=False),
                ),
            )
            conn.commit()
            row = cursor.execute(
                "SELECT * FROM greetings WHERE id = ?",
                (greeting_id,),
            ).fetchone()
            return self._row_to_greeting(row)
        except sqlite3.IntegrityError as exc:
            if "greetings.id" in str(exc):
                raise GreetingConflictError() from exc
            raise GreetingStoreError() from exc
        except sqlite3.Error as exc:
            raise GreetingStoreError() from exc
        finally:
            conn.close()

    async def get(self, greeting_id: str) -> Optional[GreetingRead]:
        try:
            conn = get_connection(self.db_path)
        except sqlite3.Error as exc:
            raise GreetingStoreError() from exc
        try:
            row = conn.execute(
                "SELECT * FROM greetings WHERE id = ?",
                (greeting_id,),
            ).fetchone()
            if not row:
                return None
            return self._row_to_greeting(row)
        except sqlite3.Error as exc:
            raise GreetingStoreError() from exc
        finally:
            conn.close()

    @staticmethod
    def _row_to_greeting(row: sqlite3.Row) -> GreetingRead:
        """Convert a database row to a ``GreetingRead`` instance."""
        memories = []
        if row["memories"]:
            try:
                memories = json.loads(row["memories"])
            except (TypeError, json.JSONDecodeError):
                logger.warning("Greeting %s has unreadable memories; ignoring them", row["id"])
                memories = []
        return GreetingRead(
            id=row["id"],
            sender=row["sender"],
            receiver=row["receiver"],
            message=row["message"],
            day_index=row["day_index"],
            subtitle=row["subtitle"],
            quote=row["quote"],
            memories=memories if isinstance(memories, list) else [],
            created_at=row["created_at"],
        )


class MemoryGreetingStore(GreetingStore):
    """Greeting store living in process memory.

    Data is lost when the process stops.  The same column bounds as the
    SQLite schema are checked on insert.
    """

    def __init__(self) -> None:
        self._greetings: Dict[str, GreetingRead] = {}

    def init(self) -> None:
        logger.warning("Using in-memory greeting store; greetings are lost on restart")

    def __len__(self) -> int:
        return len(self._greetings)

    async def insert(self, greeting_id: str, greeting: NewGreeting) -> GreetingRead:
        if greeting_id in self._greetings:
            raise GreetingConflictError()
        self._check_bounds(greeting)
        extras = greeting.extras
        record = GreetingRead(
            id=greeting_id,
            sender=greeting.sender,
            receiver=greeting.receiver,
            message=greeting.message,
            day_index=greeting.day_index,
            subtitle=extras.subtitle,
            quote=extras.quote,
            memories=list(extras.memories),
            created_at=_utc_timestamp(),
        )
        self._greetings[greeting_id] = record
        return record.model_copy(deep=True)

    async def get(self, greeting_id: str) -> Optional[GreetingRead]:
        record = self._greetings.get(greeting_id)
        return record.model_copy(deep=True) if record else None

    @staticmethod
    def _check_bounds(greeting: NewGreeting) -> None:
        extras = greeting.extras
        valid = (
            0 < len(greeting.sender.strip()) and len(greeting.sender) <= MAX_NAME_LENGTH
            and 0 < len(greeting.receiver.strip()) and len(greeting.receiver) <= MAX_NAME_LENGTH
            and len(greeting.message) <= MAX_MESSAGE_LENGTH
            and 0 <= greeting.day_index <= MAX_DAY_INDEX
            and len(extras.subtitle) <= MAX_SUBTITLE_LENGTH
            and len(extras.quote) <= MAX_QUOTE_LENGTH
            and len(extras.memories) <= MAX_MEMORY_LINES
            and all(len(line) <= MAX_MEMORY_LINE_LENGTH for line in extras.memories)
        )
        if not valid:
            raise GreetingStoreError("Greeting violates storage constraints")


def _utc_timestamp() -> str:
    """Current UTC time in the format SQLite's default produces."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
