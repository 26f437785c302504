"""
SQLite-backed conversation store.

Same contract as InMemoryConversationStore, with SQLite as the storage
mechanism. Selected with STORE_BACKEND=sqlite.

Key properties:
- Implements exactly the same interface as InMemoryConversationStore
- Can be swapped without changing any pipeline code
- One connection per store, guarded by a lock (':memory:' databases are
  per-connection, so the connection must outlive a single operation)
- No durability promise beyond what SQLite gives for the configured path
"""

import logging
import sqlite3
import threading
from typing import List, Optional

from agent.memory.base import ConversationStore
from agent.memory.types import Message

logger = logging.getLogger(__name__)


class SQLiteConversationStore(ConversationStore):
    """
    SQLite-backed transcript store.

    Design:
    - One table: messages
    - Columns: id (insertion order), thread_id, role, content, timestamp
    - Index: (thread_id, id) for ordered per-thread reads
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize SQLite conversation store.

        Args:
            db_path: Path to SQLite database file.
                    If None, uses ':memory:' (in-memory, useful for testing).
        """
        self.db_path = db_path or ":memory:"
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._initialize_db()

    def _initialize_db(self) -> None:
        """
        Create the schema if it does not exist yet.

        Enables WAL mode for file-backed databases.
        """
        with self._lock:
            cursor = self._conn.cursor()

            if self.db_path != ":memory:":
                cursor.execute("PRAGMA journal_mode=WAL")

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    thread_id TEXT NOT NULL,
                    role TEXT NOT NULL,
                    content TEXT NOT NULL,
                    timestamp INTEGER NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_thread_order
                ON messages(thread_id, id)
            """)

            self._conn.commit()

        logger.debug(f"SQLite conversation store initialized: {self.db_path}")

    def append(self, thread_id: str, message: Message) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO messages (thread_id, role, content, timestamp)
                VALUES (?, ?, ?, ?)
                """,
                (thread_id, message.role, message.content, message.timestamp),
            )
            self._conn.commit()

    def read(self, thread_id: str) -> List[Message]:
        with self._lock:
            rows = self._conn.execute(
                """
                SELECT role, content, timestamp FROM messages
                WHERE thread_id = ?
                ORDER BY id
                """,
                (thread_id,),
            ).fetchall()

        return [
            Message(role=role, content=content, timestamp=timestamp)
            for role, content, timestamp in rows
        ]

    def reset(self, thread_id: str) -> None:
        with self._lock:
            cursor = self._conn.execute(
                "DELETE FROM messages WHERE thread_id = ?",
                (thread_id,),
            )
            self._conn.commit()

        logger.debug(f"Cleared {cursor.rowcount} messages for thread {thread_id}")

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()
