# =============================================================================
# File: database.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Shared SQLite connection holding the snippet and embedding tables."""

import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from snipvault.exceptions import DatabaseConnectionError
from snipvault.logger import get_logger
from snipvault.utils.log_sanitizer import sanitize_for_log

logger = get_logger("database")

_SCHEMA = (
    """CREATE TABLE IF NOT EXISTS snippets (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        content TEXT NOT NULL,
        language TEXT NOT NULL,
        description TEXT,
        tags TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )""",
    """CREATE TABLE IF NOT EXISTS embeddings (
        snippet_id INTEGER PRIMARY KEY,
        embedding BLOB NOT NULL,
        model_version TEXT NOT NULL,
        FOREIGN KEY (snippet_id) REFERENCES snippets(id) ON DELETE CASCADE
    )""",
    "CREATE INDEX IF NOT EXISTS idx_snippets_updated ON snippets(updated_at DESC)",
)


class Database:
    """One SQLite connection shared between threads.

    Reads and writes take ``lock``; writes additionally run inside a
    transaction via :meth:`transaction`.
    """

    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        self.lock = threading.RLock()
        try:
            if db_path != ":memory:":
                db_dir = os.path.dirname(os.path.abspath(db_path))
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)
                    logger.info(f"Created database directory: {db_dir}")
            self.conn = sqlite3.connect(db_path, check_same_thread=False)
            self.conn.execute("PRAGMA foreign_keys = ON")
            if db_path != ":memory:":
                self.conn.execute("PRAGMA journal_mode = WAL")
            with self.conn:
                for statement in _SCHEMA:
                    self.conn.execute(statement)
        except (sqlite3.Error, OSError) as e:
            logger.error(
                "Cannot open database %s: %s",
                sanitize_for_log(db_path),
                sanitize_for_log(str(e)),
            )
            raise DatabaseConnectionError(f"Cannot open database: {e}")
        logger.info(f"Using snippet database: {db_path}")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        with self.lock:
            with self.conn:
                yield self.conn

    def close(self) -> None:
        with self.lock:
            self.conn.close()
