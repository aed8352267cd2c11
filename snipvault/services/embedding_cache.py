# =============================================================================
# File: embedding_cache.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Persistent snippet id -> (vector, model version) store.

Vectors are stored as raw little-endian float32 bytes, concatenated, so a
384-dimension vector occupies exactly 1536 bytes.
"""

import sqlite3
from typing import List, NamedTuple, Optional, Tuple

import numpy as np
from numpy import ndarray

from snipvault.exceptions import (
    DatabaseCorruptionError,
    DatabaseWriteError,
    InvalidInputError,
    SnippetNotFoundError,
)
from snipvault.logger import get_logger
from snipvault.services.database import Database
from snipvault.utils.constants import EMBEDDING_DIM, FLOAT_BYTES

logger = get_logger("embedding_cache")

_STORED_DTYPE = np.dtype("<f4")


class EmbeddingRecord(NamedTuple):
    snippet_id: int
    vector: ndarray
    model_version: str


def encode_vector(vector: ndarray, dimension: Optional[int] = None) -> bytes:
    """Serialize a vector; rejects non-finite values and, if given, a wrong length."""
    array = np.asarray(vector, dtype=_STORED_DTYPE)
    if dimension is not None and array.shape != (dimension,):
        raise InvalidInputError(
            f"Embedding must have shape ({dimension},), got {array.shape}"
        )
    if not np.all(np.isfinite(array)):
        raise InvalidInputError("Embedding contains NaN or infinite values")
    return array.tobytes()


def decode_vector(blob: bytes, dimension: Optional[int] = None) -> ndarray:
    if dimension is not None and len(blob) != dimension * FLOAT_BYTES:
        raise ValueError(
            f"Embedding blob of {len(blob)} bytes does not hold {dimension} float32 values"
        )
    if len(blob) % FLOAT_BYTES:
        raise ValueError(f"Embedding blob of {len(blob)} bytes is not float32-aligned")
    return np.frombuffer(blob, dtype=_STORED_DTYPE).astype(np.float32)


class EmbeddingCache:
    """Key/value store of embedding records, at most one per snippet id.

    Performs no similarity computation. Records belong to their snippet and
    disappear with it through the foreign key cascade.
    """

    def __init__(self, database: Database, dimension: int = EMBEDDING_DIM):
        self._db = database
        self.dimension = dimension

    def put(self, snippet_id: int, vector: ndarray, model_version: str) -> None:
        """Upsert; replaces any earlier vector and version tag for the id.

        Raises:
            InvalidInputError: wrong dimension or non-finite values
            SnippetNotFoundError: no snippet with this id
            DatabaseWriteError: any other SQLite failure
        """
        blob = encode_vector(vector, self.dimension)
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO embeddings (snippet_id, embedding, model_version) "
                    "VALUES (?, ?, ?)",
                    (snippet_id, blob, model_version),
                )
        except sqlite3.IntegrityError:
            raise SnippetNotFoundError(
                f"Cannot store embedding for unknown snippet {snippet_id}"
            )
        except sqlite3.Error as e:
            raise DatabaseWriteError(f"Cannot store embedding for snippet {snippet_id}: {e}")

    def get_record(self, snippet_id: int) -> Optional[EmbeddingRecord]:
        with self._db.lock:
            row = self._db.conn.execute(
                "SELECT snippet_id, embedding, model_version FROM embeddings "
                "WHERE snippet_id = ?",
                (snippet_id,),
            ).fetchone()
        if row is None:
            return None
        try:
            return EmbeddingRecord(row[0], decode_vector(row[1], self.dimension), row[2])
        except ValueError as e:
            raise DatabaseCorruptionError(f"Embedding for snippet {snippet_id}: {e}")

    def get(self, snippet_id: int, model_version: Optional[str] = None) -> Optional[ndarray]:
        """Vector for the id, or None. With model_version, stale records count as absent."""
        record = self.get_record(snippet_id)
        if record is None:
            return None
        if model_version is not None and record.model_version != model_version:
            return None
        return record.vector

    def get_all_records(self) -> List[EmbeddingRecord]:
        with self._db.lock:
            rows = self._db.conn.execute(
                "SELECT snippet_id, embedding, model_version FROM embeddings "
                "ORDER BY snippet_id"
            ).fetchall()
        records = []
        for snippet_id, blob, version in rows:
            try:
                records.append(EmbeddingRecord(snippet_id, decode_vector(blob, self.dimension), version))
            except ValueError as e:
                logger.warning(f"Skipping corrupt embedding for snippet {snippet_id}: {e}")
        return records

    def get_all(self, model_version: Optional[str] = None) -> List[Tuple[int, ndarray]]:
        return [
            (record.snippet_id, record.vector)
            for record in self.get_all_records()
            if model_version is None or record.model_version == model_version
        ]

    def delete(self, snippet_id: int) -> None:
        with self._db.transaction() as conn:
            conn.execute("DELETE FROM embeddings WHERE snippet_id = ?", (snippet_id,))

    def count(self, model_version: Optional[str] = None) -> int:
        with self._db.lock:
            if model_version is None:
                row = self._db.conn.execute("SELECT COUNT(*) FROM embeddings").fetchone()
            else:
                row = self._db.conn.execute(
                    "SELECT COUNT(*) FROM embeddings WHERE model_version = ?",
                    (model_version,),
                ).fetchone()
        return int(row[0])
