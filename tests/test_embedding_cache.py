# =============================================================================
# File: test_embedding_cache.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import struct

import numpy as np
import pytest

from snipvault.exceptions import (
    DatabaseCorruptionError,
    DatabaseWriteError,
    InvalidInputError,
    SnippetNotFoundError,
)
from snipvault.models.snippet import Snippet
from snipvault.services.database import Database
from snipvault.services.embedding_cache import (
    EmbeddingCache,
    decode_vector,
    encode_vector,
)
from snipvault.services.snippet_store import SnippetStore


@pytest.fixture
def database():
    db = Database(":memory:")
    yield db
    db.close()


@pytest.fixture
def store(database):
    return SnippetStore(database)


@pytest.fixture
def cache(database):
    return EmbeddingCache(database)


def _snippet(store, title="Binary search"):
    return store.create(Snippet(title=title, content="def search(): pass"))


def _vector(seed=0, dim=384):
    rng = np.random.default_rng(seed)
    vector = rng.standard_normal(dim).astype(np.float32)
    return vector / np.linalg.norm(vector)


def test_blob_is_little_endian_float32():
    blob = encode_vector(np.array([1.0, -2.5], dtype=np.float32))
    assert blob == struct.pack("<2f", 1.0, -2.5)


def test_decode_rejects_misaligned_blob():
    with pytest.raises(ValueError):
        decode_vector(b"\x00\x01\x02")


def test_decode_rejects_wrong_length_for_dimension():
    with pytest.raises(ValueError):
        decode_vector(b"\x00" * 1532, dimension=384)
    assert decode_vector(b"\x00" * 1536, dimension=384).shape == (384,)


@pytest.mark.parametrize("dim", [10, 383, 385])
def test_put_rejects_wrong_dimension(store, cache, dim):
    snippet = _snippet(store)

    with pytest.raises(InvalidInputError):
        cache.put(snippet.id, np.ones(dim, dtype=np.float32), "v")
    assert cache.get(snippet.id) is None


@pytest.mark.parametrize("bad", [np.nan, np.inf])
def test_put_rejects_non_finite_values(store, cache, bad):
    snippet = _snippet(store)
    vector = _vector()
    vector[7] = bad

    with pytest.raises(InvalidInputError):
        cache.put(snippet.id, vector, "v")
    assert cache.count() == 0


def test_put_then_get_is_bit_exact(store, cache):
    snippet = _snippet(store)
    vector = _vector()

    cache.put(snippet.id, vector, "all-MiniLM-L6-v2")
    stored = cache.get(snippet.id)

    assert stored.dtype == np.float32
    assert stored.tobytes() == vector.astype(np.float32).tobytes()


def test_stored_blob_is_1536_bytes(store, cache, database):
    snippet = _snippet(store)
    cache.put(snippet.id, _vector(), "all-MiniLM-L6-v2")

    (blob,) = database.conn.execute(
        "SELECT embedding FROM embeddings WHERE snippet_id = ?", (snippet.id,)
    ).fetchone()
    assert len(blob) == 1536


def test_put_replaces_earlier_record(store, cache):
    snippet = _snippet(store)
    cache.put(snippet.id, _vector(1), "old-model")
    cache.put(snippet.id, _vector(2), "new-model")

    record = cache.get_record(snippet.id)
    assert record.model_version == "new-model"
    assert record.vector.tobytes() == _vector(2).tobytes()
    assert cache.count() == 1


def test_get_with_version_treats_stale_record_as_absent(store, cache):
    snippet = _snippet(store)
    cache.put(snippet.id, _vector(), "old-model")

    assert cache.get(snippet.id, "new-model") is None
    assert cache.get(snippet.id, "old-model") is not None
    assert cache.get(snippet.id) is not None


def test_get_missing_returns_none(cache):
    assert cache.get(42) is None
    assert cache.get_record(42) is None


def test_put_for_unknown_snippet(cache):
    with pytest.raises(SnippetNotFoundError):
        cache.put(999, _vector(), "all-MiniLM-L6-v2")


def test_get_all_filters_by_version(store, cache):
    first = _snippet(store, "first")
    second = _snippet(store, "second")
    cache.put(first.id, _vector(1), "a")
    cache.put(second.id, _vector(2), "b")

    assert [sid for sid, _ in cache.get_all()] == [first.id, second.id]
    assert [sid for sid, _ in cache.get_all("b")] == [second.id]
    assert cache.count("a") == 1


def test_delete(store, cache):
    snippet = _snippet(store)
    cache.put(snippet.id, _vector(), "v")

    cache.delete(snippet.id)

    assert cache.get(snippet.id) is None


def test_deleting_snippet_cascades(store, cache):
    snippet = _snippet(store)
    cache.put(snippet.id, _vector(), "v")

    store.delete(snippet.id)

    assert cache.get_record(snippet.id) is None
    assert cache.count() == 0


def test_corrupt_blob(store, cache, database):
    good = _snippet(store, "good")
    bad = _snippet(store, "bad")
    cache.put(good.id, _vector(), "v")
    with database.transaction() as conn:
        conn.execute(
            "INSERT INTO embeddings (snippet_id, embedding, model_version) VALUES (?, ?, ?)",
            (bad.id, b"\x00\x01\x02", "v"),
        )

    with pytest.raises(DatabaseCorruptionError):
        cache.get(bad.id)
    assert [record.snippet_id for record in cache.get_all_records()] == [good.id]


def test_records_survive_reopen(tmp_path):
    path = str(tmp_path / "data" / "snippets.db")
    db = Database(path)
    snippet = SnippetStore(db).create(Snippet(title="t", content="c"))
    EmbeddingCache(db).put(snippet.id, _vector(), "v")
    db.close()

    reopened = Database(path)
    try:
        assert EmbeddingCache(reopened).get(snippet.id).tobytes() == _vector().tobytes()
    finally:
        reopened.close()


def test_truncated_aligned_blob_is_corrupt(store, cache, database):
    snippet = _snippet(store)
    with database.transaction() as conn:
        conn.execute(
            "INSERT INTO embeddings (snippet_id, embedding, model_version) VALUES (?, ?, ?)",
            (snippet.id, b"\x00" * 1532, "v"),
        )

    with pytest.raises(DatabaseCorruptionError):
        cache.get(snippet.id)
    assert cache.get_all_records() == []


def test_sqlite_failure_is_a_write_error(store, cache, database):
    snippet = _snippet(store)
    with database.transaction() as conn:
        conn.execute("DROP TABLE embeddings")

    with pytest.raises(DatabaseWriteError):
        cache.put(snippet.id, _vector(), "v")
