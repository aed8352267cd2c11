# =============================================================================
# File: snippet_store.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Snippet persistence collaborator: CRUD plus substring search."""

from datetime import datetime, timezone
from typing import List, Optional

from snipvault.exceptions import SnippetNotFoundError
from snipvault.models.snippet import Snippet
from snipvault.services.database import Database

_COLUMNS = "id, title, content, language, description, tags, created_at, updated_at"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_snippet(row) -> Snippet:
    return Snippet(
        id=row[0],
        title=row[1],
        content=row[2],
        language=row[3],
        description=row[4],
        tags=row[5],
        created_at=row[6],
        updated_at=row[7],
    )


class SnippetStore:
    def __init__(self, database: Database):
        self._db = database

    def create(self, snippet: Snippet) -> Snippet:
        created_at = snippet.created_at or _now()
        updated_at = snippet.updated_at or created_at
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO snippets (title, content, language, description, tags, "
                "created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    snippet.title,
                    snippet.content,
                    snippet.language,
                    snippet.description,
                    snippet.tags,
                    created_at,
                    updated_at,
                ),
            )
            new_id = cursor.lastrowid
        return snippet.model_copy(
            update={"id": new_id, "created_at": created_at, "updated_at": updated_at}
        )

    def get(self, snippet_id: int) -> Optional[Snippet]:
        with self._db.lock:
            row = self._db.conn.execute(
                f"SELECT {_COLUMNS} FROM snippets WHERE id = ?", (snippet_id,)
            ).fetchone()
        return _row_to_snippet(row) if row else None

    def get_all(self) -> List[Snippet]:
        """All snippets, most recently updated first."""
        with self._db.lock:
            rows = self._db.conn.execute(
                f"SELECT {_COLUMNS} FROM snippets ORDER BY updated_at DESC, id DESC"
            ).fetchall()
        return [_row_to_snippet(row) for row in rows]

    def update(self, snippet_id: int, snippet: Snippet) -> Snippet:
        updated_at = _now()
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "UPDATE snippets SET title = ?, content = ?, language = ?, "
                "description = ?, tags = ?, updated_at = ? WHERE id = ?",
                (
                    snippet.title,
                    snippet.content,
                    snippet.language,
                    snippet.description,
                    snippet.tags,
                    updated_at,
                    snippet_id,
                ),
            )
            if cursor.rowcount == 0:
                raise SnippetNotFoundError(f"Snippet {snippet_id} not found")
        stored = self.get(snippet_id)
        if stored is None:
            raise SnippetNotFoundError(f"Snippet {snippet_id} not found")
        return stored

    def delete(self, snippet_id: int) -> None:
        """Remove a snippet; its embedding record goes with it."""
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM snippets WHERE id = ?", (snippet_id,))
            if cursor.rowcount == 0:
                raise SnippetNotFoundError(f"Snippet {snippet_id} not found")

    def search(self, query: str) -> List[Snippet]:
        """Case-insensitive substring match over title, content, description and tags."""
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        with self._db.lock:
            rows = self._db.conn.execute(
                f"SELECT {_COLUMNS} FROM snippets "
                "WHERE title LIKE ?1 ESCAPE '\\' OR content LIKE ?1 ESCAPE '\\' "
                "OR description LIKE ?1 ESCAPE '\\' OR tags LIKE ?1 ESCAPE '\\' "
                "ORDER BY updated_at DESC, id DESC",
                (pattern,),
            ).fetchall()
        return [_row_to_snippet(row) for row in rows]
