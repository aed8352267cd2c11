# =============================================================================
# File: snippet.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, Field

from snipvault.utils.constants import DEFAULT_MAX_TEXT_CHARS


class Snippet(BaseModel):
    id: Optional[int] = Field(default=None, description="Stable snippet identifier")
    title: str
    content: str
    language: str = Field(default="text")
    description: Optional[str] = None
    tags: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def embedding_text(self, max_chars: int = DEFAULT_MAX_TEXT_CHARS) -> str:
        """Title, optional description and content joined by spaces, cut to max_chars."""
        parts = [self.title]
        if self.description:
            parts.append(self.description)
        parts.append(self.content)
        return " ".join(parts)[:max_chars]


class SearchResult(BaseModel):
    snippet: Snippet
    score: float = Field(..., ge=-1.0, le=1.0)
    highlight: Optional[str] = None
