# =============================================================================
# File: responses.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import List, Optional

from pydantic import BaseModel, Field

from snipvault.models.snippet import SearchResult


class BaseResponse(BaseModel):
    success: bool = Field(default=True)
    message: str = Field(default="")
    time_taken: float = Field(default=0.0)


class SearchResponse(BaseResponse):
    semantic: bool = Field(
        default=True, description="False when results come from substring search"
    )
    results: List[SearchResult] = Field(default_factory=list)


class EmbeddingResponse(BaseResponse):
    model: Optional[str] = None
    dimension: int = 0
    vector: List[float] = Field(default_factory=list)


class RegenerateResponse(BaseResponse):
    count: int = 0
