# =============================================================================
# File: requests.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, Field


class SnippetRequest(BaseModel):
    title: str = Field(..., min_length=1)
    content: str
    language: str = Field(default="text")
    description: Optional[str] = None
    tags: Optional[str] = None


class SemanticSearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="Free-text search query")


class EmbeddingRequest(BaseModel):
    input: str = Field(..., description="Text to embed")


class LoadModelRequest(BaseModel):
    model: Optional[str] = Field(
        None, description="Model name; defaults to the configured model"
    )
