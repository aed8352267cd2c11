# =============================================================================
# File: __init__.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Embedding pipeline for text snippets using a local ONNX encoder.

This package provides the following components:
- tokenizer: TokenizerAdapter over a tokenizer.json vocabulary
- session: InferenceSession over an ONNX Runtime encoder
- processing: masked mean pooling, L2 normalization, cosine similarity
- generator: EmbeddingGenerator combining the three under one lock

Public API:
- EmbeddingGenerator: text to normalized vector
- TokenizerAdapter, InferenceSession: adapters used to build a generator
- cosine_similarity: similarity of two normalized vectors
"""

from snipvault.services.embedder.generator import EmbeddingGenerator
from snipvault.services.embedder.processing import cosine_similarity
from snipvault.services.embedder.session import InferenceSession
from snipvault.services.embedder.tokenizer import TokenizerAdapter

__all__ = [
    "EmbeddingGenerator",
    "InferenceSession",
    "TokenizerAdapter",
    "cosine_similarity",
]
