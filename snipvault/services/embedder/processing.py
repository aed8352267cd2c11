# =============================================================================
# File: processing.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Embedding output processing: masked mean pooling, normalization, similarity."""

import numpy as np
from numpy import ndarray

from snipvault.logger import get_logger

logger = get_logger("embedder.processing")


def mean_pooling(hidden_states: ndarray, attention_mask: ndarray) -> ndarray:
    """Mean pooling with attention mask.

    Args:
        hidden_states: Per-token vectors, shape (seq_len, hidden_dim)
        attention_mask: 1 for real tokens, 0 for padding, shape (seq_len,)

    Returns:
        Pooled float32 vector of shape (hidden_dim,). All zeros when the mask
        has no active positions.
    """
    if hidden_states.ndim != 2:
        raise ValueError(f"Expected 2D hidden states, got shape {hidden_states.shape}")
    if attention_mask.shape[0] != hidden_states.shape[0]:
        raise ValueError(
            "Embedding and attention mask dimensions mismatch: "
            f"{hidden_states.shape[0]} != {attention_mask.shape[0]}"
        )

    mask = attention_mask.astype(np.float32)
    mask_sum = float(mask.sum())
    if mask_sum == 0.0:
        logger.debug("Attention mask is empty; returning zero vector")
        return np.zeros(hidden_states.shape[1], dtype=np.float32)

    summed = (hidden_states.astype(np.float32) * mask[:, None]).sum(axis=0)
    return (summed / np.float32(mask_sum)).astype(np.float32)


def normalize_vector(embedding: ndarray) -> ndarray:
    """L2 normalize a vector; a zero vector is returned unchanged."""
    norm = np.float32(np.sqrt(np.sum(embedding * embedding, dtype=np.float32)))
    if norm > 0.0:
        return (embedding / norm).astype(np.float32)
    return embedding.astype(np.float32)


def cosine_similarity(a: ndarray, b: ndarray) -> float:
    """Cosine similarity of two L2-normalized vectors.

    Reduces to the dot product, clamped to [-1, 1] to absorb float drift.
    Vectors of different length, or a non-finite product, score 0.0.
    """
    if a.shape != b.shape:
        return 0.0
    dot = float(np.dot(a.astype(np.float32), b.astype(np.float32)))
    if not np.isfinite(dot):
        return 0.0
    return float(np.clip(dot, -1.0, 1.0))
