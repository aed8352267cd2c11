# =============================================================================
# File: generator.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Text to embedding vector: truncate, tokenize, infer, pool, normalize."""

import logging
import threading
from typing import Any

import numpy as np
from numpy import ndarray

from snipvault.exceptions import InferenceError
from snipvault.logger import get_logger
from snipvault.services.embedder import processing
from snipvault.utils.constants import DEFAULT_MAX_TEXT_CHARS, EMBEDDING_DIM

logger = get_logger("embedder.generator")


class EmbeddingGenerator:
    """Produces one L2-normalized vector per text.

    The generator owns ``inference_lock``; every tokenizer and session call
    runs under it, so a single generator can be shared between threads.
    Pooling and normalization run outside the lock.
    """

    def __init__(
        self,
        tokenizer: Any,
        session: Any,
        model_version: str,
        dimension: int = EMBEDDING_DIM,
        max_text_chars: int = DEFAULT_MAX_TEXT_CHARS,
    ):
        self._tokenizer = tokenizer
        self._session = session
        self.model_version = model_version
        self.dimension = dimension
        self.max_text_chars = max_text_chars
        self.inference_lock = threading.Lock()

    def generate(self, text: str) -> ndarray:
        """Embed a single text.

        Args:
            text: Free text; only the first ``max_text_chars`` characters are used

        Returns:
            float32 vector of length ``dimension``; all zeros when the text
            produces no tokens

        Raises:
            TokenizationError: vocabulary or text could not be tokenized
            InferenceError: the forward pass failed or returned the wrong width
        """
        truncated = text[: self.max_text_chars]

        with self.inference_lock:
            input_ids, attention_mask = self._tokenizer.encode(truncated)
            if input_ids.shape[0] == 0:
                return np.zeros(self.dimension, dtype=np.float32)
            token_type_ids = np.zeros_like(input_ids, dtype=np.int64)
            hidden = self._session.run(input_ids, attention_mask, token_type_ids)

        if hidden.shape[-1] != self.dimension:
            raise InferenceError(
                f"Model returned hidden dimension {hidden.shape[-1]}, expected {self.dimension}"
            )

        try:
            pooled = processing.mean_pooling(hidden, attention_mask)
        except ValueError as e:
            raise InferenceError(str(e))
        embedding = processing.normalize_vector(pooled)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Embedded %d chars into %d tokens", len(truncated), int(input_ids.shape[0])
            )
        return embedding
