# =============================================================================
# File: tokenizer.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Tokenizer adapter over a local ``tokenizer.json`` vocabulary."""

import os
from typing import Tuple

import numpy as np
from numpy import ndarray
from transformers import PreTrainedTokenizerFast

from snipvault.exceptions import TokenizationError
from snipvault.logger import get_logger
from snipvault.utils.constants import DEFAULT_MAX_TOKENS
from snipvault.utils.log_sanitizer import sanitize_for_log

logger = get_logger("embedder.tokenizer")


class TokenizerAdapter:
    """Turns text into token ids and an attention mask.

    Not safe for concurrent use: fast tokenizers mutate their truncation
    settings on every call. The embedding generator serializes access.
    """

    def __init__(
        self,
        tokenizer_path: str,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        add_special_tokens: bool = False,
    ):
        if not os.path.isfile(tokenizer_path):
            raise TokenizationError(f"Vocabulary file not found: {tokenizer_path}")
        try:
            self._tokenizer = PreTrainedTokenizerFast(tokenizer_file=tokenizer_path)
        except Exception as e:
            logger.error(
                "Failed to load tokenizer from %s: %s",
                sanitize_for_log(tokenizer_path),
                sanitize_for_log(str(e)),
            )
            raise TokenizationError(f"Cannot load tokenizer: {e}")
        self.tokenizer_path = tokenizer_path
        self.max_tokens = max_tokens
        self.add_special_tokens = add_special_tokens

    def encode(self, text: str) -> Tuple[ndarray, ndarray]:
        """Tokenize a single text.

        Returns:
            (input_ids, attention_mask) as equal-length int64 arrays
        """
        if not isinstance(text, str):
            raise TokenizationError(f"Expected text, got {type(text).__name__}")
        try:
            encoding = self._tokenizer(
                text,
                add_special_tokens=self.add_special_tokens,
                truncation=True,
                max_length=self.max_tokens,
                return_attention_mask=True,
            )
        except Exception as e:
            raise TokenizationError(f"Tokenization failed: {e}")

        input_ids = np.asarray(encoding["input_ids"], dtype=np.int64)
        attention_mask = np.asarray(encoding["attention_mask"], dtype=np.int64)
        return input_ids, attention_mask
