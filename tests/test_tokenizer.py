# =============================================================================
# File: test_tokenizer.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import numpy as np
import pytest

from snipvault.exceptions import TokenizationError
from snipvault.services.embedder.tokenizer import TokenizerAdapter


def test_encode_returns_matching_int64_arrays(tokenizer_file):
    adapter = TokenizerAdapter(tokenizer_file)

    ids, mask = adapter.encode("binary search algorithm")

    assert ids.dtype == np.int64
    assert mask.dtype == np.int64
    assert ids.shape == mask.shape == (3,)
    assert mask.tolist() == [1, 1, 1]


def test_encode_is_deterministic_and_case_insensitive(tokenizer_file):
    adapter = TokenizerAdapter(tokenizer_file)

    first, _ = adapter.encode("Quick Sort")
    second, _ = adapter.encode("quick sort")

    assert first.tolist() == second.tolist()


def test_unknown_words_map_to_unknown_token(tokenizer_file):
    adapter = TokenizerAdapter(tokenizer_file)
    ids, _ = adapter.encode("zebra")
    assert ids.tolist() == [0]


def test_empty_text_has_no_tokens(tokenizer_file):
    adapter = TokenizerAdapter(tokenizer_file)
    ids, mask = adapter.encode("")
    assert ids.shape == (0,)
    assert mask.shape == (0,)


def test_long_text_is_truncated_to_max_tokens(tokenizer_file):
    adapter = TokenizerAdapter(tokenizer_file, max_tokens=3)
    ids, mask = adapter.encode("apple pie bake oven fast slow")
    assert len(ids) == 3
    assert len(mask) == 3


def test_missing_vocabulary_file(tmp_path):
    with pytest.raises(TokenizationError):
        TokenizerAdapter(str(tmp_path / "missing.json"))


def test_malformed_vocabulary_file(tmp_path):
    bad = tmp_path / "tokenizer.json"
    bad.write_text("{not a tokenizer", encoding="utf-8")
    with pytest.raises(TokenizationError):
        TokenizerAdapter(str(bad))


def test_non_text_input_is_rejected(tokenizer_file):
    adapter = TokenizerAdapter(tokenizer_file)
    with pytest.raises(TokenizationError):
        adapter.encode(None)
