# =============================================================================
# File: session.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Thin wrapper over an ONNX Runtime encoder session."""

import os
from typing import Dict, List, Optional

import numpy as np
import onnxruntime as ort
from numpy import ndarray

from snipvault.exceptions import InferenceError, ModelLoadError
from snipvault.logger import get_logger
from snipvault.utils.log_sanitizer import sanitize_for_log

logger = get_logger("embedder.session")

HIDDEN_STATE_OUTPUT = "last_hidden_state"


class InferenceSession:
    """Runs a single-segment forward pass and returns per-token hidden states.

    The native execution context is not assumed to be safe for concurrent
    calls; the owner must serialize ``run``.
    """

    def __init__(self, model_path: str, provider: str = "CPUExecutionProvider"):
        if not os.path.isfile(model_path):
            raise ModelLoadError(f"Model file not found: {model_path}")

        available_providers = ort.get_available_providers()
        if provider not in available_providers:
            logger.warning(
                "Provider %s not available, using CPUExecutionProvider",
                sanitize_for_log(provider),
            )
            provider = "CPUExecutionProvider"

        try:
            self._session = ort.InferenceSession(model_path, providers=[provider])
        except Exception as e:
            logger.error(
                "Failed to create ONNX session for %s: %s",
                sanitize_for_log(model_path),
                sanitize_for_log(str(e)),
            )
            raise ModelLoadError(f"ONNX session creation failed: {e}")

        self.model_path = model_path
        self.provider = provider
        self.input_names: List[str] = [i.name for i in self._session.get_inputs()]
        output_names = [o.name for o in self._session.get_outputs()]
        if "input_ids" not in self.input_names or not output_names:
            raise ModelLoadError(
                f"Model at {model_path} is not a text encoder "
                f"(inputs={self.input_names}, outputs={output_names})"
            )
        self.output_name = (
            HIDDEN_STATE_OUTPUT if HIDDEN_STATE_OUTPUT in output_names else output_names[0]
        )
        logger.info(
            "Loaded ONNX session %s (provider=%s, output=%s)",
            sanitize_for_log(model_path),
            provider,
            self.output_name,
        )

    def run(
        self,
        input_ids: ndarray,
        attention_mask: ndarray,
        token_type_ids: Optional[ndarray] = None,
    ) -> ndarray:
        """Forward pass for one sequence.

        Returns:
            Hidden states of shape (seq_len, hidden_dim)
        """
        if input_ids.shape != attention_mask.shape:
            raise InferenceError(
                f"input_ids {input_ids.shape} and attention_mask "
                f"{attention_mask.shape} differ in shape"
            )
        if token_type_ids is None:
            token_type_ids = np.zeros_like(input_ids, dtype=np.int64)

        candidates: Dict[str, ndarray] = {
            "input_ids": input_ids,
            "attention_mask": attention_mask,
            "token_type_ids": token_type_ids,
        }
        feeds = {
            name: np.asarray(arr, dtype=np.int64)[None, :]
            for name, arr in candidates.items()
            if name in self.input_names
        }

        try:
            outputs = self._session.run([self.output_name], feeds)
        except Exception as e:
            raise InferenceError(f"Forward pass failed: {e}")

        hidden = np.asarray(outputs[0])
        if hidden.ndim == 3 and hidden.shape[0] == 1:
            hidden = hidden[0]
        if hidden.ndim != 2 or hidden.shape[0] != input_ids.shape[0]:
            raise InferenceError(
                f"Unexpected hidden state shape {hidden.shape} "
                f"for sequence length {input_ids.shape[0]}"
            )
        return hidden
