# =============================================================================
# File: concurrent_dict.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from threading import RLock
from typing import Any, Callable, Dict


class ConcurrentDict:
    """
    Thread-safe dictionary for concurrent access.
    Used to hand out one lock object per model artifact directory.
    """

    def __init__(self):
        self._lock = RLock()
        self._dict: Dict[Any, Any] = {}

    def get_or_add(self, key: Any, factory: Callable[[], Any]) -> Any:
        """
        Atomically gets the value for the key, or adds it using the factory if not present.
        The factory runs at most once per key.
        """
        with self._lock:
            if key not in self._dict:
                self._dict[key] = factory()
            return self._dict[key]
