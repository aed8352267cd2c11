# =============================================================================
# File: __init__.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Offline semantic search over a personal snippet vault."""

__version__ = "0.1.0"
