# =============================================================================
# File: model_info.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ModelInfo(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    name: str = Field(..., description="Model name, also used as the version tag")
    path: Optional[str] = Field(None, description="Local weights path when downloaded")
    size: Optional[int] = Field(None, description="Weights file size in bytes")
    downloaded: bool = False
    loaded: bool = False
    state: str = Field("unloaded", description="Lifecycle state")
    model_version: Optional[str] = Field(
        None, description="Version tag of the loaded model, if any"
    )
