# =============================================================================
# File: model.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import time
from typing import Optional

from fastapi import APIRouter, Depends

from snipvault.app_init import get_search_service
from snipvault.logger import get_logger
from snipvault.models.model_info import ModelInfo
from snipvault.models.requests import LoadModelRequest
from snipvault.models.responses import BaseResponse, RegenerateResponse
from snipvault.services.search_service import SearchService

router = APIRouter()
logger = get_logger("router.model")


@router.get("/model/status", response_model=ModelInfo)
def model_status(service: SearchService = Depends(get_search_service)) -> ModelInfo:
    return service.model_status()


@router.post("/model/download", response_model=BaseResponse)
def download_model(
    request: Optional[LoadModelRequest] = None,
    service: SearchService = Depends(get_search_service),
) -> BaseResponse:
    start = time.time()
    artifacts = service.manager.ensure_artifacts(request.model if request else None)
    return BaseResponse(
        message=f"Model downloaded successfully to: {artifacts.weights_path}",
        time_taken=time.time() - start,
    )


@router.post("/model/load", response_model=RegenerateResponse)
def load_model(
    request: Optional[LoadModelRequest] = None,
    service: SearchService = Depends(get_search_service),
) -> RegenerateResponse:
    start = time.time()
    count = service.load_model(request.model if request else None)
    return RegenerateResponse(
        count=count,
        message=f"Model loaded; back-filled {count} embeddings",
        time_taken=time.time() - start,
    )


@router.post("/model/unload", response_model=BaseResponse)
def unload_model(service: SearchService = Depends(get_search_service)) -> BaseResponse:
    service.unload_model()
    return BaseResponse(message="Model unloaded")


@router.post("/model/regenerate", response_model=RegenerateResponse)
def regenerate_embeddings(
    service: SearchService = Depends(get_search_service),
) -> RegenerateResponse:
    start = time.time()
    count = service.regenerate_embeddings()
    return RegenerateResponse(
        count=count,
        message=f"Regenerated {count} embeddings",
        time_taken=time.time() - start,
    )
