# =============================================================================
# File: search.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import time

from fastapi import APIRouter, Depends, Query

from snipvault.app_init import get_search_service
from snipvault.exceptions import InvalidInputError
from snipvault.logger import get_logger
from snipvault.models.requests import EmbeddingRequest, SemanticSearchRequest
from snipvault.models.responses import EmbeddingResponse, SearchResponse
from snipvault.models.snippet import SearchResult
from snipvault.services.search_service import SearchService
from snipvault.utils.log_sanitizer import sanitize_for_log

router = APIRouter()
logger = get_logger("router.search")


@router.get("/search", response_model=SearchResponse)
def text_search(
    q: str = Query(..., min_length=1),
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    start = time.time()
    results = [SearchResult(snippet=s, score=1.0) for s in service.text_search(q)]
    return SearchResponse(
        semantic=False,
        results=results,
        message=f"{len(results)} results",
        time_taken=time.time() - start,
    )


@router.post("/search/semantic", response_model=SearchResponse)
def semantic_search(
    request: SemanticSearchRequest, service: SearchService = Depends(get_search_service)
) -> SearchResponse:
    if not request.query.strip():
        raise InvalidInputError("Query must not be blank")
    logger.debug("Semantic search: %s", sanitize_for_log(request.query))
    start = time.time()
    outcome = service.search(request.query)
    return SearchResponse(
        semantic=outcome.semantic,
        results=outcome.results,
        message=f"{len(outcome.results)} results",
        time_taken=time.time() - start,
    )


@router.post("/embed", response_model=EmbeddingResponse)
def embed(
    request: EmbeddingRequest, service: SearchService = Depends(get_search_service)
) -> EmbeddingResponse:
    start = time.time()
    vector = service.generate_embedding(request.input)
    return EmbeddingResponse(
        model=service.manager.model_version,
        dimension=int(vector.shape[0]),
        vector=vector.tolist(),
        time_taken=time.time() - start,
    )
