# =============================================================================
# File: snippets.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import List

from fastapi import APIRouter, Depends, Response

from snipvault.app_init import get_search_service
from snipvault.exceptions import SnippetNotFoundError
from snipvault.logger import get_logger
from snipvault.models.requests import SnippetRequest
from snipvault.models.snippet import Snippet
from snipvault.services.search_service import SearchService

router = APIRouter()
logger = get_logger("router.snippets")


@router.get("/snippets", response_model=List[Snippet])
def list_snippets(service: SearchService = Depends(get_search_service)) -> List[Snippet]:
    return service.get_all_snippets()


@router.post("/snippets", response_model=Snippet, status_code=201)
def create_snippet(
    request: SnippetRequest, service: SearchService = Depends(get_search_service)
) -> Snippet:
    return service.create_snippet(Snippet(**request.model_dump()))


@router.get("/snippets/{snippet_id}", response_model=Snippet)
def get_snippet(snippet_id: int, service: SearchService = Depends(get_search_service)) -> Snippet:
    snippet = service.get_snippet(snippet_id)
    if snippet is None:
        raise SnippetNotFoundError(f"Snippet {snippet_id} not found")
    return snippet


@router.put("/snippets/{snippet_id}", response_model=Snippet)
def update_snippet(
    snippet_id: int,
    request: SnippetRequest,
    service: SearchService = Depends(get_search_service),
) -> Snippet:
    return service.update_snippet(snippet_id, Snippet(**request.model_dump()))


@router.delete("/snippets/{snippet_id}", status_code=204)
def delete_snippet(
    snippet_id: int, service: SearchService = Depends(get_search_service)
) -> Response:
    service.delete_snippet(snippet_id)
    return Response(status_code=204)
