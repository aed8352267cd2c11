# =============================================================================
# File: search_ranker.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Linear-scan semantic ranking of snippets against a query."""

from typing import Dict, List, Sequence

from numpy import ndarray

from snipvault.logger import get_logger
from snipvault.models.snippet import SearchResult, Snippet
from snipvault.services.embedder.generator import EmbeddingGenerator
from snipvault.services.embedder.processing import cosine_similarity
from snipvault.services.embedding_cache import EmbeddingRecord
from snipvault.utils.constants import DEFAULT_MIN_SCORE

logger = get_logger("search_ranker")


class SearchRanker:
    """Scores snippets by cosine similarity and keeps those above ``min_score``."""

    def __init__(self, min_score: float = DEFAULT_MIN_SCORE):
        self.min_score = min_score

    def semantic_search(
        self,
        query: str,
        snippets: Sequence[Snippet],
        cached_records: Sequence[EmbeddingRecord],
        generator: EmbeddingGenerator,
    ) -> List[SearchResult]:
        """Rank snippets against the query.

        Only records tagged with ``generator.model_version`` take part; stale
        records and snippets without a record are skipped, never reported as
        errors. Results with a score at or below ``min_score`` are dropped.
        The sort is stable, so equal scores keep the input snippet order.

        Raises:
            GenerationError: the query could not be embedded
        """
        if not cached_records:
            return []

        query_vector = generator.generate(query)

        current: Dict[int, ndarray] = {
            record.snippet_id: record.vector
            for record in cached_records
            if record.model_version == generator.model_version
        }
        stale = len(cached_records) - len(current)
        if stale:
            logger.debug(f"Ignoring {stale} embeddings from other model versions")

        results: List[SearchResult] = []
        for snippet in snippets:
            if snippet.id is None:
                continue
            vector = current.get(snippet.id)
            if vector is None:
                continue
            score = cosine_similarity(query_vector, vector)
            if score > self.min_score:
                results.append(SearchResult(snippet=snippet, score=score))

        results.sort(key=lambda r: r.score, reverse=True)
        return results
