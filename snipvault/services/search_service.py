# =============================================================================
# File: search_service.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Application-level facade over snippets, embeddings and the active model."""

from typing import List, NamedTuple, Optional, Sequence

from numpy import ndarray

from snipvault.config.appsettings import AppSettings
from snipvault.exceptions import (
    DatabaseException,
    GenerationError,
    ModelNotLoadedError,
    ValidationException,
)
from snipvault.logger import get_logger
from snipvault.models.model_info import ModelInfo
from snipvault.models.snippet import SearchResult, Snippet
from snipvault.services.database import Database
from snipvault.services.embedder.generator import EmbeddingGenerator
from snipvault.services.embedding_cache import EmbeddingCache
from snipvault.services.model_manager import ModelLifecycleManager
from snipvault.services.search_ranker import SearchRanker
from snipvault.services.snippet_store import SnippetStore
from snipvault.utils.log_sanitizer import sanitize_for_log

logger = get_logger("search_service")

# Failures that cost a snippet its embedding but never the snippet write itself
_INDEXING_ERRORS = (GenerationError, DatabaseException, ValidationException)


class SearchOutcome(NamedTuple):
    results: List[SearchResult]
    semantic: bool


class SearchService:
    """Owns one model manager, one ranker and the persistence collaborators.

    Error policy:
    - snippet writes never fail because embedding generation failed;
    - semantic search without a model falls back to substring search;
    - explicit generation and regeneration without a model raise
      ``ModelNotLoadedError``.
    """

    def __init__(
        self,
        settings: AppSettings,
        store: SnippetStore,
        cache: EmbeddingCache,
        manager: Optional[ModelLifecycleManager] = None,
        ranker: Optional[SearchRanker] = None,
    ):
        self.settings = settings
        self.store = store
        self.cache = cache
        self.manager = manager or ModelLifecycleManager(settings.model)
        self.ranker = ranker or SearchRanker(min_score=settings.search.min_score)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "SearchService":
        database = Database(settings.database.path)
        cache = EmbeddingCache(database, settings.model.dimension)
        return cls(settings, SnippetStore(database), cache)

    # ------------------------------------------------------------------
    # Model
    # ------------------------------------------------------------------

    def load_model(self, model_name: Optional[str] = None) -> int:
        """Load the model and embed snippets that have no embedding record at all.

        Records left by another model version are not touched; they stay
        excluded from ranking until regenerate_embeddings runs.

        Returns:
            Number of snippets back-filled
        """
        generator = self.manager.load(model_name)
        embedded = {record.snippet_id for record in self.cache.get_all_records()}
        missing = [
            snippet
            for snippet in self.store.get_all()
            if snippet.id is not None and snippet.id not in embedded
        ]
        count = self._embed_all(generator, missing)
        if missing:
            logger.info(f"Back-filled {count} of {len(missing)} missing embeddings")
        return count

    def unload_model(self) -> None:
        self.manager.unload()

    def is_loaded(self) -> bool:
        return self.manager.is_loaded()

    def model_status(self) -> ModelInfo:
        return self.manager.status()

    def _require_generator(self) -> EmbeddingGenerator:
        generator = self.manager.get_generator()
        if generator is None:
            raise ModelNotLoadedError("Model not loaded. Please load the model first.")
        return generator

    # ------------------------------------------------------------------
    # Embeddings
    # ------------------------------------------------------------------

    def generate_embedding(self, text: str) -> ndarray:
        return self._require_generator().generate(text)

    def store_embedding(self, snippet_id: int, vector: ndarray) -> None:
        """Upsert a vector tagged with the active model version."""
        self.cache.put(snippet_id, vector, self._require_generator().model_version)

    def get_embedding(self, snippet_id: int) -> Optional[ndarray]:
        return self.cache.get(snippet_id)

    def get_all_embeddings(self):
        return self.cache.get_all()

    def index_snippet(self, snippet: Snippet) -> bool:
        """Embed one snippet if a model is loaded. Failures are logged, not raised."""
        generator = self.manager.get_generator()
        if generator is None or snippet.id is None:
            return False
        try:
            text = snippet.embedding_text(self.settings.model.max_text_chars)
            vector = generator.generate(text)
            self.cache.put(snippet.id, vector, generator.model_version)
            return True
        except _INDEXING_ERRORS as e:
            logger.warning(
                "Failed to generate embedding for snippet %s: %s",
                snippet.id,
                sanitize_for_log(e.message),
            )
            return False

    def regenerate_embeddings(self, snippets: Optional[Sequence[Snippet]] = None) -> int:
        """Recompute embeddings for all (or the given) snippets.

        Raises:
            ModelNotLoadedError: no model is loaded

        Returns:
            Number of snippets embedded successfully
        """
        generator = self._require_generator()
        targets = list(snippets) if snippets is not None else self.store.get_all()
        count = self._embed_all(generator, targets)
        logger.info(f"Regenerated {count} of {len(targets)} embeddings")
        return count

    def _embed_all(self, generator: EmbeddingGenerator, snippets: Sequence[Snippet]) -> int:
        count = 0
        for snippet in snippets:
            if snippet.id is None:
                continue
            try:
                text = snippet.embedding_text(self.settings.model.max_text_chars)
                self.cache.put(snippet.id, generator.generate(text), generator.model_version)
                count += 1
            except _INDEXING_ERRORS as e:
                logger.warning(
                    "Skipping snippet %s: %s", snippet.id, sanitize_for_log(e.message)
                )
        return count

    # ------------------------------------------------------------------
    # Snippets
    # ------------------------------------------------------------------

    def create_snippet(self, snippet: Snippet) -> Snippet:
        created = self.store.create(snippet)
        self.index_snippet(created)
        return created

    def update_snippet(self, snippet_id: int, snippet: Snippet) -> Snippet:
        updated = self.store.update(snippet_id, snippet)
        self.index_snippet(updated)
        return updated

    def delete_snippet(self, snippet_id: int) -> None:
        self.store.delete(snippet_id)

    def get_snippet(self, snippet_id: int) -> Optional[Snippet]:
        return self.store.get(snippet_id)

    def get_all_snippets(self) -> List[Snippet]:
        return self.store.get_all()

    def text_search(self, query: str) -> List[Snippet]:
        return self.store.search(query)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str) -> SearchOutcome:
        """Rank snippets by meaning, or by substring match when no model is loaded.

        ``semantic`` tells which of the two paths produced the results; it is
        decided from the same generator lookup that picks the path.
        """
        generator = self.manager.get_generator()
        if generator is None:
            logger.info("No model loaded; falling back to substring search")
            results = [
                SearchResult(snippet=snippet, score=1.0)
                for snippet in self.store.search(query)
            ]
            return SearchOutcome(results=results, semantic=False)
        results = self.ranker.semantic_search(
            query,
            self.store.get_all(),
            self.cache.get_all_records(),
            generator,
        )
        return SearchOutcome(results=results, semantic=True)

    def semantic_search(self, query: str) -> List[SearchResult]:
        return self.search(query).results
