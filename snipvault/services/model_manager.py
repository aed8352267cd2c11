# =============================================================================
# File: model_manager.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Model lifecycle: artifact download, load, unload and readiness state."""

import os
import shutil
import tempfile
import threading
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from huggingface_hub import hf_hub_download
from huggingface_hub.errors import (
    EntryNotFoundError,
    HfHubHTTPError,
    LocalEntryNotFoundError,
)

from snipvault.config.appsettings import ModelConfig
from snipvault.exceptions import (
    DownloadError,
    ModelException,
    ModelLoadError,
    TokenizationError,
)
from snipvault.logger import get_logger
from snipvault.models.model_info import ModelInfo
from snipvault.modules.concurrent_dict import ConcurrentDict
from snipvault.services.embedder.generator import EmbeddingGenerator
from snipvault.services.embedder.session import InferenceSession
from snipvault.services.embedder.tokenizer import TokenizerAdapter
from snipvault.utils.log_sanitizer import sanitize_for_log

logger = get_logger("model_manager")


class ModelState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


class ModelArtifacts(NamedTuple):
    model_dir: str
    weights_path: str
    tokenizer_path: str


class ModelLifecycleManager:
    """Single authority over which embedding model is active.

    ``get_generator`` hands out a generator only in the LOADED state; while a
    load is in progress callers get ``None`` and are expected to degrade.
    Downloads are collapsed per model directory so concurrent callers share
    one transfer.
    """

    def __init__(self, settings: ModelConfig):
        if not settings.models_root:
            raise ModelLoadError("Model root directory is not configured")
        self.settings = settings
        self._state = ModelState.UNLOADED
        self._generator: Optional[EmbeddingGenerator] = None
        self._model_version: Optional[str] = None
        self._state_lock = threading.RLock()
        self._load_lock = threading.Lock()
        self._artifact_locks = ConcurrentDict()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ModelState:
        with self._state_lock:
            return self._state

    @property
    def model_version(self) -> Optional[str]:
        """Version tag of the loaded model, None unless LOADED."""
        with self._state_lock:
            return self._model_version if self._state == ModelState.LOADED else None

    def is_loaded(self) -> bool:
        return self.state == ModelState.LOADED

    def get_generator(self) -> Optional[EmbeddingGenerator]:
        with self._state_lock:
            if self._state != ModelState.LOADED:
                return None
            return self._generator

    # ------------------------------------------------------------------
    # Artifacts
    # ------------------------------------------------------------------

    def artifact_paths(self, model_name: Optional[str] = None) -> ModelArtifacts:
        name = model_name or self.settings.name
        if not name or os.sep in name or name in (".", ".."):
            raise ModelLoadError(f"Invalid model name: {name!r}")
        model_dir = os.path.join(self.settings.models_root, name)
        return ModelArtifacts(
            model_dir=model_dir,
            weights_path=os.path.join(model_dir, self.settings.weights_file),
            tokenizer_path=os.path.join(model_dir, self.settings.tokenizer_file),
        )

    def artifacts_present(self, model_name: Optional[str] = None) -> bool:
        artifacts = self.artifact_paths(model_name)
        return os.path.isfile(artifacts.weights_path) and os.path.isfile(
            artifacts.tokenizer_path
        )

    def ensure_artifacts(self, model_name: Optional[str] = None) -> ModelArtifacts:
        """Make sure weights and vocabulary exist locally, downloading if needed.

        Missing files are fetched from the model hub into a scratch directory
        beside their final location and renamed into place only after every
        transfer succeeded.

        Raises:
            DownloadError: a transfer failed; nothing is renamed into place
        """
        name = model_name or self.settings.name
        artifacts = self.artifact_paths(name)
        if self.artifacts_present(name):
            return artifacts

        lock = self._artifact_locks.get_or_add(artifacts.model_dir, threading.Lock)
        with lock:
            # Another caller may have finished the transfer while we waited
            if self.artifacts_present(name):
                return artifacts

            try:
                os.makedirs(artifacts.model_dir, exist_ok=True)
                scratch_dir = tempfile.mkdtemp(prefix=".download-", dir=artifacts.model_dir)
            except OSError as e:
                raise DownloadError(f"Cannot create model directory: {e}")

            repo_id = self.settings.repo_id.format(model_name=name)
            pending: List[Tuple[str, str]] = []
            if not os.path.isfile(artifacts.weights_path):
                pending.append((self.settings.remote_weights_path, artifacts.weights_path))
            if not os.path.isfile(artifacts.tokenizer_path):
                pending.append(
                    (self.settings.remote_tokenizer_path, artifacts.tokenizer_path)
                )

            try:
                fetched = [
                    (self._download_file(repo_id, remote_path, scratch_dir), destination)
                    for remote_path, destination in pending
                ]
                for scratch_path, destination in fetched:
                    os.replace(scratch_path, destination)
            except OSError as e:
                raise DownloadError(f"Cannot move downloaded artifact into place: {e}")
            finally:
                shutil.rmtree(scratch_dir, ignore_errors=True)

        logger.info(f"Model artifacts ready in {artifacts.model_dir}")
        return artifacts

    def _download_file(self, repo_id: str, filename: str, scratch_dir: str) -> str:
        """Fetch one file of ``repo_id`` into ``scratch_dir``; return its local path."""
        logger.info(
            "Downloading %s from %s", sanitize_for_log(filename), sanitize_for_log(repo_id)
        )
        try:
            path = hf_hub_download(
                repo_id=repo_id,
                filename=filename,
                revision=self.settings.revision,
                local_dir=scratch_dir,
                endpoint=self.settings.endpoint,
                etag_timeout=self.settings.download_timeout,
            )
        except (HfHubHTTPError, EntryNotFoundError, LocalEntryNotFoundError) as e:
            logger.error(
                "Download of %s failed: %s",
                sanitize_for_log(filename),
                sanitize_for_log(str(e)),
            )
            raise DownloadError(f"Download of {filename} from {repo_id} failed: {e}")
        except (OSError, ValueError) as e:
            raise DownloadError(f"Download of {filename} from {repo_id} failed: {e}")

        if not os.path.isfile(path) or os.path.getsize(path) == 0:
            raise DownloadError(f"Empty download of {filename} from {repo_id}")
        logger.info(f"Downloaded {os.path.getsize(path)} bytes for {filename}")
        return path

    # ------------------------------------------------------------------
    # Load / unload
    # ------------------------------------------------------------------

    def load(self, model_name: Optional[str] = None) -> EmbeddingGenerator:
        """Download if needed, build a generator and make it the active one.

        Raises:
            DownloadError: artifacts could not be fetched
            ModelLoadError: artifacts could not be parsed
        """
        name = model_name or self.settings.name
        with self._load_lock:
            with self._state_lock:
                self._state = ModelState.LOADING
            logger.info("Loading model %s", sanitize_for_log(name))

            try:
                artifacts = self.ensure_artifacts(name)
                generator = self._build_generator(name, artifacts)
            except ModelException:
                self._reset_after_failure(name)
                raise
            except Exception as e:
                self._reset_after_failure(name)
                raise ModelLoadError(f"Unexpected failure loading model {name}: {e}")

            self._swap_generator(generator, name)
            logger.info("Model %s loaded", sanitize_for_log(name))
            return generator

    def _build_generator(self, name: str, artifacts: ModelArtifacts) -> EmbeddingGenerator:
        try:
            tokenizer = TokenizerAdapter(
                artifacts.tokenizer_path,
                max_tokens=self.settings.max_tokens,
                add_special_tokens=self.settings.add_special_tokens,
            )
        except TokenizationError as e:
            raise ModelLoadError(f"Vocabulary for {name} is unusable: {e.message}")
        session = InferenceSession(artifacts.weights_path, self.settings.session_provider)
        return EmbeddingGenerator(
            tokenizer,
            session,
            model_version=name,
            dimension=self.settings.dimension,
            max_text_chars=self.settings.max_text_chars,
        )

    def _swap_generator(
        self, generator: Optional[EmbeddingGenerator], model_version: Optional[str]
    ) -> None:
        """Replace the active generator once no call is running on the old one."""
        with self._state_lock:
            previous = self._generator
            if previous is not None:
                with previous.inference_lock:
                    self._generator = generator
            else:
                self._generator = generator
            self._model_version = model_version
            self._state = ModelState.LOADED if generator else ModelState.UNLOADED

    def _reset_after_failure(self, name: str) -> None:
        logger.error("Loading model %s failed; model is unloaded", sanitize_for_log(name))
        self._swap_generator(None, None)

    def unload(self) -> None:
        with self._load_lock:
            self._swap_generator(None, None)
        logger.info("Model unloaded")

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def status(self, model_name: Optional[str] = None) -> ModelInfo:
        name = model_name or self.settings.name
        artifacts = self.artifact_paths(name)
        downloaded = self.artifacts_present(name)
        state = self.state
        loaded_version = self.model_version
        return ModelInfo(
            name=name,
            path=artifacts.weights_path if downloaded else None,
            size=os.path.getsize(artifacts.weights_path) if downloaded else None,
            downloaded=downloaded,
            loaded=loaded_version == name,
            state=state.value,
            model_version=loaded_version,
        )
