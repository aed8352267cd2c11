# =============================================================================
# File: conftest.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import logging
import os
import shutil
import sys
import tempfile
import threading
import time
import types

os.environ.setdefault("SNIPVAULT_LOG_PATH", os.path.join(tempfile.gettempdir(), "snipvault-test-logs"))

from snipvault.config.appsettings import AppSettings, ModelConfig  # noqa: E402

# Provide a lightweight `snipvault.app_init` shim at import time so importing
# the FastAPI app does not read appsettings.json or open the real database.
# Tests that exercise the HTTP layer override `get_search_service`.
if "snipvault.app_init" not in sys.modules:
    shim = types.ModuleType("snipvault.app_init")
    shim.APP_SETTINGS = AppSettings(
        model=ModelConfig(models_root=os.path.join(tempfile.gettempdir(), "snipvault-models"))
    )

    def _unconfigured_service():
        raise RuntimeError("get_search_service must be overridden in tests")

    shim.get_search_service = _unconfigured_service
    sys.modules["snipvault.app_init"] = shim

import numpy as np  # noqa: E402
import pytest  # noqa: E402
from huggingface_hub.errors import LocalEntryNotFoundError  # noqa: E402

from snipvault.services.database import Database  # noqa: E402
from snipvault.services.embedding_cache import EmbeddingCache  # noqa: E402
from snipvault.services.search_service import SearchService  # noqa: E402
from snipvault.services.snippet_store import SnippetStore  # noqa: E402

HIDDEN_DIM = 384

VOCAB_WORDS = (
    "binary search algorithm implementation recipe for chocolate cake sorting "
    "efficiency quick sort merge list python function return print hello world "
    "apple pie bake oven fast slow code snippet array tree graph"
).split()


@pytest.fixture(autouse=True, scope="session")
def silence_noisy_loggers():
    """Raise log level for chatty module loggers during tests."""
    noisy_loggers = ["config_loader", "database", "model_manager", "embedder.session"]
    previous_levels = {}
    for name in noisy_loggers:
        logger = logging.getLogger(name)
        previous_levels[name] = logger.level
        logger.setLevel(logging.ERROR)

    yield

    for name, level in previous_levels.items():
        logging.getLogger(name).setLevel(level)


class _Node:
    def __init__(self, name):
        self.name = name


class FakeOrtSession:
    """Stand-in for onnxruntime.InferenceSession.

    Each token's hidden state is a one-hot vector at ``token_id % 384``, so
    mean pooling yields a bag-of-words embedding: texts sharing words are
    similar, texts without shared words are orthogonal.
    """

    input_names = ("input_ids", "attention_mask", "token_type_ids")
    last_feeds = None

    def __init__(self, model_path, *args, **kwargs):
        self.model_path = model_path

    def get_inputs(self):
        return [_Node(name) for name in self.input_names]

    def get_outputs(self):
        return [_Node("last_hidden_state"), _Node("pooler_output")]

    def run(self, output_names, feeds):
        FakeOrtSession.last_feeds = feeds
        ids = feeds["input_ids"]
        hidden = np.zeros((ids.shape[0], ids.shape[1], HIDDEN_DIM), dtype=np.float32)
        for batch in range(ids.shape[0]):
            hidden[batch, np.arange(ids.shape[1]), ids[batch] % HIDDEN_DIM] = 1.0
        return [hidden]


@pytest.fixture(autouse=True)
def _patch_onnxruntime(monkeypatch):
    """Patch onnxruntime.InferenceSession with the bag-of-words fake."""
    import onnxruntime as _ort

    monkeypatch.setattr(_ort, "InferenceSession", FakeOrtSession)
    yield


def write_tokenizer_file(path, words=VOCAB_WORDS):
    """Write a lowercase word-level tokenizer.json covering ``words``."""
    from tokenizers import Tokenizer, models, normalizers, pre_tokenizers

    vocab = {"[UNK]": 0}
    for word in words:
        vocab.setdefault(word, len(vocab))
    tokenizer = Tokenizer(models.WordLevel(vocab=vocab, unk_token="[UNK]"))
    tokenizer.normalizer = normalizers.Lowercase()
    tokenizer.pre_tokenizer = pre_tokenizers.Whitespace()
    tokenizer.save(str(path))
    return str(path)


def install_model(models_root, name, tokenizer_source=None):
    """Place model.onnx and tokenizer.json for ``name`` under models_root."""
    model_dir = os.path.join(str(models_root), name)
    os.makedirs(model_dir, exist_ok=True)
    with open(os.path.join(model_dir, "model.onnx"), "wb") as f:
        f.write(b"onnx-weights")
    tokenizer_path = os.path.join(model_dir, "tokenizer.json")
    if tokenizer_source:
        with open(tokenizer_source, "rb") as src, open(tokenizer_path, "wb") as dst:
            dst.write(src.read())
    else:
        write_tokenizer_file(tokenizer_path)
    return model_dir


class FakeHub:
    """In-process model hub serving files from ``root/<repo_id>/<filename>``."""

    def __init__(self, root):
        self.root = root
        self.calls = []
        self.delay = 0.0
        self._lock = threading.Lock()

    def publish(self, name, weights=b"onnx-weights" * 100):
        repo_dir = self.root / "sentence-transformers" / name
        (repo_dir / "onnx").mkdir(parents=True, exist_ok=True)
        (repo_dir / "onnx" / "model.onnx").write_bytes(weights)
        write_tokenizer_file(repo_dir / "tokenizer.json")
        return repo_dir

    def hf_hub_download(self, repo_id, filename, revision=None, local_dir=None, **kwargs):
        with self._lock:
            self.calls.append((repo_id, filename, revision, kwargs.get("endpoint")))
        if self.delay:
            time.sleep(self.delay)
        source = self.root / repo_id / filename
        if not source.is_file():
            raise LocalEntryNotFoundError(f"{filename} not found in {repo_id}")
        target = os.path.join(local_dir, filename)
        os.makedirs(os.path.dirname(target), exist_ok=True)
        shutil.copyfile(source, target)
        return target


@pytest.fixture(autouse=True)
def fake_hub(monkeypatch, tmp_path):
    """Route model downloads to a hub rooted in the test's tmp_path."""
    hub = FakeHub(tmp_path / "hub")
    monkeypatch.setattr(
        "snipvault.services.model_manager.hf_hub_download", hub.hf_hub_download
    )
    return hub


@pytest.fixture
def fake_ort_session():
    """The fake class installed in place of onnxruntime.InferenceSession."""
    return FakeOrtSession


@pytest.fixture
def model_installer(models_root):
    """Callable placing artifacts for a model name under models_root."""

    def _install(name, tokenizer_source=None):
        return install_model(models_root, name, tokenizer_source)

    return _install


@pytest.fixture
def tokenizer_file(tmp_path):
    return write_tokenizer_file(tmp_path / "tokenizer.json")


@pytest.fixture
def models_root(tmp_path):
    root = tmp_path / "models"
    root.mkdir()
    return root


@pytest.fixture
def app_settings(models_root):
    return AppSettings(
        model=ModelConfig(
            name="test-model",
            models_root=str(models_root),
        )
    )


@pytest.fixture
def service(app_settings):
    database = Database(":memory:")
    svc = SearchService(app_settings, SnippetStore(database), EmbeddingCache(database))
    yield svc
    database.close()


@pytest.fixture
def loaded_service(service, models_root):
    install_model(models_root, "test-model")
    service.load_model()
    return service
