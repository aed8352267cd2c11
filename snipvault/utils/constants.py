"""Project-wide constants for the embedding pipeline.

Keep this module minimal and import-safe to avoid circular imports.
"""

# Hidden dimension of all-MiniLM-L6-v2, the only supported model family
EMBEDDING_DIM: int = 384

# Bytes per stored float (little-endian float32)
FLOAT_BYTES: int = 4

# Characters of derived text kept before tokenization
DEFAULT_MAX_TEXT_CHARS: int = 2000

# Token positions supported by BERT-style encoders
DEFAULT_MAX_TOKENS: int = 512

# Relevance floor for semantic search results (exclusive)
DEFAULT_MIN_SCORE: float = 0.3

DEFAULT_MODEL_NAME: str = "all-MiniLM-L6-v2"

# Hugging Face repository holding the ONNX export and tokenizer.json
DEFAULT_REPO_ID: str = "sentence-transformers/{model_name}"
