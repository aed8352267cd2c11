from typing import Optional

from pydantic import BaseModel, Field

from snipvault.utils.constants import (
    DEFAULT_MAX_TEXT_CHARS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MIN_SCORE,
    DEFAULT_MODEL_NAME,
    DEFAULT_REPO_ID,
    EMBEDDING_DIM,
)


class AppConfig(BaseModel):
    name: str = Field(default="Snippet Vault")
    description: str = Field(default="Offline semantic search for snippets")
    version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=5011)


class ModelConfig(BaseModel):
    name: str = Field(default=DEFAULT_MODEL_NAME)
    models_root: Optional[str] = None
    repo_id: str = Field(default=DEFAULT_REPO_ID)
    revision: str = Field(default="main")
    endpoint: Optional[str] = None
    weights_file: str = Field(default="model.onnx")
    remote_weights_path: str = Field(default="onnx/model.onnx")
    tokenizer_file: str = Field(default="tokenizer.json")
    remote_tokenizer_path: str = Field(default="tokenizer.json")
    dimension: int = Field(default=EMBEDDING_DIM)
    max_text_chars: int = Field(default=DEFAULT_MAX_TEXT_CHARS, gt=0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    add_special_tokens: bool = Field(default=False)
    session_provider: str = Field(default="CPUExecutionProvider")
    download_timeout: float = Field(default=60.0, gt=0)


class SearchConfig(BaseModel):
    min_score: float = Field(default=DEFAULT_MIN_SCORE, ge=-1.0, le=1.0)


class DatabaseConfig(BaseModel):
    path: str = Field(default="data/snippets.db")


class LoggingConfig(BaseModel):
    folder: str = Field(default="logs")
    app_log_file: str = Field(default="snipvault.log")


class AppSettings(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
