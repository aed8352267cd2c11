# =============================================================================
# File: exceptions.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Custom exceptions for the snippet vault search engine."""
from typing import Optional


class SnipVaultBaseException(Exception):
    """Base exception for all snippet vault errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        super().__init__(self.message)


class ModelException(SnipVaultBaseException):
    """Exceptions related to model artifacts, loading and inference."""

    pass


class ModelLoadError(ModelException):
    """Model or vocabulary artifact missing or unparsable at load time."""

    pass


class DownloadError(ModelException):
    """Network or partial-transfer failure while fetching model artifacts."""

    pass


class GenerationError(ModelException):
    """Embedding generation failed."""

    pass


class TokenizationError(GenerationError):
    """Malformed text or vocabulary artifact."""

    pass


class InferenceError(GenerationError):
    """Model forward pass failed."""

    pass


class ModelNotLoadedError(GenerationError):
    """No embedding model is loaded."""

    pass


class ConfigurationException(SnipVaultBaseException):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationException):
    """Invalid configuration parameters."""

    pass


class MissingConfigError(ConfigurationException):
    """Required configuration missing."""

    pass


class ValidationException(SnipVaultBaseException):
    """Input validation errors."""

    pass


class InvalidInputError(ValidationException):
    """Invalid input parameters."""

    pass


class DatabaseException(SnipVaultBaseException):
    """Database-related errors."""

    pass


class DatabaseConnectionError(DatabaseException):
    """Database connection failed."""

    pass


class DatabaseCorruptionError(DatabaseException):
    """Stored data could not be decoded."""

    pass


class DatabaseWriteError(DatabaseException):
    """A write to the database failed."""

    pass


class SnippetNotFoundError(DatabaseException):
    """Snippet does not exist."""

    pass
