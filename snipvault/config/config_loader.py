# =============================================================================
# File: config_loader.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import json
import os
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from snipvault.config.appsettings import AppSettings
from snipvault.exceptions import InvalidConfigError, MissingConfigError
from snipvault.logger import get_logger
from snipvault.utils.log_sanitizer import sanitize_for_log

logger = get_logger("config_loader")


class ConfigLoader:
    __appsettings: Optional[AppSettings] = None

    @staticmethod
    def get_app_settings(config_dir: Optional[str] = None) -> AppSettings:
        """
        Loads AppSettings from appsettings.json and the environment-specific override
        in the same folder, then applies environment variable overrides.
        Performs a deep merge for nested config sections.
        """
        data = ConfigLoader._load_config_data("appsettings.json", True, config_dir)
        try:
            settings = AppSettings(**data)
        except ValidationError as e:
            logger.error("Invalid application settings: %s", sanitize_for_log(str(e)))
            raise InvalidConfigError(f"Application settings are invalid: {e}")

        settings.model.models_root = os.getenv(
            "SNIPVAULT_MODELS_ROOT", settings.model.models_root
        )
        if not settings.model.models_root:
            settings.model.models_root = ConfigLoader.default_models_root()
        settings.model.name = os.getenv("SNIPVAULT_MODEL_NAME", settings.model.name)
        settings.model.repo_id = os.getenv("SNIPVAULT_MODEL_REPO", settings.model.repo_id)
        settings.model.endpoint = os.getenv(
            "SNIPVAULT_MODEL_ENDPOINT", settings.model.endpoint
        )
        settings.model.session_provider = os.getenv(
            "SNIPVAULT_SESSION_PROVIDER", settings.model.session_provider
        )
        settings.model.max_text_chars = ConfigLoader._env_value(
            "SNIPVAULT_MAX_TEXT_CHARS", settings.model.max_text_chars, int
        )
        settings.search.min_score = ConfigLoader._env_value(
            "SNIPVAULT_MIN_SCORE", settings.search.min_score, float
        )
        settings.database.path = os.getenv("SNIPVAULT_DB_PATH", settings.database.path)
        settings.server.port = ConfigLoader._env_value(
            "SERVER_PORT", settings.server.port, int
        )
        settings.server.host = os.getenv("SERVER_HOST", settings.server.host)
        settings.app.debug = (
            os.getenv("APP_DEBUG_MODE", "1" if settings.app.debug else "0") == "1"
        )
        settings.logging.folder = os.getenv("SNIPVAULT_LOG_PATH", settings.logging.folder)

        if settings.model.max_text_chars <= 0:
            raise InvalidConfigError("model.max_text_chars must be positive")
        if not -1.0 <= settings.search.min_score <= 1.0:
            raise InvalidConfigError("search.min_score must lie in [-1, 1]")

        ConfigLoader._validate_paths(settings)
        ConfigLoader.__appsettings = settings
        return settings

    @staticmethod
    def default_models_root() -> str:
        """Per-user model cache directory used when none is configured."""
        base = os.getenv("XDG_DATA_HOME") or os.path.join(
            os.path.expanduser("~"), ".local", "share"
        )
        return os.path.join(base, "snippet-vault", "models")

    @staticmethod
    def _env_value(name: str, current: Any, cast: Callable[[str], Any]) -> Any:
        raw = os.getenv(name)
        if raw is None:
            return current
        try:
            return cast(raw)
        except ValueError:
            logger.error(
                "Invalid value for %s: %s", name, sanitize_for_log(raw)
            )
            raise InvalidConfigError(f"Environment variable {name} has invalid value")

    @staticmethod
    def _validate_paths(settings: AppSettings) -> None:
        """Create the database directory if needed."""
        db_dir = os.path.dirname(os.path.abspath(settings.database.path))
        if db_dir and not os.path.exists(db_dir):
            try:
                os.makedirs(db_dir, exist_ok=True)
                logger.info(f"Created database directory: {db_dir}")
            except OSError as e:
                logger.error(
                    "Failed to create database directory %s: %s",
                    sanitize_for_log(db_dir),
                    sanitize_for_log(str(e)),
                )
                raise InvalidConfigError(f"Cannot create database directory: {e}")

    @staticmethod
    def _load_config_data(
        config_file_name: str,
        check_env_file: bool = False,
        config_dir: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Loads a config file and merges with environment-specific override if present.
        Performs a deep merge for nested config sections.
        """
        base_dir = config_dir or os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, config_file_name)

        logger.debug(f"Loading config from {config_file_name}")

        def deep_update(d, u):
            for k, v in u.items():
                if isinstance(v, dict) and isinstance(d.get(k), dict):
                    deep_update(d[k], v)
                else:
                    d[k] = v

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise MissingConfigError(f"Config file not found: {config_path}")
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(
                "Invalid config format in %s: %s",
                sanitize_for_log(config_file_name),
                sanitize_for_log(str(e)),
            )
            raise InvalidConfigError(f"Config file format error: {e}")

        if check_env_file:
            env = os.getenv("SNIPVAULT_ENV", "Production")
            name, ext = os.path.splitext(config_file_name)
            env_file = f"{name}.{env.lower()}{ext}"
            env_path = os.path.join(base_dir, env_file)
            logger.debug(f"Loading config from {env_file}")
            try:
                with open(env_path, "r", encoding="utf-8") as f:
                    env_data = json.load(f)
                deep_update(data, env_data)
            except FileNotFoundError:
                logger.debug(
                    f"Environment-specific config file not found: {env_file}. Using base config."
                )
            except (json.JSONDecodeError, ValueError) as e:
                logger.error(
                    "Invalid environment config format in %s: %s",
                    sanitize_for_log(env_file),
                    sanitize_for_log(str(e)),
                )
                raise InvalidConfigError(f"Environment config format error: {e}")

        return data

    @staticmethod
    def get_cached_settings() -> Optional[AppSettings]:
        """Settings from the last successful get_app_settings call."""
        return ConfigLoader.__appsettings

    @staticmethod
    def clear_cache() -> None:
        ConfigLoader.__appsettings = None
        logger.info("Configuration cache cleared")
