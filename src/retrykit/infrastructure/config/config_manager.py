"""Configuration manager for loading and validating .retrykit.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from retrykit.domain.classifier import ErrorClassifier
from retrykit.domain.config import AppConfig, ClassifierConfig, RetryPolicy
from retrykit.domain.config.classifier import DEFAULT_MESSAGE_KEYWORDS
from retrykit.domain.config.retry import DEFAULT_RETRYABLE_ERROR_CODES
from retrykit.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".retrykit.yml"

# Environment variable -> retry policy field
ENV_OVERRIDES = {
    "RETRYKIT_MAX_ATTEMPTS": "max_attempts",
    "RETRYKIT_BASE_DELAY": "base_delay",
    "RETRYKIT_MAX_DELAY": "max_delay",
    "RETRYKIT_BACKOFF_MULTIPLIER": "backoff_multiplier",
    "RETRYKIT_JITTER": "jitter",
}


class ConfigManager:
    """Manages configuration from .retrykit.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values (DEFAULT_CONFIG)
    2. .retrykit.yml file (searched from current directory)
    3. Environment variables (RETRYKIT_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "retry": {
            "max_attempts": 3,
            "base_delay": 100,
            "max_delay": 5000,
            "backoff_multiplier": 2,
            "jitter": True,
            "retryable_error_codes": sorted(DEFAULT_RETRYABLE_ERROR_CODES),
        },
        "classifier": {
            "message_keywords": list(DEFAULT_MESSAGE_KEYWORDS),
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .retrykit.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            raise ConfigurationError.from_validation_error(e) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .retrykit.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ValidationError: If configuration is invalid
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
                if not isinstance(file_config, dict):
                    raise ConfigurationError(f"{self.config_path} must contain a mapping at top level")
                config_dict = self._merge_config(config_dict, file_config)
                logger.info(f"Loaded configuration from {self.config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")

        config_dict = self._apply_env_overrides(config_dict)
        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply RETRYKIT_* environment variable overrides"""
        retry = config.setdefault("retry", {})
        for env_name, field_name in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                retry[field_name] = value

        codes = os.getenv("RETRYKIT_RETRYABLE_ERROR_CODES")
        if codes:
            retry["retryable_error_codes"] = [c.strip() for c in codes.split(",") if c.strip()]
        return config

    def get_retry_policy(self) -> RetryPolicy:
        """Get retry policy

        Returns:
            Retry policy model
        """
        return self.config.retry

    def get_classifier_config(self) -> ClassifierConfig:
        """Get classifier configuration

        Returns:
            Classifier configuration model
        """
        return self.config.classifier

    def build_classifier(self) -> ErrorClassifier:
        """Create an error classifier from the loaded configuration"""
        return ErrorClassifier(
            message_keywords=self.config.classifier.message_keywords,
            retryable_error_codes=self.config.retry.retryable_error_codes,
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "retry.max_attempts" or "retry")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
