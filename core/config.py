"""
Core Module - Configuration.

============================================================
CONFIGURABLE SHELL SETTINGS
============================================================

Configuration can be loaded from:
- Default values
- Environment variables (a local .env file is honoured)
- YAML config file

Environment variables:
- SHELL_CORPUS_ROOT
- SHELL_EXCLUDED_DIR
- SHELL_HEADER_MARKER
- SHELL_REGISTRATION_TIMEOUT
- SHELL_LOG_LEVEL
- SHELL_LOG_FORMAT
- SHELL_STORAGE_PATH

============================================================
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .constants import (
    DEFAULT_REGISTRATION_TIMEOUT_SECONDS,
    EXCLUDED_DIR,
    HEADER_MARKER,
)
from .exceptions import InvalidConfigError


logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("json", "text")


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Get one YAML section; an empty section reads as {}."""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfigError(name, type(section).__name__, "section must be a mapping")
    return section


@dataclass
class ShellConfig:
    """
    Main configuration for the survey shell tooling.

    Combines include-check, bootstrap and logging settings.
    """
    # Include check
    corpus_root: Path = field(default_factory=Path.cwd)
    excluded_dir: str = EXCLUDED_DIR
    header_marker: str = HEADER_MARKER

    # Bootstrap
    registration_timeout_seconds: float = DEFAULT_REGISTRATION_TIMEOUT_SECONDS

    # Storage
    storage_path: Optional[Path] = None

    # Logging
    log_level: str = "WARNING"
    log_format: str = "text"

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of error messages (empty when valid)
        """
        errors = []
        if self.registration_timeout_seconds <= 0:
            errors.append("registration_timeout_seconds must be > 0")
        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        if self.log_format not in _LOG_FORMATS:
            errors.append(f"log_format must be one of {', '.join(_LOG_FORMATS)}")
        if not self.excluded_dir:
            errors.append("excluded_dir must not be empty")
        if not self.header_marker:
            errors.append("header_marker must not be empty")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "corpus_root": str(self.corpus_root),
            "excluded_dir": self.excluded_dir,
            "header_marker": self.header_marker,
            "registration_timeout_seconds": self.registration_timeout_seconds,
            "storage_path": str(self.storage_path) if self.storage_path else None,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "ShellConfig":
        """
        Load configuration from environment variables.

        A .env file (or env_file when given) is loaded first; variables
        already present in the process environment win.
        """
        load_dotenv(dotenv_path=env_file, override=False)
        config = cls()

        if os.getenv("SHELL_CORPUS_ROOT"):
            config.corpus_root = Path(os.getenv("SHELL_CORPUS_ROOT"))
        if os.getenv("SHELL_EXCLUDED_DIR"):
            config.excluded_dir = os.getenv("SHELL_EXCLUDED_DIR")
        if os.getenv("SHELL_HEADER_MARKER"):
            config.header_marker = os.getenv("SHELL_HEADER_MARKER")
        if os.getenv("SHELL_REGISTRATION_TIMEOUT"):
            raw = os.getenv("SHELL_REGISTRATION_TIMEOUT")
            try:
                config.registration_timeout_seconds = float(raw)
            except ValueError:
                raise InvalidConfigError("SHELL_REGISTRATION_TIMEOUT", raw, "not a number")
        if os.getenv("SHELL_STORAGE_PATH"):
            config.storage_path = Path(os.getenv("SHELL_STORAGE_PATH"))
        if os.getenv("SHELL_LOG_LEVEL"):
            config.log_level = os.getenv("SHELL_LOG_LEVEL").upper()
        if os.getenv("SHELL_LOG_FORMAT"):
            config.log_format = os.getenv("SHELL_LOG_FORMAT").lower()

        config._raise_if_invalid()
        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "ShellConfig":
        """
        Load configuration from a YAML file.

        Raises:
            InvalidConfigError: If the file is not valid YAML or a value has the wrong shape
        """
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise InvalidConfigError(str(path), None, f"not valid YAML: {e}")

        if not isinstance(data, dict):
            raise InvalidConfigError(str(path), type(data).__name__, "top level must be a mapping")

        config = cls()

        include = _section(data, "include_check")
        if "corpus_root" in include:
            config.corpus_root = Path(include["corpus_root"])
        if "excluded_dir" in include:
            config.excluded_dir = str(include["excluded_dir"])
        if "header_marker" in include:
            config.header_marker = str(include["header_marker"])

        bootstrap = _section(data, "bootstrap")
        if "registration_timeout_seconds" in bootstrap:
            raw = bootstrap["registration_timeout_seconds"]
            try:
                config.registration_timeout_seconds = float(raw)
            except (TypeError, ValueError):
                raise InvalidConfigError("bootstrap.registration_timeout_seconds", raw, "not a number")

        storage = _section(data, "storage")
        if storage.get("path"):
            config.storage_path = Path(storage["path"])

        log_cfg = _section(data, "logging")
        if "level" in log_cfg:
            config.log_level = str(log_cfg["level"]).upper()
        if "format" in log_cfg:
            config.log_format = str(log_cfg["format"]).lower()

        config._raise_if_invalid()
        logger.debug(f"Loaded shell configuration from {path}")
        return config

    def _raise_if_invalid(self) -> None:
        errors = self.validate()
        if errors:
            raise InvalidConfigError("shell_config", self.to_dict(), "; ".join(errors))


__all__ = ["ShellConfig"]
