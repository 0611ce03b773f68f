"""
Core Module Package.

This package contains the core infrastructure components
that all other packages depend on.

Components:
- constants: Canonical include contract and storage keys
- exceptions: Custom exception hierarchy
- config: ShellConfig (env / .env / YAML)
- logging_setup: Root logger configuration
- storage: String key/value storage with change listeners
"""

from .constants import CANONICAL_RESOURCES, OPTIONAL_RESOURCES
from .exceptions import ShellException
from .config import ShellConfig
from .storage import JsonFileStorage, MemoryStorage

__all__ = [
    "CANONICAL_RESOURCES",
    "OPTIONAL_RESOURCES",
    "ShellException",
    "ShellConfig",
    "JsonFileStorage",
    "MemoryStorage",
]
