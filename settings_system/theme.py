"""
Settings System - Theme Manager.

============================================================
RESPONSIBILITY
============================================================
Tracks the selected background theme.

- Two themes: warm, ocean (default ocean)
- Persisted under its own storage key
- Migrates the legacy value "sky" and the legacy key

============================================================
"""

import logging
from typing import Any, Dict, List

from core.constants import LEGACY_THEME_KEY, THEME_KEY
from core.storage import KeyValueStorage


logger = logging.getLogger(__name__)


WARM = "warm"
OCEAN = "ocean"
_LEGACY_OCEAN = "sky"

THEME_CONFIGS: Dict[str, Dict[str, Any]] = {
    WARM: {
        "name": "Warm",
        "icon": "fa-sun-bright",
        "background_class": "bg-sun-to-br",
    },
    OCEAN: {
        "name": "Ocean",
        "icon": "fa-droplet",
        "background_class": "bg-ocean-to-br",
    },
}

DEFAULT_THEME = OCEAN


class ThemeManager:
    """Background theme selection backed by key/value storage."""

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    @staticmethod
    def available_themes() -> List[str]:
        return list(THEME_CONFIGS)

    def get_current_theme(self) -> str:
        """
        Get the current theme, migrating legacy values on the way.

        Returns:
            Theme identifier
        """
        stored = self._storage.get_item(THEME_KEY)

        if stored == _LEGACY_OCEAN:
            self._storage.set_item(THEME_KEY, OCEAN)
            return OCEAN

        if not stored:
            legacy = self._storage.get_item(LEGACY_THEME_KEY)
            if legacy in (WARM, OCEAN, _LEGACY_OCEAN):
                migrated = OCEAN if legacy == _LEGACY_OCEAN else legacy
                self._storage.set_item(THEME_KEY, migrated)
                logger.info(f"Migrated legacy theme value {legacy!r} to {THEME_KEY}")
                stored = migrated

        if stored not in THEME_CONFIGS:
            return DEFAULT_THEME
        return stored

    def set_theme(self, theme: str) -> None:
        """
        Select and persist a theme.

        Raises:
            ValueError: If theme is unknown
        """
        if theme not in THEME_CONFIGS:
            raise ValueError(f"Unknown theme: {theme}")
        self._storage.set_item(THEME_KEY, theme)

    def get_theme_config(self, theme: str = None) -> Dict[str, Any]:
        """Get display config for theme (current theme by default)."""
        return dict(THEME_CONFIGS[theme or self.get_current_theme()])

    def background_class(self) -> str:
        return THEME_CONFIGS[self.get_current_theme()]["background_class"]


__all__ = [
    "WARM",
    "OCEAN",
    "DEFAULT_THEME",
    "THEME_CONFIGS",
    "ThemeManager",
]
