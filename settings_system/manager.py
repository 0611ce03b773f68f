"""
Settings System - Global Settings Manager.

============================================================
RESPONSIBILITY
============================================================
Application-wide settings behind one object: the handle the
bootstrap publishes once it is ready.

- Pydantic-validated settings with defaults
- Persisted as JSON under one storage key
- Change listeners (settings-changed / -reset / -imported)
- Import and export

============================================================
"""

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.constants import GLOBAL_SETTINGS_KEY, SETTINGS_MODAL_ELEMENT
from core.storage import KeyValueStorage
from .theme import ThemeManager


logger = logging.getLogger(__name__)


SETTINGS_CHANGED = "settings-changed"
SETTINGS_RESET = "settings-reset"
SETTINGS_IMPORTED = "settings-imported"

SettingsListener = Callable[[str, Dict[str, Any]], None]


# =============================================================
# SETTINGS SCHEMA
# =============================================================

class GlobalSettings(BaseModel):
    """Application-wide settings."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    show_floating_button: bool = True
    dark_mode: bool = False
    auto_save: bool = True
    notifications: bool = True
    compact_mode: bool = False
    auto_logout: int = Field(default=30, ge=0, description="Minutes of inactivity, 0 disables")
    language: str = "en"


# =============================================================
# MANAGER
# =============================================================

class GlobalSettingsManager:
    """
    Central settings API.

    Unknown keys are rejected; values are validated on every write.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        theme_manager: Optional[ThemeManager] = None,
        registry: Any = None,
    ):
        self._storage = storage
        self._theme_manager = theme_manager
        self._registry = registry
        self._listeners: List[SettingsListener] = []
        self._settings = self._load_settings()

    @property
    def theme(self) -> Optional[ThemeManager]:
        return self._theme_manager

    # ---------------------------------------------------------
    # Persistence
    # ---------------------------------------------------------

    def _load_settings(self) -> GlobalSettings:
        raw = self._storage.get_item(GLOBAL_SETTINGS_KEY)
        if not raw:
            return GlobalSettings()
        try:
            stored = json.loads(raw)
            if not isinstance(stored, dict):
                raise ValueError("stored settings are not an object")
            known = {k: v for k, v in stored.items() if k in GlobalSettings.model_fields}
            return GlobalSettings(**known)
        except (ValueError, ValidationError) as e:
            logger.warning(f"Error loading stored settings, using defaults: {e}")
            return GlobalSettings()

    def _save_settings(self) -> None:
        self._storage.set_item(GLOBAL_SETTINGS_KEY, self._settings.model_dump_json())

    # ---------------------------------------------------------
    # Access
    # ---------------------------------------------------------

    def get_setting(self, key: str) -> Any:
        """
        Get a setting value.

        Raises:
            KeyError: If key is not a known setting
        """
        self._check_key(key)
        return getattr(self._settings, key)

    def get_all_settings(self) -> Dict[str, Any]:
        """Get a copy of all settings."""
        return self._settings.model_dump()

    def set_setting(self, key: str, value: Any) -> None:
        """
        Set and persist a setting.

        Raises:
            KeyError: If key is not a known setting
            pydantic.ValidationError: If value has the wrong type
        """
        self._check_key(key)
        setattr(self._settings, key, value)
        self._save_settings()
        self._notify(SETTINGS_CHANGED)

    def toggle_setting(self, key: str) -> bool:
        """
        Flip a boolean setting.

        Returns:
            The new value

        Raises:
            TypeError: If the setting is not boolean
        """
        current = self.get_setting(key)
        if not isinstance(current, bool):
            raise TypeError(f"Setting {key} is not a boolean")
        self.set_setting(key, not current)
        return not current

    def reset_settings(self) -> None:
        """Reset all settings to defaults."""
        self._settings = GlobalSettings()
        self._save_settings()
        self._notify(SETTINGS_RESET)

    def import_settings(self, new_settings: Mapping[str, Any]) -> None:
        """
        Merge and persist settings from a mapping.

        The merge is validated as a whole; on error nothing changes.
        """
        merged = {**self._settings.model_dump(), **dict(new_settings)}
        self._settings = GlobalSettings.model_validate(merged)
        self._save_settings()
        self._notify(SETTINGS_IMPORTED)

    def export_settings(self) -> str:
        """Export settings as a JSON document."""
        return json.dumps(self._settings.model_dump(), indent=2, sort_keys=True)

    # ---------------------------------------------------------
    # Settings modal
    # ---------------------------------------------------------

    def open_settings_modal(self) -> Any:
        """
        Create and open the settings modal.

        Raises:
            LookupError: If the modal element is not defined
        """
        element_class = self._registry.get(SETTINGS_MODAL_ELEMENT) if self._registry else None
        if element_class is None:
            raise LookupError(f"{SETTINGS_MODAL_ELEMENT} is not defined")
        modal = element_class(manager=self)
        modal.open()
        return modal

    # ---------------------------------------------------------
    # Listeners
    # ---------------------------------------------------------

    def add_listener(self, callback: SettingsListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: SettingsListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, event_type: str) -> None:
        snapshot = self.get_all_settings()
        for listener in list(self._listeners):
            try:
                listener(event_type, dict(snapshot))
            except Exception as e:
                logger.error(f"Error in settings listener for {event_type}: {e}")

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in GlobalSettings.model_fields:
            raise KeyError(f"Unknown setting: {key}")


__all__ = [
    "SETTINGS_CHANGED",
    "SETTINGS_RESET",
    "SETTINGS_IMPORTED",
    "GlobalSettings",
    "GlobalSettingsManager",
]
