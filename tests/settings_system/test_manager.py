"""
Global Settings Manager and Theme Manager Tests.

============================================================
PURPOSE
============================================================
Tests for the published settings handle and its theme
collaborator.

TEST CATEGORIES:
- Settings access, validation and persistence
- Listeners, reset, import and export
- Settings modal
- Theme selection and legacy migration

============================================================
"""

import json

import pytest
from pydantic import ValidationError

from core.constants import (
    GLOBAL_SETTINGS_KEY,
    LEGACY_THEME_KEY,
    SETTINGS_MODAL_ELEMENT,
    THEME_KEY,
)
from core.storage import MemoryStorage
from settings_system import ElementRegistry, GlobalSettingsManager, ThemeManager
from settings_system.elements import MODAL_ELEMENT, ModalElement, build_settings_modal
from settings_system.manager import SETTINGS_CHANGED, SETTINGS_IMPORTED, SETTINGS_RESET
from settings_system.theme import DEFAULT_THEME, OCEAN, WARM


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def manager(storage):
    return GlobalSettingsManager(storage=storage, theme_manager=ThemeManager(storage))


# ============================================================
# SETTINGS ACCESS TESTS
# ============================================================

class TestSettingsAccess:
    """Tests for reading and writing settings."""

    def test_defaults(self, manager):
        """Test default values."""
        settings = manager.get_all_settings()

        assert settings["show_floating_button"] is True
        assert settings["dark_mode"] is False
        assert settings["auto_logout"] == 30
        assert settings["language"] == "en"

    def test_set_setting_persists(self, manager, storage):
        """Test that writes land in storage."""
        manager.set_setting("dark_mode", True)

        stored = json.loads(storage.get_item(GLOBAL_SETTINGS_KEY))
        assert stored["dark_mode"] is True
        assert manager.get_setting("dark_mode") is True

    def test_settings_survive_reload(self, manager, storage):
        """Test that a new manager on the same storage sees saved values."""
        manager.set_setting("language", "fi")

        reloaded = GlobalSettingsManager(storage=storage)

        assert reloaded.get_setting("language") == "fi"

    def test_unknown_key_rejected(self, manager):
        """Test that only known settings exist."""
        with pytest.raises(KeyError):
            manager.get_setting("volume")
        with pytest.raises(KeyError):
            manager.set_setting("volume", 11)

    def test_invalid_value_rejected(self, manager):
        """Test value validation."""
        with pytest.raises(ValidationError):
            manager.set_setting("auto_logout", -5)
        assert manager.get_setting("auto_logout") == 30

    def test_toggle_setting(self, manager):
        """Test flipping a boolean setting."""
        assert manager.toggle_setting("compact_mode") is True
        assert manager.toggle_setting("compact_mode") is False

    def test_toggle_non_boolean_rejected(self, manager):
        """Test that only booleans toggle."""
        with pytest.raises(TypeError):
            manager.toggle_setting("language")

    def test_corrupt_storage_falls_back_to_defaults(self, storage):
        """Test loading unreadable stored settings."""
        storage.set_item(GLOBAL_SETTINGS_KEY, "{not json")

        manager = GlobalSettingsManager(storage=storage)

        assert manager.get_setting("dark_mode") is False

    def test_unknown_stored_keys_ignored(self, storage):
        """Test that stale keys from older versions are dropped."""
        storage.set_item(GLOBAL_SETTINGS_KEY, json.dumps({"dark_mode": True, "legacy": 1}))

        manager = GlobalSettingsManager(storage=storage)

        assert manager.get_setting("dark_mode") is True
        assert "legacy" not in manager.get_all_settings()


# ============================================================
# LISTENER / IMPORT / EXPORT TESTS
# ============================================================

class TestSettingsEvents:
    """Tests for listeners, reset, import and export."""

    def test_listener_receives_changes(self, manager):
        """Test change notification."""
        events = []
        manager.add_listener(lambda event, settings: events.append((event, settings["dark_mode"])))

        manager.set_setting("dark_mode", True)
        manager.reset_settings()

        assert events == [(SETTINGS_CHANGED, True), (SETTINGS_RESET, False)]

    def test_removed_listener_not_called(self, manager):
        """Test remove_listener()."""
        events = []
        listener = lambda event, settings: events.append(event)
        manager.add_listener(listener)
        manager.remove_listener(listener)

        manager.set_setting("dark_mode", True)

        assert events == []

    def test_failing_listener_isolated(self, manager):
        """Test that a broken listener does not block others."""
        events = []

        def broken(event, settings):
            raise RuntimeError("listener bug")

        manager.add_listener(broken)
        manager.add_listener(lambda event, settings: events.append(event))

        manager.set_setting("notifications", False)

        assert events == [SETTINGS_CHANGED]

    def test_import_merges(self, manager):
        """Test import_settings()."""
        events = []
        manager.add_listener(lambda event, settings: events.append(event))

        manager.import_settings({"language": "sv", "auto_save": False})

        assert manager.get_setting("language") == "sv"
        assert manager.get_setting("auto_save") is False
        assert manager.get_setting("dark_mode") is False
        assert events == [SETTINGS_IMPORTED]

    def test_invalid_import_changes_nothing(self, manager):
        """Test that a bad import is rejected as a whole."""
        with pytest.raises(ValidationError):
            manager.import_settings({"language": "sv", "unknown": True})

        assert manager.get_setting("language") == "en"

    def test_export_round_trips_through_import(self, manager, storage):
        """Test exporting settings into another manager."""
        manager.set_setting("compact_mode", True)
        exported = manager.export_settings()

        other = GlobalSettingsManager(storage=MemoryStorage())
        other.import_settings(json.loads(exported))

        assert other.get_all_settings() == manager.get_all_settings()


# ============================================================
# SETTINGS MODAL TESTS
# ============================================================

class TestSettingsModal:
    """Tests for the settings modal element."""

    def test_open_requires_definition(self, manager):
        """Test opening before the modal element exists."""
        with pytest.raises(LookupError):
            manager.open_settings_modal()

    def test_open_and_apply(self, storage):
        """Test that the modal shows and writes settings."""
        registry = ElementRegistry()
        registry.define(MODAL_ELEMENT, ModalElement)
        registry.define(SETTINGS_MODAL_ELEMENT, build_settings_modal(ModalElement))
        manager = GlobalSettingsManager(storage=storage, registry=registry)

        modal = manager.open_settings_modal()
        modal.apply("dark_mode", True)

        assert modal.is_open is True
        assert modal.title == "Settings"
        assert isinstance(modal, ModalElement)
        assert modal.values["show_floating_button"] is True
        assert manager.get_setting("dark_mode") is True

        modal.close()
        assert modal.is_open is False


# ============================================================
# THEME MANAGER TESTS
# ============================================================

class TestThemeManager:
    """Tests for ThemeManager."""

    def test_default_theme(self, storage):
        """Test the theme when nothing is stored."""
        assert ThemeManager(storage).get_current_theme() == DEFAULT_THEME == OCEAN

    def test_set_theme(self, storage):
        """Test selecting a theme."""
        themes = ThemeManager(storage)

        themes.set_theme(WARM)

        assert themes.get_current_theme() == WARM
        assert storage.get_item(THEME_KEY) == WARM
        assert themes.background_class() == "bg-sun-to-br"

    def test_unknown_theme_rejected(self, storage):
        """Test set_theme() validation."""
        with pytest.raises(ValueError):
            ThemeManager(storage).set_theme("neon")

    def test_sky_migrates_to_ocean(self, storage):
        """Test the legacy sky value."""
        storage.set_item(THEME_KEY, "sky")

        assert ThemeManager(storage).get_current_theme() == OCEAN
        assert storage.get_item(THEME_KEY) == OCEAN

    def test_legacy_key_migrates(self, storage):
        """Test reading the theme from the legacy key."""
        storage.set_item(LEGACY_THEME_KEY, WARM)

        assert ThemeManager(storage).get_current_theme() == WARM
        assert storage.get_item(THEME_KEY) == WARM

    def test_unknown_stored_value_uses_default(self, storage):
        """Test an unrecognised stored theme."""
        storage.set_item(THEME_KEY, "purple")

        assert ThemeManager(storage).get_current_theme() == DEFAULT_THEME

    def test_theme_config(self, storage):
        """Test get_theme_config()."""
        themes = ThemeManager(storage)

        assert themes.get_theme_config(WARM)["name"] == "Warm"
        assert themes.get_theme_config()["name"] == "Ocean"
        assert ThemeManager.available_themes() == [WARM, OCEAN]
