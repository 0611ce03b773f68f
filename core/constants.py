"""
Core Module - Constants.

============================================================
RESPONSIBILITY
============================================================
Single source of truth for the include contract shared by
the runtime bootstrap and the static include checker.

- Canonical resource order (runtime load order == page include order)
- Optional presence-only resources
- Element registration confirmed after loading
- Storage keys used by shell collaborators

============================================================
"""

from typing import Tuple


# ============================================================
# CANONICAL INCLUDE CONTRACT
# ============================================================

CANONICAL_RESOURCES: Tuple[str, ...] = (
    "design-system/components/modals/Modal.js",
    "design-system/components/modals/SettingsModal.js",
    "design-system/utils/theme-manager.js",
    "design-system/utils/global-settings-manager.js",
)
"""Required includes, in the order they must be loaded and declared."""

OPTIONAL_RESOURCES: Tuple[str, ...] = (
    "design-system/styles/animations.css",
)
"""Presence-only includes (no order or duplicate check)."""

HEADER_MARKER = "components/navigation/Header.js"
"""Documents containing this text opt into the settings include check."""

EXCLUDED_DIR = "design-system"
"""Infrastructure subtree skipped by document discovery."""

DOCUMENT_EXTENSIONS: Tuple[str, ...] = (".html",)


# ============================================================
# BOOTSTRAP
# ============================================================

SETTINGS_MODAL_ELEMENT = "webropol-settings-modal"
"""Element whose registration confirms the chain actually executed."""

DEFAULT_REGISTRATION_TIMEOUT_SECONDS = 1.0


# ============================================================
# STORAGE KEYS
# ============================================================

GLOBAL_SETTINGS_KEY = "webropol_global_settings"
THEME_KEY = "webropol-bg-theme"
LEGACY_THEME_KEY = "webropol-theme"
SURVEY_NAME_KEY = "currentSurveyName"
SURVEY_ID_KEY = "currentSurveyId"
SURVEY_NAME_MAP_KEY = "surveyNameMap"

DEFAULT_SURVEY_NAME = "Untitled Survey"
