"""
Settings System - Modal Elements.

Element classes registered by the first two load steps. The
settings modal is built on top of whichever base modal the
first step produced, so it cannot exist before that step ran.
"""

from typing import Any, Dict, Optional

from core.constants import SETTINGS_MODAL_ELEMENT


MODAL_ELEMENT = "webropol-modal"


class ModalElement:
    """Base modal: a titled element that can be opened and closed."""

    tag_name = MODAL_ELEMENT

    def __init__(self, title: str = ""):
        self.title = title
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False


def build_settings_modal(base: type) -> type:
    """Derive the settings modal element from the loaded base modal."""

    class SettingsModalElement(base):
        tag_name = SETTINGS_MODAL_ELEMENT

        def __init__(self, manager: Optional[Any] = None):
            super().__init__(title="Settings")
            self.manager = manager
            self.values: Dict[str, Any] = {}

        def open(self) -> None:
            super().open()
            self.values = self.manager.get_all_settings() if self.manager else {}

        def apply(self, key: str, value: Any) -> None:
            # writes go straight through the manager so listeners fire
            self.manager.set_setting(key, value)
            self.values[key] = value

    return SettingsModalElement


__all__ = ["MODAL_ELEMENT", "ModalElement", "build_settings_modal"]
