"""
Settings System - Element Registry and Manager Slot.

============================================================
RESPONSIBILITY
============================================================
Process-wide registries the bootstrap writes into.

- ElementRegistry: named UI-element definitions with an
  explicit "defined" completion signal
- ManagerSlot: the single well-known slot holding the
  published settings manager (write once)

============================================================
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from core.exceptions import PublishError


logger = logging.getLogger(__name__)


# ============================================================
# ELEMENT REGISTRY
# ============================================================

class ElementRegistry:
    """
    Registry of UI-element definitions.

    Definitions are permanent: a name can be defined once.
    """

    def __init__(self):
        self._definitions: Dict[str, type] = {}
        self._waiters: Dict[str, List[asyncio.Future]] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def define(self, name: str, element_class: type) -> None:
        """
        Define an element and wake everyone waiting for it.

        Raises:
            ValueError: If the name is already defined
        """
        if name in self._definitions:
            raise ValueError(f"Element already defined: {name}")

        self._definitions[name] = element_class
        logger.debug(f"Defined element: {name}")

        for waiter in self._waiters.pop(name, []):
            if not waiter.done():
                waiter.set_result(element_class)

    def get(self, name: str) -> Optional[type]:
        """Get an element definition, or None."""
        return self._definitions.get(name)

    def names(self) -> List[str]:
        return list(self._definitions)

    async def when_defined(self, name: str) -> type:
        """Wait until name is defined and return its definition."""
        if name in self._definitions:
            return self._definitions[name]

        future = asyncio.get_running_loop().create_future()
        self._waiters.setdefault(name, []).append(future)
        return await future


# ============================================================
# MANAGER SLOT
# ============================================================

class ManagerSlot:
    """Write-once holder for the published settings manager."""

    def __init__(self):
        self._handle: Optional[Any] = None

    @property
    def present(self) -> bool:
        return self._handle is not None

    def get(self) -> Optional[Any]:
        return self._handle

    def publish(self, handle: Any) -> None:
        """
        Publish the handle.

        Publishing the same object again is a no-op.

        Raises:
            PublishError: If a different handle is already published
        """
        if handle is None:
            raise PublishError("Cannot publish an empty manager handle")
        if self._handle is handle:
            return
        if self._handle is not None:
            raise PublishError(
                "Global settings manager is already published",
                context={"existing": type(self._handle).__name__},
            )
        self._handle = handle


# ============================================================
# PROCESS-WIDE INSTANCES
# ============================================================

_ELEMENT_REGISTRY = ElementRegistry()
_MANAGER_SLOT = ManagerSlot()


def get_element_registry() -> ElementRegistry:
    """Get the process-wide element registry."""
    return _ELEMENT_REGISTRY


def get_manager_slot() -> ManagerSlot:
    """Get the process-wide manager slot."""
    return _MANAGER_SLOT


def get_global_settings_manager() -> Optional[Any]:
    """Get the published global settings manager, or None before readiness."""
    return _MANAGER_SLOT.get()


__all__ = [
    "ElementRegistry",
    "ManagerSlot",
    "get_element_registry",
    "get_manager_slot",
    "get_global_settings_manager",
]
