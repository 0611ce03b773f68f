"""
Settings System - Models.

============================================================
RESPONSIBILITY
============================================================
Defines data models for the settings-system bootstrap.

- ModuleStep: one entry of the ordered load chain
- LoadContext: exports of earlier steps, shared services
- InitializerStatus: immutable status snapshot

============================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from core.exceptions import LoadFailure
from core.storage import KeyValueStorage


# ============================================================
# LOAD CONTEXT
# ============================================================

@dataclass
class LoadContext:
    """
    Shared state handed to every load step.

    Each completed step stores its export under its own name so
    later steps can depend on it.
    """

    registry: Any
    storage: KeyValueStorage
    exports: Dict[str, Any] = field(default_factory=dict)

    def require(self, step_name: str, needed_by: Optional[str] = None) -> Any:
        """
        Get the export of an earlier step.

        Raises:
            LoadFailure: If that step has not been loaded
        """
        if step_name not in self.exports:
            raise LoadFailure(
                message=f"Dependency not loaded: {step_name}",
                step=needed_by,
                context={"dependency": step_name},
            )
        return self.exports[step_name]


StepLoader = Callable[[LoadContext], Awaitable[Any]]


# ============================================================
# MODULE STEP
# ============================================================

@dataclass
class ModuleStep:
    """
    One entry in the canonical load chain.

    The loaded flag moves from False to True once and never back.
    """

    name: str
    resource: str
    load: StepLoader
    loaded: bool = False
    loaded_at: Optional[datetime] = None

    def mark_loaded(self) -> None:
        """Mark the step loaded (idempotent)."""
        if self.loaded:
            return
        self.loaded = True
        self.loaded_at = datetime.now(timezone.utc)


# ============================================================
# STATUS SNAPSHOT
# ============================================================

@dataclass(frozen=True)
class InitializerStatus:
    """Immutable snapshot of the bootstrap state."""

    initialized: bool
    components: Mapping[str, bool]
    custom_element_registered: bool
    global_manager_available: bool

    @classmethod
    def capture(
        cls,
        initialized: bool,
        components: Mapping[str, bool],
        custom_element_registered: bool,
        global_manager_available: bool,
    ) -> "InitializerStatus":
        """Build a snapshot from live values, copying the component flags."""
        return cls(
            initialized=initialized,
            components=MappingProxyType(dict(components)),
            custom_element_registered=custom_element_registered,
            global_manager_available=global_manager_available,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "initialized": self.initialized,
            "components": dict(self.components),
            "custom_element_registered": self.custom_element_registered,
            "global_manager_available": self.global_manager_available,
        }


__all__ = [
    "LoadContext",
    "StepLoader",
    "ModuleStep",
    "InitializerStatus",
]
