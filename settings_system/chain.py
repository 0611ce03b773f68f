"""
Settings System - Default Load Chain.

============================================================
RESPONSIBILITY
============================================================
The ordered chain of load steps the bootstrap runs.

 1. modal                   - base modal element
 2. settings_modal          - settings modal (needs 1)
 3. theme_manager           - background theme manager
 4. global_settings_manager - the published handle (needs 3)

Step resources are taken from CANONICAL_RESOURCES, the same
list the include checker enforces on pages.

============================================================
"""

from typing import List, Sequence, Tuple

from core.constants import CANONICAL_RESOURCES, SETTINGS_MODAL_ELEMENT
from .elements import MODAL_ELEMENT, ModalElement, build_settings_modal
from .manager import GlobalSettingsManager
from .models import LoadContext, ModuleStep, StepLoader
from .theme import ThemeManager


# ============================================================
# STEP LOADERS
# ============================================================

async def load_modal(ctx: LoadContext) -> type:
    """Define the base modal element."""
    if MODAL_ELEMENT not in ctx.registry:
        ctx.registry.define(MODAL_ELEMENT, ModalElement)
    return ctx.registry.get(MODAL_ELEMENT)


async def load_settings_modal(ctx: LoadContext) -> type:
    """Define the settings modal on top of the base modal."""
    base = ctx.require("modal", needed_by="settings_modal")
    if SETTINGS_MODAL_ELEMENT not in ctx.registry:
        ctx.registry.define(SETTINGS_MODAL_ELEMENT, build_settings_modal(base))
    return ctx.registry.get(SETTINGS_MODAL_ELEMENT)


async def load_theme_manager(ctx: LoadContext) -> ThemeManager:
    return ThemeManager(ctx.storage)


async def load_global_settings_manager(ctx: LoadContext) -> GlobalSettingsManager:
    """Create the settings manager; this is the handle the bootstrap publishes."""
    theme_manager = ctx.require("theme_manager", needed_by="global_settings_manager")
    return GlobalSettingsManager(
        storage=ctx.storage,
        theme_manager=theme_manager,
        registry=ctx.registry,
    )


_LOADERS: Tuple[Tuple[str, StepLoader], ...] = (
    ("modal", load_modal),
    ("settings_modal", load_settings_modal),
    ("theme_manager", load_theme_manager),
    ("global_settings_manager", load_global_settings_manager),
)


# ============================================================
# CHAIN BUILDERS
# ============================================================

def build_default_chain(resources: Sequence[str] = CANONICAL_RESOURCES) -> List[ModuleStep]:
    """
    Build fresh steps for the default chain.

    Raises:
        ValueError: If resources does not have one entry per loader
    """
    if len(resources) != len(_LOADERS):
        raise ValueError(
            f"Load chain has {len(_LOADERS)} steps but {len(resources)} resources were given"
        )
    return [
        ModuleStep(name=name, resource=resource, load=loader)
        for (name, loader), resource in zip(_LOADERS, resources)
    ]


def chain_resources(steps: Sequence[ModuleStep]) -> List[str]:
    """Get the resource order a chain loads in."""
    return [step.resource for step in steps]


__all__ = [
    "load_modal",
    "load_settings_modal",
    "load_theme_manager",
    "load_global_settings_manager",
    "build_default_chain",
    "chain_resources",
]
