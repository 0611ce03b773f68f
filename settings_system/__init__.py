"""
Settings System Package - Ordered Bootstrap Layer.

============================================================
PACKAGE OVERVIEW
============================================================
Loads the settings system once per process and tells
subscribers when it is ready.

    +-----------------------------------------------------+
    |              SettingsSystemInitializer              |
    |-----------------------------------------------------|
    |  ModuleStep x4  |  canonical load chain, in order   |
    |  ElementRegistry|  definitions + "defined" signal   |
    |  ManagerSlot    |  write-once published handle      |
    |  Callback queue |  FIFO, failure-isolated           |
    +-----------------------------------------------------+

============================================================
QUICK START
============================================================
Programmatic usage::

    import asyncio
    from settings_system import get_settings_system_initializer

    async def main():
        initializer = get_settings_system_initializer()
        initializer.on_ready(lambda manager: print(manager.get_all_settings()))
        manager = await initializer.initialize()
        manager.set_setting("dark_mode", True)

    asyncio.run(main())

============================================================
"""

from .callbacks import ReadinessCallbackQueue
from .chain import build_default_chain, chain_resources
from .initializer import (
    SettingsSystemInitializer,
    build_settings_system_initializer,
    get_settings_system_initializer,
)
from .manager import GlobalSettings, GlobalSettingsManager
from .models import InitializerStatus, LoadContext, ModuleStep
from .registry import (
    ElementRegistry,
    ManagerSlot,
    get_element_registry,
    get_global_settings_manager,
)
from .theme import ThemeManager

__all__ = [
    "ReadinessCallbackQueue",
    "build_default_chain",
    "chain_resources",
    "SettingsSystemInitializer",
    "build_settings_system_initializer",
    "get_settings_system_initializer",
    "GlobalSettings",
    "GlobalSettingsManager",
    "InitializerStatus",
    "LoadContext",
    "ModuleStep",
    "ElementRegistry",
    "ManagerSlot",
    "get_element_registry",
    "get_global_settings_manager",
    "ThemeManager",
]
