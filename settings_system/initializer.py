"""
Settings System - Initializer.

============================================================
RESPONSIBILITY
============================================================
Brings the settings system up exactly once per process.

- Runs the load chain strictly in order, one step at a time
- Confirms the settings modal registration actually happened
- Publishes the global settings manager
- Notifies subscribers queued before readiness

============================================================
LIFECYCLE
============================================================
not ready --initialize()--> loading --ok--> ready (terminal)
                               |
                               +--failure--> not ready

- Concurrent initialize() calls share one attempt
- A failed attempt keeps queued callbacks and loaded steps;
  nothing retries automatically
- There is no reset: readiness lasts for the process

============================================================
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from core.config import ShellConfig
from core.constants import DEFAULT_REGISTRATION_TIMEOUT_SECONDS, SETTINGS_MODAL_ELEMENT
from core.exceptions import InitializationError, LoadFailure, RegistrationTimeout
from core.storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from .callbacks import ReadinessCallbackQueue, ReadyCallback
from .chain import build_default_chain
from .manager import GlobalSettingsManager
from .models import InitializerStatus, LoadContext, ModuleStep
from .registry import (
    ElementRegistry,
    ManagerSlot,
    get_element_registry,
    get_manager_slot,
)


class SettingsSystemInitializer:
    """
    Coordinates the ordered bootstrap of the settings system.

    All state changes happen inside the initializer's own coroutine
    between await points, so no lock is needed under asyncio.
    """

    def __init__(
        self,
        steps: Optional[Sequence[ModuleStep]] = None,
        registry: Optional[ElementRegistry] = None,
        slot: Optional[ManagerSlot] = None,
        storage: Optional[KeyValueStorage] = None,
        registration_element: str = SETTINGS_MODAL_ELEMENT,
        registration_timeout_seconds: float = DEFAULT_REGISTRATION_TIMEOUT_SECONDS,
    ):
        """
        Initialize the bootstrap coordinator.

        Args:
            steps: Ordered load chain (default chain when omitted)
            registry: Element registry the chain defines elements in
            slot: Where the manager handle gets published
            storage: Storage handed to the chain's managers
            registration_element: Element that must be defined after loading
            registration_timeout_seconds: How long to wait for that element
        """
        self._steps: List[ModuleStep] = list(steps) if steps is not None else build_default_chain()
        if not self._steps:
            raise ValueError("Load chain must contain at least one step")

        self._registry = registry if registry is not None else ElementRegistry()
        self._slot = slot if slot is not None else ManagerSlot()
        self._context = LoadContext(
            registry=self._registry,
            storage=storage if storage is not None else MemoryStorage(),
        )
        self._registration_element = registration_element
        self._registration_timeout = registration_timeout_seconds

        self._initialized = False
        self._callbacks = ReadinessCallbackQueue()
        self._inflight: Optional[asyncio.Task] = None
        self._background: Optional[asyncio.Task] = None
        self._attempts = 0

        self._logger = logging.getLogger(__name__)

    # --------------------------------------------------------
    # Properties
    # --------------------------------------------------------

    @property
    def step_names(self) -> Tuple[str, ...]:
        return tuple(step.name for step in self._steps)

    @property
    def resources(self) -> Tuple[str, ...]:
        return tuple(step.resource for step in self._steps)

    @property
    def storage(self) -> KeyValueStorage:
        return self._context.storage

    @property
    def registration_timeout_seconds(self) -> float:
        return self._registration_timeout

    @property
    def attempts(self) -> int:
        """Number of load attempts started so far."""
        return self._attempts

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None

    @property
    def pending_callbacks(self) -> int:
        return len(self._callbacks)

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    async def initialize(self) -> GlobalSettingsManager:
        """
        Bring the settings system up, or join the attempt in progress.

        Returns:
            The published global settings manager

        Raises:
            LoadFailure: A load step failed
            RegistrationTimeout: The settings modal never registered
        """
        if self.is_ready():
            return self._slot.get()

        if self._inflight is None:
            self._attempts += 1
            self._inflight = asyncio.get_running_loop().create_task(self._run_chain())

        # one caller being cancelled must not cancel the shared attempt
        return await asyncio.shield(self._inflight)

    def on_ready(self, callback: ReadyCallback) -> None:
        """
        Run callback with the manager once the system is ready.

        Runs immediately when already ready. Otherwise the callback is
        queued and, if nothing is loading yet, a bootstrap is started in
        the background on the running event loop.
        """
        if self.is_ready():
            callback(self._slot.get())
            return

        self._callbacks.enqueue(callback)

        if self._inflight is not None:
            return
        if self._background is not None and not self._background.done():
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._logger.debug("No running event loop; callback queued until initialize() runs")
            return

        self._background = loop.create_task(self._initialize_in_background())

    def is_ready(self) -> bool:
        return self._initialized and self._slot.present

    def get_status(self) -> InitializerStatus:
        """Get an immutable snapshot of the bootstrap state."""
        return InitializerStatus.capture(
            initialized=self._initialized,
            components={step.name: step.loaded for step in self._steps},
            custom_element_registered=self._registration_element in self._registry,
            global_manager_available=self._slot.present,
        )

    # --------------------------------------------------------
    # Internals
    # --------------------------------------------------------

    async def _initialize_in_background(self) -> None:
        try:
            await self.initialize()
        except InitializationError as e:
            self._logger.error(f"Background settings system initialization failed: {e.message}")

    async def _run_chain(self) -> GlobalSettingsManager:
        try:
            self._logger.info("Initializing settings system...")

            for step in self._steps:
                if step.loaded:
                    continue
                await self._load_step(step)

            handle = self._context.exports.get(self._steps[-1].name)
            if handle is None:
                raise LoadFailure(
                    message="Final load step produced no manager",
                    step=self._steps[-1].name,
                    resource=self._steps[-1].resource,
                )

            await self._confirm_registration()

            self._slot.publish(handle)
            self._initialized = True
            self._logger.info("Settings system initialized successfully")

            failures = self._callbacks.flush(handle)
            if failures:
                self._logger.warning(f"{len(failures)} readiness callback(s) failed")

            return handle

        except InitializationError as e:
            self._logger.error(f"Failed to initialize settings system: {e.to_log_format()}")
            raise
        finally:
            self._inflight = None

    async def _load_step(self, step: ModuleStep) -> None:
        self._logger.info(f"Loading {step.name} ({step.resource})...")
        try:
            export = await step.load(self._context)
        except InitializationError:
            raise
        except Exception as e:
            raise LoadFailure(
                message=f"Load step failed: {step.name}",
                step=step.name,
                resource=step.resource,
                cause=e,
            ) from e

        self._context.exports[step.name] = export
        step.mark_loaded()
        self._logger.info(f"Loaded {step.name}")

    async def _confirm_registration(self) -> None:
        try:
            await asyncio.wait_for(
                self._registry.when_defined(self._registration_element),
                timeout=self._registration_timeout,
            )
        except asyncio.TimeoutError:
            raise RegistrationTimeout(
                message=f"{self._registration_element} component failed to register",
                element=self._registration_element,
                timeout_seconds=self._registration_timeout,
            )


# ============================================================
# PROCESS-WIDE INSTANCE
# ============================================================

_INITIALIZER: Optional[SettingsSystemInitializer] = None


def build_settings_system_initializer(
    config: ShellConfig,
    registry: Optional[ElementRegistry] = None,
    slot: Optional[ManagerSlot] = None,
) -> SettingsSystemInitializer:
    """
    Build an initializer from shell configuration.

    Args:
        config: Supplies the registration timeout and storage path
        registry: Element registry (process-wide one when omitted)
        slot: Manager slot (process-wide one when omitted)

    Returns:
        Initializer backed by a JSON file when config.storage_path
        is set, by memory otherwise

    Raises:
        StorageError: If the storage file exists but cannot be read
    """
    if config.storage_path is not None:
        storage: KeyValueStorage = JsonFileStorage(config.storage_path)
    else:
        storage = MemoryStorage()

    return SettingsSystemInitializer(
        registry=registry if registry is not None else get_element_registry(),
        slot=slot if slot is not None else get_manager_slot(),
        storage=storage,
        registration_timeout_seconds=config.registration_timeout_seconds,
    )


def get_settings_system_initializer(config: Optional[ShellConfig] = None) -> SettingsSystemInitializer:
    """
    Get the process-wide initializer.

    Created on first use against the process-wide element registry
    and manager slot, from config or else from the environment.
    Later calls return the same instance and ignore config.
    """
    global _INITIALIZER
    if _INITIALIZER is None:
        _INITIALIZER = build_settings_system_initializer(
            config if config is not None else ShellConfig.from_env()
        )
    return _INITIALIZER


__all__ = [
    "SettingsSystemInitializer",
    "build_settings_system_initializer",
    "get_settings_system_initializer",
]
