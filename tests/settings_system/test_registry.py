"""
Element Registry, Manager Slot and Callback Queue Tests.

============================================================
PURPOSE
============================================================
Unit tests for the process-wide registries and the readiness
callback queue.

============================================================
"""

import asyncio

import pytest

from core.exceptions import CallbackFailure, LoadFailure, PublishError
from core.storage import MemoryStorage
from settings_system import (
    ElementRegistry,
    LoadContext,
    ManagerSlot,
    ModuleStep,
    ReadinessCallbackQueue,
)


# ============================================================
# ELEMENT REGISTRY TESTS
# ============================================================

class TestElementRegistry:
    """Tests for ElementRegistry."""

    def test_define_and_get(self):
        """Test defining an element."""
        registry = ElementRegistry()

        registry.define("x-widget", dict)

        assert "x-widget" in registry
        assert registry.get("x-widget") is dict
        assert registry.names() == ["x-widget"]

    def test_get_unknown_returns_none(self):
        """Test lookup of an undefined element."""
        assert ElementRegistry().get("x-missing") is None

    def test_define_twice_rejected(self):
        """Test that definitions are permanent."""
        registry = ElementRegistry()
        registry.define("x-widget", dict)

        with pytest.raises(ValueError, match="already defined"):
            registry.define("x-widget", list)
        assert registry.get("x-widget") is dict

    @pytest.mark.asyncio
    async def test_when_defined_already_defined(self):
        """Test waiting for an element that already exists."""
        registry = ElementRegistry()
        registry.define("x-widget", dict)

        assert await registry.when_defined("x-widget") is dict

    @pytest.mark.asyncio
    async def test_when_defined_wakes_all_waiters(self):
        """Test that one definition wakes every waiter."""
        registry = ElementRegistry()

        waiters = [asyncio.ensure_future(registry.when_defined("x-widget")) for _ in range(3)]
        await asyncio.sleep(0)
        registry.define("x-widget", dict)

        assert await asyncio.gather(*waiters) == [dict, dict, dict]

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_break_define(self):
        """Test that a waiter that gave up is skipped."""
        registry = ElementRegistry()

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(registry.when_defined("x-widget"), timeout=0.01)
        registry.define("x-widget", dict)

        assert "x-widget" in registry


# ============================================================
# MANAGER SLOT TESTS
# ============================================================

class TestManagerSlot:
    """Tests for ManagerSlot."""

    def test_empty_slot(self):
        """Test a fresh slot."""
        slot = ManagerSlot()

        assert slot.present is False
        assert slot.get() is None

    def test_publish(self):
        """Test publishing a handle."""
        slot = ManagerSlot()
        handle = object()

        slot.publish(handle)

        assert slot.present is True
        assert slot.get() is handle

    def test_publish_same_handle_is_noop(self):
        """Test that republishing the same object is allowed."""
        slot = ManagerSlot()
        handle = object()

        slot.publish(handle)
        slot.publish(handle)

        assert slot.get() is handle

    def test_publish_different_handle_rejected(self):
        """Test that the slot is write-once."""
        slot = ManagerSlot()
        first = object()
        slot.publish(first)

        with pytest.raises(PublishError) as exc_info:
            slot.publish(object())

        assert exc_info.value.recoverable is False
        assert slot.get() is first

    def test_publish_none_rejected(self):
        """Test that an empty handle cannot be published."""
        with pytest.raises(PublishError):
            ManagerSlot().publish(None)


# ============================================================
# CALLBACK QUEUE TESTS
# ============================================================

class TestReadinessCallbackQueue:
    """Tests for ReadinessCallbackQueue."""

    def test_flush_in_insertion_order(self):
        """Test FIFO delivery."""
        queue = ReadinessCallbackQueue()
        seen = []
        for name in ("a", "b", "c"):
            queue.enqueue(lambda value, name=name: seen.append((name, value)))

        failures = queue.flush(42)

        assert seen == [("a", 42), ("b", 42), ("c", 42)]
        assert failures == []
        assert len(queue) == 0

    def test_flush_isolates_failures(self):
        """Test that a failing callback is reported, not propagated."""
        queue = ReadinessCallbackQueue()
        seen = []

        def broken(value):
            raise ValueError("bad subscriber")

        queue.enqueue(seen.append)
        queue.enqueue(broken)
        queue.enqueue(seen.append)

        failures = queue.flush("ready")

        assert seen == ["ready", "ready"]
        assert len(failures) == 1
        assert isinstance(failures[0], CallbackFailure)
        assert failures[0].context["position"] == 1
        assert failures[0].context["cause_type"] == "ValueError"
        assert "broken" in failures[0].context["callback"]

    def test_flush_empties_queue(self):
        """Test that a second flush delivers nothing."""
        queue = ReadinessCallbackQueue()
        seen = []
        queue.enqueue(seen.append)

        queue.flush(1)
        queue.flush(2)

        assert seen == [1]

    def test_snapshot_does_not_drain(self):
        """Test snapshot()."""
        queue = ReadinessCallbackQueue()
        queue.enqueue(print)

        assert queue.snapshot() == (print,)
        assert len(queue) == 1

    def test_enqueue_rejects_non_callable(self):
        """Test enqueue() type check."""
        with pytest.raises(TypeError):
            ReadinessCallbackQueue().enqueue(None)


# ============================================================
# MODEL TESTS
# ============================================================

class TestModels:
    """Tests for LoadContext and ModuleStep."""

    def test_require_missing_dependency(self):
        """Test that requiring an unloaded step fails clearly."""
        ctx = LoadContext(registry=ElementRegistry(), storage=MemoryStorage())

        with pytest.raises(LoadFailure) as exc_info:
            ctx.require("modal", needed_by="settings_modal")

        assert exc_info.value.context["dependency"] == "modal"
        assert exc_info.value.context["step"] == "settings_modal"

    def test_mark_loaded_is_monotonic(self):
        """Test that loaded never goes back and keeps its first timestamp."""
        async def noop(ctx):
            return None

        step = ModuleStep(name="modal", resource="Modal.js", load=noop)

        step.mark_loaded()
        first_loaded_at = step.loaded_at
        step.mark_loaded()

        assert step.loaded is True
        assert step.loaded_at == first_loaded_at
