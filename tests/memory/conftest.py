"""
Memory safety test fixtures.

Provides tools for:
- Counting native buffers and processors across a block of calls
- Weak reference tracking of collected processors
"""

import gc
import weakref
from dataclasses import dataclass

import pytest


@dataclass
class AllocationSnapshot:
    buffers_allocated: int
    buffers_freed: int
    handles_created: int
    handles_freed: int


class AllocationTracker:
    """Compare native allocation counters of a FakeNativeLibrary over time."""

    def __init__(self, lib):
        self.lib = lib
        self.start = self.snapshot()

    def snapshot(self) -> AllocationSnapshot:
        return AllocationSnapshot(
            self.lib.buffers_allocated,
            self.lib.buffers_freed,
            self.lib.handles_created,
            self.lib.handles_freed,
        )

    @property
    def buffers_allocated(self) -> int:
        return self.lib.buffers_allocated - self.start.buffers_allocated

    @property
    def buffers_freed(self) -> int:
        return self.lib.buffers_freed - self.start.buffers_freed

    @property
    def handles_created(self) -> int:
        return self.lib.handles_created - self.start.handles_created

    @property
    def handles_freed(self) -> int:
        return self.lib.handles_freed - self.start.handles_freed

    def assert_balanced(self):
        """Every buffer and processor allocated since the start was freed."""
        gc.collect()
        assert self.buffers_freed == self.buffers_allocated, (
            f"{self.buffers_allocated - self.buffers_freed} buffers leaked"
        )
        assert self.handles_freed == self.handles_created, (
            f"{self.handles_created - self.handles_freed} processors leaked"
        )
        assert self.lib.errors == []


@pytest.fixture
def allocations(fake_lib):
    """Allocation tracker started at the beginning of the test."""
    return AllocationTracker(fake_lib)


@pytest.fixture
def weak_tracker():
    """Track objects weakly and assert they were collected."""

    class WeakTracker:
        def __init__(self):
            self._refs: list[weakref.ref] = []

        def track(self, obj):
            self._refs.append(weakref.ref(obj))
            return obj

        def assert_collected(self):
            gc.collect()
            gc.collect()
            alive = [r for r in self._refs if r() is not None]
            assert not alive, f"{len(alive)} objects still alive"

    return WeakTracker()
