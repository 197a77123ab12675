"""
Ownership of one native processor instance.

A ProcessorHandle pairs one ``spp_new`` with exactly one ``spp_free``, both
through the library that was active when the handle was created.
"""

import threading
from typing import Any

from .._bindings import get_lib
from .._logging import scoped_logger
from ..exceptions import AllocationError, StateError
from ._bindings import call_spp_free, call_spp_new

logger = scoped_logger("processor")

__all__ = ["ProcessorHandle"]


class ProcessorHandle:
    """
    Exclusive owner of a native processor pointer.

    The pointer is released exactly once: by ``release()``, by leaving a
    ``with`` block, or when the handle is garbage-collected. Concurrent
    ``release()`` calls are serialized so the native destructor runs once.

    The handle keeps the library it was created with; ``set_lib()`` does
    not affect existing handles.

    Raises
    ------
        AllocationError: If the native constructor returns NULL.
        LibraryError: If no native library can be loaded.
    """

    __slots__ = ("_ptr", "_lib", "_lock", "__weakref__")

    def __init__(self):
        self._lock = threading.Lock()
        self._ptr: int | None = None
        self._lib = get_lib()
        ptr = call_spp_new(self._lib)
        if not ptr:
            raise AllocationError()
        self._ptr = ptr
        logger.debug("Processor handle created", extra={"ptr": hex(ptr)})

    @property
    def ptr(self) -> int:
        """The native pointer, raising if already released."""
        ptr = self._ptr
        if ptr is None:
            raise StateError("Processor is closed", code="PROCESSOR_CLOSED")
        return ptr

    @property
    def lib(self) -> Any:
        """The native library that owns this processor."""
        return self._lib

    @property
    def released(self) -> bool:
        return self._ptr is None

    def release(self) -> None:
        """Free the native processor. Idempotent; never raises."""
        with self._lock:
            ptr, self._ptr = self._ptr, None
        if ptr:
            call_spp_free(self._lib, ptr)
            logger.debug("Processor handle released", extra={"ptr": hex(ptr)})

    def __enter__(self) -> "ProcessorHandle":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.release()

    def __del__(self):
        try:
            if getattr(self, "_lock", None) is not None:
                self.release()
        except Exception:
            pass

    def __repr__(self) -> str:
        if self._ptr is None:
            return "ProcessorHandle(released)"
        return f"ProcessorHandle({hex(self._ptr)})"
