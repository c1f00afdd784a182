"""
Exclusive-access guard for the orchestrator's mutable resources.

Each Grid and Robot lives inside one ``SharedResource``. Callers hold the lock for
exactly one operation::

    with grid_resource.access() as grid:
        grid.place_flag(x, z)

An exception escaping the ``with`` block poisons the resource, because the
guarded object may have been left half-updated. Exception types listed in
``recoverable`` come from operations that roll back on failure and pass through
without poisoning. Every later ``access()`` raises
``ResourcePoisonedError`` until an operator calls ``clear_poison()``. The error
is fatal to the calling operation only; the process keeps running.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Generic, Iterator, Optional, Tuple, Type, TypeVar

from .logging_utils import log_error

T = TypeVar("T")


class SharedResourceError(RuntimeError):
    """Base class for failures to acquire a shared resource."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class ResourcePoisonedError(SharedResourceError):
    """Raised when a previous operation failed while holding the resource."""

    def __init__(self, name: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(name, f"Shared resource '{name}' is poisoned{detail}")


class ResourceLockTimeout(SharedResourceError):
    """Raised when the lock could not be acquired within the configured timeout."""

    def __init__(self, name: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(name, f"Timed out after {timeout}s waiting for shared resource '{name}'")


class SharedResource(Generic[T]):
    """Owns one mutable object and serializes access to it."""

    def __init__(
        self,
        value: T,
        *,
        name: str,
        timeout: float = -1,
        recoverable: Tuple[Type[Exception], ...] = (),
    ) -> None:
        self._value = value
        self._lock = threading.Lock()
        self.name = name
        self.timeout = timeout
        # Errors raised by operations that roll back their own changes
        self.recoverable = recoverable
        self._poison: Optional[BaseException] = None

    @property
    def poisoned(self) -> bool:
        return self._poison is not None

    @contextmanager
    def access(self) -> Iterator[T]:
        """Acquire the lock for one operation and yield the guarded object."""
        if not self._lock.acquire(timeout=self.timeout):
            raise ResourceLockTimeout(self.name, self.timeout)
        try:
            if self._poison is not None:
                raise ResourcePoisonedError(self.name, self._poison)
            try:
                yield self._value
            except self.recoverable:
                raise
            except Exception as exc:
                self._poison = exc
                log_error(f"Shared resource '{self.name}' poisoned by {exc!r}")
                raise
        finally:
            self._lock.release()

    def clear_poison(self) -> None:
        """Accept the guarded object's current state and allow access again."""
        with self._lock:
            self._poison = None
