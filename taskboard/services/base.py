from __future__ import annotations

import functools
import threading
from collections.abc import Callable
from typing import TypeVar

LatencyHook = Callable[[], None]

F = TypeVar("F", bound=Callable)


def no_latency() -> None:
    return None


class StoreService:
    """Shared plumbing for the store-facing services.

    Public operations run under one re-entrant lock shared by every service
    of a store, so each call completes before the next one is observed. The
    latency hook runs once per public call, after the work is done.
    """

    def __init__(self, lock: threading.RLock | None = None, latency: LatencyHook | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._latency = latency or no_latency


def store_operation(method: F) -> F:
    @functools.wraps(method)
    def wrapper(self: StoreService, *args, **kwargs):
        with self._lock:
            result = method(self, *args, **kwargs)
            self._latency()
            return result

    return wrapper  # type: ignore[return-value]
