"""
Non-critical side effects.

A ``NonCritical`` wraps work whose failure must never reach the caller of the
primary operation (notification delivery, file cleanup). Failures are logged
with a traceback and reported as ``None``; nothing is retried.
"""
from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

from loguru import logger

T = TypeVar("T")


class NonCritical(Generic[T]):
    def __init__(self, name: str, func: Callable[..., T]):
        self.name = name
        self.func = func

    def __call__(self, *args, **kwargs) -> Optional[T]:
        try:
            return self.func(*args, **kwargs)
        except Exception:
            logger.exception(f"Non-critical side effect '{self.name}' failed")
            return None

    def __repr__(self) -> str:
        return f"NonCritical({self.name!r})"


def non_critical(name: str) -> Callable[[Callable[..., T]], NonCritical[T]]:
    """Decorator form of ``NonCritical``."""

    def wrap(func: Callable[..., T]) -> NonCritical[T]:
        return NonCritical(name, func)

    return wrap
