"""
Context-wide status reporting for the configuration engine.

Components never raise for recoverable problems. They push a Status into the
StatusManager owned by their Context and carry on, so one bad property does
not abort a whole configuration pass.

Key components:
- Status: immutable record of one report (level, message, origin, cause)
- StatusManager: collects statuses and notifies listeners
- Context: the shared object every component reports into
- ContextAwareBase: mixin providing add_info/add_warn/add_error
"""

from dataclasses import dataclass, field
from enum import IntEnum
import logging
import time
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class Level(IntEnum):
    """Severity of a status report."""
    INFO = 0
    WARN = 1
    ERROR = 2


_LOG_LEVELS = {
    Level.INFO: logging.DEBUG,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Status:
    """Immutable record of a single report."""
    level: Level
    message: str
    origin: Any = None
    cause: Optional[BaseException] = None
    timestamp: float = field(default_factory=time.time)

    def __str__(self) -> str:
        text = f"{self.level.name} {self.message}"
        if self.cause is not None:
            text += f" - {type(self.cause).__name__}: {self.cause}"
        return text


class StatusManager:
    """Collects statuses for one Context.

    Thread safety: Not thread-safe (one configuration pass per thread).
    """

    def __init__(self):
        self._statuses: List[Status] = []
        self._listeners: List[Callable[[Status], None]] = []
        self._level = Level.INFO

    def add(self, status: Status) -> None:
        """Record a status and notify listeners."""
        self._statuses.append(status)
        if status.level > self._level:
            self._level = status.level
        for listener in self._listeners:
            try:
                listener(status)
            except Exception as e:
                logger.warning(f"Error in status listener: {e}")

    def add_listener(self, listener: Callable[[Status], None]) -> None:
        """Subscribe to new statuses."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[Status], None]) -> None:
        """Unsubscribe from new statuses."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get_copy_of_status_list(self) -> List[Status]:
        return list(self._statuses)

    def count(self, level: Optional[Level] = None) -> int:
        """Number of statuses, optionally restricted to one level."""
        if level is None:
            return len(self._statuses)
        return sum(1 for s in self._statuses if s.level == level)

    def get_level(self) -> Level:
        """Highest level reported so far."""
        return self._level

    def clear(self) -> None:
        self._statuses.clear()
        self._level = Level.INFO


class Context:
    """Shared reporting context for one configuration pass."""

    def __init__(self, name: str = "default"):
        self.name = name
        self.status_manager = StatusManager()

    def __repr__(self) -> str:
        return f"Context(name={self.name!r})"


class ContextAwareBase:
    """Mixin giving a component access to a Context and its status sink.

    Every status is mirrored to the logging module. Without a context the
    status is only logged.
    """

    def __init__(self, context: Optional[Context] = None):
        self._context = context

    @property
    def context(self) -> Optional[Context]:
        return self._context

    @context.setter
    def context(self, context: Optional[Context]) -> None:
        self._context = context

    def add_status(self, status: Status) -> None:
        logger.log(_LOG_LEVELS[status.level], f"{type(self).__name__}: {status.message}",
                   exc_info=status.cause if status.level is Level.ERROR else None)
        if self._context is not None:
            self._context.status_manager.add(status)

    def add_info(self, message: str) -> None:
        self.add_status(Status(Level.INFO, message, self))

    def add_warn(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.add_status(Status(Level.WARN, message, self, cause))

    def add_error(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.add_status(Status(Level.ERROR, message, self, cause))
