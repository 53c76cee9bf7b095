"""Task ABC, function tasks, and task type registration."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

from .context import Context
from .errors import UnknownTaskTypeError

logger = logging.getLogger(__name__)

# -- Task Registry --

_task_registry: dict[str, type[Task]] = {}


def task(name: str):
    """Register a Task class under a type name for use in build files."""

    def decorator(cls):
        _task_registry[name] = cls
        return cls

    return decorator


def create_task(type_name: str, attrs: dict[str, Any]) -> Task:
    """Instantiate a registered task type with keyword attributes."""
    if type_name not in _task_registry:
        raise UnknownTaskTypeError(type_name)
    task_cls = _task_registry[type_name]
    logger.debug("Creating task '%s' -> %s", type_name, task_cls.__name__)
    return task_cls(**attrs)


# -- Task ABC --


class Task(ABC):
    """A unit of work that returns an integer result code."""

    log_duration: ClassVar[bool] = False

    @property
    def log_label(self) -> str:
        """Name used for this task in log output."""
        return type(self).__name__

    def execute(self, ctx: Context) -> int:
        """Run the task; faults propagate to the caller unchanged."""
        started = time.perf_counter()
        try:
            result = self.do_execute(ctx)
        except Exception:
            if self.log_duration:
                logger.error(
                    "%s failed (took %.2f seconds)",
                    self.log_label,
                    time.perf_counter() - started,
                )
            raise
        if self.log_duration:
            logger.info(
                "%s finished (took %.2f seconds)",
                self.log_label,
                time.perf_counter() - started,
            )
        return result

    @abstractmethod
    def do_execute(self, ctx: Context) -> int:
        """Perform the work and return the result code."""


class FunctionTask(Task):
    """Run a plain callable as a task."""

    def __init__(self, func: Callable[[Context], Any], label: str | None = None) -> None:
        self.func = func
        self.label = label

    @property
    def log_label(self) -> str:
        return self.label or getattr(self.func, "__name__", type(self).__name__)

    def do_execute(self, ctx: Context) -> int:
        if ctx.dry_run:
            logger.info("[DRY RUN] Would run %s", self.log_label)
            return 0
        logger.debug("Running %s", self.log_label)
        result = self.func(ctx)
        return 0 if result is None else int(result)

    def __repr__(self) -> str:
        return f"FunctionTask({self.log_label!r})"
