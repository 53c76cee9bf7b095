"""TargetTree: the registry of targets and the per-run execution memo."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from .context import Context
from .errors import DuplicateTargetError, NoDefaultTargetError, UnknownTargetError
from .targets import Target

logger = logging.getLogger(__name__)


class TargetTree(Mapping[str, Target]):
    """Registered targets keyed by name, plus the set of targets executed in this run.

    A tree lives for a single run: names are only ever added to the executed
    set, so each target runs at most once no matter how many dependents
    reference it.
    """

    def __init__(self) -> None:
        self._targets: dict[str, Target] = {}
        self._executed: set[str] = set()
        self._execution_order: list[str] = []
        self._default_target: Target | None = None

    # -- Registration --

    def add_target(self, target: Target) -> None:
        """Register a target by name; names must be unique."""
        if target.name in self._targets:
            raise DuplicateTargetError(target.name)
        logger.debug("Registered target '%s'", target.name)
        self._targets[target.name] = target

    def create_target(self, name: str) -> Target:
        """Create a target, attach it to this tree and return it."""
        target = Target(name=name)
        target.add_to_tree(self)
        return target

    def get_target(self, name: str) -> Target:
        try:
            return self._targets[name]
        except KeyError:
            raise UnknownTargetError(name) from None

    def has_target(self, name: str) -> bool:
        return name in self._targets

    def missing_targets(self, names: Iterable[str]) -> list[str]:
        """Return the names that are not registered, preserving input order."""
        return [name for name in names if name not in self._targets]

    def visible_targets(self) -> list[Target]:
        """Return non-hidden targets in registration order."""
        return [t for t in self._targets.values() if not t.hidden]

    @property
    def default_target(self) -> Target | None:
        return self._default_target

    def set_default_target(self, target: Target) -> None:
        logger.debug("Default target set to '%s'", target.name)
        self._default_target = target

    # -- Execution --

    @property
    def executed_targets(self) -> tuple[str, ...]:
        """Names of the executed targets, in the order they were marked."""
        return tuple(self._execution_order)

    def is_executed(self, name: str) -> bool:
        return name in self._executed

    def mark_target_as_executed(self, target: Target) -> None:
        if target.name in self._executed:
            return
        self._executed.add(target.name)
        self._execution_order.append(target.name)

    def ensure_dependencies_executed(self, ctx: Context, target_name: str) -> None:
        """Execute each dependency of the named target that has not run yet."""
        target = self.get_target(target_name)
        for dep_name in target.dependencies:
            dependency = self.get_target(dep_name)
            if dep_name in self._executed:
                logger.debug(
                    "Skipping dependency '%s' of '%s'; already executed",
                    dep_name,
                    target_name,
                )
                continue
            logger.debug("Target '%s' depends on '%s'", target_name, dep_name)
            dependency.execute(ctx)

    def run_target(self, ctx: Context, name: str) -> int:
        """Execute a target by name unless it already ran in this tree."""
        target = self.get_target(name)
        if name in self._executed:
            logger.debug("Skipping target '%s'; already executed", name)
            return 0
        return target.execute(ctx)

    def run_default_target(self, ctx: Context) -> int:
        if self._default_target is None:
            raise NoDefaultTargetError()
        return self.run_target(ctx, self._default_target.name)

    # -- Mapping --

    def __getitem__(self, name: str) -> Target:
        return self._targets[name]

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def __iter__(self) -> Iterator[str]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __repr__(self) -> str:
        return f"TargetTree(targets={len(self._targets)}, executed={len(self._executed)})"
