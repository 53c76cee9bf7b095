"""Runner: select targets from a tree and execute them in a single run."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .context import Context
from .errors import NoDefaultTargetError, UnknownTargetError
from .tree import TargetTree

logger = logging.getLogger(__name__)


class Runner:
    """Drives one run over a target tree."""

    def __init__(
        self,
        tree: TargetTree,
        *,
        properties: dict[str, Any] | None = None,
    ) -> None:
        self.tree = tree
        self.properties = dict(properties or {})

    def select(self, targets: str | Sequence[str] = ()) -> list[str]:
        """Return the names to run, falling back to the default target."""
        if isinstance(targets, str):
            targets = [targets]
        if not targets:
            default = self.tree.default_target
            if default is None:
                raise NoDefaultTargetError()
            return [default.name]

        missing = self.tree.missing_targets(targets)
        if missing:
            raise UnknownTargetError(missing)
        return list(targets)

    def run(self, targets: str | Sequence[str] = (), *, dry_run: bool = False) -> int:
        """Run the requested targets (or the default one) and return the last result code."""
        names = self.select(targets)
        ctx = Context(self.properties, dry_run=dry_run)
        logger.info("Running target(s): %s", ", ".join(names))

        result = 0
        for name in names:
            try:
                result = self.tree.run_target(ctx, name)
            except Exception as exc:
                logger.error("Target '%s' failed: %s", name, exc)
                raise
        logger.info("Build finished with result %d", result)
        return result

    def describe(self) -> list[tuple[str, str]]:
        """List (name, description) of every visible target."""
        return [(t.name, t.description) for t in self.tree.visible_targets()]
