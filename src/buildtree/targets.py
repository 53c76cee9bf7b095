"""Target model: a named, dependency-aware unit of work."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar, Self

from pydantic import BaseModel, Field, PrivateAttr

from .context import Context
from .errors import ActionAlreadySetError, DetachedTargetError
from .tasks import Task

if TYPE_CHECKING:
    from .tree import TargetTree

logger = logging.getLogger(__name__)


class Target(BaseModel, Task):
    """A named collection of an action and tasks, run after its dependencies.

    Dependencies are stored by name and only looked up in the owning tree when
    the target executes, so a target may depend on one that is registered later.
    """

    model_config = {"arbitrary_types_allowed": True}

    log_duration: ClassVar[bool] = True

    name: str = Field(frozen=True)
    description: str = ""
    hidden: bool = False
    dependencies: list[str] = Field(default_factory=list)
    action: Callable[[Context], Any] | None = None
    tasks: list[Task] = Field(default_factory=list)

    _tree: TargetTree | None = PrivateAttr(default=None)

    @property
    def tree(self) -> TargetTree | None:
        """The tree this target was added to, if any."""
        return self._tree

    @property
    def log_label(self) -> str:
        return self.name

    def depends_on(self, *targets: str | Target) -> Self:
        """Append dependencies, given as target names or targets."""
        for dep in targets:
            self.dependencies.append(dep.name if isinstance(dep, Target) else dep)
        return self

    def do(self, action: Callable[[Context], Any]) -> Self:
        """Set the target action; it may only be set once."""
        if self.action is not None:
            raise ActionAlreadySetError(self.name)
        self.action = action
        return self

    def override_do(self, action: Callable[[Context], Any]) -> Self:
        """Replace the target action, whether or not one was set."""
        self.action = action
        return self

    def add_task(self, *tasks: Task) -> Self:
        self.tasks.extend(tasks)
        return self

    def set_as_default(self) -> Self:
        """Make this the default target of its tree."""
        if self._tree is None:
            raise DetachedTargetError(self.name)
        self._tree.set_default_target(self)
        return self

    def set_description(self, description: str) -> Self:
        self.description = description
        return self

    def set_as_hidden(self) -> Self:
        """Hide the target from listings; it can still be executed."""
        self.hidden = True
        return self

    def add_to_tree(self, tree: TargetTree) -> TargetTree:
        """Attach this target to `tree` and register it by name."""
        tree.add_target(self)
        self._tree = tree
        return tree

    def do_execute(self, ctx: Context) -> int:
        if self._tree is None:
            raise DetachedTargetError(self.name)

        # marking before dependency resolution is what stops a cycle from recursing
        self._tree.mark_target_as_executed(self)
        self._tree.ensure_dependencies_executed(ctx, self.name)

        logger.info("Executing target '%s'", self.name)

        # a target may only sequence its dependencies and tasks
        if self.action is not None:
            if ctx.dry_run:
                logger.info("[DRY RUN] Would run action of target '%s'", self.name)
            else:
                self.action(ctx)

        result = 0
        for item in self.tasks:
            result = item.execute(ctx)
        return result
