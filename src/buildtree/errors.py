"""Exception hierarchy for build configuration and execution."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class BuildError(Exception):
    """Base class for all buildtree errors."""


class ConfigurationError(BuildError):
    """A mistake in the build script; aborts the current run."""


class ActionAlreadySetError(ConfigurationError):
    """The primary action of a target was assigned twice."""

    def __init__(self, target_name: str) -> None:
        super().__init__(f"Target action was already set for '{target_name}'")
        self.target_name = target_name


class DetachedTargetError(ConfigurationError):
    """The target has not been added to a target tree."""

    def __init__(self, target_name: str) -> None:
        super().__init__(f"Target '{target_name}' must be added to a target tree first")
        self.target_name = target_name


class DuplicateTargetError(ConfigurationError):
    """A target with the same name is already registered."""

    def __init__(self, target_name: str) -> None:
        super().__init__(f"Duplicate target: '{target_name}'")
        self.target_name = target_name


class UnknownTargetError(ConfigurationError):
    """One or more target names could not be resolved."""

    def __init__(self, names: str | Iterable[str]) -> None:
        self.names = [names] if isinstance(names, str) else list(names)
        quoted = ", ".join(f"'{name}'" for name in self.names)
        super().__init__(f"Unknown target: {quoted}")


class NoDefaultTargetError(ConfigurationError):
    """No target was requested and no default target is set."""

    def __init__(self) -> None:
        super().__init__("No target specified and no default target is set")


class UnknownTaskTypeError(ConfigurationError):
    def __init__(self, type_name: str) -> None:
        super().__init__(f"Unknown task type: '{type_name}'")
        self.type_name = type_name


class UnresolvedPropertyError(ConfigurationError):
    def __init__(self, ref: str) -> None:
        super().__init__(f"undefined property '{ref}'")
        self.ref = ref


class BuildFileError(ConfigurationError):
    """A build file could not be rendered, parsed or interpreted."""

    def __init__(self, path: str | Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)
