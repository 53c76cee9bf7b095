"""Runtime execution context for a build run."""

from __future__ import annotations

from typing import Any


class Context:
    """Runtime state passed through every action and task of a run."""

    def __init__(
        self,
        properties: dict[str, Any] | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self.properties = dict(properties or {})
        self.dry_run = dry_run

    def get(self, name: str, default: Any = None) -> Any:
        """Return a build property, or `default` when it is not set."""
        return self.properties.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self.properties[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self.properties

    def __repr__(self) -> str:
        return f"Context(properties={len(self.properties)}, dry_run={self.dry_run})"
