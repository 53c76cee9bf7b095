"""Resolver for ${...} property references in build file values."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from .errors import UnresolvedPropertyError

logger = logging.getLogger(__name__)

_REF_PATTERN = re.compile(r"\$\$\{|(\$\{([^{}]+)\})")
_WHOLE_REF = re.compile(r"\$\{([^{}]+)\}")


class Resolver:
    """Interpolate ${name} and ${dotted.name} references against a mapping of properties."""

    def __init__(self, properties: Mapping[str, Any] | None = None) -> None:
        self._properties: Mapping[str, Any] = properties or {}

    def lookup(self, ref: str) -> Any:
        """Look up a dotted reference; mappings first, then attributes."""
        current: Any = self._properties
        for part in ref.split("."):
            if isinstance(current, Mapping) and part in current:
                current = current[part]
            elif hasattr(current, part) and not isinstance(current, Mapping):
                current = getattr(current, part)
            else:
                raise UnresolvedPropertyError(ref)

        if callable(current) and not isinstance(current, type):
            current = current()
        return current

    def interpolate(self, value: str) -> Any:
        """Interpolate references in a single string.

        A string consisting of exactly one ${ref} yields the referenced object
        unchanged; references inside longer strings are stringified. $${ gives
        a literal ${.
        """
        if "${" not in value:
            return value

        whole = _WHOLE_REF.fullmatch(value)
        if whole:
            return self.lookup(whole.group(1).strip())

        def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
            if m.group(0) == "$${":
                return "${"
            return str(self.lookup(m.group(2).strip()))

        return _REF_PATTERN.sub(_replace, value)

    def resolve(self, data: Any) -> Any:
        """Return a copy of `data` with every string value interpolated."""
        if isinstance(data, dict):
            return {key: self.resolve(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self.resolve(item) for item in data]
        if isinstance(data, str):
            return self.interpolate(data)
        return data
