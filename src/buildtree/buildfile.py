"""Build files: declare properties and targets in YAML."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jinja2
import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import BuildFileError, DuplicateTargetError
from .resolve import Resolver
from .targets import Target
from .tasks import Task, create_task
from .tree import TargetTree

logger = logging.getLogger(__name__)

_BUILD_FILE_SUFFIXES = (".yaml", ".yml")


class _TargetBlock(BaseModel):
    """Field types of a target block; bools accept the usual YAML and string spellings."""

    description: str = ""
    depends_on: list[str] | str = Field(default_factory=list)
    hidden: bool = False
    default: bool = False
    tasks: list[Any] = Field(default_factory=list)


_TARGET_KEYS = set(_TargetBlock.model_fields)


def load(
    file: str | Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load a single build file, rendering it as a Jinja2 template first."""
    file = Path(file)
    try:
        text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildFileError(file, f"cannot read build file: {exc}") from exc
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        text = env.from_string(text).render(context or {})
    except jinja2.TemplateError as exc:
        raise BuildFileError(file, str(exc)) from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise BuildFileError(file, f"invalid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BuildFileError(file, f"root must be a mapping, got {type(data).__name__}")
    return data


def scan(
    path: str | Path,
    *,
    context: dict[str, Any] | None = None,
    recurse: bool = True,
) -> BuildScript:
    """Load every build file under `path` and return the resulting BuildScript."""
    script = BuildScript(context=context)
    script.scan(path, recurse=recurse)
    return script


@dataclass
class TaskRef:
    """A task declared in a build file: a registered task type plus its attributes."""

    name: str
    attrs: dict[str, Any] = field(default_factory=dict)

    def resolve(self) -> Task:
        return create_task(self.name, dict(self.attrs))


@dataclass
class TargetRef:
    """A target declared in a build file."""

    name: str
    depends_on: list[str] = field(default_factory=list)
    tasks: list[TaskRef] = field(default_factory=list)
    description: str = ""
    hidden: bool = False
    default: bool = False

    def resolve(self, tree: TargetTree) -> Target:
        """Create the target and add it to `tree`."""
        target = Target(name=self.name, description=self.description, hidden=self.hidden)
        target.depends_on(*self.depends_on)
        target.add_task(*(ref.resolve() for ref in self.tasks))
        target.add_to_tree(tree)
        if self.default:
            target.set_as_default()
        return target


def _parse_task(path: Path, target_name: str, block: Any) -> TaskRef:
    """Parse one entry of a target's task list.

    Each entry is a single-key mapping of task type to attributes:
        tasks:
          - shell: {command: "make"}
    """
    if not isinstance(block, dict) or len(block) != 1:
        raise BuildFileError(
            path, f"task in target '{target_name}' must map one task type to its attributes"
        )
    ((type_name, attrs),) = block.items()
    if attrs is None:
        attrs = {}
    if not isinstance(attrs, dict):
        raise BuildFileError(path, f"attributes of task '{type_name}' must be a mapping")
    return TaskRef(name=str(type_name), attrs=attrs)


def _parse_target(path: Path, name: str, data: Any) -> TargetRef:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise BuildFileError(path, f"target '{name}' must be a mapping")

    unknown = sorted(set(data) - _TARGET_KEYS)
    if unknown:
        raise BuildFileError(path, f"target '{name}' has unknown keys: {', '.join(unknown)}")

    # an empty key (`hidden:`) means the default
    try:
        block = _TargetBlock(**{k: v for k, v in data.items() if v is not None})
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise BuildFileError(path, f"target '{name}' is invalid: {problems}") from exc

    depends_on = [block.depends_on] if isinstance(block.depends_on, str) else block.depends_on

    return TargetRef(
        name=name,
        depends_on=depends_on,
        tasks=[_parse_task(path, name, item) for item in block.tasks],
        description=block.description,
        hidden=block.hidden,
        default=block.default,
    )


class BuildScript(Mapping[str, TargetRef]):
    """Accumulates build files and resolves their target declarations on access."""

    def __init__(self, context: dict[str, Any] | None = None) -> None:
        self._context = dict(context or {})
        self._raw_properties: dict[str, Any] = {}
        self._pending_targets: dict[str, tuple[Path, Any]] = {}
        self._refs: dict[str, TargetRef] = {}

    def _base_properties(self) -> dict[str, Any]:
        return {"env": os.environ, "cwd": os.getcwd, **self._context}

    @property
    def properties(self) -> dict[str, Any]:
        """Build properties from all loaded files, with references resolved."""
        return Resolver(self._base_properties()).resolve(self._raw_properties)

    def add(self, ref: TargetRef) -> None:
        """Register a target declaration directly."""
        if ref.name in self._refs or ref.name in self._pending_targets:
            raise DuplicateTargetError(ref.name)
        self._refs[ref.name] = ref

    def load(self, path: str | Path) -> None:
        """Load one build file; target names must be unique across files."""
        path = Path(path)
        logger.info("Loading build file %s", path)
        data = load(path, context=self._context)

        properties = data.get("properties") or {}
        if not isinstance(properties, dict):
            raise BuildFileError(path, "'properties' must be a mapping")

        targets = data.get("targets") or {}
        if not isinstance(targets, dict):
            raise BuildFileError(path, "'targets' must be a mapping")

        found = {str(name): target_data for name, target_data in targets.items()}
        for name in found:
            if name in self._pending_targets or name in self._refs:
                raise DuplicateTargetError(name)

        # nothing from this file is kept unless all of it is accepted
        for name, target_data in found.items():
            logger.debug("Found target '%s' in %s", name, path)
            self._pending_targets[name] = (path, target_data)
        self._raw_properties.update(properties)

    def scan(self, path: str | Path, *, recurse: bool = True) -> None:
        """Load a build file, or every build file in a directory."""
        path = Path(path)
        if path.is_file():
            self.load(path)
            return
        if not path.is_dir():
            raise BuildFileError(path, "no such file or directory")

        pattern = "**/*" if recurse else "*"
        files = sorted(
            p for p in path.glob(pattern) if p.is_file() and p.suffix in _BUILD_FILE_SUFFIXES
        )
        logger.debug("Found %d build file(s) in %s", len(files), path)
        for file in files:
            self.load(file)

    def _resolve(self) -> dict[str, TargetRef]:
        resolver = Resolver({**self._base_properties(), **self.properties})
        refs: dict[str, TargetRef] = {}
        for name, (path, data) in self._pending_targets.items():
            refs[name] = _parse_target(path, name, resolver.resolve(data))
        refs.update(self._refs)
        return refs

    def build_tree(self, tree: TargetTree | None = None) -> TargetTree:
        """Create a target for every declaration and return the populated tree."""
        tree = tree if tree is not None else TargetTree()
        for ref in self._resolve().values():
            ref.resolve(tree)
        return tree

    def __getitem__(self, name: str) -> TargetRef:
        return self._resolve()[name]

    def __contains__(self, name: object) -> bool:
        return name in self._pending_targets or name in self._refs

    def __iter__(self) -> Iterator[str]:
        return iter(self._resolve())

    def __len__(self) -> int:
        return len(self._pending_targets) + len(self._refs)

    def __repr__(self) -> str:
        return f"BuildScript(targets={len(self)}, properties={len(self._raw_properties)})"
