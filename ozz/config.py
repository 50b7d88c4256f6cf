"""YAML rule configuration: loading, validation, and typed tables.

The engine in :mod:`ozz.processor` consumes the typed records defined here and
never re-validates them. Validation happens exactly once, when the YAML files
are read, using Pydantic.

Config directory
----------------
``OZZ_CONFIG_DIR`` when set, otherwise ``./config`` under the current working
directory. Files:

- ``categories.yaml`` (required): ``essencial`` and ``estilo_de_vida`` groups,
  each a ``name -> id`` mapping.
- ``rules.yaml`` (required): ordered list of ``{pattern, category, note?}``.
- ``rename.yaml`` (required): ordered ``glob -> replacement`` mapping.
- ``tags.yaml`` (required): ``category name -> [tag, ...]``.
- ``pix.yaml`` (optional): ``key -> {description, category}`` overrides.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, TypeAlias, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from .logging_setup import get_logger

_logger = get_logger("ozz.config")


class ConfigError(ValueError):
    """Raised when a config file is missing, unparsable, or fails validation."""


# ---------------------------------------------------------------------------
# Typed tables consumed by the engine
# ---------------------------------------------------------------------------


class Rule(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    pattern: str = Field(min_length=1)
    category: str = Field(min_length=1)
    note: str | None = None


@dataclass(frozen=True)
class CategoryTable:
    """Category ids grouped as essential vs lifestyle, usable in both directions.

    The reverse ``id -> name`` map is built once at construction.
    """

    essential: Mapping[str, int]
    lifestyle: Mapping[str, int]
    _names_by_id: dict[int, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        names: dict[int, str] = {}
        for group in (self.essential, self.lifestyle):
            for name, cid in group.items():
                names.setdefault(cid, name)
        object.__setattr__(self, "_names_by_id", names)

    def id_for(self, name: str) -> int | None:
        if name in self.essential:
            return self.essential[name]
        return self.lifestyle.get(name)

    def name_for(self, category_id: int | None) -> str | None:
        if not category_id:
            return None
        return self._names_by_id.get(category_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._names_by_id

    def __len__(self) -> int:
        return len(self.essential) + len(self.lifestyle)


M = TypeVar("M", bound=BaseModel)

RenamePairs: TypeAlias = tuple[tuple[str, str], ...]
"""Glob pattern -> replacement pairs in declaration order."""

TagTable: TypeAlias = Mapping[str, tuple[str, ...]]


@dataclass(frozen=True, slots=True)
class PixEntry:
    description: str
    category: str


@dataclass(frozen=True, slots=True)
class RuleConfig:
    categories: CategoryTable
    rules: tuple[Rule, ...]
    rename: RenamePairs
    tags: TagTable
    pix: Mapping[str, PixEntry] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# File schemas
# ---------------------------------------------------------------------------


class _CategoriesFile(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    essencial: dict[str, int]
    estilo_de_vida: dict[str, int]


class _RulesFile(RootModel[list[Rule]]):
    pass


class _RenameFile(RootModel[dict[str, str]]):
    pass


class _TagsFile(RootModel[dict[str, list[str]]]):
    pass


class _PixEntryModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str
    category: str


class _PixFile(RootModel[dict[str, _PixEntryModel]]):
    pass


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def get_config_dir(config_dir: str | os.PathLike[str] | None = None) -> Path:
    """Return the directory holding the YAML rule files."""

    if config_dir is not None:
        return Path(config_dir).expanduser().resolve()
    root = os.getenv("OZZ_CONFIG_DIR")
    if root and root.strip():
        return Path(root).expanduser().resolve()
    return (Path.cwd() / "config").resolve()


def _format_issues(err: ValidationError) -> str:
    lines = []
    for issue in err.errors():
        loc = ".".join(str(p) for p in issue["loc"]) or "<root>"
        lines.append(f"  - {loc}: {issue['msg']}")
    return "\n".join(lines)


def _read_yaml(path: Path, filename: str) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load {filename}: {e}") from e


def _validate(filename: str, model: type[M], raw: Any) -> M:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Validation failed for {filename}:\n{_format_issues(e)}") from e


def _load_yaml(
    filename: str, model: type[M], config_dir: str | os.PathLike[str] | None
) -> M:
    path = get_config_dir(config_dir) / filename
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    return _validate(filename, model, _read_yaml(path, filename))


def _load_optional_yaml(
    filename: str, model: type[M], config_dir: str | os.PathLike[str] | None
) -> M | None:
    """Like :func:`_load_yaml`, but an absent or empty file yields ``None``."""

    path = get_config_dir(config_dir) / filename
    if not path.exists():
        return None
    raw = _read_yaml(path, filename)
    if raw is None:
        return None
    return _validate(filename, model, raw)


def load_categories(config_dir: str | os.PathLike[str] | None = None) -> CategoryTable:
    parsed = _load_yaml("categories.yaml", _CategoriesFile, config_dir)
    return CategoryTable(essential=parsed.essencial, lifestyle=parsed.estilo_de_vida)


def load_rules(config_dir: str | os.PathLike[str] | None = None) -> tuple[Rule, ...]:
    return tuple(_load_yaml("rules.yaml", _RulesFile, config_dir).root)


def load_rename(config_dir: str | os.PathLike[str] | None = None) -> RenamePairs:
    parsed = _load_yaml("rename.yaml", _RenameFile, config_dir)
    # YAML mappings load into insertion-ordered dicts; freeze that order here.
    return tuple(parsed.root.items())


def load_tags(config_dir: str | os.PathLike[str] | None = None) -> TagTable:
    parsed = _load_yaml("tags.yaml", _TagsFile, config_dir)
    return {name: tuple(tags) for name, tags in parsed.root.items()}


def load_pix(config_dir: str | os.PathLike[str] | None = None) -> dict[str, PixEntry]:
    parsed = _load_optional_yaml("pix.yaml", _PixFile, config_dir)
    if parsed is None:
        return {}
    return {
        key: PixEntry(description=e.description, category=e.category)
        for key, e in parsed.root.items()
    }


def load_all_config(config_dir: str | os.PathLike[str] | None = None) -> RuleConfig:
    """Load and validate every rule file into a single :class:`RuleConfig`."""

    cfg = RuleConfig(
        categories=load_categories(config_dir),
        rules=load_rules(config_dir),
        rename=load_rename(config_dir),
        tags=load_tags(config_dir),
        pix=load_pix(config_dir),
    )
    _logger.debug(
        "config:loaded dir=%s categories=%d rules=%d rename=%d tags=%d pix=%d",
        get_config_dir(config_dir),
        len(cfg.categories),
        len(cfg.rules),
        len(cfg.rename),
        len(cfg.tags),
        len(cfg.pix),
    )
    return cfg


# ---------------------------------------------------------------------------
# Validation report (``ozz config validate``)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ConfigFileReport:
    name: str
    status: Literal["ok", "error", "warning"]
    count: int
    message: str | None = None


def validate_config(
    config_dir: str | os.PathLike[str] | None = None,
) -> list[ConfigFileReport]:
    """Validate each rule file independently and report per-file status.

    Never raises for config problems; inspect ``status == "error"`` entries.
    """

    checks: list[tuple[str, Callable[[Any], Any], Callable[[Any], int]]] = [
        ("categories.yaml", load_categories, len),
        ("rules.yaml", load_rules, len),
        ("rename.yaml", load_rename, len),
        ("tags.yaml", load_tags, len),
    ]

    reports: list[ConfigFileReport] = []
    for name, loader, counter in checks:
        try:
            value = loader(config_dir)
        except ConfigError as e:
            reports.append(ConfigFileReport(name, "error", 0, str(e)))
            continue
        reports.append(ConfigFileReport(name, "ok", counter(value)))

    try:
        pix = load_pix(config_dir)
    except ConfigError as e:
        reports.append(ConfigFileReport("pix.yaml", "error", 0, str(e)))
    else:
        if pix:
            reports.append(ConfigFileReport("pix.yaml", "ok", len(pix)))
        else:
            reports.append(
                ConfigFileReport("pix.yaml", "warning", 0, "not found (optional)")
            )

    return reports
