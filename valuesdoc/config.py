"""Configuration loading for valuesdoc (.valuesdoc.yml or a JSON config file)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".valuesdoc.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be read or parsed."""


@dataclass
class CommentsConfig:
    """How documentation comments are introduced in the values file."""

    # Regex fragment, interpolated as-is into every tag pattern.
    format: str = "##"


@dataclass
class TagsConfig:
    """Keywords that identify each kind of tag comment."""

    param: str = "@param"
    section: str = "@section"
    skip: str = "@skip"
    extra: str = "@extra"
    description_start: str = "@descriptionStart"
    description_end: str = "@descriptionEnd"


@dataclass
class ModifiersConfig:
    """Modifier tokens understood inside a tag's ``[...]`` list."""

    array: str = "array"
    object: str = "object"
    string: str = "string"
    nullable: str = "nullable"
    default: str = "default"


@dataclass
class GeneratorConfig:
    """Represents the settings used to scan and merge a values file."""

    comments: CommentsConfig = field(default_factory=CommentsConfig)
    tags: TagsConfig = field(default_factory=TagsConfig)
    modifiers: ModifiersConfig = field(default_factory=ModifiersConfig)
    source: Optional[Path] = None


def load_config(config_path: Optional[Path] = None) -> GeneratorConfig:
    """Load configuration from disk, falling back to defaults."""
    if config_path is None:
        return GeneratorConfig()

    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        config_file = (config_path / CONFIG_FILENAME).resolve()
        if not config_file.exists():
            return GeneratorConfig()
    else:
        config_file = config_path.resolve()
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_file}")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    comments_data = _as_dict(data.get("comments"))
    comments = CommentsConfig()
    comments.format = _as_str(comments_data.get("format")) or comments.format

    tags_data = _as_dict(data.get("tags"))
    defaults = TagsConfig()
    tags = TagsConfig(
        param=_as_str(tags_data.get("param")) or defaults.param,
        section=_as_str(tags_data.get("section")) or defaults.section,
        skip=_as_str(tags_data.get("skip")) or defaults.skip,
        extra=_as_str(tags_data.get("extra")) or defaults.extra,
        description_start=_as_str(tags_data.get("descriptionStart"))
        or defaults.description_start,
        description_end=_as_str(tags_data.get("descriptionEnd")) or defaults.description_end,
    )

    modifiers_data = _as_dict(data.get("modifiers"))
    modifier_defaults = ModifiersConfig()
    modifiers = ModifiersConfig(
        array=_as_str(modifiers_data.get("array")) or modifier_defaults.array,
        object=_as_str(modifiers_data.get("object")) or modifier_defaults.object,
        string=_as_str(modifiers_data.get("string")) or modifier_defaults.string,
        nullable=_as_str(modifiers_data.get("nullable")) or modifier_defaults.nullable,
        default=_as_str(modifiers_data.get("default")) or modifier_defaults.default,
    )

    return GeneratorConfig(
        comments=comments,
        tags=tags,
        modifiers=modifiers,
        source=config_file,
    )


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    if path.suffix.lower() == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None
