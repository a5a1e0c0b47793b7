"""Flattens a parsed values file into typed ``Parameter`` entries."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from ..logging import get_logger
from ..models import Parameter
from ..paths import MISSING, flatten, get_array_prefix, get_path, resolve_literal_path

# Rendered in place of YAML null, following the Go templating convention.
NIL = "nil"

logger = get_logger("parser.values")


class ValuesParseError(RuntimeError):
    """Raised when the values file is not valid YAML."""


class ValuesLoader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as plain strings."""


ValuesLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", yaml.constructor.SafeConstructor.construct_yaml_str
)


def load_values(text: str, source: str = "<string>") -> Any:
    try:
        return yaml.load(text, Loader=ValuesLoader)
    except yaml.YAMLError as exc:
        raise ValuesParseError(f"Failed to parse {source}: {exc}") from exc


def classify(value: Any) -> Tuple[str, Any]:
    """Return ``(type tag, rendered value)`` for a flattened value."""
    if value is None:
        return NIL, NIL
    if isinstance(value, bool):
        return "boolean", value
    if isinstance(value, (int, float)):
        return "number", value
    if isinstance(value, list):
        return "array", value
    if isinstance(value, dict):
        return "object", value
    if isinstance(value, str):
        return "string", value
    return "string", str(value)


def _lookup(tree: Any, path: str) -> Tuple[Any, bool]:
    """Return ``(value, renderable)``; keys containing dots need the literal fallback."""
    value = get_path(tree, path)
    if value is not MISSING:
        return value, True
    segments = resolve_literal_path(tree, path)
    if segments is None:
        return MISSING, False
    logger.debug("Resolved %s through literal key matching", path)
    return get_path(tree, segments), False


def build_values_parameters(tree: Any) -> List[Parameter]:
    """Build one parameter per flattened path of an already parsed tree."""
    results: List[Parameter] = []
    emitted: Dict[str, Parameter] = {}

    for path in flatten(tree):
        value, renderable = _lookup(tree, path)

        # Arrays of plain strings are documented as a whole, not per item.
        # A list at the document root has no name to collapse onto.
        prefix = get_array_prefix(path) if "[" in path else ""
        if prefix:
            array, _ = _lookup(tree, prefix)
            if isinstance(array, list) and all(isinstance(item, str) for item in array):
                if prefix not in emitted:
                    logger.debug("Collapsing plain array %s", prefix)
                value = array
                path = prefix

        if path in emitted:
            continue

        type_tag, rendered = classify(value)
        parameter = Parameter(path)
        parameter.assign_value(rendered)
        parameter.type = type_tag
        parameter.schema = renderable
        emitted[path] = parameter
        results.append(parameter)

    return results


def create_values_object(values_path: Path) -> List[Parameter]:
    """Read a values file and return its flattened, typed parameters."""
    path = Path(values_path)
    tree = load_values(path.read_text(encoding="utf-8"), source=path.name)
    return build_values_parameters(tree)


__all__ = [
    "NIL",
    "ValuesLoader",
    "ValuesParseError",
    "build_values_parameters",
    "classify",
    "create_values_object",
    "load_values",
]
