"""Merge documentation metadata with the values actually present in the file."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Iterable, Optional

from .config import GeneratorConfig, ModifiersConfig
from .logging import get_logger
from .models import Metadata, Parameter

logger = get_logger("merge")


@lru_cache(maxsize=None)
def _default_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(keyword)}\s*:\s*(.*)$")


def combine_metadata_and_values(
    metadata: Metadata,
    values: Iterable[Parameter],
    config: Optional[GeneratorConfig] = None,
) -> Metadata:
    """Copy type, value and schema flags onto documented parameters by name.

    Values already set on a documented parameter (extra entries seeded with a
    value) are only replaced when empty. Modifiers run last and may override
    the value taken from the file.
    """
    config = config or GeneratorConfig()
    by_name: Dict[str, Parameter] = {parameter.name: parameter for parameter in values}

    for parameter in metadata.parameters:
        actual = by_name.get(parameter.name)
        if actual is not None:
            parameter.type = actual.type
            parameter.schema = actual.schema
            parameter.assign_value(actual.value)
        elif parameter.extra and parameter.type is None:
            parameter.type = "string"
        apply_modifiers(parameter, config.modifiers)

    return metadata


def apply_modifiers(parameter: Parameter, modifiers: ModifiersConfig) -> None:
    """Apply ``[array]``, ``[object]``, ``[string]`` and ``[default: X]`` in order."""
    default_re = _default_pattern(modifiers.default)
    for modifier in parameter.modifiers:
        if modifier == modifiers.array:
            parameter.type = "array"
            parameter.value = []
        elif modifier == modifiers.object:
            parameter.type = "object"
            parameter.value = {}
        elif modifier == modifiers.string:
            parameter.type = "string"
            parameter.value = ""
        elif modifier == modifiers.nullable:
            continue
        else:
            match = default_re.match(modifier)
            if match:
                parameter.value = match.group(1)
            else:
                logger.warning("Unknown modifier %r on parameter %s", modifier, parameter.name)


__all__ = ["apply_modifiers", "combine_metadata_and_values"]
