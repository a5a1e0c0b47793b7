"""Consistency checks between documented parameters and actual values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from .models import Metadata, Parameter


@dataclass
class CheckResult:
    """Keys that are documented without a value, or present without documentation."""

    missing_metadata: List[str] = field(default_factory=list)
    missing_values: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing_metadata and not self.missing_values

    def messages(self) -> List[str]:
        lines = [f"Missing metadata for key: {name}" for name in self.missing_metadata]
        lines.extend(
            f"Documented parameter not found in values: {name}" for name in self.missing_values
        )
        return lines


def _is_nested(name: str, prefix: str) -> bool:
    return name.startswith(f"{prefix}.") or name.startswith(f"{prefix}[")


def check_keys(values: Iterable[Parameter], metadata: Metadata) -> CheckResult:
    """Compare flattened value paths with the parameters declared in comments."""
    value_names = [parameter.name for parameter in values]
    value_set = set(value_names)
    documented = {parameter.name for parameter in metadata.parameters}
    skipped: Sequence[str] = [parameter.name for parameter in metadata.parameters if parameter.skip]

    result = CheckResult()
    for name in value_names:
        if name in documented or any(_is_nested(name, prefix) for prefix in skipped):
            continue
        result.missing_metadata.append(name)

    for parameter in metadata.parameters:
        if parameter.extra or parameter.name in result.missing_values:
            continue
        if parameter.name in value_set:
            continue
        if any(_is_nested(name, parameter.name) for name in value_names):
            continue
        result.missing_values.append(parameter.name)

    return result


__all__ = ["CheckResult", "check_keys"]
