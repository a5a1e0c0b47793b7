"""Core data models shared across valuesdoc components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Parameter:
    """A documented or observed configuration key addressed by its dotted path."""

    name: str
    description: str = ""
    modifiers: List[str] = field(default_factory=list)
    section: Optional[str] = None
    skip: bool = False
    extra: bool = False
    type: Optional[str] = None
    value: Any = None
    schema: bool = True

    def assign_value(self, value: Any) -> None:
        """Set the value unless a non-empty one is already present."""
        if self.value is None or self.value == "":
            self.value = value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "modifiers": list(self.modifiers),
            "section": self.section,
            "skip": self.skip,
            "extra": self.extra,
            "type": self.type,
            "value": self.value,
            "schema": self.schema,
        }


@dataclass
class Section:
    """Named grouping of parameters with an optional multi-line description."""

    name: str
    description: List[str] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)

    def add_parameter(self, parameter: Parameter) -> None:
        self.parameters.append(parameter)

    def add_description_line(self, line: str) -> None:
        self.description.append(line)

    @property
    def description_text(self) -> str:
        return "\n".join(self.description)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": list(self.description),
            "parameters": [parameter.name for parameter in self.parameters],
        }


@dataclass
class Metadata:
    """Sections and parameters collected from one comment scan."""

    sections: List[Section] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)

    def add_section(self, section: Section) -> None:
        self.sections.append(section)

    def add_parameter(self, parameter: Parameter) -> None:
        self.parameters.append(parameter)

    def find_parameter(self, name: str) -> Optional[Parameter]:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sections": [section.to_dict() for section in self.sections],
            "parameters": [parameter.to_dict() for parameter in self.parameters],
        }
