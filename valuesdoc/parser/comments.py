"""Comment-tag scanner that extracts documentation metadata from a values file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from re import Pattern
from typing import List, Optional

from ..config import GeneratorConfig
from ..logging import get_logger
from ..models import Metadata, Parameter, Section

# Heuristic only: ``indent key: value`` with the key not starting with '#'.
_YAML_KEY_RE = re.compile(r"^(\s*)([^#\s][^:]*?):\s*(.*)$")
_EMPTY_INLINE_VALUES = {"", "{}", "[]"}
_LINE_SPLIT_RE = re.compile(r"\r?\n")
_KEY_ECHO_RE = re.compile(r"^(\S+)\s*(.*)$")
_LEADING_MODIFIERS_RE = re.compile(r"^(\[.*?\])?\s*(.*)$")


@dataclass
class YamlLine:
    """Structural position of a ``key:`` line."""

    indent: int
    key: str
    value: str
    has_value: bool


def parse_yaml_line(line: str) -> Optional[YamlLine]:
    """Return the key and indentation of a structural line, or None."""
    match = _YAML_KEY_RE.match(line)
    if not match or line.strip().startswith("#"):
        return None
    value = match.group(3).strip()
    return YamlLine(
        indent=len(match.group(1)),
        key=match.group(2).strip(),
        value=value,
        has_value=value not in _EMPTY_INLINE_VALUES,
    )


def _update_path_stack(
    path_stack: List[str], indent_stack: List[int], indent: int, key: str
) -> None:
    while indent_stack and indent_stack[-1] >= indent:
        indent_stack.pop()
        path_stack.pop()
    indent_stack.append(indent)
    path_stack.append(key)


@dataclass
class TagPatterns:
    """Tag regexes compiled once from a configuration."""

    param: Pattern[str]
    section: Pattern[str]
    description_start: Pattern[str]
    description_content: Pattern[str]
    description_end: Pattern[str]
    skip: Pattern[str]
    extra: Pattern[str]

    @classmethod
    def compile(cls, config: GeneratorConfig) -> "TagPatterns":
        prefix = rf"^\s*{config.comments.format}\s*"
        tags = config.tags

        def documented(tag: str) -> Pattern[str]:
            return re.compile(
                rf"{prefix}{re.escape(tag)}\s*(?:\(([^\s]+)\))?\s*(\[.*?\])?\s*(.*)$"
            )

        return cls(
            param=documented(tags.param),
            section=re.compile(rf"{prefix}{re.escape(tags.section)}\s*(.*)$"),
            description_start=re.compile(rf"{prefix}{re.escape(tags.description_start)}\s*(.*)"),
            description_content=re.compile(rf"^\s*{config.comments.format}\s?(.*)"),
            description_end=re.compile(rf"{prefix}{re.escape(tags.description_end)}\s*(.*)"),
            skip=re.compile(rf"{prefix}{re.escape(tags.skip)}\s*(?:\(([^\s]+)\))?\s*(.*)$"),
            extra=documented(tags.extra),
        )


@dataclass
class ScanState:
    """Mutable state threaded through one scan of a values file."""

    metadata: Metadata = field(default_factory=Metadata)
    current_section: Optional[Section] = None
    description_capturing: bool = False
    path_stack: List[str] = field(default_factory=list)
    indent_stack: List[int] = field(default_factory=list)
    pending: Optional[Parameter] = None

    @property
    def current_path(self) -> str:
        return ".".join(self.path_stack)

    def push(self, line: YamlLine) -> None:
        _update_path_stack(self.path_stack, self.indent_stack, line.indent, line.key)

    def project(self, line: YamlLine) -> str:
        """Return the path ``line`` would produce without touching the stacks."""
        path_stack = list(self.path_stack)
        indent_stack = list(self.indent_stack)
        _update_path_stack(path_stack, indent_stack, line.indent, line.key)
        return ".".join(path_stack)

    def attach(self, parameter: Parameter) -> None:
        if self.current_section is not None:
            parameter.section = self.current_section.name
            self.current_section.add_parameter(parameter)
        self.metadata.add_parameter(parameter)


class CommentTagScanner:
    """Turns tag comments into ``Parameter`` and ``Section`` records.

    Each line is checked against every tag pattern independently. Tags
    without a parenthesised path take their path from the next structural
    ``key:`` line; when the line right after the tag is not structural the
    parameter stays pending until any later structural line shows up.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None) -> None:
        self.config = config or GeneratorConfig()
        self.patterns = TagPatterns.compile(self.config)
        self.logger = get_logger("parser.comments")

    def scan(self, text: str) -> Metadata:
        lines = _LINE_SPLIT_RE.split(text)
        state = ScanState()
        for index, line in enumerate(lines):
            next_line = lines[index + 1] if index + 1 < len(lines) else None
            self._consume(state, line, next_line)

        if state.pending is not None:
            self.logger.debug(
                "Dropping parameter with no following key: %r", state.pending.description
            )
        self.logger.debug(
            "Scanned %d sections and %d parameters",
            len(state.metadata.sections),
            len(state.metadata.parameters),
        )
        return state.metadata

    def _consume(self, state: ScanState, line: str, next_line: Optional[str]) -> None:
        patterns = self.patterns

        yaml_line = parse_yaml_line(line)
        if yaml_line is not None:
            state.push(yaml_line)
            if state.pending is not None:
                self._resolve(state, state.current_path)

        param_match = patterns.param.match(line)
        if param_match:
            explicit_path, modifiers, description = param_match.groups()
            self._handle_tag(
                state,
                Parameter(
                    explicit_path or "",
                    description=description,
                    modifiers=_split_modifiers(modifiers),
                ),
                explicit_path,
                next_line,
            )

        section_match = patterns.section.match(line)
        if section_match:
            section = Section(section_match.group(1))
            state.metadata.add_section(section)
            state.current_section = section

        if (
            state.current_section is not None
            and state.description_capturing
            and patterns.description_end.match(line)
        ):
            state.description_capturing = False

        content_match = patterns.description_content.match(line)
        if state.current_section is not None and state.description_capturing and content_match:
            state.current_section.add_description_line(content_match.group(1))

        start_match = patterns.description_start.match(line)
        if state.current_section is not None and not state.description_capturing and start_match:
            state.description_capturing = True
            if start_match.group(1) != "":
                state.current_section.add_description_line(start_match.group(1))

        skip_match = patterns.skip.match(line)
        if skip_match:
            explicit_path, description = skip_match.groups()
            self._handle_tag(
                state,
                Parameter(explicit_path or "", description=description, skip=True),
                explicit_path,
                next_line,
            )

        extra_match = patterns.extra.match(line)
        if extra_match:
            explicit_path, modifiers, description = extra_match.groups()
            self._handle_tag(
                state,
                Parameter(
                    explicit_path or "",
                    description=description,
                    modifiers=_split_modifiers(modifiers),
                    extra=True,
                    # Extra parameters have no backing value in the YAML.
                    value="",
                ),
                explicit_path,
                next_line,
            )

    def _handle_tag(
        self,
        state: ScanState,
        parameter: Parameter,
        explicit_path: Optional[str],
        next_line: Optional[str],
    ) -> None:
        if explicit_path:
            state.attach(parameter)
            return

        state.pending = parameter
        next_yaml = parse_yaml_line(next_line) if next_line is not None else None
        if next_yaml is not None:
            self._resolve(state, state.project(next_yaml))

    def _resolve(self, state: ScanState, name: str) -> None:
        parameter = state.pending
        if parameter is None:
            return
        parameter.name = name
        _strip_key_echo(parameter)
        state.attach(parameter)
        state.pending = None
        self.logger.debug("Resolved parameter %s", name)


def _split_modifiers(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    modifiers: List[str] = []
    for token in raw[1:-1].split(","):
        token = token.strip()
        if token and token not in modifiers:
            modifiers.append(token)
    return modifiers


def _strip_key_echo(parameter: Parameter) -> None:
    """Drop a leading ``key`` token that repeats the resolved path.

    Covers the ``@param key [modifiers] description`` spelling; the modifier
    list is read from what follows the key when none was parsed yet.
    """
    match = _KEY_ECHO_RE.match(parameter.description)
    if not match or match.group(1) != parameter.name:
        return
    remainder = match.group(2)
    if not parameter.skip and not parameter.modifiers:
        modifiers_match = _LEADING_MODIFIERS_RE.match(remainder)
        if modifiers_match:
            parameter.modifiers = _split_modifiers(modifiers_match.group(1))
            remainder = modifiers_match.group(2)
    parameter.description = remainder


def scan_metadata(text: str, config: Optional[GeneratorConfig] = None) -> Metadata:
    """Scan values file text for tag comments."""
    return CommentTagScanner(config).scan(text)


def parse_metadata_comments(
    values_path: Path, config: Optional[GeneratorConfig] = None
) -> Metadata:
    """Read a values file and return the metadata declared in its comments."""
    text = Path(values_path).read_text(encoding="utf-8")
    return scan_metadata(text, config)


__all__ = [
    "CommentTagScanner",
    "ScanState",
    "TagPatterns",
    "YamlLine",
    "parse_metadata_comments",
    "parse_yaml_line",
    "scan_metadata",
]
