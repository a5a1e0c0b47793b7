"""Dotted-path helpers for nested values trees.

Paths join mapping keys with ``.`` and address sequence items with ``[n]``,
e.g. ``image.pullSecrets[0]`` or ``ingress.hosts[1].paths[0].path``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence, Union

Segment = Union[str, int]

_PIECE_RE = re.compile(r"^([^\[\]]*)((?:\[\d+\])*)$")
_INDEX_RE = re.compile(r"\[(\d+)\]")


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def flatten(tree: Any) -> Dict[str, Any]:
    """Return ``dotted path -> leaf`` pairs in iteration order.

    Empty mappings and sequences are kept as leaves.
    """
    result: Dict[str, Any] = {}
    _flatten_into(tree, "", result)
    return result


def _flatten_into(node: Any, prefix: str, out: Dict[str, Any]) -> None:
    if isinstance(node, dict) and node:
        for key, value in node.items():
            _flatten_into(value, f"{prefix}.{key}" if prefix else str(key), out)
    elif isinstance(node, list) and node:
        for index, value in enumerate(node):
            _flatten_into(value, f"{prefix}[{index}]", out)
    elif prefix:
        out[prefix] = node


def split_path(path: str) -> List[Segment]:
    """Split a dotted path into mapping keys and integer indices."""
    segments: List[Segment] = []
    for piece in path.split("."):
        key, indices = _split_indices(piece)
        if key:
            segments.append(key)
        segments.extend(indices)
    return segments


def _split_indices(piece: str) -> tuple[str, List[int]]:
    match = _PIECE_RE.match(piece)
    if not match:
        return piece, []
    return match.group(1), [int(index) for index in _INDEX_RE.findall(match.group(2))]


def get_path(tree: Any, path: Union[str, Sequence[Segment]]) -> Any:
    """Look up ``path`` in ``tree``; return ``MISSING`` when any segment is absent.

    A root-level key equal to the whole path string takes precedence over
    splitting it on separators.
    """
    if isinstance(path, str):
        if isinstance(tree, dict) and path in tree:
            return tree[path]
        segments: Sequence[Segment] = split_path(path)
    else:
        segments = path
    node = tree
    for segment in segments:
        node = _child(node, segment)
        if node is MISSING:
            return MISSING
    return node


def _child(node: Any, segment: Segment) -> Any:
    if isinstance(node, dict):
        if segment in node:
            return node[segment]
        for key, value in node.items():
            if str(key) == str(segment):
                return value
        return MISSING
    if isinstance(node, list) and isinstance(segment, int):
        return node[segment] if 0 <= segment < len(node) else MISSING
    return MISSING


def resolve_literal_path(tree: Any, path: str) -> Optional[List[Segment]]:
    """Match ``path`` against the keys actually present in ``tree``.

    Consecutive dot-separated pieces are joined into a single key whenever
    that key exists, so ``podAnnotations.prometheus.io/scrape`` resolves to
    ``["podAnnotations", "prometheus.io/scrape"]``. Returns ``None`` when no
    segmentation reaches a value.
    """
    pieces = path.split(".")

    def _search(node: Any, start: int) -> Optional[List[Segment]]:
        if start == len(pieces):
            return []
        for end in range(start + 1, len(pieces) + 1):
            key, indices = _split_indices(".".join(pieces[start:end]))
            child = _child(node, key) if key else node
            if child is MISSING:
                continue
            segments: List[Segment] = [key] if key else []
            for index in indices:
                child = _child(child, index)
                if child is MISSING:
                    break
                segments.append(index)
            else:
                rest = _search(child, end)
                if rest is not None:
                    return segments + rest
        return None

    return _search(tree, 0)


def get_array_prefix(path: str) -> str:
    """Return the path of the innermost array addressed by ``path``."""
    position = path.rfind("[")
    return path[:position] if position != -1 else path


__all__ = [
    "MISSING",
    "flatten",
    "get_array_prefix",
    "get_path",
    "resolve_literal_path",
    "split_path",
]
