"""Render Go parameter and result lists by slicing the original source."""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

from .tree_sitter import node_text

_FIELD_TYPES = {"parameter_declaration", "variadic_parameter_declaration"}


def render_field_list(node: Optional[Node], source: bytes) -> str:
    """Render a ``parameter_list`` as ``a, b int, opts ...Option``.

    Types are copied verbatim from ``source`` so pointer, slice, variadic and
    package-qualified spellings come out exactly as written.
    """
    if node is None:
        return ""
    parts: List[str] = []
    for field in node.named_children:
        if field.type not in _FIELD_TYPES:
            continue
        names = [node_text(name, source) for name in field.children_by_field_name("name")]
        type_text = _field_type_text(field, source)
        if names:
            parts.append(f"{', '.join(names)} {type_text}")
        else:
            parts.append(type_text)
    return ", ".join(parts)


def render_result(node: Optional[Node], source: bytes) -> str:
    """Render a method's result, which may be a list or a single bare type."""
    if node is None:
        return ""
    if node.type == "parameter_list":
        return render_field_list(node, source)
    return node_text(node, source)


def _field_type_text(field: Node, source: bytes) -> str:
    type_node = field.child_by_field_name("type")
    if type_node is None:
        return ""
    start = type_node.start_byte
    if field.type == "variadic_parameter_declaration":
        # the grammar keeps "..." outside the type node
        for child in field.children:
            if child.type == "...":
                start = child.start_byte
                break
    return source[start : type_node.end_byte].decode("utf-8", errors="replace")


__all__ = ["render_field_list", "render_result"]
