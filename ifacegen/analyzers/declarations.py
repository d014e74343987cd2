"""Identify exported methods among a Go file's top-level declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from tree_sitter import Node

from .tree_sitter import node_text


@dataclass(frozen=True)
class MethodDeclaration:
    """A top-level ``func (recv T) Name(...)`` declaration."""

    node: Node
    type_name: str
    name: str


def is_exported(name: str) -> bool:
    """Go visibility: an identifier is exported when it starts upper-case."""
    return bool(name) and name[0].isupper()


def receiver_type_name(node: Node, source: bytes) -> str:
    """Return the receiver type with a single leading ``*`` removed."""
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return ""
    for field in receiver.named_children:
        if field.type != "parameter_declaration":
            continue
        type_node = field.child_by_field_name("type")
        if type_node is None:
            return ""
        text = node_text(type_node, source)
        return text[1:] if text.startswith("*") else text
    return ""


def classify(node: Node, source: bytes) -> Tuple[str, bool]:
    """Return ``(type_name, is_method)`` for one top-level declaration."""
    if node.type != "method_declaration":
        return "", False
    type_name = receiver_type_name(node, source)
    return type_name, bool(type_name)


def exported_methods(root: Node, source: bytes) -> Iterator[MethodDeclaration]:
    """Yield exported methods in declaration order; everything else is dropped."""
    for node in root.named_children:
        type_name, is_method = classify(node, source)
        if not is_method:
            continue
        name_node = node.child_by_field_name("name")
        if name_node is None:
            continue
        name = node_text(name_node, source)
        if not is_exported(name):
            continue
        yield MethodDeclaration(node=node, type_name=type_name, name=name)


__all__ = [
    "MethodDeclaration",
    "classify",
    "exported_methods",
    "is_exported",
    "receiver_type_name",
]
