"""Doc comment extraction for Go declarations."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

from tree_sitter import Node

from .tree_sitter import node_text

_TYPE_SPECS = {"type_spec", "type_alias"}
_DIRECTIVE = re.compile(r"^[a-z0-9]+:[a-z0-9]")
_DIRECTIVE_PREFIXES = ("line ", "extern ", "export ")


def leading_comments(node: Node) -> List[Node]:
    """Return the comment group directly above ``node``, top to bottom.

    The closest comment has to end on the line just before ``node``; further
    comments join the group while no blank line separates them. Comments that
    share a line with earlier code trail that code and are not doc comments.
    """
    group: List[Node] = []
    anchor_row = node.start_point[0]
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type == "comment":
        end_row = sibling.end_point[0]
        if group:
            if end_row < anchor_row - 1:
                break
        elif end_row != anchor_row - 1:
            break
        group.append(sibling)
        anchor_row = sibling.start_point[0]
        sibling = sibling.prev_named_sibling

    if group and sibling is not None:
        code_row = sibling.end_point[0]
        while group and group[-1].start_point[0] == code_row:
            group.pop()

    group.reverse()
    return group


def comment_text(comments: Sequence[str]) -> str:
    """Return the text of a comment group with the comment markers removed.

    Mirrors ``go/ast.CommentGroup.Text``: tool directives are dropped, trailing
    whitespace is trimmed, leading and trailing blank lines are removed and
    runs of blank lines collapse to one. Non-empty results end in a newline.
    """
    lines: List[str] = []
    for raw in comments:
        if raw.startswith("//"):
            body = raw[2:]
            if body.startswith(" "):
                body = body[1:]
            elif body and _is_directive(body):
                continue
        elif raw.startswith("/*"):
            body = raw[2:-2]
        else:
            body = raw
        for line in body.replace("\r\n", "\n").split("\n"):
            lines.append(line.rstrip())

    collapsed: List[str] = []
    for line in lines:
        if line or (collapsed and collapsed[-1]):
            collapsed.append(line)
    if collapsed and collapsed[-1]:
        collapsed.append("")
    return "\n".join(collapsed)


def _is_directive(body: str) -> bool:
    if body.startswith(_DIRECTIVE_PREFIXES):
        return True
    return bool(_DIRECTIVE.match(body))


def extract_type_docs(root: Node, source: bytes) -> Dict[str, str]:
    """Map every type declared in the file to its doc text, exported or not.

    A type inside a ``type ( ... )`` group uses its own comment group and
    falls back to the comment above the whole group.
    """
    docs: Dict[str, str] = {}
    for declaration in root.named_children:
        if declaration.type != "type_declaration":
            continue
        declaration_doc = leading_comments(declaration)
        for spec in _type_specs(declaration):
            if spec.type not in _TYPE_SPECS:
                continue
            name_node = spec.child_by_field_name("name")
            if name_node is None:
                continue
            group = leading_comments(spec) or declaration_doc
            docs[node_text(name_node, source)] = comment_text(
                [node_text(comment, source) for comment in group]
            )
    return docs


def _type_specs(declaration: Node) -> List[Node]:
    specs: List[Node] = []
    for child in declaration.named_children:
        if child.type == "type_spec_list":
            specs.extend(child.named_children)
        else:
            specs.append(child)
    return specs


__all__ = ["comment_text", "extract_type_docs", "leading_comments"]
