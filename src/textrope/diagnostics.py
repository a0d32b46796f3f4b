"""Debug dumps of the rope tree shape

These are for looking at a tree, never for rebuilding one. Absent children
are written out explicitly as ``None`` (``null`` in JSON) so the shape of
the tree is never ambiguous.
"""

from __future__ import annotations
import json
from typing import Any, Optional, Union

from .rope import Branch, Leaf, Node, ONode, Rope

# --- Configuration ---
INDENT: int = 2  # spaces per nesting level in to_json


def _node_dict(node: Node) -> dict[str, Any]:
    return {
        "content": node.text if isinstance(node, Leaf) else "",
        "weight": node.weight,
        "length": node.length,
        "left": None,
        "right": None,
    }


def to_dict(rope: Union[Rope, ONode]) -> Optional[dict[str, Any]]:
    """Get the tree as nested dicts of content, weight, length, left and right

    Args:
        rope: A Rope, a bare node, or None for a missing rope

    Returns:
        The dict for the root node, or None if there is no rope
    """
    root = rope.root if isinstance(rope, Rope) else rope
    if root is None:
        return None

    ret = _node_dict(root)
    stack: list[tuple[Node, dict[str, Any]]] = [(root, ret)]
    while stack:
        node, out = stack.pop()
        if not isinstance(node, Branch):
            continue
        for side, child in (("left", node.left), ("right", node.right)):
            child_out = _node_dict(child)
            out[side] = child_out
            stack.append((child, child_out))
    return ret


def _scalar(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def to_json(rope: Union[Rope, ONode], indent: Optional[int] = None) -> str:
    """Dump the tree shape as indented JSON

    The text is the same as ``json.dumps(to_dict(rope), indent=indent)``, but
    it is written with an explicit stack so trees of any depth can be dumped.
    """
    if indent is None:
        indent = INDENT
    root = rope.root if isinstance(rope, Rope) else rope
    if root is None:
        return "null"

    pad = " " * indent
    parts: list[str] = []
    # Each entry is either finished text or a (node, nesting level) to expand
    stack: list[Union[str, tuple[Node, int]]] = [(root, 0)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue

        node, level = item
        inner = "\n" + pad * (level + 1)
        content = node.text if isinstance(node, Leaf) else ""
        parts.append(
            "{"
            + f"{inner}\"content\": {_scalar(content)},"
            + f"{inner}\"weight\": {_scalar(node.weight)},"
            + f"{inner}\"length\": {_scalar(node.length)},"
            + f"{inner}\"left\": "
        )
        closing = "\n" + pad * level + "}"
        if isinstance(node, Branch):
            # Pushed in reverse so the left child is written first
            stack.append(closing)
            stack.append((node.right, level + 1))
            stack.append(f",{inner}\"right\": ")
            stack.append((node.left, level + 1))
        else:
            parts.append(f"null,{inner}\"right\": null{closing}")

    return "".join(parts)
