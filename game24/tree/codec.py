from __future__ import annotations

import hashlib
import json
import math
import re
from collections.abc import Sequence

from .interpreter import resolve_operator
from .nodes import Leaf, Node, is_operator, node_depth, node_size, node_to_dict

_ADDITIVE = frozenset({"+", "-"})
_PLACEHOLDER = re.compile(r"\[(\d+)\]")


def _is_additive(node: Node) -> bool:
    return is_operator(node) and node.op in _ADDITIVE


def _wrap_left(op: str, left: Node) -> bool:
    return op in {"*", "/"} and _is_additive(left)


def _wrap_right(op: str, right: Node) -> bool:
    if op == "/":
        return is_operator(right)
    return op in {"*", "-"} and _is_additive(right)


def render(root: Node) -> str:
    """Render ``root`` as infix text with the fewest parentheses needed.

    Leaves render as ``[slot]`` placeholders; see
    :func:`substitute_placeholders` to bind operand values.
    """

    def _render(node: Node, path: str) -> str:
        if isinstance(node, Leaf):
            return f"[{node.slot}]"
        resolve_operator(node, path)
        left = _render(node.left, f"{path}.left")
        right = _render(node.right, f"{path}.right")
        if _wrap_left(node.op, node.left):
            left = f"({left})"
        if _wrap_right(node.op, node.right):
            right = f"({right})"
        return f"{left}{node.op}{right}"

    return _render(root, "root")


def format_operand(value: float) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        text = str(value)
    elif math.isnan(value):
        return "NAN"
    else:
        text = f"{float(value):.12g}"
    if text.startswith("-"):
        return f"({text})"
    return text


def substitute_placeholders(text: str, operands: Sequence[float]) -> str:
    def _replace(match: re.Match[str]) -> str:
        slot = int(match.group(1))
        if slot >= len(operands):
            return match.group(0)
        return format_operand(operands[slot])

    return _PLACEHOLDER.sub(_replace, text)


def render_with_operands(root: Node, operands: Sequence[float]) -> str:
    return substitute_placeholders(render(root), operands)


def canonical_tree_json(root: Node) -> str:
    return json.dumps(node_to_dict(root), ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def stable_tree_hash(root: Node) -> str:
    """Structural fingerprint; creation ids do not take part in it."""

    canonical = canonical_tree_json(root)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def tree_summary(root: Node, max_len: int = 180) -> str:
    expr = render(root)
    if len(expr) > max_len:
        expr = expr[: max_len - 3] + "..."
    return f"{expr} [nodes={node_size(root)}, depth={node_depth(root)}]"

