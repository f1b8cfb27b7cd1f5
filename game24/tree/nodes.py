from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Leaf:
    slot: int
    creation_id: int = field(default=0, compare=False)


@dataclass(frozen=True, slots=True)
class BinaryOp:
    op: str
    left: Node
    right: Node
    creation_id: int = field(default=0, compare=False)


Node = Leaf | BinaryOp


def is_operator(node: Node, op: str | None = None) -> bool:
    if not isinstance(node, BinaryOp):
        return False
    return op is None or node.op == op


def iter_nodes(node: Node) -> Iterator[Node]:
    yield node
    if isinstance(node, BinaryOp):
        yield from iter_nodes(node.left)
        yield from iter_nodes(node.right)


def leaf_slots(node: Node) -> list[int]:
    return [item.slot for item in iter_nodes(node) if isinstance(item, Leaf)]


def node_to_dict(node: Node) -> dict[str, Any]:
    if isinstance(node, Leaf):
        return {"type": "leaf", "slot": node.slot}
    return {
        "type": "op",
        "op": node.op,
        "left": node_to_dict(node.left),
        "right": node_to_dict(node.right),
    }


def node_size(node: Node) -> int:
    if isinstance(node, BinaryOp):
        return 1 + node_size(node.left) + node_size(node.right)
    return 1


def node_depth(node: Node) -> int:
    if isinstance(node, BinaryOp):
        return 1 + max(node_depth(node.left), node_depth(node.right))
    return 1
