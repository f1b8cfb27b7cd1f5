"""Node construction with an explicit creation-id counter.

Every node built during one enumeration comes from the same
:class:`NodeFactory`, so creation ids are strictly increasing in construction
order and a parent's id is always greater than the ids of its children.
The enumerator relies on that ordering for its commutative dedup rule.

Usage:
    factory = NodeFactory()
    a, b = factory.leaves(2)
    total = factory.binary("+", a, b)   # total.creation_id == 2
"""

from __future__ import annotations

from .nodes import BinaryOp, Leaf, Node
from .operators import OPERATORS


class NodeFactory:
    """Builds immutable nodes and hands out creation ids.

    The counter only moves forward; nodes are never mutated or released
    individually, so a factory can be dropped together with everything it
    built once enumeration results are no longer needed.
    """

    def __init__(self, start_id: int = 0):
        self._next_id = int(start_id)

    @property
    def next_id(self) -> int:
        return self._next_id

    def _take_id(self) -> int:
        creation_id = self._next_id
        self._next_id += 1
        return creation_id

    def leaf(self, slot: int) -> Leaf:
        if slot < 0:
            raise ValueError(f"Leaf slot must be >= 0, got {slot}")
        return Leaf(slot=int(slot), creation_id=self._take_id())

    def leaves(self, count: int) -> list[Leaf]:
        """Build one leaf per operand slot ``0..count-1``."""

        return [self.leaf(slot) for slot in range(count)]

    def binary(self, op: str, left: Node, right: Node) -> BinaryOp:
        if op not in OPERATORS:
            raise ValueError(f"Unknown operator: {op!r}")
        return BinaryOp(op=op, left=left, right=right, creation_id=self._take_id())
