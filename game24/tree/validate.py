from __future__ import annotations

from dataclasses import dataclass

from .nodes import BinaryOp, Leaf, Node
from .operators import OPERATORS


@dataclass(slots=True)
class ValidationError(ValueError):
    """Raised when a completed tree violates a structural invariant.

    Attributes:
        code: Short machine-readable error code (``"unknown_operator"``,
            ``"slot_range"``, ``"slot_reused"``, ``"slot_missing"`` or
            ``"creation_order"``).
        path: Dot-separated path to the offending node (e.g. ``"root.left.right"``).
        message: Human-readable description of the violation.
    """

    code: str
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.code} at {self.path}: {self.message}"


def validate_tree(root: Node, operand_count: int) -> Node:
    """Check that ``root`` is a complete tree over ``operand_count`` slots.

    A complete tree references every slot ``0..operand_count-1`` exactly once,
    uses only known operators, and every child was created before its parent.
    Returns ``root`` unchanged so the call can be chained.
    """

    seen: dict[int, str] = {}

    def _walk(node: Node, path: str) -> None:
        if isinstance(node, Leaf):
            if not 0 <= node.slot < operand_count:
                raise ValidationError(
                    "slot_range", path, f"slot {node.slot} outside 0..{operand_count - 1}"
                )
            if node.slot in seen:
                raise ValidationError(
                    "slot_reused", path, f"slot {node.slot} already used at {seen[node.slot]}"
                )
            seen[node.slot] = path
            return

        if not isinstance(node, BinaryOp):
            raise ValidationError("unknown_node", path, f"unsupported node {type(node)!r}")
        if node.op not in OPERATORS:
            raise ValidationError("unknown_operator", path, f"operator {node.op!r} is not defined")
        for side, child in (("left", node.left), ("right", node.right)):
            if child.creation_id >= node.creation_id:
                raise ValidationError(
                    "creation_order",
                    f"{path}.{side}",
                    f"child id {child.creation_id} is not below parent id {node.creation_id}",
                )
            _walk(child, f"{path}.{side}")

    _walk(root, "root")
    missing = sorted(set(range(operand_count)) - set(seen))
    if missing:
        raise ValidationError("slot_missing", "root", f"slots {missing} are not referenced")
    return root
