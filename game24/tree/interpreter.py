from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .nodes import BinaryOp, Leaf, Node
from .operators import OPERATORS, OperatorSpec


@dataclass(slots=True)
class TreeInvariantError(RuntimeError):
    """A tree reached evaluation or rendering in a state construction forbids.

    Only trees built outside :class:`~game24.tree.builder.NodeFactory` can
    trigger it, so callers are not expected to recover from it.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def resolve_operator(node: BinaryOp, path: str) -> OperatorSpec:
    spec = OPERATORS.get(node.op)
    if spec is None:
        raise TreeInvariantError(path, f"Undefined operator: {node.op!r}")
    return spec


def evaluate(node: Node, operands: Sequence[float], path: str = "root") -> float:
    """Compute the value of ``node`` with ``operands`` bound to the leaf slots.

    Degenerate divisions evaluate to NaN instead of raising, so they simply
    never match a target value.
    """

    if isinstance(node, Leaf):
        return float(operands[node.slot])
    if not isinstance(node, BinaryOp):
        raise TreeInvariantError(path, f"Unsupported node: {type(node)!r}")

    spec = resolve_operator(node, path)
    left = evaluate(node.left, operands, f"{path}.left")
    right = evaluate(node.right, operands, f"{path}.right")
    return spec.fn(left, right)


def evaluate_batch(node: Node, operands: np.ndarray, path: str = "root") -> np.ndarray:
    """Vectorized :func:`evaluate` over a ``(rows, operand_count)`` matrix."""

    matrix = np.asarray(operands, dtype=np.float64)
    if matrix.ndim != 2:
        raise ValueError(f"operands must be a 2-D matrix, got shape {matrix.shape}")

    def _walk(node_: Node, path_: str) -> np.ndarray:
        if isinstance(node_, Leaf):
            return matrix[:, node_.slot]
        if not isinstance(node_, BinaryOp):
            raise TreeInvariantError(path_, f"Unsupported node: {type(node_)!r}")
        spec = resolve_operator(node_, path_)
        left = _walk(node_.left, f"{path_}.left")
        right = _walk(node_.right, f"{path_}.right")
        return spec.array_fn(left, right)

    with np.errstate(over="ignore", invalid="ignore"):
        return np.asarray(_walk(node, path), dtype=np.float64)
