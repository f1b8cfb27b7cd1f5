"""Exhaustive enumeration of binary expression trees over a fixed operand set.

Starting from one leaf per operand slot, :func:`search` repeatedly merges two
trees of the working set into one until a single root remains, and collects
every root it reaches.  Two rules keep redundant trees out of the result:

* :func:`generate_candidates` builds only one operand order for ``+`` and
  ``*``, and skips associative regroupings of same-operator chains that are
  reachable from another merge order.
* ``min_index`` forces the second merged index to shrink from one depth to the
  next, so permutation-equivalent merge sequences are explored once.

The resulting count is a regression baseline rather than a proven minimum.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from .tree.builder import NodeFactory
from .tree.nodes import BinaryOp, Node, is_operator
from .tree.operators import COMMUTATIVE_OPERATORS, NON_COMMUTATIVE_OPERATORS

logger = logging.getLogger(__name__)


def _commutative_allowed(op: str, left: Node, right: Node) -> bool:
    if is_operator(left, op):
        return False
    if not is_operator(right, op):
        return True
    # Only one of the two groupings of three same-operator terms survives.
    return left.creation_id < right.left.creation_id


def generate_candidates(left: Node, right: Node, factory: NodeFactory) -> list[BinaryOp]:
    """Return every operator node worth exploring for the pair ``(left, right)``."""

    candidates: list[BinaryOp] = []
    for op in COMMUTATIVE_OPERATORS:
        if _commutative_allowed(op, left, right):
            candidates.append(factory.binary(op, left, right))
    for op in NON_COMMUTATIVE_OPERATORS:
        candidates.append(factory.binary(op, left, right))
        candidates.append(factory.binary(op, right, left))
    return candidates


def search(working_set: Sequence[Node], min_index: int, factory: NodeFactory) -> list[Node]:
    """Merge ``working_set`` down to single roots and return all of them.

    Args:
        working_set: Trees not combined yet. Never modified.
        min_index: Smallest index allowed as the second element of a merged
            pair at this depth; the next depth receives ``j - 1``.
        factory: Source of the new operator nodes and their creation ids.
    """

    if len(working_set) == 1:
        return [working_set[0]]

    results: list[Node] = []
    for j in range(max(min_index, 1), len(working_set)):
        for i in range(j):
            remaining = [node for k, node in enumerate(working_set) if k not in (i, j)]
            for candidate in generate_candidates(working_set[i], working_set[j], factory):
                results.extend(search([*remaining, candidate], j - 1, factory))
    return results


def generate(operand_count: int = 4, factory: NodeFactory | None = None) -> list[Node]:
    """Enumerate every tree combining ``operand_count`` leaves.

    Leaves get creation ids ``0..operand_count-1`` when a fresh factory is
    used. No evaluation happens here.
    """

    if operand_count < 1:
        raise ValueError(f"operand_count must be >= 1, got {operand_count}")

    factory = factory or NodeFactory()
    started = time.perf_counter()
    trees = search(factory.leaves(operand_count), 1, factory)
    logger.info(
        "Generated %d expressions over %d operands in %.3fs",
        len(trees),
        operand_count,
        time.perf_counter() - started,
    )
    return trees
