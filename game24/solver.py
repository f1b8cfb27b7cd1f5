"""Solution filtering over enumerated trees, for single hands and hand tables."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from .config import SolverConfig
from .enumerator import generate
from .models import SolveReport
from .tree.codec import render_with_operands
from .tree.interpreter import evaluate, evaluate_batch
from .tree.nodes import Node, node_to_dict

logger = logging.getLogger(__name__)


def filter_solutions(
    trees: Iterable[Node],
    operands: Sequence[float],
    target: float,
    tolerance: float,
) -> list[Node]:
    """Keep the trees whose value lies strictly within ``tolerance`` of ``target``.

    Input order is preserved. NaN values never match.
    """

    matches: list[Node] = []
    for tree in trees:
        value = evaluate(tree, operands)
        if not math.isnan(value) and abs(target - value) < tolerance:
            matches.append(tree)
    return matches


@dataclass
class Solver:
    """Enumerate trees once and answer solve queries against them.

    Attributes:
        config: Operand count, target and tolerance.
        trees: Every enumerated tree, built in ``__post_init__``.

    Invariants:
        - Operands passed to any query have exactly ``config.operand_count``
          values.
        - Results follow enumeration order.

    Typical usage:
        >>> solver = Solver()
        >>> "(8-4)*(7-1)" in solver.solve_expressions([4, 1, 8, 7])
        True
    """

    config: SolverConfig = field(default_factory=SolverConfig)
    trees: list[Node] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.trees = generate(self.config.operand_count)

    def _check_operands(self, operands: Sequence[float]) -> list[float]:
        values = [float(value) for value in operands]
        if len(values) != self.config.operand_count:
            raise ValueError(
                f"expected {self.config.operand_count} operands, got {len(values)}"
            )
        return values

    def solve(self, operands: Sequence[float]) -> list[Node]:
        values = self._check_operands(operands)
        solutions = filter_solutions(
            self.trees, values, self.config.target, self.config.tolerance
        )
        logger.debug("Hand %s: %d solutions", values, len(solutions))
        return solutions

    def solve_expressions(self, operands: Sequence[float]) -> list[str]:
        values = self._check_operands(operands)
        return [render_with_operands(tree, values) for tree in self.solve(values)]

    def report(self, operands: Sequence[float]) -> SolveReport:
        values = self._check_operands(operands)
        solutions = self.solve(values)
        return SolveReport(
            operands=values,
            target=self.config.target,
            tolerance=self.config.tolerance,
            expressions=[render_with_operands(tree, values) for tree in solutions],
            trees=[node_to_dict(tree) for tree in solutions],
        )

    def survey(self, hands: Sequence[Sequence[float]] | np.ndarray) -> pd.DataFrame:
        """Count the solutions of many hands at once.

        Every tree is evaluated over the whole hand matrix with
        :func:`~game24.tree.interpreter.evaluate_batch`.

        Returns:
            One row per hand with operand columns ``x0..x{N-1}``, ``solutions``
            (number of matching trees) and ``example`` (the first matching
            expression, or ``None``).
        """

        n = self.config.operand_count
        matrix = np.asarray(hands, dtype=np.float64)
        if matrix.size == 0:
            matrix = matrix.reshape(0, n)
        if matrix.ndim != 2 or matrix.shape[1] != n:
            raise ValueError(f"hands must have shape (rows, {n}), got {matrix.shape}")

        counts = np.zeros(matrix.shape[0], dtype=np.int64)
        first = np.full(matrix.shape[0], -1, dtype=np.int64)
        for idx, tree in enumerate(self.trees):
            values = evaluate_batch(tree, matrix)
            with np.errstate(invalid="ignore"):
                hit = np.abs(self.config.target - values) < self.config.tolerance
            counts += hit
            first[(first < 0) & hit] = idx

        examples = [
            render_with_operands(self.trees[pos], row) if pos >= 0 else None
            for pos, row in zip(first, matrix)
        ]
        frame = pd.DataFrame(matrix, columns=[f"x{k}" for k in range(n)])
        frame["solutions"] = counts
        frame["example"] = pd.Series(examples, index=frame.index, dtype=object)
        logger.info(
            "Surveyed %d hands: %d solvable", len(frame), int((frame["solutions"] > 0).sum())
        )
        return frame
