"""Configuration for enumeration size and solution matching."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Fixed parameters of one solver instance.

    Attributes:
        operand_count: Number of operands every hand supplies; trees are
            enumerated once for this size.
        target: Value a tree must reach to count as a solution.
        tolerance: A tree matches when ``abs(value - target) < tolerance``.
    """

    operand_count: int = 4
    target: float = 24.0
    tolerance: float = 0.01
