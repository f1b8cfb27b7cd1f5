"""Pydantic schemas for hands read by the shell and solve reports it prints."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Hand(BaseModel):
    """Operand values bound to the leaf slots, in slot order.

    Attributes:
        operands: One number per slot. Text tokens are coerced by pydantic.

    Invariants:
        - At least one operand; every operand is finite.

    Example:
        >>> Hand(operands=["4", "1", "8", "7"]).operands
        [4.0, 1.0, 8.0, 7.0]
    """

    operands: list[float] = Field(min_length=1)

    @field_validator("operands")
    @classmethod
    def reject_non_finite(cls, value: list[float]) -> list[float]:
        """Reject ``nan`` and ``inf`` tokens, which ``float`` would accept."""

        for idx, operand in enumerate(value):
            if not math.isfinite(operand):
                raise ValueError(f"operand {idx} must be finite, got {operand!r}")
        return value


class SolveReport(BaseModel):
    """Solutions for one hand, as printed by ``--json``.

    Attributes:
        operands: The hand that was solved.
        target: Target value the solutions reach.
        tolerance: Absolute matching tolerance.
        expressions: Rendered solutions with operand values substituted, in
            enumeration order.
        trees: Structural form of each solution (``node_to_dict`` payloads).
    """

    operands: list[float]
    target: float
    tolerance: float
    expressions: list[str] = Field(default_factory=list)
    trees: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def solved(self) -> bool:
        return bool(self.expressions)


def parse_hand(text: str, operand_count: int) -> Hand:
    """Read ``operand_count`` numbers from a line of whitespace-separated tokens.

    Tokens past ``operand_count`` are ignored. Raises ``ValueError`` (pydantic's
    ``ValidationError`` included) when tokens are missing or not numeric.
    """

    tokens = str(text).split()
    if len(tokens) < operand_count:
        raise ValueError(f"expected {operand_count} numbers, got {len(tokens)}")
    return Hand(operands=tokens[:operand_count])
