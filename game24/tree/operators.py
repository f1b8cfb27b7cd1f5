from __future__ import annotations

import math
import sys
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

_FLOAT_TINY = sys.float_info.min


@dataclass(frozen=True, slots=True)
class OperatorSpec:
    """Immutable descriptor for one binary arithmetic operator.

    Attributes:
        symbol: Infix symbol used in trees and rendered text (``"+"``, ``"/"``...).
        name: Canonical uppercase name, used in log and error messages.
        commutative: ``True`` when swapping the operands never changes the
            value. The enumerator only builds one operand order for these.
        fn: Scalar kernel ``(left, right) -> float``.
        array_fn: Element-wise numpy kernel with the same semantics as ``fn``.
    """

    symbol: str
    name: str
    commutative: bool
    fn: Callable[[float, float], float]
    array_fn: Callable[[np.ndarray, np.ndarray], np.ndarray]


def is_normal(value: float) -> bool:
    """Mirror of IEEE ``isnormal``: finite, nonzero and not subnormal."""

    return math.isfinite(value) and abs(value) >= _FLOAT_TINY


def safe_divide(left: float, right: float) -> float:
    if math.isfinite(left) and is_normal(right):
        return left / right
    return math.nan


def safe_divide_array(left: np.ndarray, right: np.ndarray) -> np.ndarray:
    left, right = np.broadcast_arrays(
        np.asarray(left, dtype=np.float64), np.asarray(right, dtype=np.float64)
    )
    valid = np.isfinite(left) & np.isfinite(right) & (np.abs(right) >= _FLOAT_TINY)
    out = np.full(left.shape, np.nan, dtype=np.float64)
    np.divide(left, right, out=out, where=valid)
    return out


OPERATORS: dict[str, OperatorSpec] = {
    "+": OperatorSpec("+", "ADD", True, lambda a, b: a + b, np.add),
    "-": OperatorSpec("-", "SUBTRACT", False, lambda a, b: a - b, np.subtract),
    "*": OperatorSpec("*", "MULTIPLY", True, lambda a, b: a * b, np.multiply),
    "/": OperatorSpec("/", "DIVIDE", False, safe_divide, safe_divide_array),
}

COMMUTATIVE_OPERATORS: tuple[str, ...] = tuple(s for s, spec in OPERATORS.items() if spec.commutative)
NON_COMMUTATIVE_OPERATORS: tuple[str, ...] = tuple(
    s for s, spec in OPERATORS.items() if not spec.commutative
)


def get_operator(symbol: str) -> OperatorSpec:
    try:
        return OPERATORS[symbol]
    except KeyError:
        raise KeyError(f"Unknown operator: {symbol!r}") from None
