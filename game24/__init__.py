"""Public package API for game24."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("game24")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

from .config import SolverConfig
from .enumerator import generate, generate_candidates, search
from .models import Hand, SolveReport, parse_hand
from .solver import Solver, filter_solutions
from .tree import Leaf, BinaryOp, Node, NodeFactory, evaluate, render

__all__ = [
    "__version__",
    "BinaryOp",
    "Hand",
    "Leaf",
    "Node",
    "NodeFactory",
    "SolveReport",
    "Solver",
    "SolverConfig",
    "evaluate",
    "filter_solutions",
    "generate",
    "generate_candidates",
    "parse_hand",
    "render",
    "search",
]
