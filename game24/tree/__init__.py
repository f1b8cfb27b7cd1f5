from .builder import NodeFactory
from .codec import (
    canonical_tree_json,
    format_operand,
    render,
    render_with_operands,
    stable_tree_hash,
    substitute_placeholders,
    tree_summary,
)
from .interpreter import TreeInvariantError, evaluate, evaluate_batch
from .nodes import BinaryOp, Leaf, Node, is_operator, iter_nodes, leaf_slots, node_depth, node_size, node_to_dict
from .operators import (
    COMMUTATIVE_OPERATORS,
    NON_COMMUTATIVE_OPERATORS,
    OPERATORS,
    OperatorSpec,
    get_operator,
    is_normal,
    safe_divide,
)
from .validate import ValidationError, validate_tree

__all__ = [
    "COMMUTATIVE_OPERATORS",
    "NON_COMMUTATIVE_OPERATORS",
    "OPERATORS",
    "BinaryOp",
    "Leaf",
    "Node",
    "NodeFactory",
    "OperatorSpec",
    "TreeInvariantError",
    "ValidationError",
    "canonical_tree_json",
    "evaluate",
    "evaluate_batch",
    "format_operand",
    "get_operator",
    "is_normal",
    "is_operator",
    "iter_nodes",
    "leaf_slots",
    "node_depth",
    "node_size",
    "node_to_dict",
    "render",
    "render_with_operands",
    "safe_divide",
    "stable_tree_hash",
    "substitute_placeholders",
    "tree_summary",
    "validate_tree",
]
