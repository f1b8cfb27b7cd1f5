"""Regression tests for enumeration, solution filtering, and the shell."""

from __future__ import annotations

import ast
import io
import json
import math
import operator
import re

import numpy as np
import pandas as pd
import pytest

from game24.config import SolverConfig
from game24.enumerator import generate, generate_candidates, search
from game24.hands import all_hands, sample_hands
from game24.models import Hand, parse_hand
from game24.runner import main, run_repl
from game24.solver import Solver, filter_solutions
from game24.tree import (
    BinaryOp,
    Leaf,
    NodeFactory,
    evaluate,
    leaf_slots,
    render,
    render_with_operands,
    stable_tree_hash,
    validate_tree,
)

_TEXT_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}


def _eval_text(text: str) -> float:
    """Evaluate rendered arithmetic the way a reader would."""

    def _walk(node: ast.AST) -> float:
        if isinstance(node, ast.Expression):
            return _walk(node.body)
        if isinstance(node, ast.BinOp):
            return _TEXT_OPS[type(node.op)](_walk(node.left), _walk(node.right))
        if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.USub):
            return -_walk(node.operand)
        if isinstance(node, ast.Constant):
            return float(node.value)
        raise ValueError(f"unexpected syntax in {text!r}")

    return _walk(ast.parse(text, mode="eval"))


def _swapped_variants(node):
    """Trees differing from ``node`` by one swap of a ``+``/``*`` node's children."""
    if isinstance(node, Leaf):
        return
    if node.op in {"+", "*"}:
        yield BinaryOp(node.op, node.right, node.left)
    for left in _swapped_variants(node.left):
        yield BinaryOp(node.op, left, node.right)
    for right in _swapped_variants(node.right):
        yield BinaryOp(node.op, node.left, right)


@pytest.fixture(scope="module")
def trees():
    return generate(4)


@pytest.fixture(scope="module")
def solver():
    return Solver()


# ---------------------------------------------------------------------------
# Candidate generation
# ---------------------------------------------------------------------------


def test_generate_candidates_for_two_leaves() -> None:
    factory = NodeFactory()
    a, b = factory.leaves(2)
    candidates = generate_candidates(a, b, factory)
    assert [node.op for node in candidates] == ["+", "*", "-", "-", "/", "/"]
    assert [render(node) for node in candidates] == [
        "[0]+[1]",
        "[0]*[1]",
        "[0]-[1]",
        "[1]-[0]",
        "[0]/[1]",
        "[1]/[0]",
    ]
    ids = [node.creation_id for node in candidates]
    assert ids == sorted(ids)
    assert ids[0] == 2


def test_generate_candidates_skips_same_operator_on_left() -> None:
    factory = NodeFactory()
    a, b, c = factory.leaves(3)
    total = factory.binary("+", a, b)
    ops = [node.op for node in generate_candidates(total, c, factory)]
    assert "+" not in ops
    assert ops.count("*") == 1
    assert len(ops) == 5


def test_generate_candidates_same_operator_on_right_uses_id_order() -> None:
    factory = NodeFactory()
    a, b, c = factory.leaves(3)
    b_times_c = factory.binary("*", b, c)
    a_times_b = factory.binary("*", a, b)

    allowed = [node.op for node in generate_candidates(a, b_times_c, factory)]
    assert allowed.count("*") == 1

    skipped = [node.op for node in generate_candidates(c, a_times_b, factory)]
    assert "*" not in skipped
    assert skipped.count("+") == 1


def test_search_single_tree_is_returned_as_is() -> None:
    leaf = Leaf(0)
    assert search([leaf], 1, NodeFactory()) == [leaf]


def test_search_does_not_modify_working_set() -> None:
    factory = NodeFactory()
    working = factory.leaves(3)
    snapshot = list(working)
    search(working, 1, factory)
    assert working == snapshot


# ---------------------------------------------------------------------------
# Enumeration
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(("count", "expected"), [(1, 1), (2, 6), (3, 104), (4, 3012)])
def test_generate_cardinality(count: int, expected: int) -> None:
    assert len(generate(count)) == expected


def test_generate_is_deterministic(trees) -> None:
    again = generate(4)
    assert [render(tree) for tree in again] == [render(tree) for tree in trees]


def test_generate_rejects_empty_hand() -> None:
    with pytest.raises(ValueError):
        generate(0)


def test_every_tree_uses_each_slot_once(trees) -> None:
    for tree in trees:
        assert sorted(leaf_slots(tree)) == [0, 1, 2, 3]
        validate_tree(tree, 4)


def test_trees_are_structurally_distinct(trees) -> None:
    assert len({stable_tree_hash(tree) for tree in trees}) == len(trees)


def test_no_tree_is_a_commutative_swap_of_another(trees) -> None:
    generated = set(trees)
    for tree in trees:
        for variant in _swapped_variants(tree):
            assert variant not in generated, render(tree)


@pytest.mark.parametrize("operands", [[4, 1, 8, 7], [3, 3, 8, 8], [2, 5, 9, 13]])
def test_render_round_trips_through_text(trees, operands) -> None:
    for tree in trees:
        value = evaluate(tree, operands)
        if math.isnan(value):
            continue
        text = render_with_operands(tree, operands)
        assert _eval_text(text) == pytest.approx(value, rel=1e-9, abs=1e-9), text


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def test_filter_uses_strict_tolerance() -> None:
    tree = BinaryOp("+", Leaf(0), Leaf(1))
    assert filter_solutions([tree], [20, 4], 24, 0.5) == [tree]
    assert filter_solutions([tree], [20, 4], 24, 0.0) == []
    assert filter_solutions([tree], [23.5, 0], 24, 0.5) == []


def test_filter_never_matches_nan() -> None:
    tree = BinaryOp("/", Leaf(0), Leaf(1))
    assert filter_solutions([tree], [1, 0], 0.0, 1e300) == []


def test_filter_preserves_enumeration_order(trees) -> None:
    solutions = filter_solutions(trees, [4, 1, 8, 7], 24, 0.01)
    positions = {id(tree): idx for idx, tree in enumerate(trees)}
    indices = [positions[id(tree)] for tree in solutions]
    assert indices == sorted(indices)


def test_scenario_4_1_8_7(solver) -> None:
    expressions = solver.solve_expressions([4, 1, 8, 7])
    assert expressions
    assert "(8-4)*(7-1)" in expressions


def test_scenario_1_1_1_1_has_no_solution(solver) -> None:
    assert solver.solve([1, 1, 1, 1]) == []


def test_scenario_3_3_8_8(solver) -> None:
    expressions = solver.solve_expressions([3, 3, 8, 8])
    assert "8/(3-8/3)" in expressions
    for text in expressions:
        assert _eval_text(text) == pytest.approx(24, abs=0.01)


def test_solver_rejects_wrong_operand_count(solver) -> None:
    with pytest.raises(ValueError, match="expected 4 operands"):
        solver.solve([1, 2, 3])


def test_solver_custom_target() -> None:
    small = Solver(SolverConfig(operand_count=2, target=6.0))
    assert small.solve_expressions([2, 3]) == ["2*3"]


def test_report(solver) -> None:
    report = solver.report([4, 1, 8, 7])
    assert report.solved
    assert report.target == 24.0
    assert len(report.expressions) == len(report.trees)
    assert report.trees[0]["type"] == "op"


def test_survey_matches_single_hand_solves(solver) -> None:
    hands = [[4, 1, 8, 7], [1, 1, 1, 1], [3, 3, 8, 8]]
    frame = solver.survey(hands)
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ["x0", "x1", "x2", "x3", "solutions", "example"]
    for row, hand in zip(frame.itertuples(index=False), hands):
        expressions = solver.solve_expressions(hand)
        assert row.solutions == len(expressions)
        if expressions:
            assert row.example == expressions[0]
        else:
            assert row.example is None


def test_survey_example_column_keeps_none_for_unsolvable_hands(solver) -> None:
    frame = solver.survey([[1, 1, 1, 1], [4, 1, 8, 7]])
    assert frame["example"].dtype == object
    assert frame["example"].iloc[0] is None
    assert isinstance(frame["example"].iloc[1], str)
    assert frame["example"].isna().tolist() == [True, False]


def test_survey_rejects_bad_shape(solver) -> None:
    with pytest.raises(ValueError, match="shape"):
        solver.survey(np.ones((2, 3)))


# ---------------------------------------------------------------------------
# Hands and parsing
# ---------------------------------------------------------------------------


def test_all_hands() -> None:
    assert all_hands(2, 1, 3) == [(1, 1), (1, 2), (1, 3), (2, 2), (2, 3), (3, 3)]
    assert len(all_hands(4, 1, 13)) == 1820


def test_sample_hands_is_seeded() -> None:
    first = sample_hands(5, 4, seed=3)
    second = sample_hands(5, 4, seed=3)
    assert first.shape == (5, 4)
    np.testing.assert_array_equal(first, second)
    assert first.min() >= 1 and first.max() <= 13


def test_parse_hand() -> None:
    assert parse_hand("4 1 8 7", 4) == Hand(operands=[4.0, 1.0, 8.0, 7.0])
    assert parse_hand("  2.5\t3 7 11 99 ", 4).operands == [2.5, 3.0, 7.0, 11.0]


@pytest.mark.parametrize("text", ["", "1 2 3", "4 x 8 7", "nan 1 2 3", "1 inf 2 3"])
def test_parse_hand_rejects_bad_input(text: str) -> None:
    with pytest.raises(ValueError):
        parse_hand(text, 4)


# ---------------------------------------------------------------------------
# Shell
# ---------------------------------------------------------------------------


def test_repl_session(solver) -> None:
    stdin = io.StringIO("4 1 8 7\nabc\n\n1 1 1 1\n")
    stdout = io.StringIO()
    assert run_repl(solver, stdin=stdin, stdout=stdout) == 0
    output = stdout.getvalue()
    assert output.count("Input 4 Numbers: ") == 5
    assert "(8-4)*(7-1)" in output
    assert "Invalid input:" in output
    assert "No Solution." in output


def test_repl_quit(solver) -> None:
    stdout = io.StringIO()
    assert run_repl(solver, stdin=io.StringIO("quit\n4 1 8 7\n"), stdout=stdout) == 0
    assert "(8-4)" not in stdout.getvalue()


def test_cli_one_shot() -> None:
    stdout = io.StringIO()
    assert main(["4", "1", "8", "7"], stdout=stdout) == 0
    assert "(8-4)*(7-1)" in stdout.getvalue().splitlines()


def test_cli_no_solution_exit_code() -> None:
    stdout = io.StringIO()
    assert main(["1", "1", "1", "1"], stdout=stdout) == 1
    assert stdout.getvalue().strip() == "No Solution."


def test_cli_json() -> None:
    stdout = io.StringIO()
    assert main(["--json", "3", "3", "8", "8"], stdout=stdout) == 0
    payload = json.loads(stdout.getvalue())
    assert payload["operands"] == [3.0, 3.0, 8.0, 8.0]
    assert "8/(3-8/3)" in payload["expressions"]


def test_cli_survey() -> None:
    stdout = io.StringIO()
    assert main(["--count", "2", "--target", "6", "--survey", "3"], stdout=stdout) == 0
    assert stdout.getvalue().strip() == "hands: 6, solvable: 2, unsolvable: 4"


def test_cli_sample_surveys_seeded_random_hands() -> None:
    stdout = io.StringIO()
    argv = ["--count", "2", "--target", "6", "--survey", "3", "--sample", "5", "--seed", "3"]
    assert main(argv, stdout=stdout) == 0

    small = Solver(SolverConfig(operand_count=2, target=6.0))
    expected = small.survey(sample_hands(5, 2, 1, 3, seed=3))
    solvable = int((expected["solutions"] > 0).sum())
    assert stdout.getvalue().strip() == f"hands: 5, solvable: {solvable}, unsolvable: {5 - solvable}"


def test_cli_sample_json_rows() -> None:
    stdout = io.StringIO()
    assert main(["--sample", "4", "--json"], stdout=stdout) == 0
    rows = json.loads(stdout.getvalue())
    assert len(rows) == 4
    for row in rows:
        assert 1 <= min(row["x0"], row["x1"], row["x2"], row["x3"])
        assert max(row["x0"], row["x1"], row["x2"], row["x3"]) <= 13
        assert (row["example"] is None) == (row["solutions"] == 0)


def test_cli_interactive() -> None:
    stdout = io.StringIO()
    assert main([], stdin=io.StringIO("exit\n"), stdout=stdout) == 0
    banner = stdout.getvalue().splitlines()[0]
    assert re.fullmatch(r"3012 expressions generated in \d+\.\d{3}s\.", banner)


def test_cli_rejects_short_hand() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["1", "2"], stdout=io.StringIO())
    assert excinfo.value.code == 2
