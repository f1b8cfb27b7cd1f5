"""Interactive shell and CLI entry points around the solver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import TextIO

from pydantic import ValidationError as PydanticValidationError

from .config import SolverConfig
from .hands import all_hands, sample_hands
from .models import Hand, parse_hand
from .solver import Solver

logger = logging.getLogger(__name__)

_QUIT_WORDS = {"quit", "exit"}


def describe_input_error(exc: ValueError) -> str:
    if isinstance(exc, PydanticValidationError):
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        return f"{location}: {first.get('msg', 'invalid value')}"
    return str(exc)


def print_solutions(solver: Solver, hand: Hand, stdout: TextIO) -> bool:
    expressions = solver.solve_expressions(hand.operands)
    if not expressions:
        print("No Solution.", file=stdout)
        return False
    for expression in expressions:
        print(expression, file=stdout)
    return True


def run_repl(solver: Solver, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Prompt for hands until EOF or ``quit`` and print their solutions."""

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    count = solver.config.operand_count
    prompt = f"Input {count} Numbers: "

    while True:
        stdout.write(prompt)
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write("\n")
            return 0
        text = line.strip()
        if not text:
            continue
        if text.lower() in _QUIT_WORDS:
            return 0
        try:
            hand = parse_hand(text, count)
        except ValueError as exc:
            logger.debug("Rejected input %r: %s", text, exc)
            print(f"Invalid input: {describe_input_error(exc)}", file=stdout)
            continue
        print_solutions(solver, hand, stdout)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find every arithmetic expression over a hand of numbers that hits a target."
    )
    parser.add_argument(
        "numbers",
        nargs="*",
        help="Solve this hand once and exit (default: interactive prompt)",
    )
    parser.add_argument("--target", type=float, default=24.0, help="Target value (default: 24)")
    parser.add_argument(
        "--tolerance", type=float, default=0.01, help="Absolute match tolerance (default: 0.01)"
    )
    parser.add_argument("--count", type=int, default=4, help="Operands per hand (default: 4)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of plain text")
    parser.add_argument(
        "--survey",
        type=int,
        metavar="MAX",
        default=None,
        help="Count solutions for every hand with values in 1..MAX and exit",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        default=None,
        help="Survey N random hands instead of every hand (values in 1..MAX, default MAX 13)",
    )
    parser.add_argument("--seed", type=int, default=7, help="Random seed for --sample (default: 7)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    return parser


def _run_survey(solver: Solver, hands, as_json: bool, stdout: TextIO) -> int:
    frame = solver.survey(hands)
    if as_json:
        print(frame.to_json(orient="records"), file=stdout)
        return 0
    solvable = int((frame["solutions"] > 0).sum())
    print(f"hands: {len(frame)}, solvable: {solvable}, unsolvable: {len(frame) - solvable}", file=stdout)
    return 0


def main(argv: list[str] | None = None, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """CLI entrypoint: one-shot solve, hand survey, or the interactive prompt."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    stdout = stdout or sys.stdout

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    if args.count < 1:
        parser.error("--count must be >= 1")
    if args.sample is not None and args.sample < 0:
        parser.error("--sample must be >= 0")

    config = SolverConfig(operand_count=args.count, target=args.target, tolerance=args.tolerance)
    hand: Hand | None = None
    if args.numbers:
        try:
            hand = parse_hand(" ".join(args.numbers), config.operand_count)
        except ValueError as exc:
            parser.error(f"invalid hand: {describe_input_error(exc)}")

    started = time.perf_counter()
    solver = Solver(config)
    elapsed = time.perf_counter() - started

    if args.sample is not None:
        max_value = 13 if args.survey is None else args.survey
        hands = sample_hands(args.sample, config.operand_count, 1, max_value, seed=args.seed)
        return _run_survey(solver, hands, args.json, stdout)
    if args.survey is not None:
        hands = all_hands(config.operand_count, 1, args.survey)
        return _run_survey(solver, hands, args.json, stdout)

    if hand is not None:
        if args.json:
            report = solver.report(hand.operands)
            print(json.dumps(report.model_dump(), ensure_ascii=False, indent=2), file=stdout)
            return 0 if report.solved else 1
        return 0 if print_solutions(solver, hand, stdout) else 1

    print(f"{len(solver.trees)} expressions generated in {elapsed:.3f}s.", file=stdout)
    return run_repl(solver, stdin=stdin, stdout=stdout)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
