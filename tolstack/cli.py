"""Command-line interface for tolerance stack analysis."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from tolstack.analysis import analyze_state
from tolstack.errors import InvalidParameters, ToleranceStackError
from tolstack.models import State
from tolstack.monte_carlo import MonteCarloConfig
from tolstack.results import save_export_csv


MC_METHODS = ("mc", "monte-carlo", "monte_carlo")


def _check_outputs(args: argparse.Namespace, methods: Optional[list[str]]) -> None:
    """Reject output flags the selected methods cannot produce."""
    keys = {m.lower().strip() for m in methods} if methods else {"mc", "rss"}
    has_mc = bool(keys.intersection(MC_METHODS))
    if args.export and not (has_mc and "rss" in keys):
        raise InvalidParameters("--export needs both the mc and rss methods")
    if args.samples and not has_mc:
        raise InvalidParameters("--samples needs the mc method")


def cmd_analyze(args: argparse.Namespace) -> None:
    """Run analysis on a JSON state file."""
    state = State.load(args.file)
    if args.assy_sigma is not None:
        state.parameters.assy_sigma = args.assy_sigma
    if args.iterations is not None:
        state.parameters.n_iterations = args.iterations
    methods = args.methods.split(",") if args.methods else None
    _check_outputs(args, methods)

    config = MonteCarloConfig(
        chunk_size=args.chunk_size,
        n_workers=args.workers,
        seed=args.seed,
        samples_path=args.samples,
    )
    results = analyze_state(state, methods=methods, config=config)

    print(results.summary(assy_sigma=state.parameters.assy_sigma))

    if args.save:
        state.save(args.save)
        print(f"Saved state to {args.save}")
    if args.samples:
        print(f"Wrote stackup samples to {args.samples}")
    if args.export:
        save_export_csv(results, args.export)
        print(f"Exported results to {args.export}")


def cmd_create_example(args: argparse.Namespace) -> None:
    """Create an example state file."""
    from tolstack.examples import EXAMPLES

    state = EXAMPLES[args.example]()
    path = args.output or f"{args.example}_example.json"
    state.save(path)
    print(f"Created example stack: {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tolstack",
        description="1D Tolerance Stack Analysis Tool",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- analyze ---
    p_analyze = subparsers.add_parser("analyze", help="Analyze a tolerance stack from a JSON file")
    p_analyze.add_argument("file", help="Path to state JSON file")
    p_analyze.add_argument("-m", "--methods", default=None,
                           help="Comma-separated methods: mc,rss (default: all)")
    p_analyze.add_argument("--assy-sigma", type=float, default=None,
                           help="Override the assembly sigma stored in the file")
    p_analyze.add_argument("--iterations", type=int, default=None,
                           help="Override the Monte Carlo iteration count")
    p_analyze.add_argument("--chunk-size", type=int, default=100_000,
                           help="Samples per Monte Carlo chunk (default: 100000)")
    p_analyze.add_argument("--workers", type=int, default=4,
                           help="Sampling threads per tolerance (default: 4)")
    p_analyze.add_argument("--seed", type=int, default=None,
                           help="Random seed for Monte Carlo")
    p_analyze.add_argument("--export", default=None,
                           help="Write the result vector to this CSV file")
    p_analyze.add_argument("--samples", default=None,
                           help="Write every Monte Carlo stackup sample to this CSV file")
    p_analyze.add_argument("--save", default=None,
                           help="Save the state with results to this JSON file")
    p_analyze.set_defaults(func=cmd_analyze)

    # --- example ---
    p_example = subparsers.add_parser("example", help="Create an example state file")
    p_example.add_argument("example", choices=["bracket", "housing"],
                           help="Which example to create")
    p_example.add_argument("-o", "--output", default=None,
                           help="Output file path")
    p_example.set_defaults(func=cmd_create_example)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        args.func(args)
    except ToleranceStackError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
