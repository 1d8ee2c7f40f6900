"""VitaminOpt command-line interface.

Usage:
  vitaminopt solve --constraints res/constraints1.json --limb HephaestusArmLimbOne \
      --motors res/motorOptions.json [--refine] [--output result.json]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from vitaminopt.api import load_and_optimize, load_and_optimize_at_pareto_frontier
from vitaminopt.config.settings import SelectorConfig, load_config
from vitaminopt.optimization.errors import SelectionError
from vitaminopt.reporting import format_solution, pareto_set_to_dict, solution_to_dict


def _build_config(args: argparse.Namespace) -> SelectorConfig:
    config = load_config(args.config) if args.config else SelectorConfig()
    if args.time_limit is not None:
        data = config.to_dict()
        data["time_limit"] = args.time_limit
        config = SelectorConfig.from_mapping(data)
    return config


def cmd_solve(args: argparse.Namespace) -> int:
    for label, path in (("Constraints", args.constraints), ("Motor options", args.motors)):
        if not Path(path).exists():
            print(f"{label} file not found: {path}", file=sys.stderr)
            return 2

    try:
        config = _build_config(args)
    except (OSError, ValueError) as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 2

    try:
        if args.refine:
            solution = load_and_optimize_at_pareto_frontier(args.constraints, args.limb, args.motors, config)
            solutions = [solution]
            payload = solution_to_dict(solution)
        else:
            pareto = load_and_optimize(args.constraints, args.limb, args.motors, config)
            solutions = list(pareto)
            payload = pareto_set_to_dict(pareto)
    except (KeyError, ValueError) as exc:
        print(f"Failed to load problem: {exc}", file=sys.stderr)
        return 2
    except SelectionError as exc:
        print(f"Selection failed: {exc}", file=sys.stderr)
        return 1

    for solution in solutions:
        print("\n".join(format_solution(solution)))

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
        print(f"Result written: {out_path}")

    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="vitaminopt", description="Motor and gear ratio selection")
    parser.add_argument("--log-level", default="WARNING", help="Logging level for console output")
    sub = parser.add_subparsers(dest="command", required=True)

    p_solve = sub.add_parser("solve", help="Select motors for one limb")
    p_solve.add_argument("--constraints", required=True, help="Path to JSON/YAML limb constraints file")
    p_solve.add_argument("--limb", required=True, help="Limb name inside the constraints file")
    p_solve.add_argument("--motors", required=True, help="Path to JSON/YAML motor options file")
    p_solve.add_argument("--config", help="Path to JSON/YAML selector configuration")
    p_solve.add_argument("--time-limit", type=float, help="Solver time limit per solve (s)")
    p_solve.add_argument("--refine", action="store_true", help="Return one selection maximizing total gear ratio")
    p_solve.add_argument("--output", help="Write the result as JSON to this path")
    p_solve.set_defaults(func=cmd_solve)

    ns = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(ns.log_level).upper(), logging.WARNING))
    return ns.func(ns)


if __name__ == "__main__":
    raise SystemExit(main())
