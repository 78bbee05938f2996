"""Command-line front end for querying the Neumark issuance curve."""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from dataclasses import replace
from typing import Any, Callable, Dict, Tuple

from neumark.config import NeumarkConfig
from neumark.curve import (
    CAP,
    DECAY_STEP,
    INITIAL_REWARD_FRACTION,
    SATURATION_THRESHOLD,
    CurveDomainError,
    evaluate_series,
    format_ulps,
    incremental,
    incremental_inverse,
    issuance_schedule,
    parse_amount,
    solve_inverse,
)
from neumark.logging import LoggingOptions, configure_logging, load_logging_options_from_env

logger = logging.getLogger(__name__)

ERROR = "❌"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_DOMAIN_ERROR = 2


def _amount(value: int, config: NeumarkConfig) -> Any:
    if config.output.units == "whole":
        return format_ulps(value)
    return value


def _parse(args: argparse.Namespace, text: str) -> int:
    return parse_amount(text, whole=args.whole)


def _emit(payload: Any, config: NeumarkConfig) -> None:
    print(json.dumps(payload, indent=config.output.indent or None))


def _cmd_constants(args: argparse.Namespace, config: NeumarkConfig) -> int:
    _emit(
        {
            "cap": _amount(CAP, config),
            "initial_reward_fraction": _amount(INITIAL_REWARD_FRACTION, config),
            "decay_step": _amount(DECAY_STEP, config),
            "saturation_threshold": _amount(SATURATION_THRESHOLD, config),
            "max_series_pairs": config.curve.max_series_pairs,
        },
        config,
    )
    return EXIT_OK


def _cmd_cumulative(args: argparse.Namespace, config: NeumarkConfig) -> int:
    contributed = _parse(args, args.amount)
    result = evaluate_series(contributed, max_pairs=config.curve.max_series_pairs)
    payload: Dict[str, Any] = {
        "contributed": _amount(contributed, config),
        "issued": _amount(result.value, config),
    }
    if args.trace or config.curve.trace:
        payload["pairs"] = result.pairs
        payload["saturated"] = result.saturated
    _emit(payload, config)
    return EXIT_OK


def _cmd_inverse(args: argparse.Namespace, config: NeumarkConfig) -> int:
    issued = _parse(args, args.amount)
    lower = _parse(args, args.min) if args.min is not None else 0
    upper = _parse(args, args.max) if args.max is not None else SATURATION_THRESHOLD
    solution = solve_inverse(issued, lower, upper, config.curve.max_series_pairs)
    payload: Dict[str, Any] = {
        "issued": _amount(issued, config),
        "contributed": _amount(solution.value, config),
        "exact": solution.exact,
    }
    if args.trace or config.curve.trace:
        payload["steps"] = solution.steps
    _emit(payload, config)
    return EXIT_OK


def _cmd_incremental(args: argparse.Namespace, config: NeumarkConfig) -> int:
    total = _parse(args, args.total)
    delta = _parse(args, args.delta)
    issued = incremental(total, delta, config.curve.max_series_pairs)
    _emit(
        {
            "total": _amount(total, config),
            "delta": _amount(delta, config),
            "issued": _amount(issued, config),
        },
        config,
    )
    return EXIT_OK


def _cmd_incremental_inverse(args: argparse.Namespace, config: NeumarkConfig) -> int:
    total = _parse(args, args.total)
    issued_delta = _parse(args, args.delta)
    lower = _parse(args, args.min) if args.min is not None else 0
    upper = _parse(args, args.max) if args.max is not None else None
    contributed_delta = incremental_inverse(
        total, issued_delta, lower, upper, config.curve.max_series_pairs
    )
    _emit(
        {
            "total": _amount(total, config),
            "issued_delta": _amount(issued_delta, config),
            "contributed_delta": _amount(contributed_delta, config),
        },
        config,
    )
    return EXIT_OK


def _cmd_schedule(args: argparse.Namespace, config: NeumarkConfig) -> int:
    rows = issuance_schedule(
        _parse(args, args.start),
        _parse(args, args.step),
        args.count,
        config.curve.max_series_pairs,
    )
    if args.csv:
        writer = csv.writer(sys.stdout)
        writer.writerow(["contributed", "issued", "marginal"])
        for row in rows:
            writer.writerow([_amount(v, config) for v in (row.contributed, row.issued, row.marginal)])
        return EXIT_OK

    _emit(
        [{k: _amount(v, config) for k, v in row.to_dict().items()} for row in rows],
        config,
    )
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="neumark",
        description="Neumark issuance curve CLI",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", help="Path to config file (JSON, TOML or YAML)")
    parser.add_argument(
        "--whole",
        action="store_true",
        help="Amount arguments are whole units instead of Ulps",
    )
    parser.add_argument("--log-level", help="Override logging level")
    parser.add_argument("--log-format", choices=["text", "json"], help="Override log format")
    sub = parser.add_subparsers(dest="command", required=True)

    p_constants = sub.add_parser("constants", help="Print the curve constants")
    p_constants.set_defaults(func=_cmd_constants)

    p_cumulative = sub.add_parser("cumulative", help="Issued amount for a total contributed amount")
    p_cumulative.add_argument("amount", help="Total contributed amount")
    p_cumulative.add_argument("--trace", action="store_true", help="Report series pairs evaluated")
    p_cumulative.set_defaults(func=_cmd_cumulative)

    p_inverse = sub.add_parser("inverse", help="Contributed amount for a total issued amount")
    p_inverse.add_argument("amount", help="Total issued amount")
    p_inverse.add_argument("--min", help="Lower search bound (default 0)")
    p_inverse.add_argument("--max", help="Upper search bound (default saturation threshold)")
    p_inverse.add_argument("--trace", action="store_true", help="Report bisection steps")
    p_inverse.set_defaults(func=_cmd_inverse)

    p_incremental = sub.add_parser("incremental", help="Issued amount for an additional contribution")
    p_incremental.add_argument("total", help="Current total contributed amount")
    p_incremental.add_argument("delta", help="Additional contribution")
    p_incremental.set_defaults(func=_cmd_incremental)

    p_incremental_inverse = sub.add_parser(
        "incremental-inverse",
        help="Contributed amount equivalent to retiring issued amount",
    )
    p_incremental_inverse.add_argument("total", help="Current total contributed amount")
    p_incremental_inverse.add_argument("delta", help="Issued amount to retire")
    p_incremental_inverse.add_argument("--min", help="Lower search bound (default 0)")
    p_incremental_inverse.add_argument("--max", help="Upper search bound (default TOTAL)")
    p_incremental_inverse.set_defaults(func=_cmd_incremental_inverse)

    p_schedule = sub.add_parser("schedule", help="Tabulate the curve at evenly spaced amounts")
    p_schedule.add_argument("--start", default="0", help="First contributed amount")
    p_schedule.add_argument("--step", required=True, help="Contributed amount between rows")
    p_schedule.add_argument("--count", type=int, default=10, help="Number of rows")
    p_schedule.add_argument("--csv", action="store_true", help="Emit CSV instead of JSON")
    p_schedule.set_defaults(func=_cmd_schedule)

    return parser


def _load_config(args: argparse.Namespace) -> Tuple[NeumarkConfig, LoggingOptions]:
    config = NeumarkConfig.load(args.config)
    options = load_logging_options_from_env(config.logging.to_options())
    if args.log_level:
        options = replace(options, level=args.log_level)
    if args.log_format:
        options = replace(options, format=args.log_format)
    return config, options


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler: Callable[[argparse.Namespace, NeumarkConfig], int] = args.func

    try:
        config, log_options = _load_config(args)
        configure_logging(log_options)
    except (OSError, ValueError) as exc:
        print(f"{ERROR} Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        return handler(args, config)
    except CurveDomainError as exc:
        print(f"{ERROR} {args.command} rejected: {exc}", file=sys.stderr)
        return EXIT_DOMAIN_ERROR
    except Exception as exc:  # noqa: BLE001
        logger.exception("%s failed", args.command)
        print(f"{ERROR} {args.command} failed: {exc}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
