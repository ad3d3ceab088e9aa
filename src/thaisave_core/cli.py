"""Command-line entry point: run a savings calculation from a JSON request.

Usage:
    thaisave request.json
    thaisave request.json --output result.json
    cat request.json | thaisave -
    thaisave request.json --log-level DEBUG --json-logs

The request uses the SavingsInput field names, for example:

    {
      "principal_start": "100000",
      "annual_rate_pct": "1.0",
      "start_date": "2025-01-01",
      "end_date": "2025-12-31",
      "events": [{"date": "2025-03-15", "type": "deposit", "amount": "50000"}]
    }
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from .calculator import SavingsCalculator
from .config import load_config
from .exceptions import ThaiSaveError, ValidationError
from .logging_config import configure_logging

EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thaisave",
        description="Thai savings account interest (actual/365, semiannual payouts, 20k rule)",
    )
    parser.add_argument(
        "request",
        help="Path to a JSON request file, or '-' to read from stdin",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Write the JSON result here instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override THAISAVE_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit log lines as JSON on stderr",
    )
    return parser


def _read_request(source: str) -> dict:
    if source == "-":
        text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.is_file():
            raise ValidationError(
                f"Request file not found: {source}", field="request", value=source
            )
        text = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(
            f"Request is not valid JSON: {exc.msg}",
            details={"line": exc.lineno, "column": exc.colno},
        ) from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request must be a JSON object")
    return payload


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        overrides = {"log_level": args.log_level} if args.log_level else {}
        config = load_config(**overrides)
        configure_logging(
            level=config.log_level,
            json_logs=args.json_logs or config.json_logs,
        )
        payload = _read_request(args.request)
        result = SavingsCalculator(config.engine).calculate(payload)
    except ThaiSaveError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        for key, value in e.details.items():
            print(f"  {key}: {value}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    rendered = result.model_dump_json(indent=2)
    if args.output:
        args.output.write_text(rendered + "\n", encoding="utf-8")
        print(f"Result written to: {args.output}", file=sys.stderr)
    else:
        print(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
