# src/dcmna_core/cli.py
"""
Command-line interface for DC circuit analysis.

Usage::

    dcmna analyze circuit.yaml
    dcmna analyze circuit.yaml --output report.txt
    dcmna validate circuit.yaml
    dcmna example 2
"""
import argparse
import logging
import sys
from pathlib import Path

from .catalog import EXAMPLE_CIRCUITS, get_example
from .data_structures import Circuit
from .errors import DCMnaError
from .log_config import setup_logging
from .parser import NetlistParser
from .report import render_report
from .simulation import run_analysis
from .validation import SemanticValidator, ValidationIssueLevel

logger = logging.getLogger(__name__)


def _emit_report(circuit: Circuit, output: str = None) -> int:
    """Analyse ``circuit`` and print or write its report. Returns the exit code."""
    try:
        outcome = run_analysis(circuit)
    except DCMnaError as e:
        print(str(e), file=sys.stderr)
        return 1

    text = render_report(outcome)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"Report written to {output}", file=sys.stderr)
    else:
        print(text)

    if not outcome.is_success:
        print(f"Analysis failed: {outcome.reason}", file=sys.stderr)
        return 1
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """Load a netlist, analyse it and output the step-by-step report."""
    try:
        circuit = NetlistParser().load_circuit(args.netlist)
    except DCMnaError as e:
        print(str(e), file=sys.stderr)
        return 1
    return _emit_report(circuit, args.output)


def cmd_validate(args: argparse.Namespace) -> int:
    """Check a netlist for errors without analysing it."""
    try:
        circuit = NetlistParser().load_circuit(args.netlist)
    except DCMnaError as e:
        print(str(e), file=sys.stderr)
        return 1

    issues = SemanticValidator(circuit).validate()
    errors = [i for i in issues if i.level == ValidationIssueLevel.ERROR]
    if errors:
        print(f"Circuit has errors: {args.netlist}", file=sys.stderr)
        for issue in errors:
            print(f"  - {issue}", file=sys.stderr)
        return 1

    print(f"Circuit is valid: {args.netlist}")
    for issue in issues:
        print(f"  {issue.level.name.capitalize()}: {issue.message}")
    return 0


def cmd_example(args: argparse.Namespace) -> int:
    """Analyse one of the built-in example circuits."""
    return _emit_report(get_example(args.number), args.output)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="dcmna",
        description="DC Modified Nodal Analysis with a complete, auditable derivation trace.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING",
        help="Logging level of the analysis engine (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Analyse a YAML netlist and output the report")
    analyze_parser.add_argument("netlist", help="Path to the YAML netlist")
    analyze_parser.add_argument("--output", "-o", help="Write the report to a file instead of stdout")

    validate_parser = subparsers.add_parser("validate", help="Check a YAML netlist for errors without analysing it")
    validate_parser.add_argument("netlist", help="Path to the YAML netlist")

    example_parser = subparsers.add_parser("example", help="Analyse a built-in example circuit")
    example_parser.add_argument(
        "number", type=int, choices=range(1, len(EXAMPLE_CIRCUITS) + 1),
        help=f"Example number (1-{len(EXAMPLE_CIRCUITS)})",
    )
    example_parser.add_argument("--output", "-o", help="Write the report to a file instead of stdout")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    handlers = {
        "analyze": cmd_analyze,
        "validate": cmd_validate,
        "example": cmd_example,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
