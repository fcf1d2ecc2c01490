#!/usr/bin/env python3
"""
CCA CLI

Thin wrapper over the analysis engine.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from cca.explanation import explain
from cca.orchestrator import analyze_path
from cca.rules import parse_rule_ids, resolve_enabled_rules, supported_rules

log = logging.getLogger("cca")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cca",
        description="Report structural-complexity issues in C# source files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cca analyze .
  cca analyze src/Service.cs --ignore PNCC001
  cca analyze . --changed-since origin/main --format json
  cca rules
        """,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging and tracebacks",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        metavar="{analyze,rules}",
    )

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a C# file or directory",
    )
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="File or directory to analyze (default: current directory)",
    )
    analyze_parser.add_argument(
        "--select",
        default="",
        help="Comma-separated rule ids to run (default: all enabled rules)",
    )
    analyze_parser.add_argument(
        "--ignore",
        default="",
        help="Comma-separated rule ids to skip",
    )
    analyze_parser.add_argument(
        "--changed-since",
        metavar="REV",
        default=None,
        help="Only analyze files changed relative to a Git revision",
    )
    analyze_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )

    subparsers.add_parser(
        "rules",
        help="List the available rules",
    )

    return parser


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_rules() -> int:
    for rule in supported_rules():
        state = "enabled" if rule.enabled_by_default else "disabled"
        print(f"{rule.id.value}  {rule.category:<12} {rule.severity.value:<8} {state:<8} {rule.title}")
    return 0


def _run_analyze(args: argparse.Namespace) -> int:
    target = Path(args.path).resolve()

    if not target.exists():
        print(f"Error: Path does not exist: {target}", file=sys.stderr)
        return 1

    rules = resolve_enabled_rules(
        select=parse_rule_ids(args.select),
        ignore=parse_rule_ids(args.ignore),
    )
    diagnostics = analyze_path(target, rules=rules, changed_since=args.changed_since)
    explanations = explain(diagnostics)

    if args.format == "json":
        json.dump([e.to_dict() for e in explanations], sys.stdout, indent=2)
        print()
        return 0

    print(f"Analyzed: {target}")
    print(f"Total findings: {len(explanations)}")

    if explanations:
        print()
        for explanation in explanations:
            print(explanation.render())

    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.debug)

    try:
        if args.command == "rules":
            return _print_rules()
        if args.command == "analyze":
            return _run_analyze(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception:
        log.debug("Internal error", exc_info=True)
        print("Internal error while analyzing sources.", file=sys.stderr)
        print("Run with --debug for details.", file=sys.stderr)
        return 2

    # This should never happen because argparse enforces commands
    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
