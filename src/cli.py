"""
Command-line interface reporting what the safety analyzer can prove about
JavaScript files: which `var`/`let` declarations may become `const`, and which
wrapper-initialised variables resolve to their wrapped argument.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List, Optional

import esprima

from analyzer import AnalysisOptions, Session, is_wrapper_call
from analyzer.session import DEFAULT_WRAPPER_CALLEES
from frontend import FrontEndResult, run_frontend

logger = logging.getLogger("cli")


@dataclass(frozen=True)
class Finding:
    source: str
    line: Optional[int]
    column: Optional[int]
    category: str
    name: str
    result: str

    def render(self) -> str:
        return f"{self.source}{_format_location(self.line, self.column)}: {self.category} {self.name} -> {self.result}"


def _format_location(line: int | None, column: int | None) -> str:
    if line is None:
        return ""
    if column is None:
        return f":{line}"
    return f":{line}:{column}"


def _print_diagnostics(messages: List[str]) -> None:
    for message in messages:
        sys.stderr.write(message + "\n")


def _start(node) -> tuple:
    start = (node.get("loc") or {}).get("start") or {}
    return start.get("line"), start.get("column")


def _declaration_findings(result: FrontEndResult) -> List[Finding]:
    session = result.session
    findings: List[Finding] = []
    for declaration in session.unit.nodes("VariableDeclaration"):
        if declaration.get("kind") not in {"var", "let"}:
            continue
        kinds = session.suggest_kind(declaration)
        for declarator, kind in zip(declaration.get("declarations", []), kinds):
            line, column = _start(declarator)
            name = session.unit.source_of(declarator.get("id"), result.source) or "?"
            findings.append(Finding(session.unit.source_name, line, column, "declaration", name, kind))
    return findings


def _alias_findings(result: FrontEndResult) -> List[Finding]:
    session: Session = result.session
    callees = session.options.wrapper_callees
    findings: List[Finding] = []
    seen = set()
    for declarator in session.unit.nodes("VariableDeclarator"):
        identifier = declarator.get("id") or {}
        name = identifier.get("name")
        if not name or name in seen or not is_wrapper_call(declarator.get("init"), callees):
            continue
        seen.add(name)
        target = session.resolve_alias(name)
        rendered = session.unit.source_of(target, result.source) if target else None
        line, column = _start(declarator)
        findings.append(
            Finding(session.unit.source_name, line, column, "alias", name, rendered or "unresolved")
        )
    return findings


def report_command(args: argparse.Namespace) -> int:
    options = AnalysisOptions(
        wrapper_callees=frozenset(args.wrapper) if args.wrapper else DEFAULT_WRAPPER_CALLEES
    )
    source_type = "module" if args.module else "auto"
    findings: List[Finding] = []
    diagnostics: List[str] = []
    exit_code = 0

    for raw_path in args.inputs:
        input_path = Path(raw_path).resolve()
        if not input_path.exists():
            sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
            exit_code = 1
            continue
        try:
            source = input_path.read_text(encoding="utf-8")
        except OSError as exc:
            sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
            exit_code = 1
            continue

        # One session per file; nothing is shared between units.
        result = _load(source, input_path, args.strict, source_type, options)
        if result is None or result.session is None:
            sys.stderr.write(f"ERROR: Parsing failed for {input_path}; no tree produced.\n")
            exit_code = 1
            continue

        for error in result.parse.errors:
            loc = _format_location(error.line, error.column)
            diagnostics.append(f"WARNING {input_path}{loc}: {error.description}")

        findings.extend(_declaration_findings(result))
        findings.extend(_alias_findings(result))

    if args.json:
        sys.stdout.write(json.dumps([asdict(finding) for finding in findings], indent=2) + "\n")
    else:
        for finding in findings:
            sys.stdout.write(finding.render() + "\n")
    _print_diagnostics(diagnostics)
    return exit_code


def _load(source, input_path, strict, source_type, options) -> Optional[FrontEndResult]:
    try:
        return run_frontend(
            source,
            source_name=str(input_path),
            tolerant=not strict,
            source_type=source_type,
            options=options,
        )
    except esprima.Error as exc:
        logger.debug("strict parse of %s failed", input_path, exc_info=True)
        sys.stderr.write(f"ERROR {input_path}: {exc}\n")
        return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jssafe", description="Report provable rewrite-safety facts for JavaScript")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log analyzer decisions to stderr.")
    subparsers = parser.add_subparsers(dest="command")

    report_parser = subparsers.add_parser("report", help="Analyse JavaScript files and print findings")
    report_parser.add_argument("inputs", nargs="+", help="JavaScript files to analyse")
    report_parser.add_argument(
        "--module",
        action="store_true",
        help="Parse inputs as ES modules (default: try module, then script).",
    )
    report_parser.add_argument(
        "--strict",
        action="store_true",
        help="Disable tolerant parsing; any syntax error fails the file.",
    )
    report_parser.add_argument("--json", action="store_true", help="Emit findings as JSON.")
    report_parser.add_argument(
        "--wrapper",
        action="append",
        metavar="NAME",
        help="Wrapper callee recognised by alias resolution (repeatable; default: $ and jQuery).",
    )
    report_parser.set_defaults(func=report_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
