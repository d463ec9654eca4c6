"""
JavaScript parsing on top of the Python `esprima` port.

`parse_js` returns the JSON-compatible tree together with the recoverable
diagnostics esprima reported, so the analyzer can work on partially broken
input instead of giving up. Location and range data are always requested: the
analyzer uses ranges to quote resolved expressions back to the user.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import esprima

logger = logging.getLogger(__name__)

SOURCE_TYPES = ("script", "module", "auto")


@dataclass(frozen=True)
class ParseError:
    """Represents a recoverable parsing issue detected by esprima."""

    description: str
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class ParseResult:
    """Aggregate of the output tree plus metadata about the parse run."""

    ast: Any
    errors: List[ParseError]
    source_hash: str
    source_name: str
    source_type: str

    @property
    def ok(self) -> bool:
        return self.ast is not None

    def to_json(self) -> str:
        payload = {
            "ast": self.ast,
            "errors": [error.__dict__ for error in self.errors],
            "source_hash": self.source_hash,
            "source_name": self.source_name,
            "source_type": self.source_type,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


def _hash_source(source: str) -> str:
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def _run_esprima(source: str, source_type: str, tolerant: bool) -> Any:
    options = dict(loc=True, range=True, comment=True, tolerant=tolerant)
    parse = esprima.parseModule if source_type == "module" else esprima.parseScript
    tree = parse(source, **options)
    return tree.toDict() if hasattr(tree, "toDict") else tree


def _collect_errors(raw_ast: Any) -> List[ParseError]:
    errors: List[ParseError] = []
    if not isinstance(raw_ast, dict):
        return errors
    for error in raw_ast.get("errors", []):
        errors.append(
            ParseError(
                description=error.get("description"),
                line=error.get("lineNumber"),
                column=error.get("column"),
            )
        )
    return errors


def parse_js(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    source_type: str = "script",
) -> ParseResult:
    """
    Parse JavaScript source text into an esprima tree.

    Args:
        source: Raw JavaScript source code.
        source_name: Label used in diagnostics.
        tolerant: When True, esprima recovers from errors instead of raising.
        source_type: `"script"`, `"module"`, or `"auto"` (module first, then script).

    Returns:
        ParseResult; `ast` is None when the source could not be parsed at all.

    Raises:
        ValueError: For an unknown `source_type`.
        esprima.Error: If parsing fails and `tolerant` is False.
    """
    if source_type not in SOURCE_TYPES:
        raise ValueError(f"Unknown source type: {source_type!r}")

    source_hash = _hash_source(source)
    attempts = ["module", "script"] if source_type == "auto" else [source_type]

    for index, attempt in enumerate(attempts):
        last_attempt = index == len(attempts) - 1
        try:
            raw_ast = _run_esprima(source, attempt, tolerant)
        except esprima.Error as exc:
            logger.debug("%s: %s parse failed: %s", source_name, attempt, exc)
            if not last_attempt:
                continue
            if not tolerant:
                raise
            return ParseResult(
                ast=None,
                errors=[ParseError(description=f"Failed to parse source: {exc}", line=None, column=None)],
                source_hash=source_hash,
                source_name=source_name,
                source_type=attempt,
            )
        errors = _collect_errors(raw_ast) if tolerant else []
        if errors and not last_attempt:
            # A module parse that needed recovery is retried as a script.
            continue
        return ParseResult(
            ast=raw_ast,
            errors=errors,
            source_hash=source_hash,
            source_name=source_name,
            source_type=attempt,
        )

    raise AssertionError("unreachable")  # pragma: no cover


__all__ = ["ParseError", "ParseResult", "SOURCE_TYPES", "parse_js"]
