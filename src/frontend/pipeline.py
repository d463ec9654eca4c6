"""
Front-end glue: parse JavaScript, index the tree and open an analysis session.

`run_frontend` is what rewrite rules and the CLI start from. Each call returns
its own `Session`, so callers analysing many files never share caches between
them. Parse artefacts can optionally be persisted for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from analyzer import AnalysisOptions, Session
from parser import ParseResult, Unit, parse_js

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrontEndResult:
    """Combined output from parsing and session setup."""

    parse: ParseResult
    source: str
    session: Optional[Session]

    @property
    def has_ast(self) -> bool:
        return self.parse.ast is not None

    @property
    def unit(self) -> Optional[Unit]:
        return self.session.unit if self.session else None

    @property
    def diagnostics(self):
        return list(self.parse.errors)


def run_frontend(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    analyze: bool = True,
    source_type: str = "script",
    cache_dir: Optional[Union[str, Path]] = None,
    options: Optional[AnalysisOptions] = None,
) -> FrontEndResult:
    """
    Parse JavaScript input and prepare a fresh analysis session for it.

    Args:
        source: Raw JavaScript source text.
        source_name: Identifier used in diagnostics, e.g. file path.
        tolerant: Forwarded to the parser; when True esprima attempts recovery.
        analyze: When False only parsing runs and `session` is None.
        source_type: `"script"`, `"module"` or `"auto"`.
        cache_dir: Optional directory to write parse artefacts (`None` disables).
        options: Analysis options for the session (wrapper callees etc.).

    Returns:
        FrontEndResult with the parser output and, if requested, a Session.
    """
    parse_result = parse_js(
        source,
        source_name=source_name,
        tolerant=tolerant,
        source_type=source_type,
    )

    session: Optional[Session] = None
    if analyze and parse_result.ast is not None:
        unit = Unit(parse_result.ast, source_name=source_name)
        session = Session(unit, options)
        logger.debug("%s: indexed %d nodes", source_name, len(unit))

    if cache_dir is not None:
        _persist_parse(cache_dir, parse_result)

    return FrontEndResult(parse=parse_result, source=source, session=session)


def _persist_parse(cache_dir: Union[str, Path], parse_result: ParseResult) -> None:
    """Store the raw parse output to disk for reuse in subsequent runs."""
    path = Path(cache_dir)
    path.mkdir(parents=True, exist_ok=True)
    cache_file = path / f"{parse_result.source_hash}.json"
    cache_file.write_text(parse_result.to_json(), encoding="utf-8")


__all__ = ["FrontEndResult", "run_frontend"]
