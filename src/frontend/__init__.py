"""Front-end glue: parsing, tree indexing and analysis-session setup."""

from .pipeline import FrontEndResult, run_frontend

__all__ = ["FrontEndResult", "run_frontend"]
