"""Run report assembly."""

from .assemblers import build_report, trait_rows, write_report

__all__ = ["build_report", "trait_rows", "write_report"]
