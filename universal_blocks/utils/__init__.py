"""
Utility helpers used by the conversion tool.

This subpackage exposes convenience functions for structured logging,
output path resolution and the batch manifest CSV.
"""

from .errors import ERRORS, report_error, report_ok
from .manifest import generate_manifest_csv
from .paths import html_output_path, markup_output_path, pattern_output_path, resolve_in_theme

__all__ = [
    "ERRORS",
    "report_error",
    "report_ok",
    "generate_manifest_csv",
    "html_output_path",
    "markup_output_path",
    "pattern_output_path",
    "resolve_in_theme",
]
