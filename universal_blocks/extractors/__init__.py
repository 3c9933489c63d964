"""
Readers for theme source files.

This subpackage resolves which template files a command should convert
and reads them, raising errors that carry the offending path.
"""

from .theme_files import SourceLookupError, collect_html_files, read_source

__all__ = ["SourceLookupError", "collect_html_files", "read_source"]
