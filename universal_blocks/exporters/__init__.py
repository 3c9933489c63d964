"""
Writers for file formats built on top of block markup.

Currently this subpackage exposes the PHP block pattern generator from
:mod:`universal_blocks.exporters.pattern_file`.
"""

from .pattern_file import convert_html_to_pattern, generate_pattern_file, generate_pattern_metadata

__all__ = ["convert_html_to_pattern", "generate_pattern_file", "generate_pattern_metadata"]
