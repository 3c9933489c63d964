"""
Top-level package for the universal block converter.

This package converts block-theme templates between authoring HTML (with
Twig control attributes such as ``loopSource`` or ``conditionalExpression``),
``universal/element`` block trees, and the comment-delimited block markup
WordPress stores on disk.  Modules are split into subpackages:

* :mod:`universal_blocks.models` – block node and pattern header models
* :mod:`universal_blocks.parsers` – HTML ⇄ blocks ⇄ markup converters
* :mod:`universal_blocks.custom_elements` – ``<Part>``/``<Pattern>``/``<Content>`` handlers
* :mod:`universal_blocks.extractors` – source file discovery
* :mod:`universal_blocks.exporters` – PHP pattern file generation
* :mod:`universal_blocks.utils` – report logging, output paths, manifests

The converters are pure functions of their input and the registry they are
given; file handling and configuration live in
:mod:`universal_blocks.conversion_tool`.
"""

from .custom_elements import EMPTY_REGISTRY, ElementHandler, ElementRegistry, default_registry
from .models import BlockNode, ContentType
from .parsers import (
    BlockConverter,
    MalformedBlockError,
    MalformedMarkupError,
    blocks_to_html,
    html_to_blocks,
    parse_block_markup,
    serialize_blocks_to_markup,
)

__all__ = [
    "EMPTY_REGISTRY",
    "BlockConverter",
    "BlockNode",
    "ContentType",
    "ElementHandler",
    "ElementRegistry",
    "MalformedBlockError",
    "MalformedMarkupError",
    "blocks_to_html",
    "default_registry",
    "html_to_blocks",
    "parse_block_markup",
    "serialize_blocks_to_markup",
]
