"""
Converters between HTML, block nodes and block markup.

The module-level functions take the custom element registry as a keyword
argument (empty by default).  :class:`BlockConverter` binds one registry
for callers that convert many documents.
"""

from __future__ import annotations

from typing import Iterable, List

from universal_blocks.custom_elements.registry import EMPTY_REGISTRY, ElementRegistry
from universal_blocks.models import BlockNode

from .block_markup import MalformedMarkupError, parse_block_markup, serialize_blocks_to_markup
from .block_schema import MalformedBlockError, VOID_ELEMENTS, validate_block
from .blocks_to_html import BlockLike, blocks_to_html
from .html_to_blocks import html_to_blocks


class BlockConverter:
    """All conversions bound to one :class:`ElementRegistry`."""

    def __init__(self, registry: ElementRegistry = EMPTY_REGISTRY) -> None:
        self.registry = registry

    def html_to_blocks(self, html: str) -> List[BlockNode]:
        return html_to_blocks(html, registry=self.registry)

    def blocks_to_html(self, blocks: Iterable[BlockLike]) -> str:
        return blocks_to_html(blocks, registry=self.registry)

    def html_to_markup(self, html: str, *, double_escape: bool = True) -> str:
        return serialize_blocks_to_markup(self.html_to_blocks(html), double_escape=double_escape)

    def markup_to_html(self, markup: str, *, double_escaped: bool = False) -> str:
        blocks = parse_block_markup(markup, double_escaped=double_escaped, registry=self.registry)
        return self.blocks_to_html(blocks)


__all__ = [
    "BlockConverter",
    "MalformedBlockError",
    "MalformedMarkupError",
    "VOID_ELEMENTS",
    "blocks_to_html",
    "html_to_blocks",
    "parse_block_markup",
    "serialize_blocks_to_markup",
    "validate_block",
]
