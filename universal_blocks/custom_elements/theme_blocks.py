"""
Shorthand elements for WordPress core theme blocks.

``<Part>``, ``<Pattern>`` and ``<Content>`` let template authors reference
template parts, registered patterns and the post content without writing
block comments by hand.  Each handler copies a fixed list of attributes
between the element and the core block, in the same order both ways.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from bs4 import Tag

from universal_blocks.models import BlockNode, ContentType
from universal_blocks.parsers.block_schema import escape_attribute

from .registry import ElementHandler


def _element_to_block(tag: Tag, block_name: str, fields: Sequence[Tuple[str, str]]) -> BlockNode:
    attrs = {}
    for html_name, block_key in fields:
        value = tag.get(html_name)
        if isinstance(value, list):
            value = " ".join(value)
        if value:
            attrs[block_key] = value
    return BlockNode(
        name=block_name,
        tag=tag.name,
        content_type=ContentType.EMPTY,
        block_attributes=attrs,
    )


def _block_to_element(node: BlockNode, tag_name: str, fields: Sequence[Tuple[str, str]]) -> str:
    attrs = node.block_attributes or {}
    parts = [f"<{tag_name}"]
    for html_name, block_key in fields:
        if attrs.get(block_key):
            parts.append(f' {html_name}="{escape_attribute(attrs[block_key])}"')
    parts.append(f"></{tag_name}>")
    return "".join(parts)


def _handler(tag_name: str, block_name: str, fields: Sequence[Tuple[str, str]]) -> ElementHandler:
    fields = tuple(fields)
    return ElementHandler(
        tag_name=tag_name,
        block_name=block_name,
        to_block=lambda tag: _element_to_block(tag, block_name, fields),
        to_html=lambda node: _block_to_element(node, tag_name, fields),
    )


PART = _handler("Part", "core/template-part", [("slug", "slug"), ("theme", "theme"), ("class", "className")])
PATTERN = _handler("Pattern", "core/pattern", [("slug", "slug"), ("category", "category"), ("class", "className")])
CONTENT = _handler("Content", "core/post-content", [("class", "className")])

THEME_HANDLERS = (PART, PATTERN, CONTENT)
