from __future__ import annotations

from typing import Optional

from universal_blocks.custom_elements.registry import EMPTY_REGISTRY, ElementRegistry
from universal_blocks.models import PatternMetadata
from universal_blocks.parsers import html_to_blocks, serialize_blocks_to_markup


def generate_pattern_metadata(filename: str, **options) -> PatternMetadata:
    """Build pattern header fields from a file name such as ``hero-section``.

    Recognised options: ``title``, ``slug``, ``namespace``, ``description``,
    ``categories``, ``keywords``, ``viewport_width``, ``block_types``,
    ``post_types`` and ``inserter``.
    """
    return PatternMetadata.from_filename(filename, **options)


def generate_pattern_file(metadata: PatternMetadata, block_markup: str) -> str:
    lines = ["<?php", "/**", f" * Title: {metadata.title}", f" * Slug: {metadata.slug}"]
    if metadata.description:
        lines.append(f" * Description: {metadata.description}")
    if metadata.categories:
        lines.append(f" * Categories: {', '.join(metadata.categories)}")
    if metadata.keywords:
        lines.append(f" * Keywords: {', '.join(metadata.keywords)}")
    if metadata.viewport_width:
        lines.append(f" * Viewport Width: {metadata.viewport_width}")
    if metadata.block_types:
        lines.append(f" * Block Types: {', '.join(metadata.block_types)}")
    if metadata.post_types:
        lines.append(f" * Post Types: {', '.join(metadata.post_types)}")
    lines.append(f" * Inserter: {'true' if metadata.inserter else 'false'}")
    lines.append(" */")
    lines.append("?>")
    lines.append(block_markup)
    return "\n".join(lines)


def convert_html_to_pattern(
    html: str,
    filename: str,
    *,
    registry: ElementRegistry = EMPTY_REGISTRY,
    double_escape: bool = True,
    metadata: Optional[PatternMetadata] = None,
    **options,
) -> str:
    """Convert an HTML template straight to the contents of a PHP pattern file."""
    blocks = html_to_blocks(html, registry=registry)
    markup = serialize_blocks_to_markup(blocks, double_escape=double_escape)
    meta = metadata or generate_pattern_metadata(filename, **options)
    return generate_pattern_file(meta, markup)
