from __future__ import annotations

import re
from typing import Any, Dict, List, NamedTuple, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from universal_blocks.custom_elements.registry import EMPTY_REGISTRY, ElementRegistry
from universal_blocks.models import BlockNode, ContentType

from .block_schema import (
    CONTROL_ATTRIBUTES,
    IDENTITY_ATTRIBUTES,
    PRESERVE_WHITESPACE_ELEMENTS,
    VERBATIM_ELEMENTS,
    element_block,
    parse_flag,
    text_block,
)


class ExtractedAttributes(NamedTuple):
    class_name: str
    block_identity: str
    controls: Dict[str, Any]
    attributes: Dict[str, str]


# Identity sources, strongest first
_IDENTITY_ORDER = ("data-block-name", "data-block-id", "id")


def html_to_blocks(html: str, *, registry: ElementRegistry = EMPTY_REGISTRY) -> List[BlockNode]:
    """
    Convert an HTML fragment to a list of ``universal/element`` nodes.

    The fragment is parsed with ``html.parser`` so that custom tags such as
    ``<Part>`` or ``<loop>`` survive as ordinary elements.  Comments are
    dropped and loose top-level text is wrapped in a ``p`` text node.
    Elements whose tag appears in ``registry`` are handed to the matching
    handler together with their whole subtree.
    """
    if not html or not isinstance(html, str):
        return []

    soup = BeautifulSoup(html.strip(), "html.parser", multi_valued_attributes=None)
    container = soup.body if soup.body else soup

    blocks: List[BlockNode] = []
    for child in container.children:
        block = parse_node(child, registry=registry)
        if block is not None:
            blocks.append(block)
    return blocks


def parse_node(node, *, registry: ElementRegistry = EMPTY_REGISTRY) -> Optional[BlockNode]:
    if _is_text(node):
        text = str(node).strip()
        return text_block(text) if text else None
    if not isinstance(node, Tag):
        return None

    tag_name = (node.name or "").lower()

    handler = registry.for_tag(tag_name)
    if handler is not None:
        return handler.to_block(node)

    extracted = extract_attributes(node.attrs)
    content_type = determine_content_type(node, tag_name)
    parts = dict(
        class_name=extracted.class_name,
        block_identity=extracted.block_identity,
        attributes=extracted.attributes,
        controls=extracted.controls,
    )

    if content_type == ContentType.TEXT:
        text = node.get_text()
        if tag_name not in PRESERVE_WHITESPACE_ELEMENTS:
            text = normalize_text(text)
        return element_block(tag_name, content_type, text, **parts)

    if content_type == ContentType.HTML:
        inner = node.decode_contents()
        if tag_name not in PRESERVE_WHITESPACE_ELEMENTS:
            inner = normalize_markup(inner)
        return element_block(tag_name, content_type, inner, **parts)

    if content_type == ContentType.BLOCKS:
        children = []
        for child in node.children:
            child_block = parse_node(child, registry=registry)
            if child_block is not None:
                children.append(child_block)
        return element_block(tag_name, content_type, "", children, **parts)

    return element_block(tag_name, ContentType.EMPTY, **parts)


def determine_content_type(element: Tag, tag_name: str) -> ContentType:
    """
    Classify an element by its children.

    Verbatim tags are always html.  Otherwise element-only children give
    blocks, text-only children give text and a mix of both gives html.
    Whitespace-only text and comments do not count.
    """
    if tag_name in VERBATIM_ELEMENTS:
        return ContentType.HTML
    if not element.contents:
        return ContentType.EMPTY

    has_elements = False
    has_text = False
    for child in element.contents:
        if isinstance(child, Tag):
            has_elements = True
        elif _is_text(child) and str(child).strip():
            has_text = True

    if has_elements and has_text:
        return ContentType.HTML
    if has_elements:
        return ContentType.BLOCKS
    if has_text:
        return ContentType.TEXT
    return ContentType.EMPTY


def extract_attributes(attrs: Dict[str, Any]) -> ExtractedAttributes:
    """
    Split an element's attributes into class, identity, Twig controls and
    passthrough attributes.  ``style`` is discarded.

    Values arrive entity-decoded from the HTML parser.
    """
    class_name = ""
    identities: Dict[str, str] = {}
    controls: Dict[str, Any] = {}
    residual: Dict[str, str] = {}

    for name, value in (attrs or {}).items():
        if isinstance(value, list):
            value = " ".join(value)
        value = "" if value is None else str(value)
        lower = name.lower()

        if lower == "class":
            class_name = value
        elif lower in IDENTITY_ATTRIBUTES:
            identities[lower] = value
        elif lower == "style":
            continue
        elif lower in CONTROL_ATTRIBUTES:
            key = CONTROL_ATTRIBUTES[lower]
            controls[key] = parse_flag(value) if key == "conditionalVisibility" else value
        else:
            residual[name] = value

    block_identity = next((identities[k] for k in _IDENTITY_ORDER if identities.get(k)), "")
    return ExtractedAttributes(class_name, block_identity, controls, residual)


def normalize_text(text: str) -> str:
    text = re.sub(r"[\r\n]+", " ", text)
    text = re.sub(r"[ \t]+", " ", text)
    return text.strip()


def normalize_markup(markup: str) -> str:
    return re.sub(r"\s+", " ", markup).strip()


def _is_text(node) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)
