from __future__ import annotations

import html as html_lib
from typing import Any, Dict, Iterable, List, Union

from universal_blocks.custom_elements.registry import EMPTY_REGISTRY, ElementRegistry
from universal_blocks.models import DEFAULT_LOOP_VARIABLE, BlockNode, ContentType

from .block_schema import (
    CONTROL_ATTRIBUTES,
    IDENTITY_ATTRIBUTES,
    STYLE_PLACEHOLDER,
    escape_attribute,
    is_void_element,
    sanitize_attribute_name,
    validate_block,
)


BlockLike = Union[BlockNode, Dict[str, Any]]

# Names the parser reads as something other than a passthrough attribute
RESERVED_ATTRIBUTES = frozenset({"class", "style"}) | IDENTITY_ATTRIBUTES | frozenset(CONTROL_ATTRIBUTES)


def blocks_to_html(blocks: Iterable[BlockLike], *, registry: ElementRegistry = EMPTY_REGISTRY) -> str:
    """
    Convert block nodes back to HTML, one element per line.

    Nodes may also be given in the ``{name, attributes, innerBlocks}`` dict
    form.  Blocks other than ``universal/element`` are written by their
    registry handler, or dropped when no handler exists.

    :raises MalformedBlockError: if a node contradicts its content type.
    """
    if not blocks:
        return ""
    return "\n".join(block_to_html(block, registry=registry) for block in blocks)


def block_to_html(block: BlockLike, *, registry: ElementRegistry = EMPTY_REGISTRY) -> str:
    if block is None:
        return ""
    node = coerce_block(block)

    handler = registry.for_block(node.name)
    if handler is not None:
        return handler.to_html(node)
    if not node.is_element:
        return ""

    validate_block(node)
    tag = node.tag
    attr_string = build_attribute_string(node)

    if node.content_type == ContentType.EMPTY or is_void_element(tag):
        return f"<{tag}{attr_string} />"

    if node.content_type == ContentType.TEXT:
        inner = html_lib.escape(node.content, quote=False)
    elif node.content_type == ContentType.HTML:
        inner = node.content
    else:
        inner = blocks_to_html(node.children, registry=registry)
    return f"<{tag}{attr_string}>{inner}</{tag}>"


def build_attribute_string(node: BlockNode) -> str:
    parts: List[str] = []

    if node.block_identity:
        parts.append(f' data-block-name="{escape_attribute(node.block_identity)}"')
    if node.class_name:
        parts.append(f' class="{escape_attribute(node.class_name)}"')

    loop = node.loop
    if loop and loop.source:
        parts.append(f' loopSource="{escape_attribute(loop.source)}"')
        if loop.variable and loop.variable != DEFAULT_LOOP_VARIABLE:
            parts.append(f' loopVariable="{escape_attribute(loop.variable)}"')

    if node.conditional and node.conditional.expression:
        parts.append(f' conditionalExpression="{escape_attribute(node.conditional.expression)}"')
    elif node.conditional:
        flag = "true" if node.conditional.enabled else "false"
        parts.append(f' conditionalVisibility="{flag}"')

    if node.assignment:
        if node.assignment.variable:
            parts.append(f' setVariable="{escape_attribute(node.assignment.variable)}"')
        if node.assignment.expression:
            parts.append(f' setExpression="{escape_attribute(node.assignment.expression)}"')

    written = set()
    for name, value in node.attributes.items():
        if name == STYLE_PLACEHOLDER:
            if "style" not in written:
                written.add("style")
                parts.append(f' style="{escape_attribute(value)}"')
            continue
        safe_name = sanitize_attribute_name(name)
        key = safe_name.lower()
        # ":class" would otherwise duplicate the class written above
        if not safe_name or value is None or key in RESERVED_ATTRIBUTES or key in written:
            continue
        written.add(key)
        # Valueless attributes (disabled, x-cloak) are written bare.
        if value == "":
            parts.append(f" {safe_name}")
        else:
            parts.append(f' {safe_name}="{escape_attribute(value)}"')

    return "".join(parts)


def coerce_block(block: BlockLike) -> BlockNode:
    if isinstance(block, BlockNode):
        return block
    if isinstance(block, dict):
        return BlockNode.from_block_dict(block)
    raise TypeError(f"Expected BlockNode or dict, got {type(block).__name__}")
