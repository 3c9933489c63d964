from __future__ import annotations

import re
from typing import Dict, FrozenSet, List, Optional

from universal_blocks.models import (
    DEFAULT_LOOP_VARIABLE,
    AssignmentSpec,
    BlockNode,
    ConditionalSpec,
    ContentType,
    LoopSpec,
    parse_flag,
)


# --- Element tables shared by the parser and the serializer ---

# Parsed as "empty" and always written self-closing. Both directions read
# this one constant, otherwise round trips drift.
VOID_ELEMENTS: FrozenSet[str] = frozenset({
    "img", "br", "hr", "input", "meta", "link", "area", "base",
    "col", "embed", "source", "track", "wbr",
})

# Always kept as raw inner markup.
VERBATIM_ELEMENTS: FrozenSet[str] = frozenset({"svg", "script", "code", "pre", "style", "input"})

PRESERVE_WHITESPACE_ELEMENTS: FrozenSet[str] = frozenset({"pre", "code", "kbd", "samp", "var"})

IDENTITY_ATTRIBUTES: FrozenSet[str] = frozenset({"data-block-name", "data-block-id", "id"})

# Lowercase HTML attribute -> block attribute name
CONTROL_ATTRIBUTES: Dict[str, str] = {
    "loopsource": "loopSource",
    "loopvariable": "loopVariable",
    "conditionalvisibility": "conditionalVisibility",
    "conditionalexpression": "conditionalExpression",
    "setvariable": "setVariable",
    "setexpression": "setExpression",
}

STYLE_PLACEHOLDER = "data-style"

_ATTR_NAME_RE = re.compile(r"[^a-zA-Z0-9\-_]")


class MalformedBlockError(ValueError):
    """Raised when a block node cannot be serialized as it stands."""

    def __init__(self, node: BlockNode, reason: str) -> None:
        self.node = node
        self.reason = reason
        super().__init__(f"Malformed <{node.tag}> block ({node.content_type.value}): {reason}")


def is_void_element(tag: str) -> bool:
    return (tag or "").lower() in VOID_ELEMENTS


def escape_attribute(value) -> str:
    if not isinstance(value, str):
        value = str(value)
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def sanitize_attribute_name(name: str) -> str:
    return _ATTR_NAME_RE.sub("", name or "")


# --- Builders ---

def element_block(
    tag: str,
    content_type: ContentType,
    content: str = "",
    children: Optional[List[BlockNode]] = None,
    *,
    class_name: str = "",
    block_identity: str = "",
    attributes: Optional[Dict[str, str]] = None,
    controls: Optional[Dict[str, object]] = None,
) -> BlockNode:
    """Assemble a ``universal/element`` node from extracted parts.

    ``controls`` holds the block-level names from :data:`CONTROL_ATTRIBUTES`.
    A conditional expression switches the conditional on even when the
    explicit flag is absent.
    """
    controls = controls or {}

    loop = None
    if controls.get("loopSource"):
        loop = LoopSpec(
            source=controls["loopSource"],
            variable=controls.get("loopVariable") or DEFAULT_LOOP_VARIABLE,
        )

    conditional = None
    if controls.get("conditionalExpression"):
        conditional = ConditionalSpec(enabled=True, expression=controls["conditionalExpression"])
    elif "conditionalVisibility" in controls:
        conditional = ConditionalSpec(enabled=bool(controls["conditionalVisibility"]))

    assignment = None
    if controls.get("setVariable") or controls.get("setExpression"):
        assignment = AssignmentSpec(
            variable=controls.get("setVariable") or "",
            expression=controls.get("setExpression") or "",
        )

    keep_content = content_type in (ContentType.TEXT, ContentType.HTML)
    return BlockNode(
        tag=tag,
        content_type=content_type,
        content=content if keep_content else "",
        children=children if content_type == ContentType.BLOCKS and children else [],
        attributes=dict(attributes or {}),
        class_name=class_name or None,
        block_identity=block_identity or None,
        loop=loop,
        conditional=conditional,
        assignment=assignment,
    )


def text_block(text: str) -> BlockNode:
    return element_block("p", ContentType.TEXT, text)


# --- Validator ---

def validate_block(node: BlockNode) -> BlockNode:
    """
    Check that an element node is internally consistent before it is
    written out.

    - blocks and empty nodes carry no content
    - text, html and empty nodes carry no children
    - void elements carry neither
    """
    if not node.is_element:
        return node
    ctype = node.content_type
    if ctype in (ContentType.BLOCKS, ContentType.EMPTY) and node.content:
        raise MalformedBlockError(node, "content is only allowed for text or html blocks")
    if ctype != ContentType.BLOCKS and node.children:
        raise MalformedBlockError(node, "children are only allowed for blocks content")
    if is_void_element(node.tag) and (node.children or node.content):
        raise MalformedBlockError(node, "void elements cannot have children or content")
    if not node.tag or not re.match(r"^[A-Za-z][A-Za-z0-9\-_:.]*$", node.tag):
        raise MalformedBlockError(node, f"invalid tag name {node.tag!r}")
    return node
