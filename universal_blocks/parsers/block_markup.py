"""
Comment-delimited block markup.

WordPress stores templates, parts and patterns as HTML comments of the form
``<!-- wp:name {json} /-->`` (no inner blocks) or ``<!-- wp:name {json} -->``
... ``<!-- /wp:name -->`` (with inner blocks).  This module writes block
nodes in that form and reads such markup back into nodes.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterable, List, Optional

from universal_blocks.custom_elements.registry import EMPTY_REGISTRY, ElementRegistry
from universal_blocks.models import BlockNode

from .blocks_to_html import BlockLike, coerce_block
from .html_to_blocks import html_to_blocks

__all__ = [
    "MalformedMarkupError",
    "serialize_blocks_to_markup",
    "serialize_block",
    "parse_block_markup",
]


_TOKEN_RE = re.compile(
    r"<!--\s+(?P<closer>/)?wp:(?P<name>[a-z][a-z0-9_-]*(?:/[a-z][a-z0-9_-]*)?)\s+"
    r"(?:(?P<attrs>\{.*?\})\s+)?(?P<void>/)?-->",
    re.DOTALL,
)


class MalformedMarkupError(ValueError):
    """Raised when block comments are unbalanced or carry invalid JSON."""


def serialize_blocks_to_markup(blocks: Iterable[BlockLike], *, double_escape: bool = True) -> str:
    """
    Serialize nodes to block markup.  Top-level blocks are separated by a
    blank line, inner blocks by a single newline.

    ``double_escape`` doubles every backslash in the attribute JSON, which
    is needed when the markup passes through ``wp_insert_post`` (it strips
    one level of slashes).  Theme files that WordPress reads straight from
    disk (templates, parts, patterns) need ``double_escape=False``; the file
    tool's ``conversion.double_escape`` setting defaults to that.
    """
    if not blocks:
        return ""
    return "\n\n".join(serialize_block(block, double_escape=double_escape) for block in blocks)


def serialize_block(block: BlockLike, *, double_escape: bool = True) -> str:
    return _serialize_dict(coerce_block(block).to_block_dict(), double_escape)


def _serialize_dict(data: Dict[str, Any], double_escape: bool) -> str:
    name = data["name"]
    attributes = data.get("attributes") or {}
    inner = data.get("innerBlocks") or []

    attrs_json = ""
    if attributes:
        encoded = json.dumps(attributes, ensure_ascii=False, separators=(",", ":"))
        if double_escape:
            encoded = encoded.replace("\\", "\\\\")
        attrs_json = " " + encoded

    if inner:
        inner_markup = "\n".join(_serialize_dict(child, double_escape) for child in inner)
        return f"<!-- wp:{name}{attrs_json} -->\n{inner_markup}\n<!-- /wp:{name} -->"
    return f"<!-- wp:{name}{attrs_json} /-->"


def parse_block_markup(
    markup: str,
    *,
    double_escaped: bool = False,
    registry: ElementRegistry = EMPTY_REGISTRY,
) -> List[BlockNode]:
    """
    Read block markup back into nodes.

    Non-blank HTML between top-level block comments is converted with
    :func:`html_to_blocks`.  HTML inside a block (the saved output of static
    core blocks) is not needed to rebuild the node and is skipped.

    :raises MalformedMarkupError: on unbalanced comments or invalid JSON.
    """
    if not markup or not markup.strip():
        return []

    top: List[Dict[str, Any]] = []
    stack: List[Dict[str, Any]] = []
    pos = 0

    def emit(block: Dict[str, Any]) -> None:
        if stack:
            stack[-1]["innerBlocks"].append(block)
        else:
            top.append(block)

    def flush_freeform(text: str) -> None:
        if stack or not text.strip():
            return
        for node in html_to_blocks(text, registry=registry):
            top.append({"node": node})

    for match in _TOKEN_RE.finditer(markup):
        flush_freeform(markup[pos:match.start()])
        pos = match.end()
        name = _full_name(match.group("name"))

        if match.group("closer"):
            if not stack:
                raise MalformedMarkupError(f"Closing comment for {name} without an opener at offset {match.start()}")
            opened = stack.pop()
            if opened["name"] != name:
                raise MalformedMarkupError(
                    f"Closing comment for {name} does not match open block {opened['name']} at offset {match.start()}"
                )
            emit(opened)
            continue

        block = {
            "name": name,
            "attributes": _decode_attributes(match.group("attrs"), double_escaped, name),
            "innerBlocks": [],
        }
        if match.group("void"):
            emit(block)
        else:
            stack.append(block)

    if stack:
        raise MalformedMarkupError(f"Unclosed block {stack[-1]['name']}")
    flush_freeform(markup[pos:])

    return [item["node"] if "node" in item else _to_node(item) for item in top]


def _to_node(data: Dict[str, Any]) -> BlockNode:
    try:
        return BlockNode.from_block_dict(data)
    except (TypeError, ValueError) as e:
        raise MalformedMarkupError(f"Invalid attributes for {data.get('name')}: {e}") from e


def _full_name(name: str) -> str:
    return name if "/" in name else f"core/{name}"


def _decode_attributes(raw: Optional[str], double_escaped: bool, name: str) -> Dict[str, Any]:
    if not raw:
        return {}
    if double_escaped:
        raw = raw.replace("\\\\", "\\")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedMarkupError(f"Invalid attribute JSON for {name}: {e}") from e
    if not isinstance(data, dict):
        raise MalformedMarkupError(f"Attributes of {name} must be a JSON object")
    return data
