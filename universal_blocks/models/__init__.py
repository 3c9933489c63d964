"""
Data models shared by the parsers, the serializers and the file tooling.
"""

from .block_node import (
    DEFAULT_LOOP_VARIABLE,
    ELEMENT_BLOCK_NAME,
    AssignmentSpec,
    BlockNode,
    ConditionalSpec,
    ContentType,
    LoopSpec,
    parse_flag,
)
from .pattern import PatternMetadata

__all__ = [
    "DEFAULT_LOOP_VARIABLE",
    "ELEMENT_BLOCK_NAME",
    "AssignmentSpec",
    "BlockNode",
    "ConditionalSpec",
    "ContentType",
    "LoopSpec",
    "PatternMetadata",
    "parse_flag",
]
