from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional, Tuple

from bs4 import Tag

from universal_blocks.models import BlockNode


@dataclass(frozen=True)
class ElementHandler:
    """Parse/serialize pair that fully owns one custom tag.

    ``to_block`` receives the parsed element (and its untouched subtree);
    ``to_html`` receives the node whose ``name`` equals ``block_name``.
    """

    tag_name: str
    block_name: str
    to_block: Callable[[Tag], BlockNode]
    to_html: Callable[[BlockNode], str]


class ElementRegistry:
    """Immutable lookup of custom element handlers.

    Tag names are matched case-insensitively (the HTML parser lowercases
    them); block names are matched exactly.
    """

    __slots__ = ("_handlers", "_by_tag_name", "_by_block_name")

    def __init__(self, handlers: Iterable[ElementHandler] = ()) -> None:
        handlers = tuple(handlers)
        by_tag = {}
        by_block = {}
        for handler in handlers:
            key = handler.tag_name.lower()
            if key in by_tag:
                raise ValueError(f"Duplicate handler for tag <{handler.tag_name}>")
            if handler.block_name in by_block:
                raise ValueError(f"Duplicate handler for block {handler.block_name}")
            by_tag[key] = handler
            by_block[handler.block_name] = handler
        object.__setattr__(self, "_handlers", handlers)
        object.__setattr__(self, "_by_tag_name", MappingProxyType(by_tag))
        object.__setattr__(self, "_by_block_name", MappingProxyType(by_block))

    def __setattr__(self, name, value):
        raise AttributeError("ElementRegistry is immutable")

    @property
    def handlers(self) -> Tuple[ElementHandler, ...]:
        return self._handlers

    @property
    def by_tag_name(self) -> Mapping[str, ElementHandler]:
        return self._by_tag_name

    @property
    def by_block_name(self) -> Mapping[str, ElementHandler]:
        return self._by_block_name

    def for_tag(self, tag_name: Optional[str]) -> Optional[ElementHandler]:
        return self._by_tag_name.get((tag_name or "").lower())

    def for_block(self, block_name: Optional[str]) -> Optional[ElementHandler]:
        return self._by_block_name.get(block_name or "")

    def with_handlers(self, *handlers: ElementHandler) -> "ElementRegistry":
        """Return a new registry extended with ``handlers``."""
        return ElementRegistry(self._handlers + handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, tag_name: object) -> bool:
        return isinstance(tag_name, str) and tag_name.lower() in self._by_tag_name

    def __repr__(self) -> str:
        tags = ", ".join(h.tag_name for h in self._handlers)
        return f"ElementRegistry([{tags}])"


EMPTY_REGISTRY = ElementRegistry()
