"""
Custom element handlers.

A registry maps special tag names to their own parse/serialize pair.  The
converters consult the registry before applying the generic rules, and
receive it as an argument; there is no process-wide handler table.
"""

from .registry import EMPTY_REGISTRY, ElementHandler, ElementRegistry
from .theme_blocks import CONTENT, PART, PATTERN, THEME_HANDLERS


def default_registry() -> ElementRegistry:
    """Registry holding the ``<Part>``, ``<Pattern>`` and ``<Content>`` handlers."""
    return ElementRegistry(THEME_HANDLERS)


__all__ = [
    "CONTENT",
    "EMPTY_REGISTRY",
    "ElementHandler",
    "ElementRegistry",
    "PART",
    "PATTERN",
    "THEME_HANDLERS",
    "default_registry",
]
