"""
Output locations for converted theme files.

Authoring copies of templates live under ``src/`` in the theme while the
block markup WordPress reads sits at the theme root, so ``src/parts/x.html``
converts to ``parts/x.html`` and back.  The helpers below encode that
mapping; an explicit output directory always wins.
"""

from __future__ import annotations

import os
from typing import Optional


def resolve_in_theme(path: str, theme_dir: str) -> str:
    """Absolute ``path``, interpreting relative paths from ``theme_dir``."""
    if os.path.isabs(path):
        return path
    return os.path.join(theme_dir, path)


def _relative_to_theme(source_file: str, theme_dir: str) -> str:
    rel = os.path.relpath(os.path.abspath(source_file), os.path.abspath(theme_dir))
    return rel.replace(os.sep, "/")


def markup_output_path(
    source_file: str,
    theme_dir: str,
    *,
    output_dir: Optional[str] = None,
    source_dir: str = "src",
) -> str:
    """Where the block markup for an HTML source file is written.

    ``<theme>/src/parts/header.html`` -> ``<theme>/parts/header.html``.
    """
    filename = os.path.basename(source_file)
    if output_dir:
        return os.path.join(resolve_in_theme(output_dir, theme_dir), filename)

    rel = _relative_to_theme(source_file, theme_dir)
    prefix = source_dir.strip("/") + "/"
    if rel.startswith(prefix):
        rel = rel[len(prefix):]
    return os.path.join(theme_dir, os.path.dirname(rel), filename)


def html_output_path(
    source_file: str,
    theme_dir: str,
    *,
    output_dir: Optional[str] = None,
    source_dir: str = "src",
) -> str:
    """Where the HTML for a block markup file is written.

    ``<theme>/parts/header.html`` -> ``<theme>/src/parts/header.html``.
    """
    filename = os.path.basename(source_file)
    if output_dir:
        return os.path.join(resolve_in_theme(output_dir, theme_dir), filename)

    rel = _relative_to_theme(source_file, theme_dir)
    return os.path.join(theme_dir, source_dir.strip("/"), os.path.dirname(rel), filename)


def pattern_output_path(source_file: str, input_root: str, output_dir: str) -> str:
    """``.php`` pattern path mirroring ``source_file``'s place under ``input_root``."""
    if os.path.isdir(input_root):
        rel = os.path.relpath(source_file, input_root)
    else:
        rel = os.path.basename(source_file)
    base, _ = os.path.splitext(rel)
    return os.path.join(output_dir, base + ".php")
