"""
Generation of conversion manifest CSV files.

The :func:`generate_manifest_csv` helper writes a CSV file listing every
source file of a batch together with the file it was converted to, so the
generated templates can be traced back to their sources.
"""

from __future__ import annotations

import csv
import os
from typing import Dict, Iterable


def generate_manifest_csv(
    entries: Iterable[Dict[str, str]], *, theme_dir: str = "", out_path: str = "reports/conversion/manifest.csv"
) -> str:
    """Write a ``Source,Destination,Direction`` CSV for converted files.

    Parameters
    ----------
    entries:
        Iterable of dictionaries with ``source``, ``dest`` and ``direction``
        keys.
    theme_dir:
        When given, paths inside the theme are written relative to it.
    out_path:
        Location of the CSV file to be written.  The parent directory is
        created automatically.

    Returns
    -------
    str
        The path of the generated CSV file.
    """

    def display(path: str) -> str:
        if theme_dir and path:
            rel = os.path.relpath(path, theme_dir)
            if not rel.startswith(".."):
                return rel.replace(os.sep, "/")
        return path or ""

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Source", "Destination", "Direction"])
        for entry in entries:
            writer.writerow([display(entry.get("source", "")), display(entry.get("dest", "")), entry.get("direction", "")])
    return out_path
