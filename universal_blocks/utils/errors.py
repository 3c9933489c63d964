"""
Per-file outcome records for conversion batches.

Every converted or failed file produces one JSON object appended to
``success.jsonl`` or ``errors.jsonl`` in the report directory
(``reports/conversion`` unless the caller passes ``report_dir``).  Entries
carry an event code, the message looked up in :data:`ERRORS` (or the code
itself when unknown) and the source and destination paths.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

# Error and success codes share one table
ERRORS: Dict[str, str] = {
    "SOURCE_LOOKUP": "Could not resolve input files",
    "READ_FAILED": "Failed to read source file",
    "MALFORMED_BLOCK": "Block tree cannot be serialized",
    "MALFORMED_MARKUP": "Block markup is not well formed",
    "EMPTY_OUTPUT": "Conversion produced no output",
    "WRITE_FAILED": "Failed to write output file",
    "HTML_TO_BLOCKS": "Converted HTML to block markup",
    "BLOCKS_TO_HTML": "Converted block markup to HTML",
    "PATTERN": "Generated block pattern",
}

_REPORT_DIR = os.path.join("reports", "conversion")
_ERROR_LOG = "errors.jsonl"
_OK_LOG = "success.jsonl"


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def report_error(
    code: str,
    item: Dict[str, Any],
    exc: Optional[Exception] = None,
    *,
    report_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """Log an error event for ``item``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    item:
        The file being converted.  Only the ``source`` and ``dest`` keys are
        referenced if present.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry.
    report_dir:
        Directory receiving ``errors.jsonl``; defaults to
        ``reports/conversion``.

    Returns
    -------
    dict
        The entry that was written.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "source": item.get("source"),
        "dest": item.get("dest"),
    }
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {message} - {item.get('source', '')}")
    _write_jsonl(os.path.join(report_dir or _REPORT_DIR, _ERROR_LOG), entry)
    return entry


def report_ok(
    code: str,
    item: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    *,
    report_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """Append a success entry for ``item``; ``extra`` fields are merged in."""
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "source": item.get("source"),
        "dest": item.get("dest"),
    }
    if extra:
        entry.update(extra)
    print(f"[OK] {message} - {item.get('source', '')}")
    _write_jsonl(os.path.join(report_dir or _REPORT_DIR, _OK_LOG), entry)
    return entry
