"""
High-level orchestration of theme template conversion.

This module defines a :class:`ThemeConversionTool` class that ties together
the extractors, parsers, exporters and utilities into complete file
commands: HTML sources to block markup, block markup back to HTML sources,
and HTML sources to PHP block patterns.  Each file is converted on its own;
a failure is reported and the batch moves on to the next file.

Configuration is supplied via a JSON file path or directly as a
dictionary.  The ``theme`` section locates the theme and its authoring
folder, ``conversion`` holds converter options, ``pattern`` the defaults for
pattern headers and ``reports`` the log directory.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

from universal_blocks.custom_elements import EMPTY_REGISTRY, default_registry
from universal_blocks.exporters.pattern_file import convert_html_to_pattern
from universal_blocks.extractors.theme_files import SourceLookupError, collect_html_files, read_source
from universal_blocks.parsers import BlockConverter, MalformedBlockError, MalformedMarkupError
from universal_blocks.utils.errors import report_error, report_ok
from universal_blocks.utils.manifest import generate_manifest_csv
from universal_blocks.utils.paths import (
    html_output_path,
    markup_output_path,
    pattern_output_path,
    resolve_in_theme,
)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class ThemeConversionTool:
    """
    Encapsulates the state required to convert the templates of one
    theme.  The tool reads configuration, resolves input files, runs the
    converters and records every outcome through
    :mod:`universal_blocks.utils.errors`.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            # Default configuration
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("theme", {})
        config["theme"].setdefault("theme_dir", os.getenv("UNIVERSAL_BLOCKS_THEME_DIR", os.getcwd()))
        config["theme"].setdefault("source_dir", "src")

        config.setdefault("conversion", {})
        config["conversion"].setdefault("double_escape", _env_flag("UNIVERSAL_BLOCKS_DOUBLE_ESCAPE", False))
        config["conversion"].setdefault("custom_elements", True)
        config["conversion"].setdefault("pattern_glob", "**/*.html")
        config["conversion"].setdefault("dry_run", False)

        config.setdefault("pattern", {})
        config["pattern"].setdefault("namespace", os.getenv("UNIVERSAL_BLOCKS_PATTERN_NAMESPACE", ""))
        config["pattern"].setdefault("viewport_width", 1280)
        config["pattern"].setdefault("categories", [])
        config["pattern"].setdefault("keywords", [])

        config.setdefault("reports", {})
        config["reports"].setdefault("dir", os.path.join("reports", "conversion"))

        self.config = config
        self.theme_dir: str = os.path.abspath(config["theme"]["theme_dir"])
        self.report_dir: str = config["reports"]["dir"]
        registry = default_registry() if config["conversion"]["custom_elements"] else EMPTY_REGISTRY
        self.converter = BlockConverter(registry)
        self.converted: List[Dict[str, str]] = []
        self.failed = 0

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        # Append to log file
        os.makedirs(self.report_dir, exist_ok=True)
        with open(os.path.join(self.report_dir, "conversion.log"), "a", encoding="utf-8") as f:
            f.write(f"{level}: {message}\n")

    def _relative(self, path: str) -> str:
        rel = os.path.relpath(path, self.theme_dir)
        return path if rel.startswith("..") else rel.replace(os.sep, "/")

    def collect_files(self, path: str, *, convert_all: bool = False, pattern: str = "*.html") -> List[str]:
        """Resolve input files relative to the theme, logging lookup errors."""
        full_path = resolve_in_theme(path, self.theme_dir)
        try:
            return collect_html_files(full_path, convert_all=convert_all, pattern=pattern)
        except SourceLookupError as e:
            report_error("SOURCE_LOOKUP", {"source": full_path}, e, report_dir=self.report_dir)
            self.log_message(str(e), "ERROR")
            self.failed += 1
            return []

    def _write(self, dest: str, text: str) -> None:
        if self.config["conversion"]["dry_run"]:
            self.log_message(f"Dry-run: would write {self._relative(dest)}")
            return
        os.makedirs(os.path.dirname(dest) or ".", exist_ok=True)
        with open(dest, "w", encoding="utf-8") as f:
            f.write(text)

    def _convert_one(self, source: str, dest: str, code: str, convert) -> bool:
        ok = self._run_conversion(source, dest, code, convert)
        if not ok:
            self.failed += 1
        return ok

    def _run_conversion(self, source: str, dest: str, code: str, convert) -> bool:
        item = {"source": source, "dest": dest}
        try:
            text = convert(read_source(source))
        except (MalformedBlockError, MalformedMarkupError) as e:
            err_code = "MALFORMED_BLOCK" if isinstance(e, MalformedBlockError) else "MALFORMED_MARKUP"
            report_error(err_code, item, e, report_dir=self.report_dir)
            self.log_message(f"Failed to convert {self._relative(source)}: {e}", "ERROR")
            return False
        except (OSError, ValueError) as e:
            report_error("READ_FAILED", item, e, report_dir=self.report_dir)
            self.log_message(f"Failed to read {self._relative(source)}: {e}", "ERROR")
            return False

        if not text.strip():
            report_error("EMPTY_OUTPUT", item, report_dir=self.report_dir)
            self.log_message(f"Conversion of {self._relative(source)} produced no output", "ERROR")
            return False

        try:
            self._write(dest, text)
        except OSError as e:
            report_error("WRITE_FAILED", item, e, report_dir=self.report_dir)
            self.log_message(f"Failed to write {self._relative(dest)}: {e}", "ERROR")
            return False

        report_ok(code, item, {"direction": code}, report_dir=self.report_dir)
        self.converted.append({"source": source, "dest": dest, "direction": code})
        self.log_message(f"✓ {self._relative(source)} → {self._relative(dest)}")
        return True

    def html_to_blocks(self, path: str, *, convert_all: bool = False, output_dir: Optional[str] = None) -> int:
        """Convert HTML sources to block markup.  Returns the number of converted files."""
        double_escape = self.config["conversion"]["double_escape"]
        source_dir = self.config["theme"]["source_dir"]
        count = 0
        for source in self.collect_files(path, convert_all=convert_all):
            dest = markup_output_path(source, self.theme_dir, output_dir=output_dir, source_dir=source_dir)
            if self._convert_one(
                source,
                dest,
                "HTML_TO_BLOCKS",
                lambda html: self.converter.html_to_markup(html, double_escape=double_escape).strip(),
            ):
                count += 1
        self.log_message(f"Converted {count} file(s) from HTML to block markup")
        return count

    def blocks_to_html(self, path: str, *, convert_all: bool = False, output_dir: Optional[str] = None) -> int:
        """Convert block markup files to HTML sources.  Returns the number of converted files."""
        # Files written by html_to_blocks carry the same escaping level
        double_escaped = self.config["conversion"]["double_escape"]
        source_dir = self.config["theme"]["source_dir"]
        count = 0
        for source in self.collect_files(path, convert_all=convert_all):
            dest = html_output_path(source, self.theme_dir, output_dir=output_dir, source_dir=source_dir)
            if self._convert_one(
                source,
                dest,
                "BLOCKS_TO_HTML",
                lambda markup: self.converter.markup_to_html(markup, double_escaped=double_escaped),
            ):
                count += 1
        self.log_message(f"Converted {count} file(s) from block markup to HTML")
        return count

    def html_to_patterns(
        self,
        path: str,
        *,
        output_dir: str = "./patterns",
        glob_pattern: Optional[str] = None,
        **pattern_options,
    ) -> int:
        """Convert HTML files (or a whole directory) to PHP block patterns."""
        defaults = self.config["pattern"]
        options = {
            "namespace": pattern_options.get("namespace") or defaults["namespace"] or None,
            "categories": pattern_options.get("categories") or defaults["categories"],
            "keywords": pattern_options.get("keywords") or defaults["keywords"],
            "description": pattern_options.get("description"),
            "viewport_width": pattern_options.get("viewport_width") or defaults["viewport_width"],
        }
        full_path = resolve_in_theme(path, self.theme_dir)
        files = self.collect_files(
            path,
            convert_all=True,
            pattern=glob_pattern or self.config["conversion"]["pattern_glob"],
        )
        count = 0
        for source in files:
            name = os.path.splitext(os.path.basename(source))[0]
            dest = pattern_output_path(source, full_path, output_dir)
            if self._convert_one(
                source,
                dest,
                "PATTERN",
                lambda html, name=name: convert_html_to_pattern(
                    html,
                    name,
                    registry=self.converter.registry,
                    double_escape=self.config["conversion"]["double_escape"],
                    **options,
                ),
            ):
                count += 1
        self.log_message(f"Converted {count} file(s) to block patterns")
        return count

    def write_manifest(self) -> Optional[str]:
        if not self.converted:
            return None
        out_path = os.path.join(self.report_dir, "manifest.csv")
        try:
            generate_manifest_csv(self.converted, theme_dir=self.theme_dir, out_path=out_path)
        except OSError as e:
            self.log_message(f"Failed to write manifest: {e}", "ERROR")
            return None
        self.log_message(f"Manifest written with {len(self.converted)} entries")
        return out_path
