import json
import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from universal_blocks.extractors import SourceLookupError, collect_html_files, read_source
from universal_blocks.utils import (
    html_output_path,
    markup_output_path,
    pattern_output_path,
    report_error,
    report_ok,
    resolve_in_theme,
)


def test_markup_output_strips_source_dir():
    theme = os.path.join(os.sep, "t")
    src = os.path.join(theme, "src", "parts", "header.html")
    assert markup_output_path(src, theme) == os.path.join(theme, "parts", "header.html")


def test_markup_output_outside_source_dir_stays_in_place():
    theme = os.path.join(os.sep, "t")
    src = os.path.join(theme, "templates", "index.html")
    assert markup_output_path(src, theme) == os.path.join(theme, "templates", "index.html")


def test_html_output_adds_source_dir():
    theme = os.path.join(os.sep, "t")
    src = os.path.join(theme, "parts", "header.html")
    assert html_output_path(src, theme) == os.path.join(theme, "src", "parts", "header.html")
    assert html_output_path(src, theme, source_dir="authoring") == os.path.join(theme, "authoring", "parts", "header.html")


def test_output_dir_wins():
    theme = os.path.join(os.sep, "t")
    src = os.path.join(theme, "src", "parts", "header.html")
    assert markup_output_path(src, theme, output_dir="out") == os.path.join(theme, "out", "header.html")


def test_resolve_in_theme():
    theme = os.path.join(os.sep, "t")
    assert resolve_in_theme("a.html", theme) == os.path.join(theme, "a.html")
    absolute = os.path.join(os.sep, "elsewhere", "a.html")
    assert resolve_in_theme(absolute, theme) == absolute


def test_pattern_output_path(tmp_path):
    root = tmp_path / "in"
    (root / "sub").mkdir(parents=True)
    src = str(root / "sub" / "hero.html")
    assert pattern_output_path(src, str(root), "out") == os.path.join("out", "sub", "hero.php")
    assert pattern_output_path(src, src, "out") == os.path.join("out", "hero.php")


def test_collect_html_files(tmp_path):
    (tmp_path / "b.html").write_text("b", encoding="utf-8")
    (tmp_path / "a.html").write_text("a", encoding="utf-8")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "c.html").write_text("c", encoding="utf-8")

    files = collect_html_files(str(tmp_path), convert_all=True)
    assert [os.path.basename(f) for f in files] == ["a.html", "b.html"]

    files = collect_html_files(str(tmp_path), convert_all=True, pattern="**/*.html")
    assert sorted(os.path.basename(f) for f in files) == ["a.html", "b.html", "c.html"]

    assert collect_html_files(str(tmp_path / "a.html")) == [str(tmp_path / "a.html")]


def test_collect_html_files_errors(tmp_path):
    with pytest.raises(SourceLookupError):
        collect_html_files(str(tmp_path / "missing.html"))
    with pytest.raises(SourceLookupError):
        collect_html_files(str(tmp_path))
    with pytest.raises(SourceLookupError):
        collect_html_files(str(tmp_path), convert_all=True)


def test_read_source_rejects_bad_encoding(tmp_path):
    path = tmp_path / "bad.html"
    path.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(ValueError):
        read_source(str(path))


def test_report_entries(tmp_path):
    item = {"source": "src/a.html", "dest": "a.html"}
    err = report_error("MALFORMED_BLOCK", item, ValueError("boom"), report_dir=str(tmp_path))
    ok = report_ok("CUSTOM_EVENT", item, {"direction": "x"}, report_dir=str(tmp_path))
    assert err == {
        "code": "MALFORMED_BLOCK",
        "message": "Block tree cannot be serialized",
        "source": "src/a.html",
        "dest": "a.html",
        "error": "boom",
    }
    assert ok["message"] == "CUSTOM_EVENT"
    with open(tmp_path / "errors.jsonl", encoding="utf-8") as f:
        assert json.loads(f.readline()) == err
    with open(tmp_path / "success.jsonl", encoding="utf-8") as f:
        assert json.loads(f.readline())["direction"] == "x"
