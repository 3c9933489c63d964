import csv
import json
import os
import sys
import tempfile
import unittest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from universal_blocks.conversion_tool import ThemeConversionTool

HEADER_HTML = '<header class="site"><Part slug="nav"></Part><h1>Title</h1></header>'


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _read_jsonl(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


@pytest.fixture
def theme(tmp_path):
    _write(tmp_path / "src" / "parts" / "header.html", HEADER_HTML)
    _write(tmp_path / "src" / "parts" / "footer.html", "<footer><p>Bye</p></footer>")
    return tmp_path


@pytest.fixture
def tool(theme):
    return ThemeConversionTool({
        "theme": {"theme_dir": str(theme)},
        "conversion": {"double_escape": True},
        "reports": {"dir": str(theme / "reports")},
    })


def test_config_defaults(tool, theme):
    assert tool.theme_dir == os.path.abspath(str(theme))
    assert tool.config["theme"]["source_dir"] == "src"
    assert tool.config["conversion"]["pattern_glob"] == "**/*.html"
    assert tool.config["conversion"]["dry_run"] is False
    assert tool.config["pattern"]["viewport_width"] == 1280
    assert len(tool.converter.registry) == 3


def test_custom_elements_can_be_disabled(theme):
    tool = ThemeConversionTool({
        "theme": {"theme_dir": str(theme)},
        "conversion": {"custom_elements": False},
        "reports": {"dir": str(theme / "reports")},
    })
    assert len(tool.converter.registry) == 0


def test_config_file_is_loaded(theme):
    config_path = theme / "config.json"
    config_path.write_text(json.dumps({
        "theme": {"theme_dir": str(theme), "source_dir": "authoring"},
        "reports": {"dir": str(theme / "reports")},
    }), encoding="utf-8")
    tool = ThemeConversionTool(config_file=str(config_path))
    assert tool.config["theme"]["source_dir"] == "authoring"
    assert tool.config["conversion"]["custom_elements"] is True


def test_html_to_blocks_single_file(tool, theme):
    assert tool.html_to_blocks("src/parts/header.html") == 1
    markup = (theme / "parts" / "header.html").read_text(encoding="utf-8")
    assert markup.startswith('<!-- wp:universal/element {"tagName":"header","contentType":"blocks","className":"site"} -->')
    assert '<!-- wp:core/template-part {"slug":"nav"} /-->' in markup
    assert tool.failed == 0

    ok = _read_jsonl(theme / "reports" / "success.jsonl")
    assert ok[0]["code"] == "HTML_TO_BLOCKS"
    assert ok[0]["direction"] == "HTML_TO_BLOCKS"


def test_html_to_blocks_and_back(tool, theme):
    assert tool.html_to_blocks("src/parts", convert_all=True) == 2
    (theme / "src" / "parts" / "header.html").unlink()
    assert tool.blocks_to_html("parts/header.html") == 1
    html = (theme / "src" / "parts" / "header.html").read_text(encoding="utf-8")
    assert html == '<header class="site"><Part slug="nav"></Part>\n<h1>Title</h1></header>'


def test_explicit_output_directory(tool, theme):
    assert tool.html_to_blocks("src/parts/footer.html", output_dir="build") == 1
    assert (theme / "build" / "footer.html").exists()
    assert not (theme / "parts" / "footer.html").exists()


def test_directory_requires_all(tool, theme):
    assert tool.html_to_blocks("src/parts") == 0
    assert tool.failed == 1
    errors = _read_jsonl(theme / "reports" / "errors.jsonl")
    assert errors[0]["code"] == "SOURCE_LOOKUP"


def test_missing_path_is_reported(tool, theme):
    assert tool.html_to_blocks("src/nope.html") == 0
    assert tool.failed == 1
    assert "Path not found" in _read_jsonl(theme / "reports" / "errors.jsonl")[0]["error"]


def test_non_html_file_is_rejected(tool, theme):
    _write(theme / "src" / "notes.txt", "x")
    assert tool.html_to_blocks("src/notes.txt") == 0
    assert tool.failed == 1


def test_malformed_markup_is_reported_and_batch_continues(tool, theme):
    _write(theme / "parts" / "bad.html", "<!-- wp:group -->\n<p>x</p>")
    _write(theme / "parts" / "good.html", '<!-- wp:universal/element {"tagName":"p","contentType":"text","content":"ok"} /-->')
    assert tool.blocks_to_html("parts", convert_all=True) == 1
    assert tool.failed == 1
    errors = _read_jsonl(theme / "reports" / "errors.jsonl")
    assert errors[0]["code"] == "MALFORMED_MARKUP"
    assert errors[0]["source"].endswith("bad.html")
    assert (theme / "src" / "parts" / "good.html").read_text(encoding="utf-8") == "<p>ok</p>"


def test_empty_output_is_an_error(tool, theme):
    _write(theme / "src" / "empty.html", "<!-- only a comment -->")
    assert tool.html_to_blocks("src/empty.html") == 0
    assert _read_jsonl(theme / "reports" / "errors.jsonl")[0]["code"] == "EMPTY_OUTPUT"
    assert not (theme / "empty.html").exists()


def test_dry_run_writes_nothing(theme):
    tool = ThemeConversionTool({
        "theme": {"theme_dir": str(theme)},
        "conversion": {"dry_run": True},
        "reports": {"dir": str(theme / "reports")},
    })
    assert tool.html_to_blocks("src/parts/header.html") == 1
    assert not (theme / "parts" / "header.html").exists()


def test_html_to_patterns(tool, theme):
    _write(theme / "src" / "patterns" / "hero-section.html", "<section><h1>Hero</h1></section>")
    _write(theme / "src" / "patterns" / "cards" / "card.html", "<article><p>Card</p></article>")
    out = theme / "out"
    count = tool.html_to_patterns(
        str(theme / "src" / "patterns"),
        output_dir=str(out),
        namespace="mytheme",
        categories=["featured"],
    )
    assert count == 2
    hero = (out / "hero-section.php").read_text(encoding="utf-8")
    assert " * Title: Hero Section" in hero
    assert " * Slug: mytheme/hero-section" in hero
    assert " * Categories: featured" in hero
    assert " * Viewport Width: 1280" in hero
    assert (out / "cards" / "card.php").exists()


def test_manifest(tool, theme):
    tool.html_to_blocks("src/parts/header.html")
    path = tool.write_manifest()
    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [
        ["Source", "Destination", "Direction"],
        ["src/parts/header.html", "parts/header.html", "HTML_TO_BLOCKS"],
    ]


def test_manifest_skipped_without_conversions(tool):
    assert tool.write_manifest() is None


class TestLogMessage(unittest.TestCase):
    def test_log_file_is_appended(self):
        with tempfile.TemporaryDirectory() as tmp:
            tool = ThemeConversionTool({"theme": {"theme_dir": tmp}, "reports": {"dir": os.path.join(tmp, "r")}})
            tool.log_message("first")
            tool.log_message("second", "ERROR")
            with open(os.path.join(tmp, "r", "conversion.log"), encoding="utf-8") as f:
                self.assertEqual(f.read(), "INFO: first\nERROR: second\n")


def test_invalid_block_attributes_fail_one_file_only(tool, theme):
    _write(theme / "parts" / "bad.html", '<!-- wp:universal/element {"tagName":"p","globalAttrs":["a"]} /-->')
    _write(theme / "parts" / "good.html", '<!-- wp:universal/element {"tagName":"p","contentType":"text","content":"ok"} /-->')
    assert tool.blocks_to_html("parts", convert_all=True) == 1
    assert tool.failed == 1
    errors = _read_jsonl(theme / "reports" / "errors.jsonl")
    assert [e["code"] for e in errors] == ["MALFORMED_MARKUP"]
    assert (theme / "src" / "parts" / "good.html").exists()


def test_markup_is_not_double_escaped_by_default(theme, monkeypatch):
    monkeypatch.delenv("UNIVERSAL_BLOCKS_DOUBLE_ESCAPE", raising=False)
    _write(theme / "src" / "code.html", '<p>C:\\temp "x"</p>')
    tool = ThemeConversionTool({
        "theme": {"theme_dir": str(theme)},
        "reports": {"dir": str(theme / "reports")},
    })
    assert tool.config["conversion"]["double_escape"] is False
    assert tool.html_to_blocks("src/code.html") == 1
    markup = (theme / "code.html").read_text(encoding="utf-8")
    assert json.loads(markup[markup.index("{"):markup.rindex("}") + 1])["content"] == 'C:\\temp "x"'
