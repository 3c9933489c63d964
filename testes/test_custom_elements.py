import importlib
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from universal_blocks.custom_elements import (
    CONTENT,
    EMPTY_REGISTRY,
    PART,
    ElementHandler,
    ElementRegistry,
    default_registry,
)
from universal_blocks.models import BlockNode, ContentType
from universal_blocks.parsers import BlockConverter, blocks_to_html, html_to_blocks


def test_default_registry_contents():
    registry = default_registry()
    assert len(registry) == 3
    assert "part" in registry and "PART" in registry and "Pattern" in registry
    assert registry.for_tag("content") is CONTENT
    assert registry.for_block("core/template-part") is PART
    assert registry.for_block("core/paragraph") is None


def test_registry_is_immutable():
    registry = default_registry()
    with pytest.raises(AttributeError):
        registry.extra = 1
    with pytest.raises(TypeError):
        registry.by_tag_name["x"] = PART


def test_duplicate_handlers_are_rejected():
    with pytest.raises(ValueError):
        ElementRegistry([PART, PART])
    clash = ElementHandler("part", "acme/other", PART.to_block, PART.to_html)
    with pytest.raises(ValueError):
        ElementRegistry([PART, clash])


def test_with_handlers_returns_new_registry():
    extended = EMPTY_REGISTRY.with_handlers(PART)
    assert len(EMPTY_REGISTRY) == 0
    assert len(extended) == 1
    assert extended.for_tag("Part") is PART


def test_part_to_block():
    block = html_to_blocks('<Part slug="header" theme="t" class="site-header"></Part>', registry=default_registry())[0]
    assert block.name == "core/template-part"
    assert block.content_type == ContentType.EMPTY
    assert block.block_attributes == {"slug": "header", "theme": "t", "className": "site-header"}


def test_part_subtree_is_owned_by_handler():
    block = html_to_blocks('<Part slug="x"><p>ignored</p></Part>', registry=default_registry())[0]
    assert block.children == []
    assert block.block_attributes == {"slug": "x"}


def test_pattern_and_content_to_block():
    blocks = html_to_blocks(
        '<Pattern slug="theme/hero" category="banner"></Pattern><Content class="entry"></Content>',
        registry=default_registry(),
    )
    assert [(b.name, b.block_attributes) for b in blocks] == [
        ("core/pattern", {"slug": "theme/hero", "category": "banner"}),
        ("core/post-content", {"className": "entry"}),
    ]


def test_handlers_write_elements_back():
    nodes = [
        BlockNode(name="core/template-part", block_attributes={"slug": "footer", "theme": "t", "className": "f"}),
        BlockNode(name="core/pattern", block_attributes={"slug": "theme/hero"}),
        BlockNode(name="core/post-content", block_attributes={}),
    ]
    assert blocks_to_html(nodes, registry=default_registry()) == (
        '<Part slug="footer" theme="t" class="f"></Part>\n'
        '<Pattern slug="theme/hero"></Pattern>\n'
        "<Content></Content>"
    )


def test_without_registry_custom_tags_are_plain_elements():
    block = html_to_blocks('<Part slug="x"></Part>')[0]
    assert block.is_element
    assert block.tag == "part"
    assert block.attributes == {"slug": "x"}


def test_registered_tags_skip_classification(monkeypatch):
    module = importlib.import_module("universal_blocks.parsers.html_to_blocks")
    seen = []
    classify = module.determine_content_type

    def spy(element, tag_name):
        seen.append(tag_name)
        return classify(element, tag_name)

    monkeypatch.setattr(module, "determine_content_type", spy)
    html_to_blocks('<main><Part slug="x"><p>y</p></Part></main>', registry=default_registry())
    assert seen == ["main"]


def test_markup_round_trip_through_handlers():
    converter = BlockConverter(default_registry())
    html = '<div class="layout"><Part slug="header"></Part>\n<Content></Content>\n<Part slug="footer"></Part></div>'
    markup = converter.html_to_markup(html, double_escape=False)
    assert '<!-- wp:core/template-part {"slug":"header"} /-->' in markup
    assert "<!-- wp:core/post-content /-->" in markup
    assert converter.markup_to_html(markup) == html
