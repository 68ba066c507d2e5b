"""Tests for svg_inline.structured module."""

import logging

import pytest
from pathlib import Path
from xml.etree import ElementTree as ET

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_inline import structured
from svg_inline.errors import ApplyFailure, ParseFailure
from svg_inline.structured import (
    load_svg,
    find_style_element,
    apply_class_styles,
    prune_style_container,
    rename_tags,
    serialize_svg,
    convert_structured,
)

SCENARIO_SVG = (
    '<svg><defs><style>.a{fill:red;stroke:blue;}</style></defs>'
    '<path class="a" d="M0 0"/></svg>'
)


def _elements(text: str) -> list[ET.Element]:
    return list(ET.fromstring(text).iter())


class TestLoadSvg:
    """Tests for load_svg function."""

    def test_plain_document(self):
        root, prolog, epilog = load_svg("<svg><g/></svg>")
        assert root.tag == "svg"
        assert prolog == ""
        assert epilog == ""

    def test_keeps_prolog_and_trailing_newline(self):
        text = '<?xml version="1.0" encoding="UTF-8"?>\n<svg/>\n'
        root, prolog, epilog = load_svg(text)
        assert prolog == '<?xml version="1.0" encoding="UTF-8"?>\n'
        assert epilog == "\n"

    def test_namespaced_root(self):
        root, _, _ = load_svg('<svg xmlns="http://www.w3.org/2000/svg"/>')
        assert root.tag == "{http://www.w3.org/2000/svg}svg"

    def test_malformed_raises_parse_failure(self):
        with pytest.raises(ParseFailure, match="Failed to parse SVG"):
            load_svg("<svg><path></svg>")


class TestFindStyleElement:
    """Tests for find_style_element function."""

    def test_found(self):
        root = ET.fromstring(SCENARIO_SVG)
        defs, style = find_style_element(root)
        assert defs.tag == "defs"
        assert style.tag == "style"

    def test_nested_in_defs(self):
        root = ET.fromstring("<svg><defs><g><style>.a{}</style></g></defs></svg>")
        defs, style = find_style_element(root)
        assert defs.tag == "defs"
        assert style.tag == "style"

    def test_style_outside_defs_ignored(self):
        root = ET.fromstring("<svg><style>.a{fill:red}</style><defs/></svg>")
        assert find_style_element(root) is None

    def test_second_defs(self):
        root = ET.fromstring(
            '<svg><defs><linearGradient id="g"/></defs>'
            '<defs id="second"><style>.a{fill:red}</style></defs></svg>'
        )
        defs, _ = find_style_element(root)
        assert defs.get("id") == "second"

    def test_not_found(self):
        assert find_style_element(ET.fromstring("<svg><path/></svg>")) is None


class TestApplyClassStyles:
    """Tests for apply_class_styles function."""

    def test_applies_and_removes_class(self):
        root = ET.fromstring('<svg><path class="a" d="M0 0"/></svg>')
        count = apply_class_styles(root, {"a": [("fill", "red"), ("stroke", "blue")]})
        path = root[0]
        assert count == 1
        assert list(path.attrib.items()) == [
            ("d", "M0 0"),
            ("style", "fill:red;stroke:blue;"),
        ]

    def test_keeps_unstyled_classes(self):
        root = ET.fromstring('<svg><path class="a other" d="M0 0"/></svg>')
        apply_class_styles(root, {"a": [("fill", "red")]})
        assert root[0].get("class") == "other"
        assert root[0].get("style") == "fill:red;"

    def test_merges_existing_style(self):
        root = ET.fromstring('<svg><rect class="a" style="fill:blue;opacity:1"/></svg>')
        apply_class_styles(root, {"a": [("fill", "red"), ("stroke", "black")]})
        assert root[0].get("style") == "fill:red;opacity:1;stroke:black;"

    def test_keeps_semicolon_inside_existing_url(self):
        root = ET.fromstring(
            '<svg><rect class="a" style="filter:url(data:image/png;base64,AAA)"/></svg>'
        )
        apply_class_styles(root, {"a": [("fill", "red")]})
        assert root[0].get("style") == "filter:url(data:image/png;base64,AAA);fill:red;"

    def test_empty_rule_adds_no_style(self):
        root = ET.fromstring('<svg><path class="a"/><rect class="a" style="opacity:1"/></svg>')
        apply_class_styles(root, {"a": []})
        assert root[0].attrib == {}
        assert root[1].attrib == {"style": "opacity:1;"}

    def test_rule_order_decides_overwrites(self):
        root = ET.fromstring('<svg><path class="a b"/></svg>')
        rules = {"b": [("fill", "green")], "a": [("fill", "red"), ("stroke", "blue")]}
        count = apply_class_styles(root, rules)
        assert count == 1
        assert root[0].get("style") == "fill:red;stroke:blue;"
        assert "class" not in root[0].attrib

    def test_every_user_of_a_class(self):
        root = ET.fromstring(
            '<svg><g class="a"><circle class="a" r="1"/></g><rect class="b"/></svg>'
        )
        count = apply_class_styles(root, {"a": [("fill", "red")]})
        assert count == 2
        assert root[0].get("style") == "fill:red;"
        assert root[0][0].get("style") == "fill:red;"
        assert root[1].get("class") == "b"
        assert root[1].get("style") is None

    def test_style_completeness(self):
        root = ET.fromstring(
            '<svg><path class="a x"/><rect class="y a" style="opacity:0"/></svg>'
        )
        pairs = [("fill", "red"), ("stroke-width", "2")]
        apply_class_styles(root, {"a": pairs})
        for elem in root:
            style = elem.get("style")
            for name, value in pairs:
                assert f"{name}:{value};" in style
            assert "a" not in elem.get("class", "").split()


class TestPruneStyleContainer:
    """Tests for prune_style_container function."""

    def test_removes_empty_defs(self):
        root = ET.fromstring(SCENARIO_SVG)
        defs, style = find_style_element(root)
        assert prune_style_container(root, defs, style) is True
        assert [e.tag for e in root.iter()] == ["svg", "path"]

    def test_keeps_defs_with_other_children(self):
        root = ET.fromstring(
            '<svg><defs><linearGradient id="g"/><style>.a{fill:red}</style></defs></svg>'
        )
        defs, style = find_style_element(root)
        assert prune_style_container(root, defs, style) is False
        assert [e.tag for e in root.iter()] == ["svg", "defs", "linearGradient"]

    def test_keeps_surrounding_whitespace(self):
        text = (
            "<svg>\n  <defs>\n    <style>.a{fill:red;}</style>\n  </defs>\n"
            '  <path class="a"/>\n</svg>'
        )
        root = ET.fromstring(text)
        defs, style = find_style_element(root)
        prune_style_container(root, defs, style)
        assert root.text == "\n  \n  "
        assert root[0].tag == "path"


class TestRenameTags:
    """Tests for rename_tags function."""

    def test_nested_rename(self):
        root = ET.fromstring(
            "<svg><g><g><text>hi<tspan>x</tspan></text></g></g><foo/></svg>"
        )
        assert rename_tags(root) == 5
        assert ET.tostring(root, encoding="unicode") == (
            "<Svg><G><G><Text>hi<Tspan>x</Tspan></Text></G></G><foo /></Svg>"
        )

    def test_exact_case_sensitive_match(self):
        root = ET.fromstring(
            "<svg><linearGradient/><lineargradient/><textPath/><Path/></svg>"
        )
        rename_tags(root)
        assert [e.tag for e in root] == ["LinearGradient", "lineargradient", "textPath", "Path"]

    def test_namespaced_tags(self):
        svg_ns = "http://www.w3.org/2000/svg"
        other_ns = "http://example.com/ns"
        root = ET.Element(f"{{{svg_ns}}}svg")
        ET.SubElement(root, f"{{{svg_ns}}}path")
        ET.SubElement(root, f"{{{other_ns}}}path")
        assert rename_tags(root) == 2
        assert root.tag == f"{{{svg_ns}}}Svg"
        assert root[0].tag == f"{{{svg_ns}}}Path"
        assert root[1].tag == f"{{{other_ns}}}path"

    def test_preserves_attributes_and_children(self):
        text = (
            '<svg viewBox="0 0 10 10" width="10"><g id="g1" transform="scale(2)">'
            '<rect x="1" y="2"/><circle r="3"/></g><polygon points="0,0 1,1"/></svg>'
        )
        before = _elements(text)
        root = ET.fromstring(text)
        rename_tags(root)
        after = list(root.iter())

        assert len(before) == len(after)
        for old, new in zip(before, after):
            assert new.tag == old.tag[0].upper() + old.tag[1:]
            assert list(new.attrib.items()) == list(old.attrib.items())
            assert len(new) == len(old)


class TestConvertStructured:
    """Tests for convert_structured function."""

    def test_inline_conversion(self):
        result = convert_structured(SCENARIO_SVG)
        assert result.output == '<svg><path d="M0 0" style="fill:red;stroke:blue;" /></svg>'
        assert result.style_found is True
        assert result.rules_found == 1
        assert result.elements_styled == 1
        assert result.tags_renamed == 0

    def test_inline_conversion_with_rename(self):
        result = convert_structured(SCENARIO_SVG, react_native=True)
        assert result.output == '<Svg><Path d="M0 0" style="fill:red;stroke:blue;" /></Svg>'
        assert result.tags_renamed == 2

    def test_rename_without_style(self, caplog):
        caplog.set_level(logging.INFO)
        result = convert_structured('<svg><path d="M0 0"/></svg>', react_native=True)
        assert result.output == '<Svg><Path d="M0 0" /></Svg>'
        assert result.style_found is False
        assert "No style element found" in caplog.text

    def test_no_style_returns_input_unchanged(self):
        text = "<svg>\n  <path d='M0 0'/>\n</svg>\n"
        result = convert_structured(text)
        assert result.changed is False
        assert result.output == text

    def test_idempotent(self):
        once = convert_structured(SCENARIO_SVG).output
        twice = convert_structured(once).output
        assert twice == once

    def test_defs_removed(self):
        result = convert_structured(
            '<svg><defs><style>.a{fill:red;}</style></defs><rect class="a"/></svg>'
        )
        assert "defs" not in result.output
        assert "<style" not in result.output

    def test_namespaced_document(self):
        text = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">'
            "<defs><style>.a{fill:red}</style></defs>"
            '<rect class="a b" width="1"/></svg>\n'
        )
        result = convert_structured(text, react_native=True)
        assert result.output == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<Svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">'
            '<Rect class="b" width="1" style="fill:red;" /></Svg>\n'
        )

    def test_keeps_comments(self):
        result = convert_structured(
            "<svg><!-- keep --><defs><style>.a{fill:red}</style></defs>"
            '<path class="a"/></svg>'
        )
        assert result.output == '<svg><!-- keep --><path style="fill:red;" /></svg>'

    def test_empty_rule_body(self):
        result = convert_structured(
            '<svg><defs><style>.a{ }</style></defs><path class="a"/></svg>'
        )
        assert result.output == "<svg><path /></svg>"

    def test_parse_failure(self):
        with pytest.raises(ParseFailure):
            convert_structured("<svg><path></svg>")

    def test_apply_failure(self, monkeypatch):
        def boom(root, rules):
            raise RuntimeError("boom")

        monkeypatch.setattr(structured, "apply_class_styles", boom)
        with pytest.raises(ApplyFailure, match="boom"):
            convert_structured(SCENARIO_SVG)

    def test_serialize_wraps_prolog(self):
        root = ET.fromstring("<svg/>")
        assert serialize_svg(root, "<?xml version='1.0'?>\n", "\n") == (
            "<?xml version='1.0'?>\n<svg />\n"
        )
