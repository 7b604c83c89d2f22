"""Tests for composing node trees into XML text."""

import pytest

from pixl_xml.api.document import parse
from pixl_xml.api.serializer import (
    XML_HEADER,
    ComposeError,
    is_valid_tag_name,
    stringify,
    strip_declaration,
)


def body(node, name="doc", **options):
    """Compose and drop the declaration line."""
    return strip_declaration(stringify(node, name, **options))


class TestStringify:
    """Test element layout and formatting."""

    def test_declaration_and_simple_child(self) -> None:
        """Test the declaration and tab indentation."""
        assert stringify({"a": "1"}, "doc") == (
            '<?xml version="1.0"?>\n<doc>\n\t<a>1</a>\n</doc>\n'
        )

    def test_root_name_derived_from_single_key(self) -> None:
        """Test the sole top-level key names the root."""
        assert body({"doc": {"a": "1"}}, None) == "<doc>\n\t<a>1</a>\n</doc>\n"

    def test_root_name_required_otherwise(self) -> None:
        """Test a text or empty tree cannot name its root."""
        with pytest.raises(ComposeError):
            stringify("text")
        with pytest.raises(ComposeError):
            stringify({})

    def test_root_name_not_derived_from_several_keys(self) -> None:
        """Test a mapping with more than one key cannot name its root."""
        with pytest.raises(ComposeError, match="single top-level key"):
            stringify({"a": "1", "b": "2"})

    def test_empty_element_is_self_closed(self) -> None:
        """Test empty mappings become self-closing tags."""
        assert body({"e": {}}) == "<doc>\n\t<e/>\n</doc>\n"

    def test_attributes_sorted_and_self_closed(self) -> None:
        """Test an attribute-only element is self-closed with sorted attributes."""
        node = {"_Attribs": {"b": "2", "a": "1"}}

        assert body(node, "n") == '<n a="1" b="2"/>\n'

    def test_attributes_with_text(self) -> None:
        """Test an element with attributes and text is written inline."""
        node = {"_Attribs": {"id": "7"}, "_Data": "seven"}

        assert body(node, "n") == '<n id="7">seven</n>\n'

    def test_text_with_children(self) -> None:
        """Test text is written as an indented line before the children."""
        node = {"_Data": "intro", "b": "bold"}

        assert body(node, "p") == "<p>\n\tintro\n\t<b>bold</b>\n</p>\n"

    def test_falsy_text_with_children(self) -> None:
        """Test zero is written as the text line before the children."""
        assert body({"_Data": 0, "b": "x"}) == "<doc>\n\t0\n\t<b>x</b>\n</doc>\n"

    def test_empty_text_with_children(self) -> None:
        """Test an empty text entry adds no line."""
        assert body({"_Data": "", "b": "x"}) == "<doc>\n\t<b>x</b>\n</doc>\n"

    def test_lists_become_repeated_siblings(self) -> None:
        """Test each list item is written under the same name."""
        assert body({"x": ["1", {"y": "2"}]}) == (
            "<doc>\n\t<x>1</x>\n\t<x>\n\t\t<y>2</y>\n\t</x>\n</doc>\n"
        )

    def test_empty_list_emits_nothing(self) -> None:
        """Test an empty sequence produces no elements."""
        assert body({"x": [], "y": "1"}) == "<doc>\n\t<y>1</y>\n</doc>\n"

    def test_invalid_names_are_skipped(self) -> None:
        """Test keys that are not tag names are left out."""
        assert body({"bad key": "x", "-dash": "y", "ok": "z"}) == (
            "<doc>\n\t<ok>z</ok>\n</doc>\n"
        )

    def test_entities_encoded(self) -> None:
        """Test text and attribute values are escaped."""
        node = {"_Attribs": {"q": "\"it's\" <b>"}, "t": "a < b & c"}

        assert body(node) == (
            '<doc q="&quot;it&apos;s&quot; &lt;b&gt;">\n'
            "\t<t>a &lt; b &amp; c</t>\n"
            "</doc>\n"
        )

    def test_non_string_values(self) -> None:
        """Test numbers are written as text."""
        assert body({"n": 5, "f": 1.5}) == "<doc>\n\t<f>1.5</f>\n\t<n>5</n>\n</doc>\n"

    def test_unsorted_keeps_insertion_order(self) -> None:
        """Test sorting can be disabled."""
        assert body({"b": "1", "a": "2"}, sort=False) == (
            "<doc>\n\t<b>1</b>\n\t<a>2</a>\n</doc>\n"
        )

    def test_custom_indent_and_eol(self) -> None:
        """Test formatting options."""
        xml = stringify({"a": {"b": "1"}}, "doc", indent="  ", eol="\r\n")

        assert xml == (
            '<?xml version="1.0"?>\r\n<doc>\r\n  <a>\r\n    <b>1</b>\r\n  </a>\r\n</doc>\r\n'
        )

    def test_custom_reserved_keys(self) -> None:
        """Test the reserved keys are configurable."""
        node = {"@": {"id": "1"}, "#text": "x"}

        assert body(node, "n", attributes_key="@", data_key="#text") == '<n id="1">x</n>\n'


class TestRoundTrip:
    """Test that composed trees parse back to themselves."""

    @pytest.mark.parametrize("tree", [
        {"a": "1"},
        {"x": ["1", "2", "3"]},
        {"_Attribs": {"version": "2"}, "item": [
            {"_Attribs": {"id": "1"}, "name": "A"},
            {"_Attribs": {"id": "2"}, "name": "B & C"},
        ]},
        {"empty": {}, "note": "x < y", "nested": {"deeper": {"deepest": "ok"}}},
        {"p": {"_Data": "intro", "b": "bold"}},
    ])
    def test_parse_of_compose(self, tree) -> None:
        """Test parse(compose(tree)) reproduces the tree."""
        assert parse(stringify(tree, "doc")).tree == tree


class TestHelpers:
    """Test declaration stripping and name validation."""

    def test_strip_declaration(self) -> None:
        """Test only the leading declaration is removed."""
        xml = XML_HEADER + "\n<doc><?keep me?></doc>"

        assert strip_declaration(xml) == "<doc><?keep me?></doc>"
        assert strip_declaration("<doc/>") == "<doc/>"

    @pytest.mark.parametrize("name, valid", [
        ("doc", True),
        ("ns:item", True),
        ("a.b-c_d", True),
        ("_private", True),
        ("1st", True),
        ("-dash", False),
        ("bad key", False),
        ("", False),
        (None, False),
    ])
    def test_is_valid_tag_name(self, name, valid) -> None:
        """Test the tag name pattern."""
        assert is_valid_tag_name(name) is valid
