#!/usr/bin/env python3
"""Unit tests for the canonical converter.

Each representation of the same sample must convert to every target.
"""

import json
import os
from dataclasses import dataclass
from types import SimpleNamespace
from unittest.mock import patch
from xml.etree.ElementTree import Element, SubElement

import pytest

from formatbridge.core.config import ConverterConfig
from formatbridge.services.converter import to_json, to_node, to_record, to_serialized, to_xml
from formatbridge.services.domain.coercion import box, unbox
from formatbridge.services.domain.tree import NestingTooDeepError


DATA = {"key": "value", "number": 1337, "boolean": True, "float": 1.5, "array": [1, 2, 3]}
RECORD = SimpleNamespace(key="value", number=1337, boolean=True, float=1.5, array=[1, 2, 3])
JSON_TEXT = '{"key":"value","number":1337,"boolean":true,"float":1.5,"array":[1,2,3]}'
SERIALIZED_TEXT = (
    'a:5:{s:3:"key";s:5:"value";s:6:"number";i:1337;s:7:"boolean";b:1;'
    's:5:"float";d:1.5;s:5:"array";a:3:{i:0;i:1;i:1;i:2;i:2;i:3;}}'
)
XML_TEXT = (
    '<?xml version="1.0" encoding="utf-8"?>\n<root>'
    "<key>value</key><number>1337</number><boolean>true</boolean><float>1.5</float>"
    "<array>1</array><array>2</array><array>3</array></root>"
)

RESOURCES = {
    "container": DATA,
    "record": RECORD,
    "json": JSON_TEXT,
    "serialized": SERIALIZED_TEXT,
    "xml": XML_TEXT,
}


@dataclass
class Hero:
    name: str
    life: int


class TestToNode:
    """Test suite for to_node()."""

    @pytest.mark.parametrize("kind", list(RESOURCES))
    def test_every_format(self, kind):
        """Test that every representation converts to the same Node."""
        assert to_node(RESOURCES[kind]) == DATA

    def test_container_returned_as_is(self):
        """Test that a non-recursive container conversion is the identity."""
        assert to_node(DATA) is DATA

    def test_recursive_container_is_copied_and_boxed(self):
        """Test that recursive conversion deep-copies and boxes."""
        source = {"outer": {"n": "42"}}
        node = to_node(source, recursive=True)
        assert node == {"outer": {"n": 42}}
        assert node["outer"] is not source["outer"]
        assert source == {"outer": {"n": "42"}}

    def test_json_scalar_is_wrapped(self):
        """Test that a scalar JSON document is cast to a list."""
        assert to_node("42") == [42]

    def test_serialized_null_becomes_empty(self):
        """Test that a serialized null casts to an empty Node."""
        assert to_node("N;") == []

    def test_unknown_input_is_cast(self):
        """Test that unrecognized input is wrapped as a one-item list."""
        assert to_node("plain text") == ["plain text"]
        assert to_node(7) == [7]
        assert to_node(None) == []

    def test_xml_element_input(self):
        """Test that an XML element is decoded with the GROUP policy."""
        root = Element("root")
        life = SubElement(root, "life", {"max": "150"})
        life.text = "50"
        assert to_node(root) == {"life": {"value": 50, "attributes": {"max": 150}}}

    def test_empty_xml_root_is_empty_mapping(self):
        """Test that an empty root element reads back as an empty mapping."""
        assert to_node(to_xml({})) == {}
        assert to_node("<root></root>") == {}

    def test_oversized_number_in_xml(self):
        """Test that element text past the int conversion limit stays a string."""
        digits = "1" * 5000
        assert to_node(f"<root><a>{digits}</a></root>") == {"a": digits}
        assert to_json(f"<root><a>{digits}</a></root>") == f'{{"a":"{digits}"}}'


class TestToRecord:
    """Test suite for to_record()."""

    @pytest.mark.parametrize("kind", list(RESOURCES))
    def test_every_format(self, kind):
        """Test that every representation converts to the same record."""
        assert to_record(RESOURCES[kind]) == RECORD

    def test_record_returned_as_is(self):
        """Test that a non-recursive record conversion is the identity."""
        assert to_record(RECORD) is RECORD

    def test_recursive_record_is_rebuilt(self):
        """Test that recursive conversion rebuilds records as SimpleNamespace."""
        record = to_record(Hero("Barbarian", 50), recursive=True)
        assert record == SimpleNamespace(name="Barbarian", life=50)

    def test_nested_tiers(self):
        """Test that nested mappings become nested records."""
        record = to_record({"one": {"two": {"three": 3}}})
        assert record.one.two.three == 3

    def test_empty_xml_root_is_empty_record(self):
        """Test that an empty root element becomes an empty record."""
        assert to_record("<root/>") == SimpleNamespace()

    def test_scalar_input_is_wrapped(self):
        """Test that scalars are cast under a "value" field."""
        assert to_record("plain text") == SimpleNamespace(value="plain text")
        assert to_record(None) == SimpleNamespace()


class TestToJson:
    """Test suite for to_json()."""

    @pytest.mark.parametrize("kind", list(RESOURCES))
    def test_every_format(self, kind):
        """Test that every representation converts to the same JSON text."""
        assert to_json(RESOURCES[kind]) == JSON_TEXT

    def test_json_returned_unchanged(self):
        """Test that JSON input keeps its original formatting."""
        pretty = json.dumps(DATA, indent=4)
        assert to_json(pretty) == pretty

    def test_nested_records_in_containers(self):
        """Test that records nested in containers are mirrored."""
        assert to_json({"hero": Hero("Barbarian", 50)}) == '{"hero":{"name":"Barbarian","life":50}}'

    def test_non_ascii_output(self):
        """Test that non-ASCII text is written as-is."""
        assert to_json({"name": "Ünit"}) == '{"name":"Ünit"}'

    @pytest.mark.parametrize("value", [
        DATA, RECORD, XML_TEXT, SERIALIZED_TEXT, "plain text", "null", 42, None, "N;",
        [float("nan")], {"x": float("inf")},
    ])
    def test_idempotent(self, value):
        """Test that converting JSON output again changes nothing."""
        once = to_json(value)
        assert to_json(once) == once

    def test_non_finite_floats_become_null(self):
        """Test that NaN and infinities are written as JSON null."""
        assert to_json([float("nan"), float("inf"), -float("inf"), 1.5]) == "[null,null,null,1.5]"
        assert to_json(SimpleNamespace(ratio=float("nan"))) == '{"ratio":null}'

    def test_deep_nesting_is_rejected(self):
        """Test that containers nested past the depth limit raise NestingTooDeepError."""
        with pytest.raises(NestingTooDeepError):
            to_json(_nested_lists(5000))

    @patch.dict(os.environ, {"CONVERTER_JSON_INDENT": "2"})
    def test_indent_from_config(self):
        """Test that JSON_INDENT pretty-prints output."""
        with patch("formatbridge.services.converter.converter_config", ConverterConfig()):
            assert to_json({"a": 1}) == '{\n  "a": 1\n}'


class TestToSerialized:
    """Test suite for to_serialized()."""

    @pytest.mark.parametrize("kind", list(RESOURCES))
    def test_every_format(self, kind):
        """Test that every representation converts to the same serialized text."""
        assert to_serialized(RESOURCES[kind]) == SERIALIZED_TEXT

    def test_serialized_input_is_reencoded(self):
        """Test that serialized input is decoded and encoded again, not passed through."""
        # Same content, non-canonical float spelling
        source = 'a:1:{s:1:"f";d:2.50;}'
        assert to_serialized(source) == 'a:1:{s:1:"f";d:2.5;}'

    def test_deep_nesting_is_rejected(self):
        """Test that containers nested past the depth limit raise NestingTooDeepError."""
        with pytest.raises(NestingTooDeepError):
            to_serialized(_nested_lists(5000))

    def test_nested_records_in_containers(self):
        """Test that records nested in containers are mirrored."""
        assert to_serialized({"hero": Hero("Mace", 15)}) == (
            'a:1:{s:4:"hero";a:2:{s:4:"name";s:4:"Mace";s:4:"life";i:15;}}'
        )


class TestToXml:
    """Test suite for to_xml()."""

    @pytest.mark.parametrize("kind", list(RESOURCES))
    def test_every_format(self, kind):
        """Test that every representation converts to the same XML document."""
        assert to_xml(RESOURCES[kind]) == XML_TEXT

    def test_xml_returned_unchanged(self):
        """Test that XML text is not re-rendered."""
        source = "<doc>\n  <a>1</a>\n</doc>"
        assert to_xml(source) == source

    def test_element_is_rendered(self):
        """Test that an XML element input is rendered as a document."""
        root = Element("doc")
        SubElement(root, "a").text = "1"
        assert to_xml(root) == '<?xml version="1.0" encoding="utf-8"?>\n<doc><a>1</a></doc>'

    def test_root_name(self):
        """Test that the root element name can be chosen."""
        assert to_xml({"a": 1}, root_name="unit").endswith("<unit><a>1</a></unit>")

    @patch.dict(os.environ, {"CONVERTER_ROOT_NAME": "document"})
    def test_default_root_name_from_config(self):
        """Test that the default root name comes from configuration."""
        config = ConverterConfig()
        with patch("formatbridge.services.domain.xml_tree.converter.converter_config", config):
            assert to_xml({"a": 1}).endswith("<document><a>1</a></document>")

    def test_group_shape_written_as_attributes(self):
        """Test that GROUP-shaped containers produce XML attributes."""
        node = {"name": "Barbarian", "life": {"value": 50, "attributes": {"max": 150}}}
        assert to_xml(node).endswith('<root><name>Barbarian</name><life max="150">50</life></root>')

    def test_does_not_mutate_input(self):
        """Test that the caller's container is left untouched."""
        source = {"n": "42", "nested": {"flag": "true"}}
        to_xml(source)
        assert source == {"n": "42", "nested": {"flag": "true"}}

    @pytest.mark.parametrize("node", [
        {"name": "Barbarian", "life": "50", "ratio": "0.5", "alive": True},
        {"weapons": {"sword": ["Broadsword", "Longsword"], "mace": "Mace"}},
        {"deep": {"er": {"est": {"value_text": "x", "count": 3}}}},
    ])
    def test_round_trip(self, node):
        """Test to_node(to_xml(n)) == n with leaves passed through box(unbox())."""
        expected = _boxed(node)
        assert to_node(to_xml(node)) == expected


def _boxed(node):
    if isinstance(node, dict):
        return {key: _boxed(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_boxed(item) for item in node]
    return box(unbox(node))


def _nested_lists(depth):
    """Build lists nested ``depth`` levels deep without recursion."""
    node = []
    for _ in range(depth):
        node = [node]
    return node
