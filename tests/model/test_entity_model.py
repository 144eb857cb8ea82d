# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the entity model and its XML fragments."""

import xml.etree.ElementTree as ET

import pytest

from phpreflect.model import (
    DEFAULT_NAMESPACE,
    Argument,
    ClassDef,
    ConstantDef,
    DocBlock,
    FunctionDef,
    IncludeDef,
    InterfaceDef,
    MethodDef,
    PropertyDef,
)
from phpreflect.model.entities import _Fragment

# ###############
# Defaults
# ###############


class TestDefaults:
    def test_default_namespace(self) -> None:
        assert FunctionDef(name="f").namespace == DEFAULT_NAMESPACE == "default"

    def test_collections_are_independent(self) -> None:
        first = ClassDef(name="A")
        second = ClassDef(name="B")
        first.methods.append(MethodDef(name="run"))
        assert second.methods == []

    def test_class_is_an_interface_with_extras(self) -> None:
        cls = ClassDef(name="Foo")
        assert isinstance(cls, InterfaceDef)
        assert cls.parent_class is None
        assert cls.properties == []


# ###############
# Fragments
# ###############


class TestSerialize:
    def test_function_fragment(self) -> None:
        function = FunctionDef(
            name="foo",
            namespace="App",
            line=3,
            arguments=[Argument(name="$a", type="int", default="1", line=3)],
            return_type="string",
        )
        assert function.serialize() == (
            '<function namespace="App" line="3"><name>foo</name><return-type>string</return-type>'
            '<argument line="3"><name>$a</name><default>1</default><type>int</type></argument></function>'
        )

    def test_method_fragment_carries_flags(self) -> None:
        method = MethodDef(name="run", visibility="protected", is_abstract=True, line=7)
        assert method.serialize() == (
            '<method final="false" abstract="true" static="false" visibility="protected" line="7">'
            "<name>run</name></method>"
        )

    def test_property_fragment(self) -> None:
        prop = PropertyDef(name="$x", visibility="private", is_static=True, line=5)
        assert prop.serialize() == (
            '<property static="true" visibility="private" line="5"><name>$x</name><default /></property>'
        )

    def test_constant_fragment(self) -> None:
        constant = ConstantDef(name="A", value="1", line=2)
        assert constant.serialize() == (
            '<constant namespace="default" line="2"><name>A</name><value>1</value></constant>'
        )

    def test_include_fragment(self) -> None:
        include = IncludeDef(name="a.php", type="require_once", line=4)
        assert include.serialize() == '<include type="require_once" line="4"><name>a.php</name></include>'

    def test_interface_fragment_lists_parents(self) -> None:
        interface = InterfaceDef(name="I", parent_interfaces=["A", "B"], line=1)
        assert interface.serialize() == (
            '<interface namespace="default" line="1"><name>I</name><extends>A</extends><extends>B</extends></interface>'
        )

    def test_empty_class_fragment(self) -> None:
        assert ClassDef(name="Foo", line=2).serialize() == (
            '<class final="false" abstract="false" namespace="default" line="2"><name>Foo</name><extends /></class>'
        )

    def test_class_fragment_member_order(self) -> None:
        cls = ClassDef(
            name="Foo",
            parent_class="Base",
            interfaces=["Countable"],
            docblock=DocBlock(short_description="Doc."),
            constants=[ConstantDef(name="A", value="1")],
            methods=[MethodDef(name="count")],
            properties=[PropertyDef(name="$items")],
        )
        element = ET.fromstring(cls.serialize())
        assert [child.tag for child in element] == [
            "name",
            "extends",
            "implements",
            "docblock",
            "constant",
            "method",
            "property",
        ]
        assert element.find("extends").text == "Base"

    def test_text_is_escaped(self) -> None:
        constant = ConstantDef(name="A", value='"x" & <y>')
        assert '<value>"x" &amp; &lt;y&gt;</value>' in constant.serialize()

    def test_fragment_is_standalone_document(self) -> None:
        function = FunctionDef(name="f", docblock=DocBlock(short_description="Doc.", line=1))
        root = ET.fromstring(function.serialize())
        assert root.tag == "function"
        assert root.find("docblock/description").text == "Doc."


class TestFragmentBase:
    def test_kind_without_fragment_cannot_serialize(self) -> None:
        class Bare(_Fragment):
            name: str

        with pytest.raises(NotImplementedError, match="Bare does not define its XML fragment"):
            Bare(name="x").serialize()
