# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declarations discovered in a PHP source file.

Every top-level entity serializes itself to an independent XML fragment; the
file document merges those fragments unchanged.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from pydantic import BaseModel
from pydantic import Field as _Field

from phpreflect.model.docblock import DocBlock

# ###############
# Public Interface
# ###############

DEFAULT_NAMESPACE = "default"


class Marker(BaseModel):
    """An inline ``// TODO: ...`` style annotation."""

    term: str
    content: str
    line: int


class Argument(BaseModel):
    """A single function or method parameter."""

    name: str
    type: str | None = None
    default: str | None = None
    by_reference: bool = False
    variadic: bool = False
    line: int = 0

    def to_element(self) -> ET.Element:
        element = ET.Element("argument", {"line": str(self.line)})
        ET.SubElement(element, "name").text = self.name
        ET.SubElement(element, "default").text = self.default or ""
        ET.SubElement(element, "type").text = self.type or ""
        return element


class _Fragment(BaseModel):
    """Base for entities that render themselves as a standalone XML fragment."""

    def to_element(self) -> ET.Element:
        """Build the fragment's root element. Every entity kind overrides this."""
        raise NotImplementedError(f"{type(self).__name__} does not define its XML fragment")

    def serialize(self) -> str:
        """Return this entity's XML fragment."""
        return ET.tostring(self.to_element(), encoding="unicode")


class FunctionDef(_Fragment):
    """A global function declaration."""

    name: str
    namespace: str = DEFAULT_NAMESPACE
    line: int = 0
    docblock: DocBlock | None = None
    arguments: list[Argument] = _Field(default_factory=list)
    return_type: str | None = None
    by_reference: bool = False

    def to_element(self) -> ET.Element:
        element = ET.Element("function", {"namespace": self.namespace, "line": str(self.line)})
        self._add_signature(element)
        return element

    def _add_signature(self, element: ET.Element) -> None:
        ET.SubElement(element, "name").text = self.name
        if self.return_type:
            ET.SubElement(element, "return-type").text = self.return_type
        if self.docblock is not None:
            element.append(self.docblock.to_element())
        for argument in self.arguments:
            element.append(argument.to_element())


class MethodDef(FunctionDef):
    """A method declared in a class or interface body."""

    visibility: str = "public"
    is_static: bool = False
    is_abstract: bool = False
    is_final: bool = False

    def to_element(self) -> ET.Element:
        element = ET.Element(
            "method",
            {
                "final": _flag(self.is_final),
                "abstract": _flag(self.is_abstract),
                "static": _flag(self.is_static),
                "visibility": self.visibility,
                "line": str(self.line),
            },
        )
        self._add_signature(element)
        return element


class PropertyDef(_Fragment):
    """A property declared in a class body."""

    name: str
    line: int = 0
    docblock: DocBlock | None = None
    visibility: str = "public"
    is_static: bool = False
    type: str | None = None
    default: str | None = None

    def to_element(self) -> ET.Element:
        element = ET.Element(
            "property",
            {"static": _flag(self.is_static), "visibility": self.visibility, "line": str(self.line)},
        )
        ET.SubElement(element, "name").text = self.name
        ET.SubElement(element, "default").text = self.default or ""
        if self.type:
            ET.SubElement(element, "type").text = self.type
        if self.docblock is not None:
            element.append(self.docblock.to_element())
        return element


class ConstantDef(_Fragment):
    """A ``const`` declaration, either global or inside a class body."""

    name: str
    namespace: str = DEFAULT_NAMESPACE
    line: int = 0
    docblock: DocBlock | None = None
    value: str = ""

    def to_element(self) -> ET.Element:
        element = ET.Element("constant", {"namespace": self.namespace, "line": str(self.line)})
        ET.SubElement(element, "name").text = self.name
        ET.SubElement(element, "value").text = self.value
        if self.docblock is not None:
            element.append(self.docblock.to_element())
        return element


class IncludeDef(_Fragment):
    """A ``require``/``include`` statement."""

    name: str
    type: str
    namespace: str = DEFAULT_NAMESPACE
    line: int = 0
    docblock: DocBlock | None = None

    def to_element(self) -> ET.Element:
        element = ET.Element("include", {"type": self.type, "line": str(self.line)})
        ET.SubElement(element, "name").text = self.name
        if self.docblock is not None:
            element.append(self.docblock.to_element())
        return element


class InterfaceDef(_Fragment):
    """An interface declaration."""

    name: str
    namespace: str = DEFAULT_NAMESPACE
    line: int = 0
    docblock: DocBlock | None = None
    parent_interfaces: list[str] = _Field(default_factory=list)
    constants: list[ConstantDef] = _Field(default_factory=list)
    methods: list[MethodDef] = _Field(default_factory=list)

    def to_element(self) -> ET.Element:
        element = ET.Element("interface", {"namespace": self.namespace, "line": str(self.line)})
        ET.SubElement(element, "name").text = self.name
        for parent in self.parent_interfaces:
            ET.SubElement(element, "extends").text = parent
        self._add_members(element)
        return element

    def _add_members(self, element: ET.Element) -> None:
        if self.docblock is not None:
            element.append(self.docblock.to_element())
        for constant in self.constants:
            element.append(constant.to_element())
        for method in self.methods:
            element.append(method.to_element())


class ClassDef(InterfaceDef):
    """A class declaration."""

    parent_class: str | None = None
    interfaces: list[str] = _Field(default_factory=list)
    is_abstract: bool = False
    is_final: bool = False
    properties: list[PropertyDef] = _Field(default_factory=list)

    def to_element(self) -> ET.Element:
        element = ET.Element(
            "class",
            {
                "final": _flag(self.is_final),
                "abstract": _flag(self.is_abstract),
                "namespace": self.namespace,
                "line": str(self.line),
            },
        )
        ET.SubElement(element, "name").text = self.name
        ET.SubElement(element, "extends").text = self.parent_class or ""
        for interface in self.interfaces:
            ET.SubElement(element, "implements").text = interface
        self._add_members(element)
        for prop in self.properties:
            element.append(prop.to_element())
        return element


# ################
# Implementation
# ################


def _flag(value: bool) -> str:
    return "true" if value else "false"
