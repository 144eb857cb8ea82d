# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assembly of the XML document describing one reflected file.

The file's own attributes, doc block, markers and namespace aliases are
written directly; every entity contributes the fragment it serializes itself
and that fragment is merged under the root unchanged.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from phpreflect.reflection.file import SourceFile

# ###############
# Public Interface
# ###############

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'


def build_document(source: SourceFile, pretty: bool = False) -> str:
    """Build the composite XML document for a processed SourceFile.

    Entity fragments are merged after the file-level nodes, grouped in a fixed
    order: includes, constants, functions, interfaces, classes.

    Args:
        source: The reflected file.
        pretty: Indent the output for human readers.

    Returns:
        The serialized document, starting with the XML declaration and
        without surrounding whitespace.
    """
    root = ET.Element("file", {"path": source.path.lstrip("./"), "hash": source.content_hash or ""})

    if source.doc_block is not None:
        root.append(source.doc_block.to_element())

    markers: ET.Element | None = None
    for marker in source.markers:
        if markers is None:
            markers = ET.SubElement(root, "markers")
        node = ET.SubElement(markers, marker.term.lower(), {"line": str(marker.line)})
        node.text = marker.content.strip()

    for alias, namespace in source.namespace_aliases.items():
        ET.SubElement(root, "namespace-alias", {"name": alias}).text = namespace

    for include in source.includes:
        merge_fragment(root, include.serialize())
    for constant in source.constants.values():
        merge_fragment(root, constant.serialize())
    for function in source.functions.values():
        merge_fragment(root, function.serialize())
    for interface in source.interfaces.values():
        merge_fragment(root, interface.serialize())
    for cls in source.classes.values():
        merge_fragment(root, cls.serialize())

    if pretty:
        ET.indent(root)
    return f"{XML_DECLARATION}\n{ET.tostring(root, encoding='unicode')}".strip()


def merge_fragment(root: ET.Element, fragment: str) -> ET.Element:
    """Import the root node of a serialized fragment as the last child of *root*."""
    node = ET.fromstring(fragment.strip())
    root.append(node)
    return node
