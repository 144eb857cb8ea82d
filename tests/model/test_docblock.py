# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for documentation comment parsing."""

import xml.etree.ElementTree as ET

import pytest

from phpreflect.model.docblock import DocBlock, DocBlockError, DocBlockTag, parse_docblock

# ###############
# Test Helpers
# ###############

_FULL = """/**
 * Short text.
 *
 * Long one
 * more.
 *
 * Second para.
 * @package Foo
 * @param int $a the value
 *        continued
 * @deprecated
 */"""


# ###############
# Descriptions
# ###############


class TestDescriptions:
    def test_short_description_is_first_paragraph(self) -> None:
        assert parse_docblock(_FULL).short_description == "Short text."

    def test_long_description_keeps_paragraph_breaks(self) -> None:
        assert parse_docblock(_FULL).long_description == "Long one\nmore.\n\nSecond para."

    def test_single_line_block(self) -> None:
        block = parse_docblock("/** Returns the total. */")
        assert block.short_description == "Returns the total."
        assert block.long_description == ""
        assert block.tags == []

    def test_empty_block(self) -> None:
        block = parse_docblock("/***/")
        assert block == DocBlock()

    def test_line_is_recorded(self) -> None:
        assert parse_docblock("/** Text. */", line=12).line == 12

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert parse_docblock("\n   /** Text. */  \n").short_description == "Text."


# ###############
# Tags
# ###############


class TestTags:
    def test_tags_in_declaration_order(self) -> None:
        names = [tag.name for tag in parse_docblock(_FULL).tags]
        assert names == ["package", "param", "deprecated"]

    def test_continuation_line_is_folded(self) -> None:
        param = parse_docblock(_FULL).get_tags("param")[0]
        assert param.description == "int $a the value continued"

    def test_tag_without_description(self) -> None:
        assert parse_docblock(_FULL).get_tags("deprecated") == [DocBlockTag(name="deprecated")]

    def test_tag_on_opening_line(self) -> None:
        block = parse_docblock("/** @package Demo */")
        assert block.tags == [DocBlockTag(name="package", description="Demo")]
        assert block.short_description == ""

    def test_has_tag(self) -> None:
        block = parse_docblock(_FULL)
        assert block.has_tag("package")
        assert not block.has_tag("return")

    def test_get_tags_returns_all_with_name(self) -> None:
        block = parse_docblock("/**\n * @param int $a\n * @param string $b\n */")
        assert [tag.description for tag in block.get_tags("param")] == ["int $a", "string $b"]

    def test_namespaced_tag_name(self) -> None:
        block = parse_docblock("/** @psalm-return list<int> */")
        assert block.tags[0].name == "psalm-return"


# ###############
# Errors
# ###############


class TestErrors:
    @pytest.mark.parametrize(
        "raw",
        [
            "/* plain comment */",
            "// line comment",
            "/** never closed",
            "",
        ],
    )
    def test_not_a_doc_comment_raises(self, raw: str) -> None:
        with pytest.raises(DocBlockError):
            parse_docblock(raw)

    def test_malformed_tag_raises_with_line(self) -> None:
        with pytest.raises(DocBlockError) as exc_info:
            parse_docblock("/**\n * @ orphan\n */", line=4)
        assert exc_info.value.line == 4
        assert "Malformed tag" in str(exc_info.value)

    def test_tag_name_starting_with_digit_raises(self) -> None:
        with pytest.raises(DocBlockError):
            parse_docblock("/** @1st */")


# ###############
# XML Rendering
# ###############


class TestToElement:
    def test_renders_descriptions_and_tags(self) -> None:
        block = DocBlock(
            short_description="S",
            tags=[DocBlockTag(name="package", description="P")],
            line=3,
        )
        assert ET.tostring(block.to_element(), encoding="unicode") == (
            '<docblock line="3"><description>S</description><long-description />'
            '<tag name="package" description="P" /></docblock>'
        )
