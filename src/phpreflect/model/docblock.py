# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structured documentation comments (``/** ... */`` blocks)."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class DocBlockError(Exception):
    """Raised when a documentation comment cannot be parsed into a DocBlock.

    Attributes:
        line: 1-based line number of the comment.
    """

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"Line {line}: {message}")
        self.line = line


class DocBlockTag(BaseModel):
    """One ``@name description`` entry of a DocBlock."""

    name: str
    description: str = ""


class DocBlock(BaseModel):
    """A parsed documentation comment."""

    short_description: str = ""
    long_description: str = ""
    tags: list[DocBlockTag] = _Field(default_factory=list)
    line: int = 0

    def has_tag(self, name: str) -> bool:
        """Return True if the block carries at least one tag called *name*."""
        return any(tag.name == name for tag in self.tags)

    def get_tags(self, name: str) -> list[DocBlockTag]:
        """Return all tags called *name*, in declaration order."""
        return [tag for tag in self.tags if tag.name == name]

    def to_element(self) -> ET.Element:
        element = ET.Element("docblock", {"line": str(self.line)})
        ET.SubElement(element, "description").text = self.short_description
        ET.SubElement(element, "long-description").text = self.long_description
        for tag in self.tags:
            ET.SubElement(element, "tag", {"name": tag.name, "description": tag.description})
        return element


def parse_docblock(raw: str, line: int = 0) -> DocBlock:
    """Parse the raw text of a documentation comment.

    The leading ``*`` gutter is stripped from every line. Text before the first
    tag is split into a short description (first paragraph) and a long
    description (remaining paragraphs); every line starting with ``@`` opens a
    new tag and following lines are folded into its description.

    Args:
        raw: The comment exactly as it appears in the source.
        line: Line number of the comment, recorded on the result.

    Returns:
        The parsed DocBlock.

    Raises:
        DocBlockError: If *raw* is not a ``/** */`` comment or contains a
            malformed tag.
    """
    text = raw.strip()
    if not text.startswith("/**") or not text.endswith("*/") or len(text) < 5:
        raise DocBlockError("Not a documentation comment", line)

    description_lines: list[str] = []
    tags: list[DocBlockTag] = []
    for content in _strip_gutter(text[3:-2]):
        if content.startswith("@"):
            match = _TAG_RE.match(content)
            if match is None:
                raise DocBlockError(f"Malformed tag {content!r}", line)
            tags.append(DocBlockTag(name=match.group(1), description=(match.group(2) or "").strip()))
        elif tags:
            if content:
                previous = tags[-1]
                previous.description = f"{previous.description} {content.strip()}".strip()
        else:
            description_lines.append(content)

    paragraphs = _paragraphs(description_lines)
    return DocBlock(
        short_description=paragraphs[0] if paragraphs else "",
        long_description="\n\n".join(paragraphs[1:]),
        tags=tags,
        line=line,
    )


# ################
# Implementation
# ################

_TAG_RE = re.compile(r"@([A-Za-z_\\][\w\\-]*)(?:\s+(.*)|$)")
_GUTTER_RE = re.compile(r"^[ \t]*\*?[ \t]?")


def _strip_gutter(body: str) -> list[str]:
    return [_GUTTER_RE.sub("", line, count=1).rstrip() for line in body.splitlines()]


def _paragraphs(lines: list[str]) -> list[str]:
    """Group lines into blank-line separated paragraphs."""
    paragraphs: list[str] = []
    current: list[str] = []
    for line in lines:
        if line.strip():
            current.append(line.strip())
        elif current:
            paragraphs.append("\n".join(current))
            current = []
    if current:
        paragraphs.append("\n".join(current))
    return paragraphs
