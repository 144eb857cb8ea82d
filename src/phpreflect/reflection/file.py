# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reflection of a single PHP source file.

:class:`SourceFile` walks the file's token stream once. Namespace and ``use``
statements update the parser state kept on the instance; class, interface,
function, constant and include keywords are handed to the entity parsers,
which advance the same shared stream past the declaration they consume.
Inline markers are collected from the raw text, independently of the tokens.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from phpreflect.model.docblock import DocBlock, DocBlockError, parse_docblock
from phpreflect.model.entities import (
    DEFAULT_NAMESPACE,
    ClassDef,
    ConstantDef,
    FunctionDef,
    IncludeDef,
    InterfaceDef,
    Marker,
)
from phpreflect.parser.lexer import Token, TokenKind, tokenize
from phpreflect.parser.token_stream import TokenStream
from phpreflect.reflection.document import build_document
from phpreflect.reflection.entities import (
    parse_class,
    parse_constant,
    parse_function,
    parse_include,
    parse_interface,
)
from phpreflect.source.lint import lint_source
from phpreflect.source.loader import DEFAULT_FALLBACK_ENCODING, load_source

logger = structlog.get_logger()

# ###############
# Public Interface
# ###############

DEFAULT_MARKER_TERMS: tuple[str, ...] = ("TODO", "FIXME")

# A file-level doc comment must appear within this many tokens of the start.
FILE_DOCBLOCK_LOOKAHEAD = 10


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal condition recorded while reflecting a file.

    Attributes:
        kind: ``"docblock-parse-failed"`` or ``"missing-file-docblock"``.
        message: Human-readable description.
        line: Source line the condition refers to, if any.
    """

    kind: str
    message: str
    line: int | None = None


class SourceFile:
    """The reflected contents of one PHP file."""

    def __init__(self, path: str, contents: str, content_hash: str | None = None) -> None:
        self._path = path
        self._contents = contents
        self._content_hash = content_hash
        self._stream: TokenStream | None = None
        self._processed = False
        self._marker_terms: list[str] = list(DEFAULT_MARKER_TERMS)
        self._reset()

        self._handlers: dict[TokenKind, Callable[[TokenStream], None]] = {
            TokenKind.NAMESPACE: self._process_namespace,
            TokenKind.USE: self._process_use,
            TokenKind.INTERFACE: self._process_interface,
            TokenKind.CLASS: self._process_class,
            TokenKind.FUNCTION: self._process_function,
            TokenKind.CONST: self._process_constant,
            TokenKind.REQUIRE: self._process_include,
            TokenKind.REQUIRE_ONCE: self._process_include,
            TokenKind.INCLUDE: self._process_include,
            TokenKind.INCLUDE_ONCE: self._process_include,
        }

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        *,
        validate: bool = False,
        php_binary: str = "php",
        fallback_encoding: str = DEFAULT_FALLBACK_ENCODING,
    ) -> SourceFile:
        """Load a file from disk and return an unprocessed SourceFile for it.

        Args:
            path: Location of the PHP file.
            validate: Run ``php -l`` on the file before accepting it.
            php_binary: PHP executable used for validation.
            fallback_encoding: Encoding assumed when the file is not UTF-8.

        Raises:
            SourceLoadError: If the file is missing or unreadable.
            SourceValidationError: If validation is requested and fails.
        """
        source = load_source(Path(path), fallback_encoding=fallback_encoding)
        if validate:
            lint_source(Path(path), php_binary=php_binary)
        return cls(source.path, source.contents, source.content_hash)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def content_hash(self) -> str | None:
        return self._content_hash

    @property
    def active_namespace(self) -> str:
        return self._active_namespace

    @property
    def namespace_aliases(self) -> dict[str, str]:
        return self._namespace_aliases

    @property
    def interfaces(self) -> dict[str, InterfaceDef]:
        return self._interfaces

    @property
    def classes(self) -> dict[str, ClassDef]:
        return self._classes

    @property
    def functions(self) -> dict[str, FunctionDef]:
        return self._functions

    @property
    def constants(self) -> dict[str, ConstantDef]:
        return self._constants

    @property
    def includes(self) -> list[IncludeDef]:
        return self._includes

    @property
    def markers(self) -> list[Marker]:
        return self._markers

    @property
    def marker_terms(self) -> tuple[str, ...]:
        return tuple(self._marker_terms)

    @property
    def doc_block(self) -> DocBlock | None:
        return self._doc_block

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def processed(self) -> bool:
        return self._processed

    # ------------------------------------------------------------------
    # Configuration and processing
    # ------------------------------------------------------------------

    def add_marker(self, term: str) -> None:
        """Register an additional marker keyword; only affects a later process()."""
        if term not in self._marker_terms:
            self._marker_terms.append(term)

    def set_markers(self, terms: Iterable[str]) -> None:
        """Replace the marker keywords; only affects a later process()."""
        self._marker_terms = list(dict.fromkeys(terms))

    def process(self) -> None:
        """Run the single token pass and the marker scan.

        Calling this again on an already processed instance does nothing. A
        failed pass leaves no partial results behind, so calling it again
        starts over from the first token.

        Raises:
            LexerError: If the source cannot be tokenized.
            EntityParseError: If a declaration is malformed.
        """
        if self._processed:
            logger.debug("already_processed", path=self._path)
            return
        try:
            stream = self._initialize_tokens()
            self._process_generic_information(stream)
            self._process_tokens(stream)
        except Exception:
            self._reset()
            raise

        # the collections are all that serialization needs
        self._stream = None
        self._processed = True

    def serialize(self, pretty: bool = False) -> str:
        """Return the XML document describing this file."""
        return build_document(self, pretty=pretty)

    # ################
    # Implementation
    # ################

    def _reset(self) -> None:
        """Drop the token stream and everything collected from it."""
        self._stream = None
        self._active_namespace = DEFAULT_NAMESPACE
        self._namespace_aliases: dict[str, str] = {}
        self._interfaces: dict[str, InterfaceDef] = {}
        self._classes: dict[str, ClassDef] = {}
        self._functions: dict[str, FunctionDef] = {}
        self._constants: dict[str, ConstantDef] = {}
        self._includes: list[IncludeDef] = []
        self._markers: list[Marker] = []
        self._doc_block: DocBlock | None = None
        self._diagnostics: list[Diagnostic] = []

    def _initialize_tokens(self) -> TokenStream:
        if self._stream is None:
            tokens = tokenize(self._contents)
            logger.debug("tokens_found", path=self._path, count=len(tokens))
            self._stream = TokenStream(tokens)
        return self._stream

    def _record(self, kind: str, message: str, line: int | None = None) -> None:
        self._diagnostics.append(Diagnostic(kind=kind, message=message, line=line))

    def _process_generic_information(self, stream: TokenStream) -> None:
        self._doc_block = self._find_doc_block(stream)
        self._markers = self._scan_markers()

    def _find_doc_block(self, stream: TokenStream) -> DocBlock | None:
        """Return the file-level doc block, if the file starts with one.

        A doc comment only documents the file when it is met within the first
        tokens before any class or namespace keyword, is not directly followed
        by a class keyword, and carries a ``@package`` tag.
        """
        token = stream.find_next_by_type(
            TokenKind.DOC_COMMENT,
            FILE_DOCBLOCK_LOOKAHEAD,
            (TokenKind.CLASS, TokenKind.NAMESPACE),
        )

        result: DocBlock | None = None
        if token is not None:
            try:
                result = parse_docblock(token.content, token.line)
            except DocBlockError as exc:
                self._record("docblock-parse-failed", str(exc), token.line)
                logger.error("docblock_parse_failed", path=self._path, line=token.line, error=str(exc))

            if result is not None and _directly_precedes_class(stream, token):
                result = None
            if result is not None and not result.has_tag("package"):
                result = None

        if result is None:
            message = f"No page-level DocBlock was found for {self._path}"
            self._record("missing-file-docblock", message)
            logger.error("missing_file_docblock", path=self._path)
        return result

    def _scan_markers(self) -> list[Marker]:
        """Collect ``// TERM: text`` markers line by line from the raw source."""
        if not self._marker_terms:
            return []
        terms = "|".join(re.escape(term) for term in self._marker_terms)
        pattern = re.compile(rf"//\s*({terms}):?\s*(.*?)(?=//\s*(?:{terms})|$)")

        markers: list[Marker] = []
        for number, line in enumerate(self._contents.split("\n"), start=1):
            for match in pattern.finditer(line):
                markers.append(Marker(term=match.group(1), content=match.group(2).strip(), line=number))
        return markers

    def _process_tokens(self, stream: TokenStream) -> None:
        while (token := stream.current()) is not None:
            handler = self._handlers.get(token.type) if token.type is not None else None
            if handler is None:
                stream.advance()
                continue
            start = stream.position
            handler(stream)
            assert stream.position > start, f"{token.type.value} handler at line {token.line} did not advance"

    # ------------------------------------------------------------------
    # Token handlers
    # ------------------------------------------------------------------

    def _process_namespace(self, stream: TokenStream) -> None:
        following = stream.peek(1)
        if following is not None and following.type is TokenKind.NS_SEPARATOR:
            # namespace\name() is a relative name, not a declaration
            stream.advance()
            return

        parts: list[str] = []
        while (token := stream.goto_next_by_type(TokenKind.STRING, 5, (";", "{"))) is not None:
            parts.append(token.content)
        stream.advance()
        self._active_namespace = "\\".join(parts)

    def _process_use(self, stream: TokenStream) -> None:
        """Collect ``use A\\B[ as C][, ...];`` aliases."""
        clauses = [""]
        depth = 0
        token = stream.advance()
        while token is not None and not _is_punct(token, ";"):
            if _is_punct(token, ",") and depth == 0:
                clauses.append("")
                token = stream.advance()
                continue
            if _is_punct(token, "{"):
                depth += 1
            elif _is_punct(token, "}"):
                depth -= 1
            clauses[-1] += token.content
            token = stream.advance()
        stream.advance()

        aliases: dict[str, str] = {}
        for clause in clauses:
            # an "as" is surrounded by spaces: the first part is the namespace,
            # the last part the alias
            parts = clause.strip().split(" ")
            if len(parts) == 1:
                parts.append(parts[0].split("\\")[-1])
            aliases[parts[-1]] = parts[0]
        self._namespace_aliases.update(aliases)

    def _process_interface(self, stream: TokenStream) -> None:
        interface = parse_interface(stream, self._active_namespace)
        self._interfaces[interface.name] = interface
        logger.debug("processed_entity", kind="interface", name=interface.name, line=interface.line)

    def _process_class(self, stream: TokenStream) -> None:
        cls = parse_class(stream, self._active_namespace)
        if cls is None:
            return
        self._classes[cls.name] = cls
        logger.debug("processed_entity", kind="class", name=cls.name, line=cls.line)

    def _process_function(self, stream: TokenStream) -> None:
        function = parse_function(stream, self._active_namespace)
        if function is None:
            return
        self._functions[function.name] = function
        logger.debug("processed_entity", kind="function", name=function.name, line=function.line)

    def _process_constant(self, stream: TokenStream) -> None:
        constant = parse_constant(stream, self._active_namespace)
        self._constants[constant.name] = constant
        logger.debug("processed_entity", kind="constant", name=constant.name, line=constant.line)

    def _process_include(self, stream: TokenStream) -> None:
        include = parse_include(stream, self._active_namespace)
        self._includes.append(include)
        logger.debug("processed_entity", kind="include", name=include.name, line=include.line)


def _is_punct(token: Token, content: str) -> bool:
    return token.type is None and token.content == content


def _directly_precedes_class(stream: TokenStream, doc_token: Token) -> bool:
    """Return True if only whitespace separates *doc_token* from a class keyword."""
    offset = 1
    while (token := stream.peek(offset)) is not None and token is not doc_token:
        offset += 1
    while (token := stream.peek(offset + 1)) is not None and token.type is TokenKind.WHITESPACE:
        offset += 1
    following = stream.peek(offset + 1)
    return following is not None and following.type is TokenKind.CLASS
