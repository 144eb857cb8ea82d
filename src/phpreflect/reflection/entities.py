# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-entity parsers for classes, interfaces, functions, constants and includes.

Every parser is handed the shared stream with the cursor on the keyword that
triggered it. It consumes the whole declaration and returns with the cursor
on the first token after it, so the file driver resumes exactly where the
declaration ended. A parser returns None when the keyword turned out not to
start a named declaration (closures, anonymous classes); the construct is
still consumed.
"""

from collections.abc import Iterator
from dataclasses import dataclass

import structlog

from phpreflect.model.docblock import DocBlock, DocBlockError, parse_docblock
from phpreflect.model.entities import (
    Argument,
    ClassDef,
    ConstantDef,
    FunctionDef,
    IncludeDef,
    InterfaceDef,
    MethodDef,
    PropertyDef,
)
from phpreflect.parser.lexer import Token, TokenKind
from phpreflect.parser.token_stream import TokenStream

logger = structlog.get_logger()

# ###############
# Public Interface
# ###############


class EntityParseError(Exception):
    """Raised when a declaration violates the grammar the entity parsers rely on.

    Attributes:
        line: 1-based line number of the offending token.
    """

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"Line {line}: {message}")
        self.line = line


def parse_class(stream: TokenStream, namespace: str) -> ClassDef | None:
    """Parse ``[abstract|final] class Name [extends X] [implements Y, Z] { ... }``."""
    keyword = _expect_current(stream, TokenKind.CLASS)
    modifiers = _leading_modifiers(stream)
    docblock = _leading_docblock(stream)

    token = _next_significant(stream, keyword.line)
    if token.type is not TokenKind.STRING:
        _skip_anonymous_class(stream, keyword.line)
        return None
    name = token.content
    stream.advance()

    parent_class: str | None = None
    interfaces: list[str] = []
    token = _skip_trivia(stream, keyword.line)
    if token.type is TokenKind.EXTENDS:
        stream.advance()
        _skip_trivia(stream, keyword.line)
        parent_class = _read_qualified_name(stream)
        token = _skip_trivia(stream, keyword.line)
    if token.type is TokenKind.IMPLEMENTS:
        stream.advance()
        interfaces = _read_name_list(stream, keyword.line)
        token = _skip_trivia(stream, keyword.line)
    if not _is_punct(token, "{"):
        raise EntityParseError(f"Expected '{{' to open class {name}, got {token.content!r}", token.line)

    constants, properties, methods = _parse_members(stream, namespace, keyword.line)
    return ClassDef(
        name=name,
        namespace=namespace,
        line=keyword.line,
        docblock=docblock,
        parent_class=parent_class,
        interfaces=interfaces,
        is_abstract=TokenKind.ABSTRACT in modifiers,
        is_final=TokenKind.FINAL in modifiers,
        constants=constants,
        properties=properties,
        methods=methods,
    )


def parse_interface(stream: TokenStream, namespace: str) -> InterfaceDef:
    """Parse ``interface Name [extends A, B] { ... }``."""
    keyword = _expect_current(stream, TokenKind.INTERFACE)
    docblock = _leading_docblock(stream)

    token = _next_significant(stream, keyword.line)
    if token.type is not TokenKind.STRING:
        raise EntityParseError(f"Expected interface name, got {token.content!r}", token.line)
    name = token.content
    stream.advance()

    parents: list[str] = []
    token = _skip_trivia(stream, keyword.line)
    if token.type is TokenKind.EXTENDS:
        stream.advance()
        parents = _read_name_list(stream, keyword.line)
        token = _skip_trivia(stream, keyword.line)
    if not _is_punct(token, "{"):
        raise EntityParseError(f"Expected '{{' to open interface {name}, got {token.content!r}", token.line)

    constants, _, methods = _parse_members(stream, namespace, keyword.line)
    return InterfaceDef(
        name=name,
        namespace=namespace,
        line=keyword.line,
        docblock=docblock,
        parent_interfaces=parents,
        constants=constants,
        methods=methods,
    )


def parse_function(stream: TokenStream, namespace: str) -> FunctionDef | None:
    """Parse ``function [&]name(args) [: type] { ... }``; closures yield None."""
    keyword = _expect_current(stream, TokenKind.FUNCTION)
    docblock = _leading_docblock(stream)
    signature = _parse_signature(stream, keyword.line)
    if signature.name is None:
        return None
    return FunctionDef(
        name=signature.name,
        namespace=namespace,
        line=keyword.line,
        docblock=docblock,
        arguments=signature.arguments,
        return_type=signature.return_type,
        by_reference=signature.by_reference,
    )


def parse_constant(stream: TokenStream, namespace: str) -> ConstantDef:
    """Parse ``const NAME = value[, ...];`` and return the first constant."""
    _expect_current(stream, TokenKind.CONST)
    docblock = _leading_docblock(stream)
    constants = _parse_constant_list(stream, namespace, docblock)
    return constants[0]


def parse_include(stream: TokenStream, namespace: str) -> IncludeDef:
    """Parse a ``require``/``require_once``/``include``/``include_once`` statement."""
    keyword = _expect_current(
        stream,
        TokenKind.REQUIRE,
        TokenKind.REQUIRE_ONCE,
        TokenKind.INCLUDE,
        TokenKind.INCLUDE_ONCE,
    )
    docblock = _leading_docblock(stream)
    stream.advance()
    expression = _collect_until(stream, {";"})
    if _is_punct(stream.current(), ";"):
        stream.advance()
    return IncludeDef(
        name=_include_target(expression),
        type=keyword.content.lower(),
        namespace=namespace,
        line=keyword.line,
        docblock=docblock,
    )


# ################
# Implementation
# ################

_TRIVIA: frozenset[TokenKind] = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT, TokenKind.DOC_COMMENT})

_CLASS_MODIFIERS: frozenset[TokenKind] = frozenset({TokenKind.ABSTRACT, TokenKind.FINAL, TokenKind.READONLY})

_MEMBER_MODIFIERS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.ABSTRACT,
        TokenKind.FINAL,
        TokenKind.PUBLIC,
        TokenKind.PROTECTED,
        TokenKind.PRIVATE,
        TokenKind.STATIC,
        TokenKind.VAR,
        TokenKind.READONLY,
    }
)

_VISIBILITY: dict[TokenKind, str] = {
    TokenKind.PUBLIC: "public",
    TokenKind.PROTECTED: "protected",
    TokenKind.PRIVATE: "private",
}

_NAME_PARTS: frozenset[TokenKind] = frozenset({TokenKind.STRING, TokenKind.NS_SEPARATOR, TokenKind.NAMESPACE})

_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass
class _Signature:
    """Name, arguments and return type of a function or method header."""

    name: str | None
    arguments: list[Argument]
    return_type: str | None
    by_reference: bool
    has_body: bool


# ------------------------------------------------------------------
# Cursor helpers
# ------------------------------------------------------------------


def _is_punct(token: Token | None, content: str) -> bool:
    return token is not None and token.type is None and token.content == content


def _expect_current(stream: TokenStream, *kinds: TokenKind) -> Token:
    token = stream.current()
    if token is None or token.type not in kinds:
        got = "end of file" if token is None else repr(token.content)
        raise EntityParseError(f"Parser invoked on {got}", token.line if token else 0)
    return token


def _skip_trivia(stream: TokenStream, line: int) -> Token:
    """Move past whitespace and comments; fail if the stream runs out."""
    token = stream.current()
    while token is not None and token.type in _TRIVIA:
        token = stream.advance()
    if token is None:
        raise EntityParseError("Unexpected end of file", line)
    return token


def _next_significant(stream: TokenStream, line: int) -> Token:
    stream.advance()
    return _skip_trivia(stream, line)


def _look_behind(stream: TokenStream) -> Iterator[Token]:
    """Yield the tokens before the cursor, nearest first, without moving it."""
    offset = -1
    while (token := stream.peek(offset)) is not None:
        yield token
        offset -= 1


def _leading_modifiers(stream: TokenStream) -> set[TokenKind]:
    modifiers: set[TokenKind] = set()
    for token in _look_behind(stream):
        if token.type in _CLASS_MODIFIERS:
            modifiers.add(token.type)
        elif token.type not in (TokenKind.WHITESPACE, TokenKind.COMMENT):
            break
    return modifiers


def _leading_docblock(stream: TokenStream) -> DocBlock | None:
    """Return the doc comment written directly before the declaration keyword."""
    for token in _look_behind(stream):
        if token.type is TokenKind.DOC_COMMENT:
            return _parse_attached(token)
        if token.type not in (TokenKind.WHITESPACE, TokenKind.COMMENT) and token.type not in _CLASS_MODIFIERS:
            return None
    return None


def _parse_attached(token: Token | None) -> DocBlock | None:
    if token is None:
        return None
    try:
        return parse_docblock(token.content, token.line)
    except DocBlockError as exc:
        logger.error("docblock_parse_failed", line=token.line, error=str(exc))
        return None


def _skip_balanced(stream: TokenStream, line: int) -> None:
    """With the cursor on an opening bracket, move past its matching closer."""
    depth = 0
    token = stream.current()
    while token is not None:
        if token.type is None:
            if token.content in _OPENERS:
                depth += 1
            elif token.content in _CLOSERS:
                depth -= 1
                if depth == 0:
                    stream.advance()
                    return
        token = stream.advance()
    raise EntityParseError("Unbalanced brackets", line)


def _collect_until(stream: TokenStream, stops: set[str]) -> list[Token]:
    """Collect tokens up to a bracket-depth-0 stop content, which is left under the cursor.

    Collection also ends, without consuming, at a closing tag or at a closing
    bracket that belongs to an enclosing construct.
    """
    collected: list[Token] = []
    depth = 0
    token = stream.current()
    while token is not None:
        if token.type is TokenKind.CLOSE_TAG:
            break
        if token.type is None:
            if depth == 0 and token.content in stops:
                break
            if token.content in _OPENERS:
                depth += 1
            elif token.content in _CLOSERS:
                if depth == 0:
                    break
                depth -= 1
        collected.append(token)
        token = stream.advance()
    return collected


def _text(tokens: list[Token]) -> str:
    return "".join(token.content for token in tokens).strip()


def _compact(tokens: list[Token]) -> str:
    """Join the significant tokens without whitespace (for type declarations)."""
    return "".join(token.content for token in tokens if token.type not in _TRIVIA)


def _read_qualified_name(stream: TokenStream) -> str:
    parts: list[str] = []
    token = stream.current()
    while token is not None and token.type in _NAME_PARTS:
        parts.append(token.content)
        token = stream.advance()
    return "".join(parts)


def _read_name_list(stream: TokenStream, line: int) -> list[str]:
    names: list[str] = []
    while True:
        _skip_trivia(stream, line)
        name = _read_qualified_name(stream)
        if name:
            names.append(name)
        token = _skip_trivia(stream, line)
        if not _is_punct(token, ","):
            return names
        stream.advance()


def _skip_anonymous_class(stream: TokenStream, line: int) -> None:
    """Consume ``class(args) extends X implements Y { ... }`` of a ``new class`` expression."""
    token = stream.current()
    while token is not None and not _is_punct(token, "{"):
        if _is_punct(token, "("):
            _skip_balanced(stream, line)
            token = stream.current()
        else:
            token = stream.advance()
    _skip_balanced(stream, line)


# ------------------------------------------------------------------
# Class and interface bodies
# ------------------------------------------------------------------


def _parse_members(
    stream: TokenStream, namespace: str, line: int
) -> tuple[list[ConstantDef], list[PropertyDef], list[MethodDef]]:
    """Parse a class or interface body; the cursor starts on '{' and ends past '}'."""
    constants: list[ConstantDef] = []
    properties: list[PropertyDef] = []
    methods: list[MethodDef] = []

    doc_token: Token | None = None
    modifiers: list[TokenKind] = []
    type_tokens: list[Token] = []

    token = stream.advance()
    while True:
        if token is None:
            raise EntityParseError("Unterminated declaration body", line)
        if _is_punct(token, "}"):
            stream.advance()
            return constants, properties, methods

        member = True
        if token.type is TokenKind.DOC_COMMENT:
            doc_token = token
            stream.advance()
            member = False
        elif token.type in (TokenKind.WHITESPACE, TokenKind.COMMENT):
            stream.advance()
            member = False
        elif token.type in _MEMBER_MODIFIERS:
            modifiers.append(token.type)
            stream.advance()
            member = False
        elif token.type is TokenKind.CONST:
            constants.extend(_parse_constant_list(stream, namespace, _parse_attached(doc_token)))
        elif token.type is TokenKind.FUNCTION:
            methods.append(_parse_method(stream, namespace, modifiers, _parse_attached(doc_token)))
        elif token.type is TokenKind.VARIABLE:
            properties.extend(_parse_properties(stream, modifiers, type_tokens, _parse_attached(doc_token)))
        elif token.type is TokenKind.USE:
            _skip_trait_use(stream, line)
        elif _is_punct(token, ";"):
            stream.advance()
        else:
            type_tokens.append(token)
            stream.advance()
            member = False

        if member:
            doc_token = None
            modifiers = []
            type_tokens = []
        token = stream.current()


def _visibility(modifiers: list[TokenKind]) -> str:
    for modifier in modifiers:
        if modifier in _VISIBILITY:
            return _VISIBILITY[modifier]
    return "public"


def _parse_method(
    stream: TokenStream, namespace: str, modifiers: list[TokenKind], docblock: DocBlock | None
) -> MethodDef:
    keyword = stream.current()
    assert keyword is not None
    signature = _parse_signature(stream, keyword.line)
    if signature.name is None:
        raise EntityParseError("Expected method name", keyword.line)
    return MethodDef(
        name=signature.name,
        namespace=namespace,
        line=keyword.line,
        docblock=docblock,
        arguments=signature.arguments,
        return_type=signature.return_type,
        by_reference=signature.by_reference,
        visibility=_visibility(modifiers),
        is_static=TokenKind.STATIC in modifiers,
        is_abstract=TokenKind.ABSTRACT in modifiers or not signature.has_body,
        is_final=TokenKind.FINAL in modifiers,
    )


def _parse_properties(
    stream: TokenStream,
    modifiers: list[TokenKind],
    type_tokens: list[Token],
    docblock: DocBlock | None,
) -> list[PropertyDef]:
    """Parse ``$a [= x][, $b [= y]];`` with the cursor on the first variable."""
    properties: list[PropertyDef] = []
    prop_type = _compact(type_tokens) or None
    while True:
        token = _skip_trivia(stream, 0)
        if token.type is not TokenKind.VARIABLE:
            raise EntityParseError(f"Expected property name, got {token.content!r}", token.line)
        stream.advance()
        default: str | None = None
        after = _skip_trivia(stream, token.line)
        if _is_punct(after, "="):
            stream.advance()
            default = _text(_collect_until(stream, {",", ";"}))
        properties.append(
            PropertyDef(
                name=token.content,
                line=token.line,
                docblock=docblock,
                visibility=_visibility(modifiers),
                is_static=TokenKind.STATIC in modifiers,
                type=prop_type,
                default=default,
            )
        )
        end = _skip_trivia(stream, token.line)
        if not (_is_punct(end, ",") or _is_punct(end, ";")):
            raise EntityParseError(f"Expected ',' or ';' after property {token.content}", end.line)
        stream.advance()
        if _is_punct(end, ";"):
            return properties


def _skip_trait_use(stream: TokenStream, line: int) -> None:
    """Consume ``use A, B;`` or ``use A { ... }`` inside a class body."""
    stream.advance()
    _collect_until(stream, {";", "{"})
    token = stream.current()
    if _is_punct(token, "{"):
        _skip_balanced(stream, line)
    elif _is_punct(token, ";"):
        stream.advance()
    else:
        raise EntityParseError("Unterminated trait use", line)


def _parse_constant_list(stream: TokenStream, namespace: str, docblock: DocBlock | None) -> list[ConstantDef]:
    """Parse ``const [type] A = x[, B = y];`` with the cursor on ``const``."""
    keyword = stream.current()
    assert keyword is not None
    constants: list[ConstantDef] = []
    stream.advance()
    while True:
        head = _collect_until(stream, {"=", ";"})
        names = [token for token in head if token.type not in _TRIVIA]
        if not names or not _is_punct(stream.current(), "="):
            raise EntityParseError("Expected 'NAME = value' in constant declaration", keyword.line)
        name_token = names[-1]
        stream.advance()
        value = _text(_collect_until(stream, {",", ";"}))
        constants.append(
            ConstantDef(
                name=name_token.content,
                namespace=namespace,
                line=name_token.line,
                docblock=docblock,
                value=value,
            )
        )
        end = stream.current()
        if _is_punct(end, ","):
            stream.advance()
            continue
        if _is_punct(end, ";"):
            stream.advance()
        return constants


# ------------------------------------------------------------------
# Function headers
# ------------------------------------------------------------------


def _parse_signature(stream: TokenStream, line: int) -> _Signature:
    """Parse a function header and body; the cursor starts on ``function``."""
    token = _next_significant(stream, line)
    by_reference = False
    if _is_punct(token, "&"):
        by_reference = True
        token = _next_significant(stream, line)

    name: str | None = None
    if not _is_punct(token, "("):
        if token.type is None:
            raise EntityParseError(f"Expected function name, got {token.content!r}", token.line)
        name = token.content
        token = _next_significant(stream, line)
        if not _is_punct(token, "("):
            raise EntityParseError(f"Expected '(' after function {name}, got {token.content!r}", token.line)

    arguments = _parse_arguments(stream, line)
    token = _skip_trivia(stream, line)
    if name is None and token.type is TokenKind.USE:
        _next_significant(stream, line)
        _skip_balanced(stream, line)
        token = _skip_trivia(stream, line)

    return_type: str | None = None
    if _is_punct(token, ":"):
        stream.advance()
        return_type = _compact(_collect_until(stream, {"{", ";"})) or None
        token = _skip_trivia(stream, line)

    if _is_punct(token, "{"):
        _skip_balanced(stream, line)
        has_body = True
    elif _is_punct(token, ";"):
        stream.advance()
        has_body = False
    else:
        raise EntityParseError(f"Expected function body, got {token.content!r}", token.line)
    return _Signature(name, arguments, return_type, by_reference, has_body)


def _parse_arguments(stream: TokenStream, line: int) -> list[Argument]:
    """Parse a parenthesised parameter list; the cursor starts on '(' and ends past ')'."""
    groups: list[list[Token]] = [[]]
    depth = 0
    token = stream.advance()
    while True:
        if token is None:
            raise EntityParseError("Unterminated parameter list", line)
        if token.type is None:
            if token.content in _OPENERS:
                depth += 1
            elif token.content in _CLOSERS:
                if depth == 0 and token.content == ")":
                    stream.advance()
                    break
                depth -= 1
            elif token.content == "," and depth == 0:
                groups.append([])
                token = stream.advance()
                continue
        groups[-1].append(token)
        token = stream.advance()
    return [argument for group in groups if (argument := _build_argument(group)) is not None]


def _build_argument(tokens: list[Token]) -> Argument | None:
    variable_index = next(
        (index for index, token in enumerate(tokens) if token.type is TokenKind.VARIABLE),
        None,
    )
    if variable_index is None:
        return None
    variable = tokens[variable_index]

    by_reference = False
    variadic = False
    head = [token for token in tokens[:variable_index] if token.type not in _TRIVIA]
    while head and (head[-1].type is TokenKind.ELLIPSIS or _is_punct(head[-1], "&")):
        marker = head.pop()
        if marker.type is TokenKind.ELLIPSIS:
            variadic = True
        else:
            by_reference = True
    type_tokens = [token for token in head if token.type not in _MEMBER_MODIFIERS]

    default: str | None = None
    tail = tokens[variable_index + 1 :]
    for index, token in enumerate(tail):
        if _is_punct(token, "="):
            default = _text(tail[index + 1 :])
            break

    return Argument(
        name=variable.content,
        type=_compact(type_tokens) or None,
        default=default,
        by_reference=by_reference,
        variadic=variadic,
        line=variable.line,
    )


# ------------------------------------------------------------------
# Includes
# ------------------------------------------------------------------


def _include_target(tokens: list[Token]) -> str:
    """Return the included path, unquoted when it is a single string literal."""
    significant = [token for token in tokens if token.type not in _TRIVIA]
    if len(significant) == 3 and _is_punct(significant[0], "(") and _is_punct(significant[-1], ")"):
        significant = significant[1:2]
    if len(significant) == 1 and significant[0].type is TokenKind.CONSTANT_ENCAPSED_STRING:
        literal = significant[0].content
        if len(literal) >= 2 and literal[0] in "'\"" and literal[-1] == literal[0]:
            return literal[1:-1]
    return _text(tokens)
