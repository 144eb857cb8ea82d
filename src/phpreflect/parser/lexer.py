# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for PHP source files.

Converts raw source text into the flat sequence of tokens consumed by the
reflection driver. Token kinds follow the names used by PHP's own tokenizer;
single-character punctuation is left untyped and compared by content.
"""

import enum
import re
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenKind(enum.Enum):
    """All typed token kinds produced by the PHP lexer."""

    # Markup and tags
    INLINE_HTML = "T_INLINE_HTML"
    OPEN_TAG = "T_OPEN_TAG"
    OPEN_TAG_WITH_ECHO = "T_OPEN_TAG_WITH_ECHO"
    CLOSE_TAG = "T_CLOSE_TAG"

    # Trivia
    WHITESPACE = "T_WHITESPACE"
    COMMENT = "T_COMMENT"
    DOC_COMMENT = "T_DOC_COMMENT"

    # Names and literals
    STRING = "T_STRING"
    VARIABLE = "T_VARIABLE"
    LNUMBER = "T_LNUMBER"
    DNUMBER = "T_DNUMBER"
    CONSTANT_ENCAPSED_STRING = "T_CONSTANT_ENCAPSED_STRING"
    NS_SEPARATOR = "T_NS_SEPARATOR"

    # Keywords
    ABSTRACT = "T_ABSTRACT"
    ARRAY = "T_ARRAY"
    AS = "T_AS"
    BREAK = "T_BREAK"
    CALLABLE = "T_CALLABLE"
    CASE = "T_CASE"
    CATCH = "T_CATCH"
    CLASS = "T_CLASS"
    CLONE = "T_CLONE"
    CONST = "T_CONST"
    CONTINUE = "T_CONTINUE"
    DECLARE = "T_DECLARE"
    DEFAULT = "T_DEFAULT"
    DO = "T_DO"
    ECHO = "T_ECHO"
    ELSE = "T_ELSE"
    ELSEIF = "T_ELSEIF"
    EMPTY = "T_EMPTY"
    EXTENDS = "T_EXTENDS"
    FINAL = "T_FINAL"
    FINALLY = "T_FINALLY"
    FN = "T_FN"
    FOR = "T_FOR"
    FOREACH = "T_FOREACH"
    FUNCTION = "T_FUNCTION"
    GLOBAL = "T_GLOBAL"
    GOTO = "T_GOTO"
    IF = "T_IF"
    IMPLEMENTS = "T_IMPLEMENTS"
    INCLUDE = "T_INCLUDE"
    INCLUDE_ONCE = "T_INCLUDE_ONCE"
    INSTANCEOF = "T_INSTANCEOF"
    INSTEADOF = "T_INSTEADOF"
    INTERFACE = "T_INTERFACE"
    ISSET = "T_ISSET"
    LIST = "T_LIST"
    LOGICAL_AND = "T_LOGICAL_AND"
    LOGICAL_OR = "T_LOGICAL_OR"
    LOGICAL_XOR = "T_LOGICAL_XOR"
    NAMESPACE = "T_NAMESPACE"
    NEW = "T_NEW"
    PRINT = "T_PRINT"
    PRIVATE = "T_PRIVATE"
    PROTECTED = "T_PROTECTED"
    PUBLIC = "T_PUBLIC"
    READONLY = "T_READONLY"
    REQUIRE = "T_REQUIRE"
    REQUIRE_ONCE = "T_REQUIRE_ONCE"
    RETURN = "T_RETURN"
    STATIC = "T_STATIC"
    SWITCH = "T_SWITCH"
    THROW = "T_THROW"
    TRAIT = "T_TRAIT"
    TRY = "T_TRY"
    UNSET = "T_UNSET"
    USE = "T_USE"
    VAR = "T_VAR"
    WHILE = "T_WHILE"
    YIELD = "T_YIELD"

    # Operators
    IS_IDENTICAL = "T_IS_IDENTICAL"
    IS_NOT_IDENTICAL = "T_IS_NOT_IDENTICAL"
    IS_EQUAL = "T_IS_EQUAL"
    IS_NOT_EQUAL = "T_IS_NOT_EQUAL"
    IS_SMALLER_OR_EQUAL = "T_IS_SMALLER_OR_EQUAL"
    IS_GREATER_OR_EQUAL = "T_IS_GREATER_OR_EQUAL"
    SPACESHIP = "T_SPACESHIP"
    OBJECT_OPERATOR = "T_OBJECT_OPERATOR"
    NULLSAFE_OBJECT_OPERATOR = "T_NULLSAFE_OBJECT_OPERATOR"
    DOUBLE_ARROW = "T_DOUBLE_ARROW"
    DOUBLE_COLON = "T_DOUBLE_COLON"
    ELLIPSIS = "T_ELLIPSIS"
    BOOLEAN_AND = "T_BOOLEAN_AND"
    BOOLEAN_OR = "T_BOOLEAN_OR"
    COALESCE = "T_COALESCE"
    COALESCE_EQUAL = "T_COALESCE_EQUAL"
    INC = "T_INC"
    DEC = "T_DEC"
    POW = "T_POW"
    POW_EQUAL = "T_POW_EQUAL"
    PLUS_EQUAL = "T_PLUS_EQUAL"
    MINUS_EQUAL = "T_MINUS_EQUAL"
    MUL_EQUAL = "T_MUL_EQUAL"
    DIV_EQUAL = "T_DIV_EQUAL"
    CONCAT_EQUAL = "T_CONCAT_EQUAL"
    MOD_EQUAL = "T_MOD_EQUAL"
    AND_EQUAL = "T_AND_EQUAL"
    OR_EQUAL = "T_OR_EQUAL"
    XOR_EQUAL = "T_XOR_EQUAL"
    SL = "T_SL"
    SR = "T_SR"
    SL_EQUAL = "T_SL_EQUAL"
    SR_EQUAL = "T_SR_EQUAL"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token, or None for single-character punctuation.
        content: The literal source text of the token.
        line: 1-based line number where the token starts.
    """

    type: TokenKind | None
    content: str
    line: int


class LexerError(Exception):
    """Raised when the scanner encounters an unterminated literal or comment.

    Attributes:
        line: 1-based line number where the offending construct starts.
    """

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"Line {line}: {message}")
        self.line = line


def tokenize(source: str) -> list[Token]:
    """Tokenize PHP source text into a sequence of tokens.

    Whitespace and comments are kept as tokens so that the token contents
    concatenate back to the original source.

    Args:
        source: The full, already decoded text of a PHP file.

    Returns:
        A list of Token objects in source order.

    Raises:
        LexerError: On unterminated strings, heredocs or block comments.
    """
    return _Lexer(source).tokenize()


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenKind] = {
    "abstract": TokenKind.ABSTRACT,
    "and": TokenKind.LOGICAL_AND,
    "array": TokenKind.ARRAY,
    "as": TokenKind.AS,
    "break": TokenKind.BREAK,
    "callable": TokenKind.CALLABLE,
    "case": TokenKind.CASE,
    "catch": TokenKind.CATCH,
    "class": TokenKind.CLASS,
    "clone": TokenKind.CLONE,
    "const": TokenKind.CONST,
    "continue": TokenKind.CONTINUE,
    "declare": TokenKind.DECLARE,
    "default": TokenKind.DEFAULT,
    "do": TokenKind.DO,
    "echo": TokenKind.ECHO,
    "else": TokenKind.ELSE,
    "elseif": TokenKind.ELSEIF,
    "empty": TokenKind.EMPTY,
    "extends": TokenKind.EXTENDS,
    "final": TokenKind.FINAL,
    "finally": TokenKind.FINALLY,
    "fn": TokenKind.FN,
    "for": TokenKind.FOR,
    "foreach": TokenKind.FOREACH,
    "function": TokenKind.FUNCTION,
    "global": TokenKind.GLOBAL,
    "goto": TokenKind.GOTO,
    "if": TokenKind.IF,
    "implements": TokenKind.IMPLEMENTS,
    "include": TokenKind.INCLUDE,
    "include_once": TokenKind.INCLUDE_ONCE,
    "instanceof": TokenKind.INSTANCEOF,
    "insteadof": TokenKind.INSTEADOF,
    "interface": TokenKind.INTERFACE,
    "isset": TokenKind.ISSET,
    "list": TokenKind.LIST,
    "namespace": TokenKind.NAMESPACE,
    "new": TokenKind.NEW,
    "or": TokenKind.LOGICAL_OR,
    "print": TokenKind.PRINT,
    "private": TokenKind.PRIVATE,
    "protected": TokenKind.PROTECTED,
    "public": TokenKind.PUBLIC,
    "readonly": TokenKind.READONLY,
    "require": TokenKind.REQUIRE,
    "require_once": TokenKind.REQUIRE_ONCE,
    "return": TokenKind.RETURN,
    "static": TokenKind.STATIC,
    "switch": TokenKind.SWITCH,
    "throw": TokenKind.THROW,
    "trait": TokenKind.TRAIT,
    "try": TokenKind.TRY,
    "unset": TokenKind.UNSET,
    "use": TokenKind.USE,
    "var": TokenKind.VAR,
    "while": TokenKind.WHILE,
    "xor": TokenKind.LOGICAL_XOR,
    "yield": TokenKind.YIELD,
}

# Longest operators first so that a prefix never shadows a longer match.
_OPERATORS: list[tuple[str, TokenKind]] = [
    ("===", TokenKind.IS_IDENTICAL),
    ("!==", TokenKind.IS_NOT_IDENTICAL),
    ("<=>", TokenKind.SPACESHIP),
    ("**=", TokenKind.POW_EQUAL),
    ("...", TokenKind.ELLIPSIS),
    ("<<=", TokenKind.SL_EQUAL),
    (">>=", TokenKind.SR_EQUAL),
    ("??=", TokenKind.COALESCE_EQUAL),
    ("?->", TokenKind.NULLSAFE_OBJECT_OPERATOR),
    ("==", TokenKind.IS_EQUAL),
    ("!=", TokenKind.IS_NOT_EQUAL),
    ("<>", TokenKind.IS_NOT_EQUAL),
    ("<=", TokenKind.IS_SMALLER_OR_EQUAL),
    (">=", TokenKind.IS_GREATER_OR_EQUAL),
    ("->", TokenKind.OBJECT_OPERATOR),
    ("=>", TokenKind.DOUBLE_ARROW),
    ("::", TokenKind.DOUBLE_COLON),
    ("&&", TokenKind.BOOLEAN_AND),
    ("||", TokenKind.BOOLEAN_OR),
    ("??", TokenKind.COALESCE),
    ("++", TokenKind.INC),
    ("--", TokenKind.DEC),
    ("**", TokenKind.POW),
    ("+=", TokenKind.PLUS_EQUAL),
    ("-=", TokenKind.MINUS_EQUAL),
    ("*=", TokenKind.MUL_EQUAL),
    ("/=", TokenKind.DIV_EQUAL),
    (".=", TokenKind.CONCAT_EQUAL),
    ("%=", TokenKind.MOD_EQUAL),
    ("&=", TokenKind.AND_EQUAL),
    ("|=", TokenKind.OR_EQUAL),
    ("^=", TokenKind.XOR_EQUAL),
    ("<<", TokenKind.SL),
    (">>", TokenKind.SR),
]

# Member access: the following identifier is never a keyword.
_MEMBER_ACCESS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.OBJECT_OPERATOR,
        TokenKind.NULLSAFE_OBJECT_OPERATOR,
        TokenKind.DOUBLE_COLON,
    }
)

_OPEN_TAG_RE = re.compile(r"<\?php(?:\r\n|\s|$)|<\?=", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"[ \t\r\n\f\v]+")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_\x80-\U0010ffff][A-Za-z0-9_\x80-\U0010ffff]*")
_VARIABLE_RE = re.compile(r"\$[A-Za-z_\x80-\U0010ffff][A-Za-z0-9_\x80-\U0010ffff]*")
_NUMBER_RE = re.compile(
    r"""
    0[xX][0-9a-fA-F_]+
    | 0[bB][01_]+
    | (?P<float>
        (?:[0-9][0-9_]*)?\.[0-9][0-9_]*(?:[eE][+-]?[0-9]+)?
        | [0-9][0-9_]*\.(?:[eE][+-]?[0-9]+)?
        | [0-9][0-9_]*[eE][+-]?[0-9]+
      )
    | [0-9][0-9_]*
    """,
    re.VERBOSE,
)
_HEREDOC_START_RE = re.compile(r"<<<[ \t]*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\1\r?\n")


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens."""
        while self._pos < len(self._source):
            self._scan_inline_html()
            while self._pos < len(self._source):
                if self._scan_php_token():
                    break
        return self._tokens

    # ------------------------------------------------------------------
    # Token emission
    # ------------------------------------------------------------------

    def _emit(self, kind: TokenKind | None, end: int) -> None:
        """Emit the source slice up to *end* as one token and move past it."""
        content = self._source[self._pos : end]
        self._tokens.append(Token(kind, content, self._line))
        self._line += content.count("\n")
        self._pos = end

    def _previous_significant(self) -> Token | None:
        """Return the last emitted token that is not whitespace or a comment."""
        for tok in reversed(self._tokens):
            if tok.type not in (TokenKind.WHITESPACE, TokenKind.COMMENT, TokenKind.DOC_COMMENT):
                return tok
        return None

    # ------------------------------------------------------------------
    # Markup outside of PHP tags
    # ------------------------------------------------------------------

    def _scan_inline_html(self) -> None:
        """Consume markup up to and including the next opening tag."""
        match = _OPEN_TAG_RE.search(self._source, self._pos)
        if match is None:
            self._emit(TokenKind.INLINE_HTML, len(self._source))
            return
        if match.start() > self._pos:
            self._emit(TokenKind.INLINE_HTML, match.start())
        if match.group(0) == "<?=":
            self._emit(TokenKind.OPEN_TAG_WITH_ECHO, match.end())
        else:
            self._emit(TokenKind.OPEN_TAG, match.end())

    # ------------------------------------------------------------------
    # Code inside PHP tags
    # ------------------------------------------------------------------

    def _scan_php_token(self) -> bool:
        """Scan one token of PHP code.

        Returns True when a closing tag was consumed and the scanner is back
        in markup mode.
        """
        source = self._source
        pos = self._pos
        ch = source[pos]

        if source.startswith("?>", pos):
            end = pos + 2
            if source.startswith("\r\n", end):
                end += 2
            elif source.startswith("\n", end):
                end += 1
            self._emit(TokenKind.CLOSE_TAG, end)
            return True

        match = _WHITESPACE_RE.match(source, pos)
        if match:
            self._emit(TokenKind.WHITESPACE, match.end())
        elif source.startswith("/*", pos):
            self._scan_block_comment()
        elif source.startswith("//", pos) or ch == "#":
            self._scan_line_comment()
        elif ch == "$" and (match := _VARIABLE_RE.match(source, pos)):
            self._emit(TokenKind.VARIABLE, match.end())
        elif match := _IDENTIFIER_RE.match(source, pos):
            self._scan_identifier(match.group(0), match.end())
        elif (ch.isdigit() or (ch == "." and source[pos + 1 : pos + 2].isdigit())) and (
            match := _NUMBER_RE.match(source, pos)
        ):
            kind = TokenKind.DNUMBER if match.group("float") else TokenKind.LNUMBER
            self._emit(kind, match.end())
        elif ch in "'\"`":
            self._scan_quoted(ch)
        elif match := _HEREDOC_START_RE.match(source, pos):
            self._scan_heredoc(match.group(2), match.end())
        elif ch == "\\":
            self._emit(TokenKind.NS_SEPARATOR, pos + 1)
        else:
            for text, kind in _OPERATORS:
                if source.startswith(text, pos):
                    self._emit(kind, pos + len(text))
                    break
            else:
                self._emit(None, pos + 1)
        return False

    def _scan_identifier(self, word: str, end: int) -> None:
        """Emit an identifier, mapping it to a keyword kind where applicable."""
        previous = self._previous_significant()
        if previous is not None and previous.type in _MEMBER_ACCESS:
            self._emit(TokenKind.STRING, end)
            return
        self._emit(_KEYWORDS.get(word.lower(), TokenKind.STRING), end)

    def _scan_block_comment(self) -> None:
        """Scan a '/* */' comment; '/**' followed by whitespace is a doc comment."""
        start = self._pos
        close = self._source.find("*/", start + 2)
        if close == -1:
            raise LexerError("Unterminated comment", self._line)
        is_doc = self._source.startswith("/**", start) and self._source[start + 3 : start + 4].isspace()
        self._emit(TokenKind.DOC_COMMENT if is_doc else TokenKind.COMMENT, close + 2)

    def _scan_line_comment(self) -> None:
        """Scan a '//' or '#' comment through the newline, stopping before '?>'."""
        source = self._source
        end = self._pos
        while end < len(source) and source[end] != "\n":
            if source.startswith("?>", end):
                self._emit(TokenKind.COMMENT, end)
                return
            end += 1
        if end < len(source):
            end += 1  # the newline belongs to the comment
        self._emit(TokenKind.COMMENT, end)

    def _scan_quoted(self, quote: str) -> None:
        """Scan a single, double or backtick quoted literal honouring backslash escapes."""
        source = self._source
        end = self._pos + 1
        while end < len(source):
            ch = source[end]
            if ch == "\\":
                end += 2
                continue
            if ch == quote:
                self._emit(TokenKind.CONSTANT_ENCAPSED_STRING, end + 1)
                return
            end += 1
        raise LexerError("Unterminated string literal", self._line)

    def _scan_heredoc(self, label: str, body_start: int) -> None:
        """Scan a heredoc or nowdoc literal as a single token."""
        closing = re.compile(r"^[ \t]*" + re.escape(label) + r"\b", re.MULTILINE)
        match = closing.search(self._source, body_start)
        if match is None:
            raise LexerError(f"Unterminated heredoc '{label}'", self._line)
        self._emit(TokenKind.CONSTANT_ENCAPSED_STRING, match.end())
