# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and token stream for PHP source files."""

from phpreflect.parser.lexer import LexerError, Token, TokenKind, tokenize
from phpreflect.parser.token_stream import TokenStream

__all__ = [
    "tokenize",
    "LexerError",
    "Token",
    "TokenKind",
    "TokenStream",
]
