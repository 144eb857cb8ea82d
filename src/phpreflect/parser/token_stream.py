# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Forward-only, single-cursor view over a token sequence.

One TokenStream is shared by reference between the file driver and every
entity parser it delegates to, so a move made by any holder is visible to all
of them. The cursor can only ever advance.
"""

from collections.abc import Collection, Sequence

from phpreflect.parser.lexer import Token, TokenKind

# ###############
# Public Interface
# ###############


class TokenStream:
    """An ordered token sequence with one shared, forward-only cursor."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tuple(tokens)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def position(self) -> int:
        """Index of the token under the cursor (equal to len() once exhausted)."""
        return self._pos

    def at_end(self) -> bool:
        """Return True once the cursor has moved past the last token."""
        return self._pos >= len(self._tokens)

    def current(self) -> Token | None:
        """Return the token under the cursor, or None when exhausted."""
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def advance(self) -> Token | None:
        """Move the cursor one token forward and return the new current token."""
        if self._pos < len(self._tokens):
            self._pos += 1
        return self.current()

    def peek(self, offset: int = 1) -> Token | None:
        """Return the token *offset* positions from the cursor without moving.

        Negative offsets look behind the cursor; they never rewind it.
        """
        index = self._pos + offset
        if 0 <= index < len(self._tokens):
            return self._tokens[index]
        return None

    def find_next_by_type(
        self,
        kind: TokenKind,
        max_lookahead: int,
        stop_types: Collection[TokenKind] = (),
    ) -> Token | None:
        """Search the tokens after the cursor for the first one of *kind*.

        The cursor is never moved, even on success.

        Args:
            kind: Token kind to look for.
            max_lookahead: Maximum number of tokens after the cursor to inspect.
            stop_types: Token kinds that end the search unsuccessfully when
                they are seen before a match.

        Returns:
            The matching token, or None if the lookahead was exhausted or a
            stop kind came first.
        """
        end = min(self._pos + 1 + max_lookahead, len(self._tokens))
        for index in range(self._pos + 1, end):
            token = self._tokens[index]
            if token.type is kind:
                return token
            if token.type in stop_types:
                return None
        return None

    def goto_next_by_type(
        self,
        kind: TokenKind,
        max_lookahead: int,
        stop_contents: Collection[str] = (),
    ) -> Token | None:
        """Advance the cursor token by token until one of *kind* is reached.

        Unlike :meth:`find_next_by_type` every inspected token is committed:
        on return the cursor rests on the last token examined.

        Args:
            kind: Token kind to look for.
            max_lookahead: Maximum number of tokens to advance over.
            stop_contents: Literal token contents that end the search
                unsuccessfully (for example ``";"``).

        Returns:
            The matching token (now under the cursor), or None.
        """
        for _ in range(max_lookahead):
            token = self.advance()
            if token is None:
                return None
            if token.type is kind:
                return token
            if token.content in stop_contents:
                return None
        return None
