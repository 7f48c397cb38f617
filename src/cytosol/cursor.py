"""One-token-lookahead cursor over a token source."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from cytosol.tokens import Token, TokenKind


class TokenCursor:
    """Pulls tokens one at a time, buffering at most one for ``peek``.

    The file name is kept separately from the tokens so an empty stream can
    still be attributed to its file.
    """

    def __init__(self, file: str, tokens: Iterable[Token]) -> None:
        self.file = file
        self._tokens: Iterator[Token] = iter(tokens)
        self._buffered: Token | None = None
        self._exhausted = False

    def peek(self) -> Token | None:
        """Return the next token without consuming it, or None at the end."""
        if self._buffered is None and not self._exhausted:
            self._buffered = next(self._tokens, None)
            if self._buffered is None:
                self._exhausted = True
        return self._buffered

    def next(self) -> Token | None:
        """Consume and return the next token, or None at the end."""
        tok = self.peek()
        self._buffered = None
        return tok

    def at(self, kind: TokenKind) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind == kind
