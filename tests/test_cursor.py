"""Tests for the one-token-lookahead cursor."""

from __future__ import annotations

from cytosol.cursor import TokenCursor
from cytosol.source import Span
from cytosol.tokens import Token, TokenKind


def _tok(kind: TokenKind, value: str, col: int) -> Token:
    return Token(kind, value, Span("c.cyt", 1, col, 1, col + len(value) - 1))


class TestTokenCursor:
    def test_empty(self):
        cur = TokenCursor("c.cyt", [])
        assert cur.peek() is None
        assert cur.next() is None
        assert cur.file == "c.cyt"

    def test_peek_does_not_consume(self):
        a = _tok(TokenKind.IDENTIFIER, "a", 1)
        cur = TokenCursor("c.cyt", [a])
        assert cur.peek() is a
        assert cur.peek() is a
        assert cur.next() is a
        assert cur.peek() is None

    def test_next_in_order(self):
        toks = [_tok(TokenKind.RECORD, "record", 1), _tok(TokenKind.IDENTIFIER, "A", 8)]
        cur = TokenCursor("c.cyt", toks)
        assert cur.next() is toks[0]
        assert cur.next() is toks[1]
        assert cur.next() is None

    def test_at(self):
        cur = TokenCursor("c.cyt", [_tok(TokenKind.COMMA, ",", 1)])
        assert cur.at(TokenKind.COMMA)
        assert not cur.at(TokenKind.COLON)
        cur.next()
        assert not cur.at(TokenKind.COMMA)

    def test_pulls_lazily(self):
        pulled: list[int] = []

        def source():
            for i in range(3):
                pulled.append(i)
                yield _tok(TokenKind.INTEGER_LIT, str(i), i + 1)

        cur = TokenCursor("c.cyt", source())
        assert pulled == []
        cur.peek()
        assert pulled == [0]
        cur.next()
        assert pulled == [0]
        cur.peek()
        assert pulled == [0, 1]
