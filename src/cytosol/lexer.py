"""Lexer for the Cytosol language.

Produces the flat token list consumed by the parser. Whitespace and
comments are dropped; there is no end-of-file token, the end of the list
is the end of input.
"""

from __future__ import annotations

from cytosol.errors import CompileError, Diagnostic, DiagnosticLabel, Severity
from cytosol.source import Span
from cytosol.tokens import KEYWORDS, SYMBOLS, Token, TokenKind


def _is_digit(ch: str) -> bool:
    """ASCII decimal digit or ``_`` separator."""
    return ch in "0123456789_"


def _is_ident(ch: str) -> bool:
    """ASCII letter, digit or underscore."""
    return ch.isascii() and (ch.isalnum() or ch == "_")


class Lexer:
    """Tokenizes Cytosol source code."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch.isspace():
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                self._skip_line_comment()
            elif ch == '"':
                self._lex_string()
            elif _is_digit(ch) and ch != '_':
                self._lex_number()
            elif _is_ident(ch) and not ch.isdigit():
                self._lex_identifier()
            else:
                self._lex_symbol()

        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _emit(self, kind: TokenKind, value: str, start_line: int, start_col: int) -> Token:
        end_col = self.col - 1 if self.col > 1 else 1
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        tok = Token(kind, value, span)
        self.tokens.append(tok)
        return tok

    def _error(self, message: str, line: int, col: int) -> None:
        span = Span(self.filename, line, col, line, col)
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code="E100",
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        )

    def _skip_line_comment(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

    # ── Strings ──────────────────────────────────────────────────

    def _lex_string(self) -> None:
        start_line = self.line
        start_col = self.col
        self._advance()  # skip opening "
        text = []

        while self.pos < len(self.source) and self.source[self.pos] != '"':
            if self.source[self.pos] == '\\':
                text.append(self._lex_escape_sequence())
            else:
                text.append(self._advance())

        if self.pos >= len(self.source):
            self._error("unterminated string literal", start_line, start_col)
            return

        self._advance()  # skip closing "
        self._emit(TokenKind.STRING_LIT, ''.join(text), start_line, start_col)

    def _lex_escape_sequence(self) -> str:
        self._advance()  # skip backslash
        if self.pos >= len(self.source):
            self._error("unexpected end of escape sequence", self.line, self.col)
            return ""
        ch = self._advance()
        escape_map = {'n': '\n', 't': '\t', '\\': '\\', '"': '"', '0': '\0'}
        if ch in escape_map:
            return escape_map[ch]
        self._error(f"unknown escape sequence: \\{ch}", self.line, self.col - 1)
        return ch

    # ── Numbers ──────────────────────────────────────────────────

    def _lex_number(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and _is_digit(self.source[self.pos]):
            ch = self._advance()
            if ch != '_':
                text.append(ch)
        self._emit(TokenKind.INTEGER_LIT, ''.join(text), start_line, start_col)

    # ── Identifiers and Keywords ─────────────────────────────────

    def _lex_identifier(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and _is_ident(self.source[self.pos]):
            text.append(self._advance())
        word = ''.join(text)
        self._emit(KEYWORDS.get(word, TokenKind.IDENTIFIER), word, start_line, start_col)

    # ── Operators and Punctuation ────────────────────────────────

    def _lex_symbol(self) -> None:
        start_line = self.line
        start_col = self.col

        two = self.source[self.pos:self.pos + 2]
        if len(two) == 2 and two in SYMBOLS:
            self._advance()
            self._advance()
            self._emit(SYMBOLS[two], two, start_line, start_col)
            return

        ch = self._advance()
        if ch in SYMBOLS:
            self._emit(SYMBOLS[ch], ch, start_line, start_col)
        else:
            self._error(f"unexpected character: {ch!r}", start_line, start_col)
