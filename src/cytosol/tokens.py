"""Token kinds and token representation for the Cytosol lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cytosol.source import Span


class TokenKind(Enum):
    # Keywords
    RECORD = auto()
    EXTERN = auto()
    GENE = auto()
    RULE = auto()
    WHEN = auto()
    CALL = auto()
    EXPRESS = auto()
    NOTHING = auto()

    # Literals
    INTEGER_LIT = auto()
    STRING_LIT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    COLON = auto()
    DOT = auto()
    ARROW = auto()

    # Identifiers
    IDENTIFIER = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span


KEYWORDS: dict[str, TokenKind] = {
    "record": TokenKind.RECORD,
    "extern": TokenKind.EXTERN,
    "gene": TokenKind.GENE,
    "rule": TokenKind.RULE,
    "when": TokenKind.WHEN,
    "call": TokenKind.CALL,
    "express": TokenKind.EXPRESS,
    "nothing": TokenKind.NOTHING,
}

# Longest match first: two-character symbols are tried before one-character ones.
SYMBOLS: dict[str, TokenKind] = {
    "->": TokenKind.ARROW,
    "!=": TokenKind.NOT_EQUAL,
    "<=": TokenKind.LESS_EQUAL,
    ">=": TokenKind.GREATER_EQUAL,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "=": TokenKind.EQUAL,
    "<": TokenKind.LESS,
    ">": TokenKind.GREATER,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ".": TokenKind.DOT,
}
