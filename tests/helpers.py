"""Shared test helpers for the Cytosol parser test suite."""

from __future__ import annotations

import pytest

from cytosol.errors import ParseError
from cytosol.lexer import Lexer
from cytosol.parser import parse_file

FILENAME = "test.cyt"

# Expressions are parsed as the guard of a minimal rule.
EXPR_PREFIX = "rule (x) -> nothing when "
EXPR_COL = len(EXPR_PREFIX) + 1


def parse(source: str):
    """Lex and parse source, return the File."""
    tokens = Lexer(source, FILENAME).lex()
    return parse_file(FILENAME, tokens)


def parse_expr(source: str):
    """Parse a single expression."""
    tree = parse(EXPR_PREFIX + source)
    assert len(tree.rules) == 1
    return tree.rules[0].when


def parse_fails(source: str, error_type: type[ParseError] = ParseError) -> ParseError:
    """Parse source, asserting it raises ``error_type``."""
    with pytest.raises(error_type) as excinfo:
        parse(source)
    return excinfo.value
