"""Tests for error contexts and parse errors."""

from __future__ import annotations

from cytosol.errors import (
    CTX,
    ErrorContext,
    ParseError,
    Severity,
    UnexpectedEnd,
    UnexpectedToken,
)
from cytosol.source import Span
from tests.helpers import parse_fails

_SPAN = Span("e.cyt", 2, 5, 2, 7)


class TestErrorContext:
    def test_default_is_empty(self):
        assert CTX == ErrorContext()
        assert CTX.origin is None
        assert CTX.activity == ""
        assert CTX.expectation is None

    def test_updates_return_new_values(self):
        base = CTX.while_parsing("a gene item")
        narrowed = base.expected("`{`")
        assert base.expectation is None
        assert narrowed.expectation == "`{`"
        assert narrowed.activity == "a gene item"

    def test_siblings_do_not_share_refinements(self):
        parent = CTX.start(_SPAN, "rule item")
        left = parent.while_parsing("a rule reactant list")
        right = parent.while_parsing("a product list")
        assert left.activity == "a rule reactant list"
        assert right.activity == "a product list"
        assert left.origin == right.origin == (_SPAN, "rule item")

    def test_start_replaces_origin(self):
        ctx = CTX.start(_SPAN, "record definition").start(_SPAN, "field list")
        assert ctx.origin == (_SPAN, "field list")

    def test_describe(self):
        ctx = CTX.while_parsing("a record field").expected("`:`")
        assert ctx.describe() == "while parsing a record field, expected `:`"
        assert CTX.describe() == ""


class TestParseErrors:
    def test_unexpected_token_message(self):
        err = UnexpectedToken(_SPAN, CTX.while_parsing("a binding"))
        assert isinstance(err, ParseError)
        assert err.file == "e.cyt"
        assert str(err) == "unexpected token at e.cyt:2:5, while parsing a binding"

    def test_unexpected_end_message(self):
        err = UnexpectedEnd("e.cyt", CTX.expected("`)`"))
        assert err.file == "e.cyt"
        assert str(err) == "unexpected end of e.cyt, expected `)`"

    def test_base_error_is_concrete(self):
        err = ParseError("e.cyt", CTX.while_parsing("a rule item"))
        assert err.file == "e.cyt"
        assert str(err) == "syntax error in e.cyt, while parsing a rule item"
        diag = err.to_diagnostic()
        assert diag.code == "E200"
        assert diag.message == "syntax error in e.cyt"
        assert diag.labels == []

    def test_unexpected_token_diagnostic(self):
        ctx = CTX.start(Span("e.cyt", 1, 1, 1, 6), "record definition") \
            .while_parsing("a record field").expected("`:`")
        diag = UnexpectedToken(_SPAN, ctx).to_diagnostic()
        assert diag.severity == Severity.ERROR
        assert diag.code == "E200"
        primary, secondary = diag.labels
        assert primary.span == _SPAN
        assert primary.style == "primary"
        assert "a record field" in primary.message
        assert secondary.style == "secondary"
        assert secondary.message == "record definition started here"
        assert diag.notes == ["expected `:`"]

    def test_unexpected_end_diagnostic(self):
        diag = UnexpectedEnd("e.cyt", CTX.while_parsing("a product list")).to_diagnostic()
        assert diag.code == "E201"
        assert diag.labels == []
        assert diag.notes == []

    def test_unexpected_end_keeps_origin_label(self):
        ctx = CTX.start(_SPAN, "gene item")
        diag = UnexpectedEnd("e.cyt", ctx).to_diagnostic()
        assert [label.span for label in diag.labels] == [_SPAN]

    def test_parser_errors_reach_caller_unchanged(self):
        err = parse_fails("gene (x) { express }", ParseError)
        assert type(err) is UnexpectedToken
        assert err.context.activity == "a product"
