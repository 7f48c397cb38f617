"""Tests for spans and source files."""

from __future__ import annotations

from cytosol.source import SourceFile, Span


class TestSpanMerge:
    def test_merge_adjacent(self):
        a = Span("f", 1, 1, 1, 6)
        b = Span("f", 1, 8, 1, 10)
        assert a.merge(b) == Span("f", 1, 1, 1, 10)

    def test_merge_is_order_independent(self):
        a = Span("f", 1, 1, 1, 6)
        b = Span("f", 1, 8, 1, 10)
        assert b.merge(a) == a.merge(b)

    def test_merge_across_lines(self):
        a = Span("f", 1, 20, 1, 25)
        b = Span("f", 3, 1, 3, 1)
        assert a.merge(b) == Span("f", 1, 20, 3, 1)

    def test_merge_contained(self):
        outer = Span("f", 1, 1, 4, 2)
        inner = Span("f", 2, 5, 2, 9)
        assert outer.merge(inner) == outer

    def test_merge_with_itself(self):
        a = Span("f", 2, 3, 2, 4)
        assert a.merge(a) == a

    def test_str(self):
        assert str(Span("model.cyt", 3, 7, 3, 9)) == "model.cyt:3:7"


class TestSourceFile:
    def test_line_at(self, tmp_path):
        path = tmp_path / "m.cyt"
        path.write_text("record A\nrecord B\n")
        src = SourceFile(path)
        assert src.line_at(2) == "record B"
        assert src.line_at(0) == ""
        assert src.line_at(9) == ""
        assert src.name == str(path)

    def test_span_text(self, tmp_path):
        path = tmp_path / "m.cyt"
        path.write_text("record Foo(\n  a: Int\n)\n")
        src = SourceFile(path)
        assert src.span_text(Span(str(path), 1, 8, 1, 10)) == "Foo"
        assert src.span_text(Span(str(path), 1, 11, 3, 1)) == "(\n  a: Int\n)"
