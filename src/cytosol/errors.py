"""Parse errors, their reporting context, and diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cytosol.source import Span


# ── Error context ────────────────────────────────────────────────


@dataclass(frozen=True)
class ErrorContext:
    """Describes what the parser was doing when an error appeared.

    Contexts are values: every update returns a new context, so a parent
    production can hand refined copies to each of its children without
    the children seeing each other's refinements.
    """

    # Where the enclosing construct began, and what to call it.
    origin: tuple[Span, str] | None = None
    # The production currently being parsed.
    activity: str = ""
    # The token(s) the parser was looking for.
    expectation: str | None = None

    def start(self, span: Span, description: str) -> ErrorContext:
        return replace(self, origin=(span, description))

    def while_parsing(self, description: str) -> ErrorContext:
        return replace(self, activity=description)

    def expected(self, description: str) -> ErrorContext:
        return replace(self, expectation=description)

    def describe(self) -> str:
        """One-line summary, e.g. ``while parsing a record field, expected `:```."""
        parts: list[str] = []
        if self.activity:
            parts.append(f"while parsing {self.activity}")
        if self.expectation:
            parts.append(f"expected {self.expectation}")
        return ", ".join(parts)


CTX = ErrorContext()


# ── Diagnostics ──────────────────────────────────────────────────


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str
    style: str = "primary"  # "primary" or "secondary"


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class CompileError(Exception):
    """Batch error carrying multiple diagnostics (used by the lexer)."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")


# ── Parse errors ─────────────────────────────────────────────────


class ParseError(Exception):
    """First grammar violation found by the parser; aborts the parse."""

    code = "E200"

    def __init__(self, file: str, context: ErrorContext) -> None:
        self.file = file
        self.context = context
        super().__init__(self._message())

    def _headline(self) -> str:
        return f"syntax error in {self.file}"

    def _message(self) -> str:
        detail = self.context.describe()
        return f"{self._headline()}, {detail}" if detail else self._headline()

    def _primary_label(self) -> DiagnosticLabel | None:
        return None

    def to_diagnostic(self) -> Diagnostic:
        labels: list[DiagnosticLabel] = []
        primary = self._primary_label()
        if primary is not None:
            labels.append(primary)
        if self.context.origin is not None:
            span, desc = self.context.origin
            labels.append(DiagnosticLabel(span, f"{desc} started here", "secondary"))
        notes: list[str] = []
        if self.context.expectation:
            notes.append(f"expected {self.context.expectation}")
        return Diagnostic(
            severity=Severity.ERROR,
            code=self.code,
            message=self._headline(),
            labels=labels,
            notes=notes,
        )


class UnexpectedToken(ParseError):
    """A token that does not fit the production being parsed."""

    def __init__(self, span: Span, context: ErrorContext) -> None:
        self.span = span
        super().__init__(span.file, context)

    def _headline(self) -> str:
        return f"unexpected token at {self.span}"

    def _primary_label(self) -> DiagnosticLabel | None:
        if self.context.activity:
            return DiagnosticLabel(self.span, f"while parsing {self.context.activity}")
        return DiagnosticLabel(self.span, "")


class UnexpectedEnd(ParseError):
    """The token stream ended while a construct was still open."""

    code = "E201"

    def _headline(self) -> str:
        return f"unexpected end of {self.file}"


# ── Rendering ────────────────────────────────────────────────────

# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with optional colors.

    ``sources`` maps file names to already loaded text; files not in the
    map are read from disk on first use.
    """

    def __init__(self, *, color: bool = True,
                 sources: dict[str, str] | None = None) -> None:
        self.color = color
        self._lines: dict[str, list[str]] = {
            name: text.splitlines() for name, text in (sources or {}).items()
        }

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _source_line(self, filename: str, line_num: int) -> str | None:
        if filename not in self._lines:
            path = Path(filename)
            try:
                text = path.read_text(encoding="utf-8") if path.is_file() else ""
            except (OSError, UnicodeDecodeError):
                text = ""
            self._lines[filename] = text.splitlines()
        lines = self._lines[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        out: list[str] = []
        color = _COLORS[diag.severity]
        bar = f"  {self._c(_BLUE)}   |{self._c(_RESET)}"

        out.append(
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            mark = "^" if label.style == "primary" else "-"
            out.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            out.append(bar)

            text = self._source_line(span.file, span.start_line)
            if text is not None:
                out.append(
                    f"  {self._c(_BLUE)}{span.start_line:>4} |{self._c(_RESET)} {text}"
                )
                if span.start_line == span.end_line:
                    width = max(1, span.end_col - span.start_col + 1)
                else:
                    width = max(1, len(text) - span.start_col + 1)
                out.append(
                    f"{bar} {' ' * (span.start_col - 1)}"
                    f"{self._c(color)}{mark * width}{self._c(_RESET)}"
                )

            if label.message:
                out.append(f"{bar}   {self._c(color)}{label.message}{self._c(_RESET)}")

        for note in diag.notes:
            out.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(out)
