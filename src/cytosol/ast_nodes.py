"""AST node definitions for the Cytosol language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from cytosol.source import Span

# ── Names and types ──────────────────────────────────────────────


@dataclass(frozen=True)
class Identifier:
    name: str
    span: Span


@dataclass(frozen=True)
class NamedType:
    name: Identifier
    span: Span


TypeExpr = NamedType


# ── Expressions ──────────────────────────────────────────────────


class InfixOperator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    EQ = "="
    NEQ = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="


class PrefixOperator(Enum):
    NEG = "-"


@dataclass(frozen=True)
class Variable:
    name: Identifier
    span: Span


@dataclass(frozen=True)
class IntegerLit:
    value: int
    span: Span


@dataclass(frozen=True)
class StringLit:
    value: str
    span: Span


Literal = Union[IntegerLit, StringLit]


@dataclass(frozen=True)
class InfixOp:
    op: InfixOperator
    op_span: Span
    left: Expr
    right: Expr
    span: Span

    @property
    def args(self) -> tuple[Expr, Expr]:
        return (self.left, self.right)


@dataclass(frozen=True)
class PrefixOp:
    op: PrefixOperator
    op_span: Span
    operand: Expr
    span: Span


@dataclass(frozen=True)
class Concentration:
    """``[Type]``: the current quantity of a record type."""

    type_name: Identifier
    span: Span


@dataclass(frozen=True)
class FieldAccess:
    base: Expr
    field_name: Identifier
    span: Span


Expr = Union[Variable, IntegerLit, StringLit, InfixOp, PrefixOp, Concentration, FieldAccess]


# ── Bindings and products ────────────────────────────────────────


@dataclass(frozen=True)
class Quantity:
    value: int
    span: Span


@dataclass(frozen=True)
class Rename:
    """``source : local`` binds the record ``source`` under the name ``local``."""

    source: Identifier
    span: Span


BindingAttribute = Union[Quantity, Rename]


@dataclass(frozen=True)
class Binding:
    name: Identifier
    attr: BindingAttribute | None
    span: Span


@dataclass(frozen=True)
class NamedArg:
    """``name: expr`` in call arguments and product fields."""

    name: Identifier
    value: Expr
    span: Span


@dataclass(frozen=True)
class Product:
    quantity: Quantity | None
    name: Identifier
    fields: list[NamedArg]
    span: Span


# ── Gene statements ──────────────────────────────────────────────


@dataclass(frozen=True)
class CallStmt:
    name: Identifier
    arguments: list[NamedArg]
    span: Span


@dataclass(frozen=True)
class ExpressStmt:
    product: Product
    span: Span


GeneStatement = Union[CallStmt, ExpressStmt]


# ── Items ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FieldDef:
    """``name: Type`` in record fields and extern parameters."""

    name: Identifier
    type_expr: TypeExpr
    span: Span


@dataclass(frozen=True)
class Record:
    name: Identifier
    fields: list[FieldDef]
    span: Span


@dataclass(frozen=True)
class Extern:
    name: Identifier
    parameters: list[FieldDef]
    span: Span


@dataclass(frozen=True)
class Gene:
    factors: list[Binding]
    when: Expr | None
    body: list[GeneStatement]
    span: Span


@dataclass(frozen=True)
class Rule:
    reactants: list[Binding]
    products: list[Product]
    when: Expr | None
    span: Span


Item = Union[Record, Extern, Gene, Rule]


@dataclass(frozen=True)
class File:
    """Root of a parsed source file; items grouped by kind in source order."""

    records: list[Record] = field(default_factory=list)
    externs: list[Extern] = field(default_factory=list)
    genes: list[Gene] = field(default_factory=list)
    rules: list[Rule] = field(default_factory=list)
