"""Parser for the Cytosol language.

Recursive descent over a one-token-lookahead cursor. Lists are parsed by
three shared combinators (``_grouped``, ``_grouped_separated`` and
``_separated``); expressions use a single precedence level for every
infix operator, associating left to right.

The first grammar violation raises ``UnexpectedToken`` or
``UnexpectedEnd`` and aborts the parse; there is no recovery.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Protocol, TypeVar

from cytosol.ast_nodes import (
    Binding,
    CallStmt,
    Concentration,
    Expr,
    ExpressStmt,
    Extern,
    FieldAccess,
    FieldDef,
    File,
    Gene,
    GeneStatement,
    Identifier,
    InfixOp,
    InfixOperator,
    IntegerLit,
    NamedArg,
    NamedType,
    PrefixOp,
    PrefixOperator,
    Product,
    Quantity,
    Record,
    Rename,
    Rule,
    StringLit,
    TypeExpr,
    Variable,
)
from cytosol.cursor import TokenCursor
from cytosol.errors import CTX, ErrorContext, UnexpectedEnd, UnexpectedToken
from cytosol.source import Span
from cytosol.tokens import Token, TokenKind

T = TypeVar("T")


class _Spanned(Protocol):
    @property
    def span(self) -> Span: ...


S = TypeVar("S", bound=_Spanned)


_INFIX_OPS: dict[TokenKind, InfixOperator] = {
    TokenKind.PLUS: InfixOperator.ADD,
    TokenKind.MINUS: InfixOperator.SUB,
    TokenKind.STAR: InfixOperator.MUL,
    TokenKind.SLASH: InfixOperator.DIV,
    TokenKind.EQUAL: InfixOperator.EQ,
    TokenKind.NOT_EQUAL: InfixOperator.NEQ,
    TokenKind.LESS: InfixOperator.LT,
    TokenKind.LESS_EQUAL: InfixOperator.LTE,
    TokenKind.GREATER: InfixOperator.GT,
    TokenKind.GREATER_EQUAL: InfixOperator.GTE,
}


def parse_file(file: str, tokens: Iterable[Token]) -> File:
    """Parse the tokens of one source file into a ``File``.

    ``file`` names the source even when ``tokens`` is empty, so an
    unexpected end can still be attributed.
    """
    return Parser(tokens, file).parse()


class Parser:
    """Parses a stream of tokens into a Cytosol AST. One instance per file."""

    def __init__(self, tokens: Iterable[Token], filename: str = "<stdin>") -> None:
        self.filename = filename
        self.cursor = TokenCursor(filename, tokens)

    # ── Token access ─────────────────────────────────────────────

    def _peek(self) -> Token | None:
        return self.cursor.peek()

    def _at(self, kind: TokenKind) -> bool:
        return self.cursor.at(kind)

    def _advance(self) -> Token:
        tok = self.cursor.next()
        assert tok is not None, "advance past the end of the token stream"
        return tok

    def _peek_or_end(self, ctx: ErrorContext) -> Token:
        tok = self._peek()
        if tok is None:
            raise UnexpectedEnd(self.filename, ctx)
        return tok

    def _expect(self, ctx: ErrorContext, *kinds: TokenKind) -> Token:
        """Consume the next token if it is one of ``kinds``."""
        tok = self._peek_or_end(ctx)
        if tok.kind not in kinds:
            raise UnexpectedToken(tok.span, ctx)
        return self._advance()

    # ── Combinators ──────────────────────────────────────────────

    def _grouped(
        self,
        open_kind: TokenKind,
        close_kind: TokenKind,
        open_ctx: ErrorContext,
        element: Callable[[], T],
    ) -> tuple[Span, list[T]]:
        """``open element* close`` with no separators."""
        start = self._expect(open_ctx, open_kind).span
        values: list[T] = []
        while True:
            if self._at(close_kind):
                end = self._advance().span
                return start.merge(end), values
            values.append(element())

    def _grouped_separated(
        self,
        open_kind: TokenKind,
        close_kind: TokenKind,
        open_ctx: ErrorContext,
        separator: TokenKind,
        separator_ctx: ErrorContext,
        element: Callable[[], T],
    ) -> tuple[Span, list[T]]:
        """``open (element (separator element)* separator?)? close``."""
        start = self._expect(open_ctx, open_kind).span
        values: list[T] = []
        while True:
            if self._at(close_kind):
                end = self._advance().span
                return start.merge(end), values

            values.append(element())

            tok = self._expect(separator_ctx, separator, close_kind)
            if tok.kind == close_kind:
                return start.merge(tok.span), values

    def _separated(
        self,
        separator: TokenKind,
        element: Callable[[], S],
    ) -> tuple[Span, list[S]]:
        """``element (separator element)*`` without delimiters, spanning first to last."""
        values: list[S] = [element()]
        while self._at(separator):
            self._advance()
            values.append(element())
        first = values[0].span
        last = values[-1].span
        return first.merge(last), values

    # ── Top-level parsing ────────────────────────────────────────

    def parse(self) -> File:
        """Parse the entire token stream into a File."""
        records: list[Record] = []
        externs: list[Extern] = []
        genes: list[Gene] = []
        rules: list[Rule] = []

        while (tok := self._peek()) is not None:
            if tok.kind == TokenKind.RECORD:
                records.append(self._parse_record())
            elif tok.kind == TokenKind.EXTERN:
                externs.append(self._parse_extern())
            elif tok.kind == TokenKind.GENE:
                genes.append(self._parse_gene())
            elif tok.kind == TokenKind.RULE:
                rules.append(self._parse_rule())
            else:
                raise UnexpectedToken(
                    tok.span,
                    CTX.while_parsing("a top level item")
                    .expected("`record`, `gene`, `rule` or `extern`"),
                )

        return File(records=records, externs=externs, genes=genes, rules=rules)

    # ── Records and externs ──────────────────────────────────────

    def _parse_record(self) -> Record:
        start = self._advance().span  # 'record'
        ec = CTX.start(start, "record definition").while_parsing("a record definition")

        name = self._parse_identifier(ec)

        if self._at(TokenKind.LPAREN):
            list_ec = ec.start(start, "field list").while_parsing("the field list of a record item")
            end, fields = self._grouped_separated(
                TokenKind.LPAREN, TokenKind.RPAREN, list_ec.expected("`(`"),
                TokenKind.COMMA, list_ec.expected("`,` or `)`"),
                lambda: self._parse_field_def(
                    ec.while_parsing("a record field"),
                    ec.while_parsing("a record field"),
                ),
            )
        else:
            end, fields = name.span, []

        return Record(name, fields, start.merge(end))

    def _parse_extern(self) -> Extern:
        start = self._advance().span  # 'extern'
        ec = CTX.start(start, "extern item").while_parsing("an extern item")

        name = self._parse_identifier(ec)

        list_ec = ec.while_parsing("the parameter list of an extern item")
        end, params = self._grouped_separated(
            TokenKind.LPAREN, TokenKind.RPAREN, list_ec.expected("`(`"),
            TokenKind.COMMA, list_ec.expected("`,` or `)`"),
            lambda: self._parse_field_def(
                ec.while_parsing("an extern item parameter"),
                ec.while_parsing("an extern parameter description"),
            ),
        )

        return Extern(name, params, start.merge(end))

    def _parse_field_def(self, name_ctx: ErrorContext, colon_ctx: ErrorContext) -> FieldDef:
        """``name : Type``"""
        name = self._parse_identifier(name_ctx)
        colon = self._expect(colon_ctx.expected("`:`"), TokenKind.COLON)
        type_expr = self._parse_type(name_ctx.start(colon.span, "beginning of type"))
        return FieldDef(name, type_expr, name.span.merge(type_expr.span))

    # ── Genes and rules ──────────────────────────────────────────

    def _parse_gene(self) -> Gene:
        start = self._advance().span  # 'gene'
        ec = CTX.start(start, "gene item").while_parsing("a gene item")

        _, factors = self._grouped_separated(
            TokenKind.LPAREN, TokenKind.RPAREN,
            ec.while_parsing("a gene factor list").expected("`(`"),
            TokenKind.COMMA,
            ec.while_parsing("a gene factor list").expected("`,` or `)`"),
            lambda: self._parse_binding(ec),
        )

        # a guard or body must follow the factors
        self._peek_or_end(ec)
        when = self._parse_when(ec)

        end, body = self._grouped(
            TokenKind.LBRACE, TokenKind.RBRACE,
            ec.while_parsing("a gene statement list").expected("`{`"),
            lambda: self._parse_gene_statement(ec),
        )

        return Gene(factors, when, body, start.merge(end))

    def _parse_rule(self) -> Rule:
        start = self._advance().span  # 'rule'
        ec = CTX.start(start, "rule item").while_parsing("a rule item")

        _, reactants = self._grouped_separated(
            TokenKind.LPAREN, TokenKind.RPAREN,
            ec.while_parsing("a rule reactant list").expected("`(`"),
            TokenKind.COMMA,
            ec.while_parsing("a rule reactant list").expected("`,` or `)`"),
            lambda: self._parse_binding(ec),
        )

        self._expect(
            ec.while_parsing("a rule reaction description").expected("`->`"),
            TokenKind.ARROW,
        )

        end, products = self._parse_product_list(ec)

        when = self._parse_when(ec)
        if when is not None:
            end = when.span

        return Rule(reactants, products, when, start.merge(end))

    def _parse_when(self, ec: ErrorContext) -> Expr | None:
        """Optional ``when expr`` guard."""
        if not self._at(TokenKind.WHEN):
            return None
        when_tok = self._advance()
        return self._parse_expression(
            ec.while_parsing("a when clause").start(when_tok.span, "when clause")
        )

    def _parse_gene_statement(self, pec: ErrorContext) -> GeneStatement:
        tok = self._peek_or_end(pec.while_parsing("a gene statement"))

        if tok.kind == TokenKind.CALL:
            self._advance()
            ec = CTX.start(tok.span, "call statement")
            name = self._parse_identifier(ec.while_parsing("a call statement"))
            list_ec = ec.while_parsing("a call statement parameter list")
            end, arguments = self._grouped_separated(
                TokenKind.LPAREN, TokenKind.RPAREN, list_ec.expected("`(`"),
                TokenKind.COMMA, list_ec.expected("`,` or `)`"),
                lambda: self._parse_named_arg(ec.while_parsing("a named argument")),
            )
            return CallStmt(name, arguments, tok.span.merge(end))

        if tok.kind == TokenKind.EXPRESS:
            self._advance()
            product = self._parse_product(
                CTX.start(tok.span, "express statement").while_parsing("an express statement")
            )
            return ExpressStmt(product, tok.span.merge(product.span))

        raise UnexpectedToken(
            tok.span,
            pec.while_parsing("a gene statement").expected("`call` or `express`"),
        )

    # ── Bindings and products ────────────────────────────────────

    def _parse_binding(self, pec: ErrorContext) -> Binding:
        """``n Name``, ``Name`` or ``source : local``."""
        ec = pec.while_parsing("a binding")
        tok = self._peek_or_end(ec.expected("a quantity or identifier"))
        ec = ec.start(tok.span, "binding")

        if tok.kind == TokenKind.INTEGER_LIT:
            self._advance()
            quantity = Quantity(int(tok.value), tok.span)
            name = self._parse_identifier(ec)
            return Binding(name, quantity, tok.span.merge(name.span))

        if tok.kind == TokenKind.IDENTIFIER:
            ident = self._parse_identifier(ec)
            if not self._at(TokenKind.COLON):
                return Binding(ident, None, ident.span)
            self._advance()  # ':'
            name = self._parse_identifier(ec)
            return Binding(name, Rename(ident, ident.span), ident.span.merge(name.span))

        raise UnexpectedToken(
            tok.span,
            pec.while_parsing("a record binding").expected("a quantity or identifier"),
        )

    def _parse_product_list(self, pec: ErrorContext) -> tuple[Span, list[Product]]:
        """``nothing`` or ``product (+ product)*``."""
        tok = self._peek_or_end(pec.while_parsing("a product list"))

        if tok.kind == TokenKind.NOTHING:
            self._advance()
            return tok.span, []

        ec = CTX.start(tok.span, "product list").while_parsing("a product list")
        return self._separated(TokenKind.PLUS, lambda: self._parse_product(ec))

    def _parse_product(self, pec: ErrorContext) -> Product:
        quantity = None
        tok = self._peek()
        if tok is not None and tok.kind == TokenKind.INTEGER_LIT:
            self._advance()
            quantity = Quantity(int(tok.value), tok.span)

        name = self._parse_identifier(pec.while_parsing("a product"))
        start = quantity.span if quantity is not None else name.span
        ec = CTX.start(start, "product").while_parsing("a product")

        if self._at(TokenKind.LPAREN):
            end, fields = self._grouped_separated(
                TokenKind.LPAREN, TokenKind.RPAREN,
                ec.while_parsing("the start of product fields").expected("`(`"),
                TokenKind.COMMA,
                ec.while_parsing("a product field list").expected("`,` or `)`"),
                lambda: self._parse_named_arg(ec.while_parsing("a product field")),
            )
        else:
            end, fields = name.span, []

        return Product(quantity, name, fields, start.merge(end))

    def _parse_named_arg(self, ec: ErrorContext) -> NamedArg:
        """``name : expr``"""
        name = self._parse_identifier(ec)
        colon = self._expect(ec.expected("`:`"), TokenKind.COLON)
        value = self._parse_expression(
            CTX.start(colon.span, "beginning of expression").while_parsing("an expression")
        )
        return NamedArg(name, value, name.span.merge(value.span))

    # ── Names and types ──────────────────────────────────────────

    def _parse_identifier(self, pec: ErrorContext) -> Identifier:
        tok = self._expect(pec.expected("an identifier"), TokenKind.IDENTIFIER)
        return Identifier(tok.value, tok.span)

    def _parse_type(self, pec: ErrorContext) -> TypeExpr:
        name = self._parse_identifier(pec.while_parsing("a type"))
        return NamedType(name, name.span)

    # ── Expressions ──────────────────────────────────────────────

    def _parse_expression(self, pec: ErrorContext) -> Expr:
        """Atoms joined by infix operators, all of one precedence, left to right.

        ``a + b * c`` parses as ``(a + b) * c``.
        """
        expr = self._parse_atom(pec)

        while (tok := self._peek()) is not None and tok.kind in _INFIX_OPS:
            self._advance()
            rhs = self._parse_atom(pec)
            expr = InfixOp(_INFIX_OPS[tok.kind], tok.span, expr, rhs, expr.span.merge(rhs.span))

        return expr

    def _parse_atom(self, pec: ErrorContext) -> Expr:
        """A primary expression followed by any number of ``.field`` accesses."""
        tok = self._peek_or_end(pec.while_parsing("an expression atom"))
        expr: Expr

        if tok.kind == TokenKind.IDENTIFIER:
            self._advance()
            expr = Variable(Identifier(tok.value, tok.span), tok.span)

        elif tok.kind == TokenKind.INTEGER_LIT:
            self._advance()
            expr = IntegerLit(int(tok.value), tok.span)

        elif tok.kind == TokenKind.STRING_LIT:
            self._advance()
            expr = StringLit(tok.value, tok.span)

        elif tok.kind == TokenKind.LBRACKET:
            self._advance()
            type_name = self._parse_identifier(
                pec.while_parsing("a type inside a concentration expression")
            )
            close = self._expect(
                pec.while_parsing("a concentration expression").expected("`]`"),
                TokenKind.RBRACKET,
            )
            expr = Concentration(type_name, tok.span.merge(close.span))

        elif tok.kind == TokenKind.LPAREN:
            # No node for the parentheses; the inner expression takes their extent.
            self._advance()
            inner = self._parse_expression(pec)
            close = self._expect(
                pec.while_parsing("a nested expression").expected("`)`"),
                TokenKind.RPAREN,
            )
            expr = replace(inner, span=tok.span.merge(close.span))

        elif tok.kind == TokenKind.MINUS:
            self._advance()
            operand = self._parse_atom(pec)
            expr = PrefixOp(PrefixOperator.NEG, tok.span, operand, tok.span.merge(operand.span))

        else:
            raise UnexpectedToken(
                tok.span,
                pec.while_parsing("an expression atom").expected("an expression"),
            )

        while self._at(TokenKind.DOT):
            self._advance()
            field_name = self._parse_identifier(pec.while_parsing("a field access expression"))
            expr = FieldAccess(expr, field_name, expr.span.merge(field_name.span))

        return expr
