"""
Unit tests for the transcript parser.
"""

import sys

import pytest
from transcript import (
    tokenize, parse, run, Parser, ParserError, format_ast, NodeKind,
    Program, VarDeclaration, AssignmentExpr, BinaryExpr, MemberExpr, CallExpr,
    Identifier, NumericLiteral, Property, ObjectLiteral,
)


def parse_source(source: str) -> Program:
    return parse(tokenize(source))


def parse_expr(source: str):
    """Parse a single expression statement inside a script region."""
    program = parse_source(f"<trans>{source}</trans>")
    assert len(program.body) == 1
    return program.body[0]


def strip_spans(node):
    """Compare trees without caring about source positions."""
    if isinstance(node, list):
        return [strip_spans(n) for n in node]
    if not hasattr(node, "kind"):
        return node
    fields = {k: strip_spans(v) for k, v in node.__dict__.items() if k != "span"}
    return (node.kind, fields)


def num(value):
    return NumericLiteral(span=None, value=value)


def ident(symbol):
    return Identifier(span=None, symbol=symbol)


class TestDeclarations:
    """Test let/const parsing."""

    def test_let_with_value(self):
        program = parse_source("<trans>let x = 5; x;</trans>")
        assert len(program.body) == 2

        decl = program.body[0]
        assert isinstance(decl, VarDeclaration)
        assert decl.kind == NodeKind.VAR_DECLARATION
        assert decl.constant is False
        assert decl.identifier == "x"
        assert isinstance(decl.value, NumericLiteral)
        assert decl.value.value == 5

        ref = program.body[1]
        assert isinstance(ref, Identifier)
        assert ref.symbol == "x"

    def test_const_with_value(self):
        decl = parse_source("<trans>const limit = 10;</trans>").body[0]
        assert decl.constant is True
        assert decl.identifier == "limit"

    def test_let_without_value(self):
        decl = parse_source("<trans>let y;</trans>").body[0]
        assert decl.constant is False
        assert decl.value is None

    def test_const_without_value(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>const y;</trans>")
        assert exc_info.value.code == "E106"
        assert "E106" in str(exc_info.value)

    def test_missing_name(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>let = 5;</trans>")
        assert exc_info.value.code == "E101"

    def test_declaration_requires_semicolon(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>let x = 5</trans>")
        assert exc_info.value.code == "E102"

    def test_declaration_span(self):
        decl = parse_source("<trans>\n  let x = 5;</trans>").body[0]
        assert decl.span.start.line == 2
        assert decl.span.start.column == 3
        assert decl.span.end.column == 13


class TestExpressions:
    """Test expression precedence and associativity."""

    def test_multiplication_binds_tighter(self):
        expr = parse_expr("1 + 2 * 3")
        expected = BinaryExpr(
            span=None, left=num(1), operator="+",
            right=BinaryExpr(span=None, left=num(2), operator="*", right=num(3)),
        )
        assert strip_spans(expr) == strip_spans(expected)

    def test_left_associative(self):
        expr = parse_expr("8 - 3 - 2")
        expected = BinaryExpr(
            span=None,
            left=BinaryExpr(span=None, left=num(8), operator="-", right=num(3)),
            operator="-",
            right=num(2),
        )
        assert strip_spans(expr) == strip_spans(expected)

    def test_modulo_is_multiplicative(self):
        expr = parse_expr("1 + 7 % 4")
        assert expr.operator == "+"
        assert expr.right.operator == "%"

    def test_grouping(self):
        expr = parse_expr("(1 + 2) * 3")
        assert expr.operator == "*"
        assert isinstance(expr.left, BinaryExpr)
        assert expr.left.operator == "+"

    def test_assignment_is_right_associative(self):
        expr = parse_expr("a = b = 3")
        expected = AssignmentExpr(
            span=None,
            assignee=ident("a"),
            value=AssignmentExpr(span=None, assignee=ident("b"), value=num(3)),
        )
        assert strip_spans(expr) == strip_spans(expected)

    def test_assignment_target_not_checked_by_parser(self):
        expr = parse_expr("1 = 2")
        assert isinstance(expr, AssignmentExpr)
        assert isinstance(expr.assignee, NumericLiteral)

    def test_binary_span_covers_operands(self):
        expr = parse_expr("10 + 20")
        assert expr.span.start.column == 8
        assert expr.span.end.column == 15

    def test_semicolons_optional_after_expressions(self):
        program = parse_source("<trans>1 2; 3</trans>")
        assert [s.value for s in program.body] == [1, 2, 3]

    def test_incomplete_expression(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>1 +</trans>")
        assert exc_info.value.code == "E102"

    def test_unbalanced_paren(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>(1 + 2;</trans>")
        assert exc_info.value.code == "E101"

    def test_stray_token(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>;</trans>")
        assert exc_info.value.code == "E101"
        assert "expression" in exc_info.value.diagnostic.message


class TestObjectLiterals:
    """Test object literal parsing."""

    def test_empty_object(self):
        expr = parse_expr("{}")
        assert isinstance(expr, ObjectLiteral)
        assert expr.properties == []

    def test_properties_and_shorthand(self):
        expr = parse_expr("{ a: 1, b, c: 2 + 3, }")
        assert [p.key for p in expr.properties] == ["a", "b", "c"]
        assert all(isinstance(p, Property) for p in expr.properties)
        assert expr.properties[0].value.value == 1
        assert expr.properties[1].value is None
        assert isinstance(expr.properties[2].value, BinaryExpr)

    def test_shorthand_last(self):
        expr = parse_expr("{ a }")
        assert len(expr.properties) == 1
        assert expr.properties[0].value is None

    def test_nested_object(self):
        expr = parse_expr("{ inner: { x: 1 } }")
        assert isinstance(expr.properties[0].value, ObjectLiteral)

    def test_object_in_declaration(self):
        decl = parse_source("<trans>let o = { a: 1 };</trans>").body[0]
        assert isinstance(decl.value, ObjectLiteral)

    def test_missing_comma(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>{ a: 1 b: 2 }</trans>")
        assert exc_info.value.code == "E101"

    def test_non_identifier_key(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>{ 1: 2 }</trans>")
        assert exc_info.value.code == "E101"

    def test_unclosed_object(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>{ a: 1</trans>")
        assert exc_info.value.code == "E102"


class TestMemberAndCall:
    """Member access and calls are parsed even though they are not evaluated."""

    def test_member_access(self):
        expr = parse_expr("foo.bar")
        assert isinstance(expr, MemberExpr)
        assert expr.computed is False
        assert expr.object.symbol == "foo"
        assert expr.property.symbol == "bar"

    def test_computed_member(self):
        expr = parse_expr("items[1 + 1]")
        assert isinstance(expr, MemberExpr)
        assert expr.computed is True
        assert isinstance(expr.property, BinaryExpr)

    def test_member_chain(self):
        expr = parse_expr("a.b.c")
        assert expr.property.symbol == "c"
        assert isinstance(expr.object, MemberExpr)
        assert expr.object.property.symbol == "b"

    def test_call_with_arguments(self):
        expr = parse_expr("foo.bar(1, x = 2)")
        assert isinstance(expr, CallExpr)
        assert expr.kind == NodeKind.CALL_EXPR
        assert isinstance(expr.caller, MemberExpr)
        assert len(expr.arguments) == 2
        assert isinstance(expr.arguments[1], AssignmentExpr)

    def test_chained_calls(self):
        expr = parse_expr("make()(3)")
        assert isinstance(expr, CallExpr)
        assert isinstance(expr.caller, CallExpr)
        assert expr.caller.arguments == []
        assert expr.arguments[0].value == 3

    def test_dot_requires_identifier(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>a.5</trans>")
        assert exc_info.value.code == "E101"


class TestScriptRegion:
    """Test how the parser selects the tokens that form the program."""

    def test_template_text_ignored(self):
        program = parse_source("<h1>Title</h1><trans>1</trans> trailing words")
        assert strip_spans(program.body) == strip_spans([num(1)])

    def test_without_tags(self):
        program = parse_source("let x = 1; x")
        assert len(program.body) == 2

    def test_empty_region(self):
        program = parse_source("<trans></trans>")
        assert program.body == []
        assert program.kind == NodeKind.PROGRAM

    def test_empty_source(self):
        assert parse_source("").body == []

    def test_missing_close_tag(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("<trans>1")
        assert exc_info.value.code == "E104"
        assert "</trans>" in exc_info.value.diagnostic.message

    def test_aborted_scan(self):
        tokens = tokenize("<trans>1 @ 2</trans>")
        with pytest.raises(ParserError) as exc_info:
            Parser(tokens).produce_ast()
        assert exc_info.value.code == "E105"

    def test_parse_does_not_modify_tokens(self):
        tokens = tokenize("<trans>let x = { a: 1 };</trans>")
        snapshot = list(tokens)
        parse(tokens)
        assert tokens == snapshot


class TestFormatting:
    """Test the debug printer."""

    def test_format_ast(self):
        text = format_ast(parse_source("<trans>let x = 1 + 2;</trans>"))
        lines = text.splitlines()
        assert lines[0] == "Program"
        assert "VarDeclaration" in text
        assert "identifier: 'x'" in text
        assert "operator: '+'" in text
        assert "NumericLiteral" in text


INT_DIGIT_LIMIT = getattr(sys, "get_int_max_str_digits", lambda: 0)()


@pytest.mark.skipif(INT_DIGIT_LIMIT == 0, reason="no integer string conversion limit")
class TestLargeLiterals:
    """Literals past the integer conversion limit are parse errors."""

    def test_literal_too_large(self):
        digits = "1" * (INT_DIGIT_LIMIT + 1)
        with pytest.raises(ParserError) as exc_info:
            parse_source(f"<trans>{digits}</trans>")
        assert exc_info.value.code == "E107"
        assert str(INT_DIGIT_LIMIT + 1) in exc_info.value.diagnostic.message

    def test_run_reports_literal_too_large(self):
        result = run("<trans>" + "1" * (INT_DIGIT_LIMIT + 1) + "</trans>")
        assert not result.success
        assert result.diagnostics.codes() == ["E107"]

    def test_literal_at_limit(self):
        literal = parse_expr("7" * INT_DIGIT_LIMIT)
        assert literal.value == int("7" * INT_DIGIT_LIMIT)
