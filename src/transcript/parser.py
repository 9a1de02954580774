"""
Recursive descent parser for transcript.

Converts a token stream into a Program node. Only the tokens between the
first <trans> and </trans> tags form the program; anything before the open
tag is template text. A stream without an open tag is parsed as a whole.
"""

from typing import List, NoReturn, Optional
from .tokens import Token, TokenType, SourceSpan, scan_aborted
from .ast import (
    Statement, Expression, Program, VarDeclaration,
    AssignmentExpr, BinaryExpr, MemberExpr, CallExpr,
    Identifier, NumericLiteral, Property, ObjectLiteral,
)
from .errors import (
    error_unexpected_token,
    error_unexpected_eof,
    error_missing_close_tag,
    error_scan_aborted,
    error_const_without_initializer,
    error_numeric_literal_too_large,
)


class Parser:
    """
    Recursive descent parser.

    Usage:
        parser = Parser(tokens)
        program = parser.produce_ast()

    Expression precedence, lowest first:
        assignment (right-associative)
        object literal
        + -
        * / %
        call
        member access
        primary
    """

    ADDITIVE = ("+", "-")
    MULTIPLICATIVE = ("*", "/", "%")

    def __init__(self, tokens: List[Token], filename: Optional[str] = None):
        self.tokens = tokens
        self.filename = filename
        self.pos = 0
        # Index of the token that ends the program (close tag or EOF)
        self.end = len(tokens) - 1

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        if self.pos >= self.end:
            return self.tokens[self.end]
        return self.tokens[self.pos]

    def _is_at_end(self) -> bool:
        return self.pos >= self.end

    def _check(self, token_type: TokenType, value: Optional[str] = None) -> bool:
        token = self._current()
        if self._is_at_end() or token.type != token_type:
            return False
        return value is None or token.value == value

    def _advance(self) -> Token:
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        if not self._is_at_end() and self._current().type in token_types:
            return self._advance()
        return None

    def _match_operator(self, operators) -> Optional[Token]:
        token = self._current()
        if self._check(TokenType.BINARY_OPERATOR) and token.value in operators:
            return self._advance()
        return None

    def _error(self, expected: str) -> NoReturn:
        token = self._current()
        if self._is_at_end():
            raise error_unexpected_eof(expected, token.span)
        raise error_unexpected_token(expected, f"{token.type.name} {token.value!r}", token.span)

    def _span_from(self, start: Token) -> SourceSpan:
        """Create a span from start token to the previously consumed token."""
        end_token = self.tokens[max(0, self.pos - 1)]
        return SourceSpan(start.span.start, end_token.span.end)

    @staticmethod
    def _join(left: Expression, right: Expression) -> SourceSpan:
        return SourceSpan(left.span.start, right.span.end)

    # =========================================================================
    # Script region
    # =========================================================================

    def _enter_script_region(self) -> None:
        """Position the cursor inside the script region and bound its end."""
        if scan_aborted(self.tokens):
            raise error_scan_aborted(self.tokens[-1].span)

        open_idx = next(
            (i for i, t in enumerate(self.tokens) if t.type == TokenType.OPEN_TRANS_TAG),
            None,
        )
        if open_idx is None:
            return

        close_idx = next(
            (i for i, t in enumerate(self.tokens)
             if i > open_idx and t.type == TokenType.CLOSE_TRANS_TAG),
            None,
        )
        if close_idx is None:
            raise error_missing_close_tag(self.tokens[-1].span)

        self.pos = open_idx + 1
        self.end = close_idx

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Statement:
        if self._check(TokenType.LET) or self._check(TokenType.CONST):
            return self._parse_var_declaration()

        expr = self._parse_expression()
        self._match(TokenType.SEMICOLON)
        return expr

    def _parse_var_declaration(self) -> VarDeclaration:
        """let IDENT; | (let|const) IDENT = expr;"""
        start = self._advance()
        constant = start.type == TokenType.CONST
        name_token = self._consume(TokenType.IDENTIFIER, "identifier name after let/const")
        name = name_token.value

        if self._match(TokenType.SEMICOLON):
            if constant:
                raise error_const_without_initializer(name, self._span_from(start))
            return VarDeclaration(
                span=self._span_from(start),
                constant=False,
                identifier=name,
                value=None,
            )

        self._consume(TokenType.ASSIGNMENT, "'=' after identifier in declaration")
        value = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "';' after variable declaration")

        return VarDeclaration(
            span=self._span_from(start),
            constant=constant,
            identifier=name,
            value=value,
        )

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_assignment_expr()

    def _parse_assignment_expr(self) -> Expression:
        left = self._parse_object_expr()

        if self._match(TokenType.ASSIGNMENT):
            value = self._parse_assignment_expr()
            return AssignmentExpr(span=self._join(left, value), assignee=left, value=value)

        return left

    def _parse_object_expr(self) -> Expression:
        if not self._check(TokenType.OPEN_BRACE):
            return self._parse_additive_expr()

        start = self._advance()
        properties: List[Property] = []

        while not self._is_at_end() and not self._check(TokenType.CLOSE_BRACE):
            key_token = self._consume(TokenType.IDENTIFIER, "object literal key")

            # Shorthand: { key, } or { key }
            if self._match(TokenType.COMMA):
                properties.append(Property(span=key_token.span, key=key_token.value))
                continue
            if self._check(TokenType.CLOSE_BRACE):
                properties.append(Property(span=key_token.span, key=key_token.value))
                continue

            self._consume(TokenType.COLON, "':' after object literal key")
            value = self._parse_expression()
            properties.append(Property(
                span=SourceSpan(key_token.span.start, value.span.end),
                key=key_token.value,
                value=value,
            ))

            if not self._check(TokenType.CLOSE_BRACE):
                self._consume(TokenType.COMMA, "',' or '}' after property")

        self._consume(TokenType.CLOSE_BRACE, "'}' to close object literal")
        return ObjectLiteral(span=self._span_from(start), properties=properties)

    def _parse_additive_expr(self) -> Expression:
        left = self._parse_multiplicative_expr()

        while True:
            op = self._match_operator(self.ADDITIVE)
            if op is None:
                break
            right = self._parse_multiplicative_expr()
            left = BinaryExpr(span=self._join(left, right), left=left, operator=op.value, right=right)

        return left

    def _parse_multiplicative_expr(self) -> Expression:
        left = self._parse_call_member_expr()

        while True:
            op = self._match_operator(self.MULTIPLICATIVE)
            if op is None:
                break
            right = self._parse_call_member_expr()
            left = BinaryExpr(span=self._join(left, right), left=left, operator=op.value, right=right)

        return left

    def _parse_call_member_expr(self) -> Expression:
        member = self._parse_member_expr()

        if self._check(TokenType.OPEN_PAREN):
            return self._parse_call_expr(member)
        return member

    def _parse_call_expr(self, caller: Expression) -> Expression:
        start_span = caller.span
        arguments = self._parse_arguments()
        call = CallExpr(
            span=SourceSpan(start_span.start, self.tokens[self.pos - 1].span.end),
            caller=caller,
            arguments=arguments,
        )

        # Chained calls: foo()()
        if self._check(TokenType.OPEN_PAREN):
            return self._parse_call_expr(call)
        return call

    def _parse_arguments(self) -> List[Expression]:
        self._consume(TokenType.OPEN_PAREN, "'('")

        args: List[Expression] = []
        if not self._check(TokenType.CLOSE_PAREN):
            args.append(self._parse_assignment_expr())
            while self._match(TokenType.COMMA):
                args.append(self._parse_assignment_expr())

        self._consume(TokenType.CLOSE_PAREN, "')' after arguments")
        return args

    def _parse_member_expr(self) -> Expression:
        obj = self._parse_primary_expr()

        while True:
            if self._match(TokenType.DOT):
                prop = self._parse_primary_expr()
                if not isinstance(prop, Identifier):
                    raise error_unexpected_token(
                        "identifier after '.'", prop.kind.value, prop.span
                    )
                obj = MemberExpr(span=self._join(obj, prop), object=obj, property=prop, computed=False)
            elif self._match(TokenType.OPEN_BRACKET):
                prop = self._parse_expression()
                self._consume(TokenType.CLOSE_BRACKET, "']' after computed member")
                obj = MemberExpr(
                    span=SourceSpan(obj.span.start, self.tokens[self.pos - 1].span.end),
                    object=obj,
                    property=prop,
                    computed=True,
                )
            else:
                break

        return obj

    def _parse_primary_expr(self) -> Expression:
        token = self._current()

        if self._check(TokenType.IDENTIFIER):
            self._advance()
            return Identifier(span=token.span, symbol=token.value)

        if self._check(TokenType.NUMBER):
            self._advance()
            try:
                value = int(token.value)
            except ValueError:
                # Longer than the interpreter's int conversion limit
                raise error_numeric_literal_too_large(len(token.value), token.span) from None
            return NumericLiteral(span=token.span, value=value)

        if self._check(TokenType.OPEN_PAREN):
            self._advance()
            expr = self._parse_expression()
            self._consume(TokenType.CLOSE_PAREN, "')' to close grouped expression")
            return expr

        self._error("expression")

    # =========================================================================
    # Entry point
    # =========================================================================

    def produce_ast(self) -> Program:
        """Parse the script region into a Program."""
        self._enter_script_region()
        start = self._current()

        body: List[Statement] = []
        while not self._is_at_end():
            body.append(self._parse_statement())

        if body:
            span = SourceSpan(body[0].span.start, body[-1].span.end)
        else:
            span = SourceSpan(start.span.start, start.span.start)
        return Program(span=span, body=body)


def parse(tokens: List[Token], filename: Optional[str] = None) -> Program:
    """
    Convenience function to parse tokens into a Program.

    Args:
        tokens: List of tokens from the scanner
        filename: Optional filename for error messages

    Returns:
        Parsed Program node

    Raises:
        ParserError: If parsing fails
    """
    parser = Parser(tokens, filename)
    return parser.produce_ast()
