"""
Tree-walking interpreter for transcript programs.

Evaluates syntax tree nodes against a chain of environments. Errors are
raised as EvaluationError; ``execute`` and ``run`` turn them into an
ExecutionResult so callers decide whether to abort or continue.

Permissive mode handles errors per statement: a failing statement is
recorded as a diagnostic, logged, and evaluates to null, and evaluation
carries on with the next statement.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .values import (
    Value, Number, ValueType, null_val, number_val, object_val, to_python,
)
from .environment import Environment, create_global_environment

from ..ast import (
    AstNode, Program, VarDeclaration, AssignmentExpr, BinaryExpr,
    Identifier, NumericLiteral, ObjectLiteral,
)
from ..errors import (
    DiagnosticCollector,
    EvaluationError,
    ParserError,
    error_invalid_assignment_target,
    error_unsupported_operand,
    error_division_by_zero,
    error_numeric_overflow,
    error_const_missing_value,
    error_unknown_operator,
    warning_unhandled_node,
)
from ..lexer import Lexer
from ..parser import parse
from ..tokens import SourceSpan

logger = logging.getLogger(__name__)


def _kind_name(node: Any) -> str:
    kind = getattr(node, "kind", None)
    if kind is not None:
        return kind.value
    return type(node).__name__


@dataclass
class ExecutionResult:
    """Result of executing a program."""
    success: bool
    value: Value = field(default_factory=null_val)
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)
    error_message: Optional[str] = None

    @property
    def data(self) -> Any:
        """Get the result as plain Python data."""
        return to_python(self.value)


class Interpreter:
    """
    Tree-walking evaluator.

    Evaluates nodes by dispatching on their type. The interpreter never owns
    the environment chain; it is borrowed from the caller on every call.
    """

    def __init__(self, permissive: bool = False):
        """
        Initialize the interpreter.

        Args:
            permissive: Substitute null for failing statements instead of raising
        """
        self.permissive = permissive
        self.diagnostics = DiagnosticCollector()

    def evaluate(self, node: AstNode, env: Environment) -> Value:
        """
        Evaluate a node to produce a Value.

        Raises:
            EvaluationError: On any runtime error, unless permissive
        """
        if not self.permissive:
            return self._evaluate(node, env)
        try:
            return self._evaluate(node, env)
        except EvaluationError as e:
            self._report(e)
            return null_val()

    def _report(self, error: EvaluationError) -> None:
        self.diagnostics.add_error(error)
        logger.error("%s", error.diagnostic.format(show_source=False))

    def _evaluate(self, node: AstNode, env: Environment) -> Value:
        if isinstance(node, NumericLiteral):
            return number_val(node.value)
        elif isinstance(node, Identifier):
            return self._eval_identifier(node, env)
        elif isinstance(node, ObjectLiteral):
            return self._eval_object_expr(node, env)
        elif isinstance(node, AssignmentExpr):
            return self._eval_assignment(node, env)
        elif isinstance(node, BinaryExpr):
            return self._eval_binary_expr(node, env)
        elif isinstance(node, Program):
            return self._eval_program(node, env)
        elif isinstance(node, VarDeclaration):
            return self._eval_var_declaration(node, env)
        else:
            return self._eval_unhandled(node)

    def _eval_unhandled(self, node: Any) -> Value:
        """Report a node kind the evaluator does not interpret and yield null."""
        diag = warning_unhandled_node(_kind_name(node), getattr(node, "span", None))
        self.diagnostics.add(diag)
        logger.error("%s", diag.format(show_source=False))
        return null_val()

    # =========================================================================
    # Statements
    # =========================================================================

    def _eval_program(self, program: Program, env: Environment) -> Value:
        """Evaluate statements in order; the last result is the program's result."""
        last = null_val()
        for stmt in program.body:
            last = self.evaluate(stmt, env)
        return last

    def _eval_var_declaration(self, decl: VarDeclaration, env: Environment) -> Value:
        if decl.value is None:
            if decl.constant:
                raise error_const_missing_value(decl.identifier, decl.span)
            value = null_val()
        else:
            value = self._evaluate(decl.value, env)
        return env.declare(decl.identifier, value, decl.constant, decl.span)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _eval_identifier(self, ident: Identifier, env: Environment) -> Value:
        return env.lookup(ident.symbol, ident.span)

    def _eval_object_expr(self, obj: ObjectLiteral, env: Environment) -> Value:
        properties = {}
        for prop in obj.properties:
            if prop.value is None:
                # { key } shorthand reads the variable of the same name
                value = env.lookup(prop.key, prop.span)
            else:
                value = self._evaluate(prop.value, env)
            properties[prop.key] = value
        return object_val(properties)

    def _eval_assignment(self, node: AssignmentExpr, env: Environment) -> Value:
        if not isinstance(node.assignee, Identifier):
            raise error_invalid_assignment_target(_kind_name(node.assignee), node.span)

        value = self._evaluate(node.value, env)
        return env.assign(node.assignee.symbol, value, node.span)

    def _eval_binary_expr(self, op: BinaryExpr, env: Environment) -> Value:
        left = self._evaluate(op.left, env)
        right = self._evaluate(op.right, env)

        if left.type != ValueType.NUMBER or right.type != ValueType.NUMBER:
            raise error_unsupported_operand(op.operator, left.type.value, right.type.value, op.span)

        try:
            result = self._eval_numeric(left.data, op.operator, right.data, op.span)
        except OverflowError:
            raise error_numeric_overflow(op.operator, op.span) from None
        return number_val(result)

    def _eval_numeric(self, left: Number, operator: str, right: Number,
                      span: Optional[SourceSpan]) -> Number:
        if operator == "+":
            return left + right
        elif operator == "-":
            return left - right
        elif operator == "*":
            return left * right
        elif operator in ("/", "%") and right == 0:
            raise error_division_by_zero(operator, span)
        elif operator == "/":
            # Exact integer quotients stay integers of any size
            if isinstance(left, int) and isinstance(right, int) and left % right == 0:
                return left // right
            return left / right
        elif operator == "%":
            return _remainder(left, right)
        else:
            raise error_unknown_operator(operator, span)


def _remainder(left: Number, right: Number) -> Number:
    """Remainder with the sign of the dividend."""
    if isinstance(left, int) and isinstance(right, int):
        result = abs(left) % abs(right)
        return -result if left < 0 else result
    return math.fmod(left, right)


def _attach_source_lines(diagnostics: DiagnosticCollector, source: str) -> None:
    """Fill in the source line of diagnostics that have a span but no line."""
    lines: List[str] = source.splitlines()
    for diag in diagnostics.diagnostics:
        if diag.source_line is None and diag.span is not None:
            line = diag.span.start.line
            if 1 <= line <= len(lines):
                diag.source_line = lines[line - 1]


def execute(
    program: Program,
    env: Optional[Environment] = None,
    permissive: bool = False,
) -> ExecutionResult:
    """
    Evaluate a parsed program.

    Args:
        program: The Program node
        env: Root environment; a fresh global environment when omitted
        permissive: Continue past failing statements, substituting null

    Returns:
        ExecutionResult with the value of the last statement
    """
    if env is None:
        env = create_global_environment()

    interpreter = Interpreter(permissive=permissive)
    try:
        value = interpreter.evaluate(program, env)
    except EvaluationError as e:
        interpreter._report(e)
        return ExecutionResult(
            success=False,
            diagnostics=interpreter.diagnostics,
            error_message=e.diagnostic.message,
        )

    return ExecutionResult(
        success=not interpreter.diagnostics.has_errors,
        value=value,
        diagnostics=interpreter.diagnostics,
    )


def run(
    source: str,
    env: Optional[Environment] = None,
    permissive: bool = False,
    filename: Optional[str] = None,
) -> ExecutionResult:
    """
    Convenience function to scan, parse and execute source text.

    Args:
        source: Source text containing the script region
        env: Root environment; a fresh global environment when omitted
        permissive: Continue past failing statements, substituting null
        filename: Optional filename for diagnostics

    Returns:
        ExecutionResult; scan and parse failures are reported as unsuccessful results
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()

    diagnostics = DiagnosticCollector()
    diagnostics.extend(lexer.diagnostics)

    if lexer.aborted:
        return ExecutionResult(
            success=False,
            diagnostics=diagnostics,
            error_message=next(
                d.message for d in lexer.diagnostics.diagnostics if d.code == "E001"
            ),
        )

    try:
        program = parse(tokens, filename)
    except ParserError as e:
        diagnostics.add_error(e)
        _attach_source_lines(diagnostics, source)
        return ExecutionResult(
            success=False,
            diagnostics=diagnostics,
            error_message=e.diagnostic.message,
        )

    result = execute(program, env, permissive)
    diagnostics.extend(result.diagnostics)
    _attach_source_lines(diagnostics, source)
    result.diagnostics = diagnostics
    return result
