"""
transcript - scanner and evaluator for <trans> script regions.

This module provides:
- Lexer: Tokenizes source text, honouring the <trans> script region
- Parser: Builds a syntax tree from tokens
- Interpreter: Evaluates the tree against chained environments

Usage:
    from transcript import tokenize, parse, execute, run

    tokens = tokenize('<trans>let x = 5; x;</trans>')
    program = parse(tokens)
    result = execute(program)
    print(result.data)   # 5

    # Or in one step
    result = run('<p>total:</p><trans>let a = 2; a * 21</trans>')
    if not result.success:
        print(result.diagnostics.format_all())
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("transcript-lang")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"


from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
    OPEN_TAG,
    CLOSE_TAG,
    EOF_VALUE,
    UNEXPECTED_EOF_VALUE,
    scan_aborted,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    AstNode,
    AstVisitor,
    NodeKind,
    Statement,
    Expression,
    Program,
    VarDeclaration,
    AssignmentExpr,
    BinaryExpr,
    MemberExpr,
    CallExpr,
    Identifier,
    NumericLiteral,
    Property,
    ObjectLiteral,
    format_ast,
    print_ast,
)

from .errors import (
    TranscriptError,
    LexerError,
    ParserError,
    EvaluationError,
    Diagnostic,
    DiagnosticCollector,
    ErrorSeverity,
)

from .runtime import (
    Interpreter,
    ExecutionResult,
    execute,
    run,
    Environment,
    create_global_environment,
    Value,
    ValueType,
    null_val,
    number_val,
    bool_val,
    object_val,
    to_python,
    format_value,
)

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',
    'KEYWORDS',
    'OPEN_TAG',
    'CLOSE_TAG',
    'EOF_VALUE',
    'UNEXPECTED_EOF_VALUE',
    'scan_aborted',

    # Lexer
    'Lexer',
    'tokenize',

    # Parser
    'Parser',
    'parse',

    # Syntax tree
    'AstNode',
    'AstVisitor',
    'NodeKind',
    'Statement',
    'Expression',
    'Program',
    'VarDeclaration',
    'AssignmentExpr',
    'BinaryExpr',
    'MemberExpr',
    'CallExpr',
    'Identifier',
    'NumericLiteral',
    'Property',
    'ObjectLiteral',
    'format_ast',
    'print_ast',

    # Errors
    'TranscriptError',
    'LexerError',
    'ParserError',
    'EvaluationError',
    'Diagnostic',
    'DiagnosticCollector',
    'ErrorSeverity',

    # Runtime
    'Interpreter',
    'ExecutionResult',
    'execute',
    'run',
    'Environment',
    'create_global_environment',
    'Value',
    'ValueType',
    'null_val',
    'number_val',
    'bool_val',
    'object_val',
    'to_python',
    'format_value',
]
