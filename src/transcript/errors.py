"""
Exceptions and diagnostics shared by the scanner, parser and evaluator.

Error code ranges:
- E0xx: Scanner errors
- E1xx: Parser errors
- E4xx: Runtime errors
- W0xx/W4xx: Scanner/runtime warnings
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        loc = f"{self.span.start}" if self.span is not None else "<unknown>"
        parts.append(f"{loc}: {self.severity.value}[{self.code}]: {self.message}")

        # Source line with caret
        if show_source and self.span is not None and self.source_line is not None:
            parts.append("  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            if self.span.start.line == self.span.end.line:
                end_col = self.span.end.column
            else:
                end_col = len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        result = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "range": None,
            "hints": self.hints,
        }
        if self.span is not None:
            result["range"] = {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            }
        return result


class TranscriptError(Exception):
    """Base exception for transcript errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(TranscriptError):
    """Error during scanning (E0xx)."""
    pass


class ParserError(TranscriptError):
    """Error during parsing (E1xx)."""
    pass


class EvaluationError(TranscriptError):
    """Error during evaluation (E4xx)."""
    pass


# --- Scanner diagnostics ---

def error_unrecognized_character(char: str, span: SourceSpan,
                                 source_line: str = None) -> LexerError:
    """E001: Unrecognized character inside the script region."""
    diag = Diagnostic(
        code="E001",
        message=f"unrecognized character {char!r} (code {ord(char)}) inside script region",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=["the scan was aborted; the token stream ends with UnexpectedEndOfFile"],
    )
    return LexerError(diag)


def warning_self_closing_comment(span: SourceSpan, source_line: str = None) -> Diagnostic:
    """W001: Block comment whose content starts with a slash."""
    return Diagnostic(
        code="W001",
        message="block comment content begins with '/'; some consumers reject '/*/' as an unknown token '*/'",
        severity=ErrorSeverity.WARNING,
        span=span,
        source_line=source_line,
    )


def warning_unterminated_comment(span: SourceSpan, source_line: str = None) -> Diagnostic:
    """W002: Block comment without a closing delimiter."""
    return Diagnostic(
        code="W002",
        message="unterminated block comment (expected closing */); rest of input skipped",
        severity=ErrorSeverity.WARNING,
        span=span,
        source_line=source_line,
    )


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, span: SourceSpan,
                           source_line: str = None) -> ParserError:
    """E101: Unexpected token."""
    diag = Diagnostic(
        code="E101",
        message=f"expected {expected}, found {found}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParserError(diag)


def error_unexpected_eof(expected: str, span: SourceSpan) -> ParserError:
    """E102: Unexpected end of file."""
    diag = Diagnostic(
        code="E102",
        message=f"unexpected end of file, expected {expected}",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return ParserError(diag)


def error_missing_close_tag(span: SourceSpan) -> ParserError:
    """E104: Script region opened but never closed."""
    diag = Diagnostic(
        code="E104",
        message="missing closing tag </trans>",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return ParserError(diag)


def error_scan_aborted(span: SourceSpan) -> ParserError:
    """E105: Token stream ends in the unexpected-EOF sentinel."""
    diag = Diagnostic(
        code="E105",
        message="token stream is incomplete: the scanner aborted on an unrecognized character",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return ParserError(diag)


def error_const_without_initializer(name: str, span: SourceSpan,
                                    source_line: str = None) -> ParserError:
    """E106: Constant declared without a value."""
    diag = Diagnostic(
        code="E106",
        message=f"must assign a value to constant '{name}'",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParserError(diag)


def error_numeric_literal_too_large(digits: int, span: SourceSpan,
                                    source_line: str = None) -> ParserError:
    """E107: Integer literal too long to convert."""
    diag = Diagnostic(
        code="E107",
        message=f"numeric literal too large ({digits} digits)",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParserError(diag)


# --- Runtime error codes ---

def error_undeclared_variable(name: str, span: SourceSpan = None) -> EvaluationError:
    """E401: Variable lookup or assignment reached the end of the scope chain."""
    diag = Diagnostic(
        code="E401",
        message=f"cannot resolve '{name}': variable not declared",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return EvaluationError(diag)


def error_already_declared(name: str, span: SourceSpan = None) -> EvaluationError:
    """E402: Redeclaration in the same scope."""
    diag = Diagnostic(
        code="E402",
        message=f"cannot declare '{name}': already declared in this scope",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return EvaluationError(diag)


def error_constant_reassignment(name: str, span: SourceSpan = None) -> EvaluationError:
    """E403: Assignment to a constant binding."""
    diag = Diagnostic(
        code="E403",
        message=f"cannot reassign constant '{name}'",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return EvaluationError(diag)


def error_invalid_assignment_target(kind: str, span: SourceSpan = None) -> EvaluationError:
    """E404: Assignment target is not an identifier."""
    diag = Diagnostic(
        code="E404",
        message=f"invalid assignment target: {kind}",
        severity=ErrorSeverity.ERROR,
        span=span,
        hints=["only identifiers can be assigned to"],
    )
    return EvaluationError(diag)


def error_unsupported_operand(operator: str, left: str, right: str,
                              span: SourceSpan = None) -> EvaluationError:
    """E405: Binary operator applied to non-numeric operands."""
    diag = Diagnostic(
        code="E405",
        message=f"unsupported operand type(s) for '{operator}': '{left}' and '{right}'",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return EvaluationError(diag)


def error_division_by_zero(operator: str, span: SourceSpan = None) -> EvaluationError:
    """E406: Division or modulo by zero."""
    what = "modulo" if operator == "%" else "division"
    diag = Diagnostic(
        code="E406",
        message=f"{what} by zero",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return EvaluationError(diag)


def error_numeric_overflow(operator: str, span: SourceSpan = None) -> EvaluationError:
    """E409: Arithmetic result out of floating point range."""
    diag = Diagnostic(
        code="E409",
        message=f"numeric overflow in '{operator}': result too large for a float",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return EvaluationError(diag)


def error_const_missing_value(name: str, span: SourceSpan = None) -> EvaluationError:
    """E407: Constant declaration reached the evaluator without a value."""
    diag = Diagnostic(
        code="E407",
        message=f"constant '{name}' must be initialized",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return EvaluationError(diag)


def error_unknown_operator(operator: str, span: SourceSpan = None) -> EvaluationError:
    """E408: Operator outside + - * / %."""
    diag = Diagnostic(
        code="E408",
        message=f"unknown binary operator '{operator}'",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return EvaluationError(diag)


def warning_unhandled_node(kind: str, span: SourceSpan = None) -> Diagnostic:
    """W401: Syntax kind the evaluator does not interpret."""
    return Diagnostic(
        code="W401",
        message=f"unhandled syntax kind '{kind}'; evaluated as null",
        severity=ErrorSeverity.WARNING,
        span=span,
    )


class DiagnosticCollector:
    """Collects diagnostics during scanning and evaluation."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1

    def add_error(self, error: TranscriptError) -> None:
        """Add an error exception as a diagnostic."""
        self.add(error.diagnostic)

    def extend(self, other: "DiagnosticCollector") -> None:
        """Append every diagnostic from another collector."""
        for diagnostic in other.diagnostics:
            self.add(diagnostic)

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == ErrorSeverity.WARNING)

    @property
    def has_errors(self) -> bool:
        return self._error_count > 0

    def codes(self) -> List[str]:
        """Diagnostic codes in the order they were recorded."""
        return [d.code for d in self.diagnostics]

    def format_all(self, show_source: bool = True) -> str:
        """Format all diagnostics for display."""
        parts = [d.format(show_source) for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"\n{self._error_count} error(s), {self.warning_count} warning(s)")
        elif self.warning_count > 0:
            parts.append(f"\n{self.warning_count} warning(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
            "warning_count": self.warning_count,
        }
