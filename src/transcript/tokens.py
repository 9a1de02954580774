"""
Token types for the transcript scanner.

Token type categories follow the diagnostic code ranges:
- E0xx: Scanner errors
- E1xx: Parser errors
- E4xx: Runtime errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional


class TokenType(Enum):
    """All token types recognized by the scanner."""

    # --- Script scope tags ---
    OPEN_TRANS_TAG = auto()     # <trans>
    CLOSE_TRANS_TAG = auto()    # </trans>

    # --- Literals ---
    NUMBER = auto()             # 42
    IDENTIFIER = auto()         # user-defined names

    # --- Keywords ---
    LET = auto()                # let
    CONST = auto()              # const

    # --- Operators ---
    BINARY_OPERATOR = auto()    # + - * / %
    ASSIGNMENT = auto()         # =

    # --- Delimiters ---
    COMMA = auto()              # ,
    DOT = auto()                # .
    COLON = auto()              # :
    SEMICOLON = auto()          # ;
    OPEN_PAREN = auto()         # (
    CLOSE_PAREN = auto()        # )
    OPEN_BRACE = auto()         # {
    CLOSE_BRACE = auto()        # }
    OPEN_BRACKET = auto()       # [
    CLOSE_BRACKET = auto()      # ]

    # --- Special ---
    EOF = auto()                # end of file
    UNKNOWN = auto()            # unrecognized character inside the script region


OPEN_TAG = "<trans>"
CLOSE_TAG = "</trans>"

EOF_VALUE = "EndOfFile"
UNEXPECTED_EOF_VALUE = "UnexpectedEndOfFile"


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the scanner."""
    type: TokenType
    value: str              # The raw text as seen in the source
    span: SourceSpan        # Location in source

    @property
    def is_unexpected_eof(self) -> bool:
        """True for the sentinel EOF appended when a scan aborts."""
        return self.type == TokenType.EOF and self.value == UNEXPECTED_EOF_VALUE

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.IDENTIFIER,
                         TokenType.BINARY_OPERATOR, TokenType.UNKNOWN):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# Reserved words. Read-only for the lifetime of the process.
KEYWORDS: Mapping[str, TokenType] = MappingProxyType({
    "let": TokenType.LET,
    "const": TokenType.CONST,
})


# Single-character punctuation
PUNCTUATION: Mapping[str, TokenType] = MappingProxyType({
    "(": TokenType.OPEN_PAREN,
    ")": TokenType.CLOSE_PAREN,
    "{": TokenType.OPEN_BRACE,
    "}": TokenType.CLOSE_BRACE,
    "[": TokenType.OPEN_BRACKET,
    "]": TokenType.CLOSE_BRACKET,
    "+": TokenType.BINARY_OPERATOR,
    "-": TokenType.BINARY_OPERATOR,
    "*": TokenType.BINARY_OPERATOR,
    "/": TokenType.BINARY_OPERATOR,
    "%": TokenType.BINARY_OPERATOR,
    "=": TokenType.ASSIGNMENT,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
})


def scan_aborted(tokens: List[Token]) -> bool:
    """Check whether a token sequence ends in the unexpected-EOF sentinel."""
    return bool(tokens) and tokens[-1].is_unexpected_eof
