"""
Scanner for transcript source text.

Converts source text into a list of tokens for the parser.
Supports:
- Line comments (//) and block comments (/* */)
- A single <trans> ... </trans> script region
- Single-character punctuation and binary operators
- Integer literals
- Identifiers and the reserved words let/const

Text outside the script region is template markup: characters the scanner
does not recognize there are dropped. Inside the region an unrecognized
character aborts the scan, and the result ends with an EOF token whose value
is UnexpectedEndOfFile instead of EndOfFile. The scanner never raises;
callers check the final token (see ``scan_aborted``).
"""

import logging
from typing import List, Optional, Iterator

from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, KEYWORDS, PUNCTUATION,
    OPEN_TAG, CLOSE_TAG, EOF_VALUE, UNEXPECTED_EOF_VALUE,
)
from .errors import (
    Diagnostic,
    DiagnosticCollector,
    error_unrecognized_character,
    warning_self_closing_comment,
    warning_unterminated_comment,
)

logger = logging.getLogger(__name__)

WHITESPACE = frozenset(" \t\n\r")


def is_alpha(ch: str) -> bool:
    """A character is alphabetic when its upper and lower case forms differ."""
    return ch.upper() != ch.lower()


def is_digit(ch: str) -> bool:
    """ASCII decimal digits only."""
    return "0" <= ch <= "9"


class Lexer:
    """
    Tokenizer with tag-scoped recognition.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
        if lexer.aborted:
            print(lexer.diagnostics.format_all())
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

        # Script region state: each tag is recognized at most once
        self.tag_opened = False
        self.tag_closed = False
        self.aborted = False

        self.diagnostics = DiagnosticCollector()
        self._tokens: Optional[List[Token]] = None

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _advance_by(self, count: int) -> None:
        for _ in range(count):
            self._advance()

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _starts_with(self, text: str) -> bool:
        return self.source.startswith(text, self.pos)

    def _emit(self, token_type: TokenType, value: str, start: SourceLocation) -> None:
        self._tokens.append(Token(token_type, value, self._span(start)))

    def _warn(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.add(diagnostic)
        logger.warning("%s", diagnostic.format(show_source=False))

    def _skip_line_comment(self) -> None:
        """Skip // up to, but not including, the next newline (or end of input)."""
        self._advance_by(2)
        while not self._is_at_end() and self._peek() != '\n':
            self._advance()

    def _skip_block_comment(self) -> None:
        """Skip /* ... */. Unterminated comments swallow the rest of the input."""
        start = self._location()
        self._advance_by(2)

        if self._peek() == '/':
            self._warn(warning_self_closing_comment(
                self._span(start), self.get_source_line(start.line)
            ))

        while not self._is_at_end():
            ch = self._advance()
            if ch == '*' and self._peek() == '/':
                self._advance()
                return

        self._warn(warning_unterminated_comment(
            self._span(start), self.get_source_line(start.line)
        ))

    def _scan_number(self) -> None:
        start = self._location()
        begin = self.pos
        while not self._is_at_end() and is_digit(self._peek()):
            self._advance()
        self._emit(TokenType.NUMBER, self.source[begin:self.pos], start)

    def _scan_identifier_or_keyword(self) -> None:
        start = self._location()
        begin = self.pos
        while not self._is_at_end() and is_alpha(self._peek()):
            self._advance()
        lexeme = self.source[begin:self.pos]
        self._emit(KEYWORDS.get(lexeme, TokenType.IDENTIFIER), lexeme, start)

    def _unrecognized(self, ch: str) -> None:
        """Handle a character no rule claims."""
        if not self.tag_opened:
            # Template text before the script region
            self._advance()
            return

        start = self._location()
        self._advance()
        span = self._span(start)
        error = error_unrecognized_character(ch, span, self.get_source_line(start.line))
        self.diagnostics.add_error(error)
        logger.error(
            "%s (script region opened: %s, closed: %s)",
            error.diagnostic.format(show_source=False), self.tag_opened, self.tag_closed,
        )
        self._tokens.append(Token(TokenType.UNKNOWN, ch, span))
        self._tokens.append(Token(TokenType.EOF, UNEXPECTED_EOF_VALUE, SourceSpan(span.end, span.end)))
        self.aborted = True

    def _scan_step(self) -> None:
        """Classify and consume the next piece of input."""
        ch = self._peek()

        if ch == '/' and self._peek(1) == '/':
            self._skip_line_comment()
        elif ch == '/' and self._peek(1) == '*':
            self._skip_block_comment()
        elif not self.tag_opened and self._starts_with(OPEN_TAG):
            start = self._location()
            self._advance_by(len(OPEN_TAG))
            self._emit(TokenType.OPEN_TRANS_TAG, OPEN_TAG, start)
            self.tag_opened = True
        elif self.tag_opened and not self.tag_closed and self._starts_with(CLOSE_TAG):
            start = self._location()
            self._advance_by(len(CLOSE_TAG))
            self._emit(TokenType.CLOSE_TRANS_TAG, CLOSE_TAG, start)
            self.tag_closed = True
        elif ch in PUNCTUATION:
            start = self._location()
            self._advance()
            self._emit(PUNCTUATION[ch], ch, start)
        elif is_digit(ch):
            self._scan_number()
        elif is_alpha(ch):
            self._scan_identifier_or_keyword()
        elif ch in WHITESPACE:
            self._advance()
        else:
            self._unrecognized(ch)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        if self._tokens is not None:
            return list(self._tokens)

        self._tokens = []
        while not self._is_at_end() and not self.aborted:
            self._scan_step()

        if not self.aborted:
            self._emit(TokenType.EOF, EOF_VALUE, self._location())
        return list(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        return iter(self.tokenize())


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for diagnostics

    Returns:
        List of tokens, always ending in exactly one EOF token
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()
