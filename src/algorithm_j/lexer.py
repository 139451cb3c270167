"""Lexer for lambda terms and type schemes."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .errors import LexError


class TokenType(Enum):
    """Token types."""
    # Identifiers and keywords
    IDENT = auto()
    LET = auto()       # let
    IN = auto()        # in
    LAMBDA = auto()    # \ λ lambda
    FORALL = auto()    # ∀ forall

    # Symbols
    LPAREN = auto()    # (
    RPAREN = auto()    # )
    ARROW = auto()     # -> →
    DOT = auto()       # .
    EQUALS = auto()    # =
    COLON = auto()     # :
    COMMA = auto()     # ,
    SEMICOLON = auto() # ;

    # Special
    NEWLINE = auto()
    EOF = auto()


@dataclass
class Token:
    """A lexical token."""
    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}, {self.column})"


class Lexer:
    """Lexical analyzer."""

    KEYWORDS = {
        'let': TokenType.LET,
        'in': TokenType.IN,
        'lambda': TokenType.LAMBDA,
        'forall': TokenType.FORALL,
    }

    SYMBOLS = {
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        '->': TokenType.ARROW,
        '→': TokenType.ARROW,
        '\\': TokenType.LAMBDA,
        'λ': TokenType.LAMBDA,
        '∀': TokenType.FORALL,
        '.': TokenType.DOT,
        '=': TokenType.EQUALS,
        ':': TokenType.COLON,
        ',': TokenType.COMMA,
        ';': TokenType.SEMICOLON,
    }

    def __init__(self, source: str, filename: Optional[str] = None, keep_newlines: bool = False):
        self.source = source
        self.filename = filename
        self.keep_newlines = keep_newlines
        self.position = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def current_char(self) -> Optional[str]:
        """Get the current character."""
        if self.position >= len(self.source):
            return None
        return self.source[self.position]

    def peek_char(self, offset: int = 1) -> Optional[str]:
        """Peek at a character ahead."""
        pos = self.position + offset
        if pos >= len(self.source):
            return None
        return self.source[pos]

    def advance(self) -> None:
        """Move to the next character."""
        if self.position < len(self.source):
            if self.source[self.position] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.position += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace and `--` comments."""
        while self.current_char() is not None:
            if self.current_char() in ' \t\r':
                self.advance()
            elif self.current_char() == '\n':
                if self.keep_newlines:
                    self.tokens.append(Token(TokenType.NEWLINE, '\n', self.line, self.column))
                self.advance()
            elif self.current_char() == '-' and self.peek_char() == '-':
                while self.current_char() is not None and self.current_char() != '\n':
                    self.advance()
            else:
                break

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        value = ""
        while (self.current_char() is not None and
               (self.current_char().isalnum() or self.current_char() in '_\'') and
               self.current_char() != 'λ'):
            value += self.current_char()
            self.advance()
        return value

    def tokenize(self) -> List[Token]:
        """Tokenize the source."""
        self.tokens = []

        while self.position < len(self.source):
            self.skip_whitespace()

            if self.current_char() is None:
                break

            start_line = self.line
            start_column = self.column
            char = self.current_char()

            if (char.isalpha() and char != 'λ') or char == '_':
                value = self.read_identifier()
                token_type = self.KEYWORDS.get(value, TokenType.IDENT)
                self.tokens.append(Token(token_type, value, start_line, start_column))

            elif self.peek_char() and char + self.peek_char() in self.SYMBOLS:
                symbol = char + self.peek_char()
                self.advance()
                self.advance()
                self.tokens.append(Token(self.SYMBOLS[symbol], symbol, start_line, start_column))

            elif char in self.SYMBOLS:
                self.advance()
                self.tokens.append(Token(self.SYMBOLS[char], char, start_line, start_column))

            else:
                raise LexError(f"Unexpected character '{char}'", self.line, self.column, self.filename)

        self.tokens.append(Token(TokenType.EOF, '', self.line, self.column))

        return self.tokens


def lex(source: str, filename: Optional[str] = None, keep_newlines: bool = False) -> List[Token]:
    """Convenience function to tokenize source text."""
    return Lexer(source, filename, keep_newlines).tokenize()
