"""
SQL Lexer - Tokenizes PocketDB statements

Converts raw statement text into a stream of tokens for the parser.
Every token remembers its span in the source so the parser can recover
values exactly as they were written.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, List, Optional


class TokenType(Enum):
    """Types of tokens in a statement"""
    # Keywords
    SELECT = auto()
    FROM = auto()
    WHERE = auto()
    INSERT = auto()
    INTO = auto()
    VALUES = auto()
    UPDATE = auto()
    SET = auto()
    DELETE = auto()
    CREATE = auto()
    DROP = auto()
    TABLE = auto()
    JOIN = auto()
    ON = auto()

    # Operators and punctuation
    EQUALS = auto()
    MINUS = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    SEMICOLON = auto()
    DOT = auto()
    STAR = auto()

    # Literals
    INTEGER = auto()
    STRING = auto()
    IDENTIFIER = auto()

    # Any other character, kept so bare values survive intact
    SYMBOL = auto()

    # Special
    EOF = auto()


@dataclass
class Token:
    """A single token"""
    type: TokenType
    value: Any
    line: int
    column: int
    pos: int = 0
    end: int = 0

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r})"


class Lexer:
    """Statement lexer - converts text to tokens"""

    KEYWORDS = {
        'SELECT': TokenType.SELECT,
        'FROM': TokenType.FROM,
        'WHERE': TokenType.WHERE,
        'INSERT': TokenType.INSERT,
        'INTO': TokenType.INTO,
        'VALUES': TokenType.VALUES,
        'UPDATE': TokenType.UPDATE,
        'SET': TokenType.SET,
        'DELETE': TokenType.DELETE,
        'CREATE': TokenType.CREATE,
        'DROP': TokenType.DROP,
        'TABLE': TokenType.TABLE,
        'JOIN': TokenType.JOIN,
        'ON': TokenType.ON,
    }

    # Elsewhere a quote is part of a bare word, as in O'Brien
    STRING_OPENERS = {TokenType.LPAREN, TokenType.COMMA, TokenType.EQUALS}

    SINGLE_CHAR_TOKENS = {
        '=': TokenType.EQUALS,
        '-': TokenType.MINUS,
        '*': TokenType.STAR,
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        ',': TokenType.COMMA,
        ';': TokenType.SEMICOLON,
        '.': TokenType.DOT,
    }

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def _current_char(self) -> Optional[str]:
        """Get current character or None if at end"""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def _advance(self) -> str:
        """Advance position and return current char"""
        char = self._current_char()
        self.pos += 1
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _skip_whitespace(self) -> None:
        while self._current_char() is not None and self._current_char().isspace():
            self._advance()

    def _read_string(self, quote_char: str) -> Token:
        """Read a quoted string literal"""
        start, start_line, start_col = self.pos, self.line, self.column
        self._advance()  # Opening quote

        value = []
        while self._current_char() is not None and self._current_char() != quote_char:
            if self._current_char() == '\\' and self._peek() == quote_char:
                self._advance()  # Skip escape
            value.append(self._advance())

        if self._current_char() == quote_char:
            self._advance()  # Closing quote

        return Token(TokenType.STRING, ''.join(value), start_line, start_col, start, self.pos)

    def _read_number(self) -> Token:
        start, start_line, start_col = self.pos, self.line, self.column
        while self._current_char() is not None and self._current_char().isdigit():
            self._advance()
        return Token(TokenType.INTEGER, int(self.text[start:self.pos]),
                     start_line, start_col, start, self.pos)

    def _read_identifier(self) -> Token:
        """Read an identifier or keyword"""
        start, start_line, start_col = self.pos, self.line, self.column
        while self._current_char() is not None and (self._current_char().isalnum() or
                                                    self._current_char() == '_'):
            self._advance()

        identifier = self.text[start:self.pos]
        upper_id = identifier.upper()

        if upper_id in self.KEYWORDS:
            return Token(self.KEYWORDS[upper_id], upper_id, start_line, start_col, start, self.pos)

        return Token(TokenType.IDENTIFIER, identifier, start_line, start_col, start, self.pos)

    def _opens_string(self, tokens: List[Token]) -> bool:
        """Quotes open a string only where a value can start"""
        return not tokens or tokens[-1].type in self.STRING_OPENERS

    def tokenize(self) -> List[Token]:
        """Tokenize the entire input"""
        tokens = []

        while True:
            self._skip_whitespace()
            char = self._current_char()
            if char is None:
                break

            if char in '"\'' and self._opens_string(tokens):
                tokens.append(self._read_string(char))
            elif char.isdigit():
                tokens.append(self._read_number())
            elif char.isalpha() or char == '_':
                tokens.append(self._read_identifier())
            else:
                start, start_line, start_col = self.pos, self.line, self.column
                self._advance()
                token_type = self.SINGLE_CHAR_TOKENS.get(char, TokenType.SYMBOL)
                tokens.append(Token(token_type, char, start_line, start_col, start, self.pos))

        tokens.append(Token(TokenType.EOF, None, self.line, self.column, self.pos, self.pos))

        return tokens
