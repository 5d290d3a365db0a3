"""Parser module - Lexer and Parser"""

from .lexer import Lexer, Token, TokenType
from .parser import Parser, ParseError, parse_sql

__all__ = ['Lexer', 'Token', 'TokenType', 'Parser', 'ParseError', 'parse_sql']
