"""Core module - Database, Schema, Types, Executor, Formatters, REPL"""

from .database import Database
from .repl import REPL
from .schema import TableSchema, Column
from .types import DataType, TypeValidator
from .errors import (
    ErrorKind, DatabaseError, StatementSyntaxError, NotFoundError,
    ValidationError, CoercionError, UnsupportedPredicateError,
)
from .executor import QueryExecutor, QueryResult
from .formatter import ResultFormatter, JsonLinesFormatter, TableFormatter

__all__ = [
    'Database', 'REPL',
    'TableSchema', 'Column',
    'DataType', 'TypeValidator',
    'ErrorKind', 'DatabaseError', 'StatementSyntaxError', 'NotFoundError',
    'ValidationError', 'CoercionError', 'UnsupportedPredicateError',
    'QueryExecutor', 'QueryResult',
    'ResultFormatter', 'JsonLinesFormatter', 'TableFormatter',
]
