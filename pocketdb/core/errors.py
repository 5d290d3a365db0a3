"""
Errors - The failure kinds a statement can end with
"""

from enum import Enum


class ErrorKind(Enum):
    SYNTAX = 'syntax'
    NOT_FOUND = 'not_found'
    VALIDATION = 'validation'
    TYPE_COERCION = 'type_coercion'
    UNSUPPORTED_PREDICATE = 'unsupported_predicate'
    UNKNOWN_COMMAND = 'unknown_command'
    INTERNAL = 'internal'


class DatabaseError(Exception):
    """Base class for anticipated statement failures"""
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StatementSyntaxError(DatabaseError):
    """Statement does not match the shape of its command"""
    kind = ErrorKind.SYNTAX


class NotFoundError(DatabaseError):
    """Referenced table, row or column does not exist"""
    kind = ErrorKind.NOT_FOUND


class ValidationError(DatabaseError):
    """Schema rule violated (missing primary key, name collision)"""
    kind = ErrorKind.VALIDATION


class CoercionError(DatabaseError):
    """Value cannot be parsed as the declared column kind"""
    kind = ErrorKind.TYPE_COERCION


class UnsupportedPredicateError(DatabaseError):
    """WHERE clause targets something other than the primary key"""
    kind = ErrorKind.UNSUPPORTED_PREDICATE
