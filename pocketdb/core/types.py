"""
Data Types Module - Defines supported column value kinds for PocketDB

Supports: INTEGER, TEXT
"""

import re
from enum import Enum, auto
from typing import Optional, Union

from .errors import CoercionError


Value = Union[int, str]

_INTEGER_RE = re.compile(r'^[+-]?\d+$')


class DataType(Enum):
    """Supported value kinds in PocketDB"""
    INTEGER = auto()
    TEXT = auto()

    def __str__(self) -> str:
        return 'int' if self is DataType.INTEGER else 'text'


class TypeValidator:
    """Converts statement text into typed cell values"""

    @staticmethod
    def parse_type(type_str: str) -> DataType:
        """Map a column type token to a DataType.

        Only ``int`` is recognized as integer; every other token is text.
        """
        if type_str.strip().lower() == 'int':
            return DataType.INTEGER
        return DataType.TEXT

    @staticmethod
    def strip_quotes(text: str) -> str:
        return text.strip().strip('"\'')

    @staticmethod
    def to_integer(text: str, column: Optional[str] = None) -> int:
        """Parse base-10 integer text, raising CoercionError otherwise"""
        raw = TypeValidator.strip_quotes(text)
        if not _INTEGER_RE.match(raw):
            target = f" for column '{column}'" if column else ""
            raise CoercionError(f"Cannot convert '{raw}' to int{target}.")
        return int(raw)

    @staticmethod
    def coerce(text: str, dtype: DataType, column: Optional[str] = None) -> Value:
        """Convert raw value text to the given kind"""
        if dtype is DataType.INTEGER:
            return TypeValidator.to_integer(text, column)
        return TypeValidator.strip_quotes(text)
