"""
Schema Module - Defines table structure and the primary key rule

Every table carries exactly one primary key: an ``id`` column of
integer kind, declared explicitly in CREATE TABLE.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import ValidationError
from .types import DataType

PRIMARY_KEY = 'id'


@dataclass
class Column:
    """Represents a column in a table"""
    name: str
    dtype: DataType
    primary_key: bool = False


@dataclass
class TableSchema:
    """Represents the schema of a table"""
    name: str
    columns: List[Column] = field(default_factory=list)
    primary_key: Optional[str] = None  # Column name that is PK

    def __post_init__(self):
        self._column_map: Dict[str, Column] = {}

        columns, self.columns = self.columns, []
        for col in columns:
            self.add_column(col)

    def add_column(self, column: Column) -> None:
        """Add a column to the schema"""
        if column.name.lower() in self._column_map:
            raise ValidationError(f"Column '{column.name}' already exists.")

        if column.name.lower() == PRIMARY_KEY and column.dtype is DataType.INTEGER:
            column.primary_key = True

        self.columns.append(column)
        self._column_map[column.name.lower()] = column

        if column.primary_key:
            self.primary_key = column.name

    def validate(self) -> None:
        """Check the primary key rule"""
        if self.primary_key is None:
            raise ValidationError("Table must include an 'id' column of type 'int'.")

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by name (case-insensitive)"""
        return self._column_map.get(name.lower())

    def get_column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def to_dict(self) -> dict:
        """Serialize schema to dictionary"""
        return {
            'name': self.name,
            'columns': [
                {
                    'name': col.name,
                    'type': str(col.dtype),
                    'primary_key': col.primary_key,
                }
                for col in self.columns
            ],
            'primary_key': self.primary_key,
        }
