"""
Storage Engine - Holds table rows in memory

Features:
- One row store per table, keyed by primary key
- Table registry owned by a single Database instance
- Nothing is written to disk; data lives as long as the process
"""

import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, Iterator, List, Optional

from ..core.errors import NotFoundError, ValidationError
from ..core.schema import TableSchema
from ..core.types import Value

logger = logging.getLogger(__name__)


@dataclass
class Row:
    """A primary key plus the row's values by column name"""
    id: int
    data: Dict[str, Value] = field(default_factory=dict)

    def copy(self) -> 'Row':
        return Row(self.id, dict(self.data))


@dataclass
class TableStorage:
    """
    Storage manager for a single table.
    Rows are addressed by their primary key value.
    """
    schema: TableSchema
    rows: Dict[int, Row] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock)

    @property
    def name(self) -> str:
        return self.schema.name

    def insert(self, row: Row) -> bool:
        """Store a row under its key. Returns True when a row was replaced."""
        with self._lock:
            replaced = row.id in self.rows
            if replaced:
                logger.debug("Overwriting row %d in '%s'", row.id, self.name)
            self.rows[row.id] = row
            return replaced

    def get(self, row_id: int) -> Optional[Row]:
        """Get a copy of the row with the given key"""
        row = self.rows.get(row_id)
        return row.copy() if row is not None else None

    def update(self, row: Row) -> bool:
        """Write back a row that already exists"""
        with self._lock:
            if row.id not in self.rows:
                return False
            self.rows[row.id] = row
            return True

    def delete(self, row_id: int) -> bool:
        """Delete a row by key; an absent key is not an error"""
        with self._lock:
            return self.rows.pop(row_id, None) is not None

    def scan(self) -> Iterator[Row]:
        """Iterate over copies of all rows"""
        for row in list(self.rows.values()):
            yield row.copy()

    def count(self) -> int:
        return len(self.rows)

    def drop(self) -> None:
        """Discard all rows"""
        with self._lock:
            self.rows.clear()


class StorageEngine:
    """
    Table registry: maps table names to their row stores.
    Names are matched case-insensitively.
    """

    def __init__(self):
        self.tables: Dict[str, TableStorage] = {}

    def create_table(self, schema: TableSchema) -> TableStorage:
        """Create and register an empty table"""
        table_name = schema.name.lower()
        if table_name in self.tables:
            raise ValidationError("Table already exists.")
        schema.validate()
        storage = TableStorage(schema)
        self.tables[table_name] = storage
        logger.debug("Created table '%s'", schema.name)
        return storage

    def drop_table(self, name: str) -> None:
        """Drop a table and its rows"""
        storage = self.tables.pop(name.lower(), None)
        if storage is None:
            raise NotFoundError("Table not found.")
        storage.drop()
        logger.debug("Dropped table '%s'", storage.name)

    def get_table_storage(self, name: str) -> Optional[TableStorage]:
        return self.tables.get(name.lower())

    def get_table_schema(self, name: str) -> Optional[TableSchema]:
        storage = self.get_table_storage(name)
        return storage.schema if storage is not None else None

    def table_exists(self, name: str) -> bool:
        return name.lower() in self.tables

    def list_tables(self) -> List[str]:
        return [storage.name for storage in self.tables.values()]
