"""
Query Executor - Executes parsed statements

Takes statement nodes from the parser and executes them against
the storage engine, returning results.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..parser.parser import (
    CreateTableStatement, DropTableStatement, InsertStatement, SelectStatement,
    JoinStatement, UpdateStatement, DeleteStatement, Literal, Predicate,
)
from ..storage.engine import StorageEngine, TableStorage, Row
from .errors import (
    ErrorKind, CoercionError, NotFoundError, StatementSyntaxError,
    UnsupportedPredicateError, ValidationError,
)
from .formatter import JsonLinesFormatter
from .schema import TableSchema, Column, PRIMARY_KEY
from .types import DataType, TypeValidator, Value

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Outcome of one statement: a success payload or an error"""
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Value]] = field(default_factory=list)
    affected_rows: int = 0
    message: str = ""
    lines: List[str] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> 'QueryResult':
        return cls(message=message, error_kind=kind)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def render(self, formatter=None) -> str:
        """Render through a formatter, JSON lines by default"""
        if formatter is None:
            formatter = JsonLinesFormatter()
        return formatter.format_result(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ok': self.ok,
            'message': self.message,
            'columns': list(self.columns),
            'rows': [dict(row) for row in self.rows],
            'affected_rows': self.affected_rows,
            'lines': list(self.lines),
            'error': None if self.ok else {
                'kind': self.error_kind.value,
                'message': self.message,
            },
        }

    def __str__(self) -> str:
        return self.render()


class QueryExecutor:
    """
    Executes statements against the database.

    Each handler raises a DatabaseError subclass for anticipated failures;
    turning those into results is left to the caller.
    """

    JOIN_LEFT_COLUMN = 'username'
    JOIN_RIGHT_KEY = 'user_id'
    JOIN_RIGHT_COLUMN = 'item'

    def __init__(self, storage: StorageEngine):
        self.storage = storage

    def execute(self, ast: Any) -> QueryResult:
        """Execute a parsed statement"""
        if isinstance(ast, SelectStatement):
            return self._execute_select(ast)
        elif isinstance(ast, JoinStatement):
            return self._execute_join(ast)
        elif isinstance(ast, InsertStatement):
            return self._execute_insert(ast)
        elif isinstance(ast, UpdateStatement):
            return self._execute_update(ast)
        elif isinstance(ast, DeleteStatement):
            return self._execute_delete(ast)
        elif isinstance(ast, CreateTableStatement):
            return self._execute_create_table(ast)
        elif isinstance(ast, DropTableStatement):
            return self._execute_drop_table(ast)
        else:
            raise ValueError(f"Unknown statement type: {type(ast)}")

    def _require_table(self, name: str, message: str = "Table not found.") -> TableStorage:
        table_storage = self.storage.get_table_storage(name)
        if table_storage is None:
            raise NotFoundError(message)
        return table_storage

    def _resolve_key(self, where: Predicate, unsupported: str) -> int:
        """Turn an ``id=<int>`` predicate into a primary key value"""
        if where.column.lower() != PRIMARY_KEY:
            raise UnsupportedPredicateError(unsupported)
        try:
            return TypeValidator.to_integer(where.value.text)
        except CoercionError:
            raise CoercionError("Invalid ID format.") from None

    @staticmethod
    def _coerce(literal: Literal, column: Column) -> Value:
        if column.dtype is DataType.TEXT and literal.quoted:
            return literal.text
        return TypeValidator.coerce(literal.text, column.dtype, column.name)

    def _execute_create_table(self, stmt: CreateTableStatement) -> QueryResult:
        if self.storage.table_exists(stmt.table):
            raise ValidationError("Table already exists.")

        schema = TableSchema(name=stmt.table, columns=[
            Column(name=col_def.name, dtype=TypeValidator.parse_type(col_def.data_type))
            for col_def in stmt.columns
        ])
        self.storage.create_table(schema)

        return QueryResult(message=f"Table '{stmt.table}' created successfully.")

    def _execute_drop_table(self, stmt: DropTableStatement) -> QueryResult:
        table_storage = self._require_table(stmt.table)
        self.storage.drop_table(stmt.table)
        return QueryResult(message=f"Table '{table_storage.name}' dropped successfully.")

    def _execute_insert(self, stmt: InsertStatement) -> QueryResult:
        table_storage = self._require_table(stmt.table)
        schema = table_storage.schema

        if len(stmt.values) < len(schema.columns):
            raise StatementSyntaxError(
                f"Expected {len(schema.columns)} values for table '{schema.name}', "
                f"got {len(stmt.values)}."
            )
        if len(stmt.values) > len(schema.columns):
            logger.debug("Ignoring %d surplus values for '%s'",
                         len(stmt.values) - len(schema.columns), schema.name)

        data = {
            col.name: self._coerce(literal, col)
            for col, literal in zip(schema.columns, stmt.values)
        }
        row = Row(id=data[schema.primary_key], data=data)
        table_storage.insert(row)

        return QueryResult(affected_rows=1, message="Row inserted successfully.")

    def _project(self, schema: TableSchema, columns: List[str]) -> List[str]:
        if columns == ['*']:
            return schema.get_column_names()

        projected = []
        for name in columns:
            col = schema.get_column(name)
            if col is None:
                raise NotFoundError(f"Column '{name}' not found.")
            projected.append(col.name)
        return projected

    def _execute_select(self, stmt: SelectStatement) -> QueryResult:
        table_storage = self._require_table(
            stmt.table, "Table not found. Usage: SELECT * FROM [table]")
        columns = self._project(table_storage.schema, stmt.columns)

        if stmt.where is not None:
            key = self._resolve_key(stmt.where, "Only lookup by ID is supported.")
            row = table_storage.get(key)
            if row is None:
                return QueryResult(columns=columns, message="No results.")
            rows = [row]
        else:
            rows = list(table_storage.scan())

        return QueryResult(
            columns=columns,
            rows=[{col: row.data[col] for col in columns} for row in rows],
        )

    def _join_column(self, schema: TableSchema, name: str,
                     dtype: Optional[DataType] = None) -> str:
        col = schema.get_column(name)
        if col is None:
            raise ValidationError(f"Join requires column '{name}' in table '{schema.name}'.")
        if dtype is not None and col.dtype is not dtype:
            raise ValidationError(f"Join column '{schema.name}.{col.name}' must be of type '{dtype}'.")
        return col.name

    def _execute_join(self, stmt: JoinStatement) -> QueryResult:
        """Pair rows where left.id == right.user_id.

        The ON clause is carried on the statement but not evaluated.
        """
        left = self.storage.get_table_storage(stmt.left)
        right = self.storage.get_table_storage(stmt.right)
        if left is None or right is None:
            raise NotFoundError("One or more tables not found.")

        username = self._join_column(left.schema, self.JOIN_LEFT_COLUMN)
        user_id = self._join_column(right.schema, self.JOIN_RIGHT_KEY, DataType.INTEGER)
        item = self._join_column(right.schema, self.JOIN_RIGHT_COLUMN)
        if stmt.on:
            logger.debug("Join condition '%s' not evaluated", stmt.on)

        rows = []
        lines = []
        right_rows = list(right.scan())
        for left_row in left.scan():
            for right_row in right_rows:
                if left_row.id == right_row.data[user_id]:
                    rows.append({
                        self.JOIN_LEFT_COLUMN: left_row.data[username],
                        self.JOIN_RIGHT_COLUMN: right_row.data[item],
                    })
                    lines.append(f"{left_row.data[username]} bought {right_row.data[item]}")

        return QueryResult(
            columns=[self.JOIN_LEFT_COLUMN, self.JOIN_RIGHT_COLUMN],
            rows=rows,
            lines=lines,
            message=f"--- JOIN RESULT ({left.name} + {right.name}) ---",
        )

    def _execute_update(self, stmt: UpdateStatement) -> QueryResult:
        table_storage = self._require_table(stmt.table)
        schema = table_storage.schema

        key = self._resolve_key(stmt.where, "Only update by ID is supported.")
        row = table_storage.get(key)
        if row is None:
            raise NotFoundError("Row not found.")

        # Coerce everything first so a bad assignment leaves the row as it was
        changes = {}
        for col_name, literal in stmt.assignments:
            col = schema.get_column(col_name)
            if col is None:
                raise NotFoundError(f"Column '{col_name}' not found.")
            if col.primary_key:
                logger.debug("Ignoring assignment to primary key of '%s'", schema.name)
                continue
            changes[col.name] = self._coerce(literal, col)

        row.data.update(changes)
        table_storage.update(row)

        return QueryResult(affected_rows=1, message="Row updated successfully.")

    def _execute_delete(self, stmt: DeleteStatement) -> QueryResult:
        table_storage = self._require_table(stmt.table)

        key = self._resolve_key(stmt.where, "Only deletion by ID is supported.")
        deleted = table_storage.delete(key)

        return QueryResult(affected_rows=1 if deleted else 0,
                           message="Row deleted successfully.")
