"""
Database - Main entry point for PocketDB

This is the primary interface for interacting with PocketDB.
It classifies statements, hands them to the parser and query executor,
and turns every failure into a QueryResult.
"""

import logging
import threading
from typing import Any, Dict, List

from ..storage.engine import StorageEngine
from ..parser.parser import parse_sql
from .errors import DatabaseError, ErrorKind, NotFoundError, ValidationError
from .executor import QueryExecutor, QueryResult

logger = logging.getLogger(__name__)

COMMANDS = ('CREATE', 'DROP', 'INSERT', 'SELECT', 'UPDATE', 'DELETE')

DEFAULT_TABLES = (
    "CREATE TABLE users (id int, username text, age int)",
    "CREATE TABLE orders (id int, user_id int, item text)",
)

DEFAULT_ROWS = (
    'INSERT INTO users VALUES (001, "John Doe", 25)',
    'INSERT INTO users VALUES (002, "Jane Smith", 30)',
    'INSERT INTO orders VALUES (101, 001, "Laptop")',
)


class Database:
    """
    PocketDB Database instance.

    Usage:
        db = Database()
        db.execute("CREATE TABLE pets (id int, name text)")
        db.execute("INSERT INTO pets VALUES (1, 'Rex')")
        result = db.execute("SELECT * FROM pets WHERE id=1")
        for row in result.rows:
            print(row)

    Each instance owns its own tables. Statements are processed one at
    a time, so an instance may be shared between threads.
    """

    def __init__(self, name: str = "default"):
        self.name = name
        self.storage = StorageEngine()
        self.executor = QueryExecutor(self.storage)
        self._lock = threading.RLock()

    def execute(self, sql: str) -> QueryResult:
        """
        Execute a single statement.

        Args:
            sql: Statement to execute

        Returns:
            QueryResult; failures are reported through ``error_kind``
            and ``message`` rather than raised
        """
        statement = sql.strip()
        parts = statement.split(None, 1)
        command = parts[0].upper() if parts else ''

        if command not in COMMANDS:
            return QueryResult.failure(ErrorKind.UNKNOWN_COMMAND, "Unknown command.")

        logger.debug("Executing %s statement on '%s': %s", command, self.name, statement)
        with self._lock:
            try:
                return self.executor.execute(parse_sql(statement))
            except DatabaseError as e:
                logger.debug("%s failed: %s", command, e.message)
                return QueryResult.failure(e.kind, e.message)
            except Exception as e:
                logger.exception("Internal error while executing %s", command)
                return QueryResult.failure(ErrorKind.INTERNAL, str(e) or type(e).__name__)

    def execute_sql(self, sql: str) -> str:
        """Execute a statement and render the outcome as text"""
        return self.execute(sql).render()

    def execute_many(self, sql: str) -> List[QueryResult]:
        """
        Execute multiple statements separated by semicolons.

        Args:
            sql: Multiple statements

        Returns:
            List of QueryResult objects
        """
        # Simple split by semicolon (doesn't handle strings with semicolons)
        statements = [s.strip() for s in sql.split(';') if s.strip()]
        return [self.execute(stmt) for stmt in statements]

    def seed_defaults(self) -> None:
        """Create the built-in users and orders tables.

        Sample rows are inserted only when ``users`` is empty.
        """
        with self._lock:
            for statement in DEFAULT_TABLES:
                table = statement.split()[2]
                if not self.storage.table_exists(table):
                    self._execute_or_raise(statement)

            if self.count('users') == 0:
                for statement in DEFAULT_ROWS:
                    self._execute_or_raise(statement)

    def _execute_or_raise(self, sql: str) -> None:
        result = self.execute(sql)
        if not result.ok:
            raise ValidationError(f"Seeding failed on '{sql}': {result.message}")

    def tables(self) -> List[str]:
        """List all tables in the database."""
        return self.storage.list_tables()

    def describe(self, table_name: str) -> Dict[str, Any]:
        """
        Get table schema information.

        Raises:
            NotFoundError: If the table does not exist
        """
        schema = self.storage.get_table_schema(table_name)
        if schema is None:
            raise NotFoundError(f"Table '{table_name}' does not exist")
        return schema.to_dict()

    def count(self, table_name: str) -> int:
        """
        Get row count for a table.

        Raises:
            NotFoundError: If the table does not exist
        """
        storage = self.storage.get_table_storage(table_name)
        if storage is None:
            raise NotFoundError(f"Table '{table_name}' does not exist")
        return storage.count()

    def close(self) -> None:
        """Discard all tables."""
        with self._lock:
            for table_name in self.storage.list_tables():
                self.storage.drop_table(table_name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
