"""
REPL - Interactive SQL shell for PocketDB

Provides a command-line interface for executing statements
against an in-memory database.
"""

import logging
import os
import sys
from typing import Optional

from .database import Database
from .errors import NotFoundError
from .formatter import TableFormatter


class REPL:
    """
    Interactive SQL REPL (Read-Eval-Print Loop) for PocketDB.

    Features:
    - Multi-line input (statements ending with ;)
    - Special commands (.tables, .schema, .quit, etc.)
    - Aligned result tables
    """

    BANNER = """
PocketDB - an in-memory relational data store

Type .help for commands, or enter SQL statements.
Statements must end with a semicolon (;).
"""

    HELP = """
Special Commands:
  .help             Show this help message
  .tables           List all tables
  .schema <table>   Show schema for a table
  .count <table>    Show row count for a table
  .clear            Clear the screen
  .quit / .exit     Exit the REPL

SQL Commands:
  CREATE TABLE <name> (id int, <col> <type>, ...)
  DROP TABLE <name>
  INSERT INTO <name> VALUES (v1, v2, ...)
  SELECT * FROM <name> [WHERE id=<id>]
  SELECT * FROM <left> JOIN <right> ON <condition>
  UPDATE <name> SET col=val[, ...] WHERE id=<id>
  DELETE FROM <name> WHERE id=<id>

Example:
  CREATE TABLE pets (id int, name text);
  INSERT INTO pets VALUES (1, 'Rex');
  SELECT * FROM pets WHERE id=1;
"""

    def __init__(self, db: Optional[Database] = None, seed: bool = True):
        """Initialize REPL with a database, seeding the built-in tables."""
        self.db = db or Database()
        if seed:
            self.db.seed_defaults()
        self.formatter = TableFormatter()
        self.running = False
        self.buffer = []

    def run(self) -> None:
        """Start the REPL loop."""
        self.running = True
        print(self.BANNER)

        while self.running:
            try:
                self._process_input()
            except KeyboardInterrupt:
                print("\n(Use .quit to exit)")
            except EOFError:
                print()
                self._quit()

    def _get_prompt(self) -> str:
        if self.buffer:
            return "     ...> "
        return "pocketdb> "

    def _process_input(self) -> None:
        """Read and process user input."""
        line = input(self._get_prompt()).strip()

        if not line:
            return

        # Special commands (only when not in multi-line mode)
        if not self.buffer and line.startswith('.'):
            self.handle_command(line)
            return

        self.buffer.append(line)

        full_statement = ' '.join(self.buffer)
        if full_statement.rstrip().endswith(';'):
            self.buffer = []
            self.execute_statement(full_statement.rstrip().rstrip(';'))

    def handle_command(self, cmd: str) -> None:
        """Handle special dot commands."""
        parts = cmd.split(None, 1)
        command = parts[0].lower()
        args = parts[1].strip() if len(parts) > 1 else None

        if command in ('.quit', '.exit', '.q'):
            self._quit()
        elif command == '.help':
            print(self.HELP)
        elif command == '.tables':
            self._show_tables()
        elif command == '.schema':
            self._show_schema(args)
        elif command == '.count':
            self._show_count(args)
        elif command == '.clear':
            os.system('clear' if os.name == 'posix' else 'cls')
        else:
            print(f"Unknown command: {command}")
            print("Type .help for available commands.")

    def _quit(self) -> None:
        print("Goodbye!")
        self.running = False
        self.db.close()

    def _show_tables(self) -> None:
        tables = self.db.tables()
        if tables:
            print("\nTables:")
            for table in tables:
                print(f"  {table} ({self.db.count(table)} rows)")
            print()
        else:
            print("No tables found.")

    def _show_schema(self, table_name: Optional[str]) -> None:
        if not table_name:
            print("Usage: .schema <table_name>")
            return

        try:
            schema = self.db.describe(table_name)
        except NotFoundError as e:
            print(f"Error: {e}")
            return

        print(f"\nTable: {schema['name']}")
        print("-" * 40)
        for col in schema['columns']:
            flags = 'PRIMARY KEY' if col['primary_key'] else ''
            print(f"  {col['name']:20} {col['type']:6} {flags}")
        print()

    def _show_count(self, table_name: Optional[str]) -> None:
        if not table_name:
            print("Usage: .count <table_name>")
            return

        try:
            print(f"{table_name}: {self.db.count(table_name)} rows")
        except NotFoundError as e:
            print(f"Error: {e}")

    def execute_statement(self, sql: str) -> bool:
        """Execute a statement and display the result."""
        result = self.db.execute(sql)
        print(result.render(self.formatter))
        return result.ok


def main(argv=None):
    """Entry point for the REPL."""
    import argparse

    parser = argparse.ArgumentParser(
        description="PocketDB - an in-memory relational data store"
    )
    parser.add_argument(
        '-e', '--execute',
        help='Execute a statement and exit'
    )
    parser.add_argument(
        '-f', '--file',
        help='Execute semicolon-separated statements from a file and exit'
    )
    parser.add_argument(
        '--no-seed', action='store_true',
        help='Start without the built-in users and orders tables'
    )
    parser.add_argument(
        '-v', '--verbose', action='store_true',
        help='Log debug output to stderr'
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s %(name)s %(levelname)s %(message)s',
        )

    db = Database()
    if not args.no_seed:
        db.seed_defaults()

    # Execute single statement
    if args.execute:
        result = db.execute(args.execute)
        print(result.render())
        if not result.ok:
            sys.exit(1)
        return

    # Execute from file
    if args.file:
        try:
            with open(args.file, 'r') as f:
                sql = f.read()
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        failed = False
        for result in db.execute_many(sql):
            print(result.render())
            failed = failed or not result.ok
        if failed:
            sys.exit(1)
        return

    # Start interactive REPL
    repl = REPL(db, seed=False)
    repl.run()


if __name__ == '__main__':
    main()
