"""
PocketDB - An in-memory relational data store with a small SQL dialect
"""

__version__ = "1.0.0"

from .core.database import Database
from .core.executor import QueryResult
from .core.errors import ErrorKind
from .core.repl import REPL

__all__ = ["Database", "QueryResult", "ErrorKind", "REPL"]
