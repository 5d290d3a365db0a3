"""Storage module - In-memory row stores"""

from .engine import StorageEngine, TableStorage, Row

__all__ = ['StorageEngine', 'TableStorage', 'Row']
