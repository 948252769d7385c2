"""Database layer for kwanza application."""

from kwanza.database.base import Database
from kwanza.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
