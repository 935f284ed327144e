"""Database module for local SQLite storage."""

from .models import LegoSet
from .schemas import DataSource, SetCreate, SetResponse, SetStatus, SetUpdate
from .sqlite import Database, get_db

__all__ = [
    "LegoSet",
    "DataSource",
    "SetCreate",
    "SetResponse",
    "SetStatus",
    "SetUpdate",
    "Database",
    "get_db",
]
