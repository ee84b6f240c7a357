"""Database package - SQLAlchemy models and database operations."""

from database.models import (
    Base,
    User,
    AgentRecord,
    ChatMessage,
)
from database.queries import DatabaseManager, get_db_manager

__all__ = [
    "Base",
    "User",
    "AgentRecord",
    "ChatMessage",
    "DatabaseManager",
    "get_db_manager",
]
