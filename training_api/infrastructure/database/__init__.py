"""
Database infrastructure module.
Provides the async SQLAlchemy engine and the profile table.
"""

from .session import Database
from .tables import SORTABLE_COLUMNS, Base, UserProfile

__all__ = [
    "Database",
    "Base",
    "UserProfile",
    "SORTABLE_COLUMNS",
]
