"""
Database configuration and models.
"""

from app.db.database import engine, SessionLocal, get_db
from app.db.models import Base, Deal, Property

__all__ = ["engine", "SessionLocal", "get_db", "Base", "Deal", "Property"]
