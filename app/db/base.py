"""
Database base module - imports all models for Alembic migration detection.

This module imports all SQLAlchemy models to ensure they are registered
with the metadata before ``create_all`` or Alembic autogenerate runs.
"""

from app.auth.models.user import User
from app.canned_responses.models.canned_response import CannedResponse
from app.categories.models.category import Category
from app.db.session import Base
from app.knowledge_base.models.article import Article
from app.tickets.models.comment import TicketComment
from app.tickets.models.ticket import Ticket

__all__ = [
    "Base",
    "User",
    "Category",
    "Ticket",
    "TicketComment",
    "Article",
    "CannedResponse",
]
