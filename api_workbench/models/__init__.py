"""
Models package for API Workbench.

Exports all SQLAlchemy models for database operations.
"""

from .request import SavedRequest
from .collection import Collection
from .environment import Environment, Variable

__all__ = [
    "SavedRequest",
    "Collection",
    "Environment",
    "Variable",
]
