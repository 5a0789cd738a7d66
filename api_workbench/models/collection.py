"""
Collection model for grouping saved requests.

A collection is a named, flat list of requests. Deleting a collection
cascades to all of its requests.
"""

from datetime import datetime
from typing import List, TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base

if TYPE_CHECKING:
    from .request import SavedRequest


class Collection(Base):
    """
    SQLAlchemy model for collections.

    Attributes:
        id: Unique identifier for the collection
        name: Human-readable name, never empty
        description: Free-form description
        created_at: Timestamp when the collection was created
        updated_at: Timestamp when the collection was last updated
        requests: Requests in this collection, ordered by sort_order
    """
    __tablename__ = "collections"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    requests: Mapped[List["SavedRequest"]] = relationship(
        "SavedRequest",
        back_populates="collection",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SavedRequest.sort_order",
    )
