"""
Request model for storing HTTP request configurations.

Stores the declarative request exactly as the user wrote it, placeholders
included; substitution only happens at execution time.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base

if TYPE_CHECKING:
    from .collection import Collection


class SavedRequest(Base):
    """
    SQLAlchemy model for HTTP request configurations.

    Attributes:
        id: Unique identifier for the request
        collection_id: Parent collection
        name: Human-readable name for the request
        method: HTTP method
        url: Target URL, may contain variable placeholders like {{variable}}
        headers: Ordered list of {"key", "value"} objects
        query_params: Key-value pairs for URL query parameters
        body: Request body content
        auth: Optional {"type", "params"} authentication settings
        sort_order: Order within the collection
        created_at: Timestamp when the request was created
        updated_at: Timestamp when the request was last updated
    """
    __tablename__ = "requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    collection_id: Mapped[int] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE")
    )
    name: Mapped[str] = mapped_column(String(255))
    method: Mapped[str] = mapped_column(String(10))
    url: Mapped[str] = mapped_column(Text)
    headers: Mapped[list] = mapped_column(JSON, default=list)
    query_params: Mapped[dict] = mapped_column(JSON, default=dict)
    body: Mapped[str] = mapped_column(Text, default="")
    auth: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    sort_order: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    collection: Mapped["Collection"] = relationship(
        "Collection",
        back_populates="requests"
    )
