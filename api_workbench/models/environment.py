"""
Environment and Variable models.

An environment is a named set of variables substituted into {{key}}
placeholders when a request executes. Executions pick an environment
explicitly by id; none is ever implicitly active.
"""

from datetime import datetime
from typing import List

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base


class Environment(Base):
    """
    SQLAlchemy model for environments.

    Attributes:
        id: Unique identifier for the environment
        name: Human-readable name (e.g. "dev", "staging")
        created_at: Timestamp when the environment was created
        updated_at: Timestamp when the environment was last updated
        variables: Variables in insertion order; deleted with the environment
    """
    __tablename__ = "environments"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    variables: Mapped[List["Variable"]] = relationship(
        "Variable",
        back_populates="environment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Variable.id",
    )

    def as_mapping(self) -> dict[str, str]:
        """Variables as a key -> value mapping; a later duplicate key wins."""
        return {variable.key: variable.value for variable in self.variables}


class Variable(Base):
    """A single key/value pair referenced as {{key}}."""
    __tablename__ = "variables"

    id: Mapped[int] = mapped_column(primary_key=True)
    environment_id: Mapped[int] = mapped_column(
        ForeignKey("environments.id", ondelete="CASCADE")
    )
    key: Mapped[str] = mapped_column(String(255))
    value: Mapped[str] = mapped_column(Text)

    environment: Mapped["Environment"] = relationship(
        "Environment",
        back_populates="variables"
    )
