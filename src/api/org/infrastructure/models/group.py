"""SQLAlchemy ORM model for the groups table.

The organizational tree lives entirely in this table: every row carries
its direct children and its ancestor chain as id arrays.
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class GroupModel(Base, TimestampMixin):
    """ORM model for groups table.

    ``admins``, ``members``, ``children`` and ``ancestors`` are plain id
    arrays without foreign keys. GIN indexes back the containment lookups
    (``children @> ARRAY[id]``) used to find a group's parent and the
    groups listing a person.

    Timestamps are written from the aggregate; there is no ``onupdate``.
    """

    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    clearance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    admins: Mapped[list[str]] = mapped_column(
        ARRAY(String(7)), nullable=False, default=list
    )
    members: Mapped[list[str]] = mapped_column(
        ARRAY(String(7)), nullable=False, default=list
    )
    children: Mapped[list[str]] = mapped_column(
        ARRAY(String(26)), nullable=False, default=list
    )
    ancestors: Mapped[list[str]] = mapped_column(
        ARRAY(String(26)), nullable=False, default=list
    )
    hierarchy: Mapped[list[str]] = mapped_column(
        ARRAY(String(255)), nullable=False, default=list
    )

    __table_args__ = (
        Index("idx_groups_children", "children", postgresql_using="gin"),
        Index("idx_groups_members", "members", postgresql_using="gin"),
        Index("idx_groups_admins", "admins", postgresql_using="gin"),
        Index("idx_groups_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<GroupModel(id={self.id}, name={self.name})>"
