"""SQLAlchemy ORM model for the persons table."""

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class PersonModel(Base, TimestampMixin):
    """ORM model for persons table.

    The primary key is the externally supplied seven digit personal number.
    ``direct_group_id`` is a weak reference to ``groups.id`` (no foreign
    key); group removal clears it explicitly.
    """

    __tablename__ = "persons"

    id: Mapped[str] = mapped_column(String(7), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    job: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mail: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    rank: Mapped[str] = mapped_column(String(64), nullable=False)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_security_officer: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    clearance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    direct_group_id: Mapped[str | None] = mapped_column(
        String(26), nullable=True, index=True
    )
    alive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("idx_persons_updated_at", "updated_at"),
        Index("idx_persons_alive_created_at", "alive", "created_at"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<PersonModel(id={self.id}, alive={self.alive})>"
