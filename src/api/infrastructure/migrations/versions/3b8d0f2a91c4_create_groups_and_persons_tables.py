"""create groups and persons tables

Revision ID: 3b8d0f2a91c4
Revises:
Create Date: 2026-10-19 09:12:27.514302

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3b8d0f2a91c4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=255), nullable=True),
        sa.Column("clearance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "admins",
            postgresql.ARRAY(sa.String(length=7)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "members",
            postgresql.ARRAY(sa.String(length=7)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "children",
            postgresql.ARRAY(sa.String(length=26)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "ancestors",
            postgresql.ARRAY(sa.String(length=26)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "hierarchy",
            postgresql.ARRAY(sa.String(length=255)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("clearance >= 0", name="ck_groups_clearance_non_negative"),
    )
    # GIN indexes serve the containment lookups (children @> ARRAY[id])
    op.create_index(
        "idx_groups_children", "groups", ["children"], postgresql_using="gin"
    )
    op.create_index("idx_groups_members", "groups", ["members"], postgresql_using="gin")
    op.create_index("idx_groups_admins", "groups", ["admins"], postgresql_using="gin")
    op.create_index("idx_groups_created_at", "groups", ["created_at"])

    op.create_table(
        "persons",
        sa.Column("id", sa.String(length=7), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("job", sa.String(length=255), nullable=True),
        sa.Column("mail", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("rank", sa.String(length=64), nullable=False),
        sa.Column("address", sa.String(length=512), nullable=True),
        sa.Column(
            "is_security_officer",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("clearance", sa.Integer(), nullable=False, server_default="0"),
        # Weak reference to groups.id, cleared explicitly on group removal
        sa.Column("direct_group_id", sa.String(length=26), nullable=True),
        sa.Column("alive", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("id ~ '^[0-9]{7}$'", name="ck_persons_id_format"),
        sa.CheckConstraint(
            "clearance >= 0", name="ck_persons_clearance_non_negative"
        ),
    )
    op.create_index(
        op.f("ix_persons_direct_group_id"), "persons", ["direct_group_id"], unique=False
    )
    op.create_index("idx_persons_updated_at", "persons", ["updated_at"])
    op.create_index("idx_persons_alive_created_at", "persons", ["alive", "created_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_persons_alive_created_at", table_name="persons")
    op.drop_index("idx_persons_updated_at", table_name="persons")
    op.drop_index(op.f("ix_persons_direct_group_id"), table_name="persons")
    op.drop_table("persons")

    op.drop_index("idx_groups_created_at", table_name="groups")
    op.drop_index("idx_groups_admins", table_name="groups")
    op.drop_index("idx_groups_members", table_name="groups")
    op.drop_index("idx_groups_children", table_name="groups")
    op.drop_table("groups")
