"""Create parents table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261001_create_parents"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "parents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("children", sa.JSON(), nullable=False),
        sa.Column("children_details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_parents_id", "parents", ["id"], unique=False)
    op.create_index("ix_parents_email", "parents", ["email"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_parents_email", table_name="parents")
    op.drop_index("ix_parents_id", table_name="parents")
    op.drop_table("parents")
