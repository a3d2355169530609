"""Create schools table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `schools` table in its first shape (no student count).
How:   Portable column types so the same revision runs on PostgreSQL, MySQL
       and SQLite.

Rollback: downgrade() drops the table entirely (all records lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "schools",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("city", sa.Text(), nullable=False),
        sa.Column("state", sa.Text(), nullable=False),
        sa.Column("contact", sa.String(15), nullable=False),
        sa.Column("email_id", sa.Text(), nullable=False),

        # Public reference (/uploads/schoolImages/<file>), NULL when no image
        sa.Column("image", sa.Text(), nullable=True),

        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Listing is always newest first
    op.create_index(
        "idx_schools_created_at",
        "schools",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_schools_created_at", table_name="schools")
    op.drop_table("schools")
