"""Add students column to schools

Revision ID: 002
Revises: 001
Create Date: 2024-02-01 00:00:00.000000+00:00

What:  Adds the student count used by the aggregate stats.
How:   NOT NULL with a server default of 0, so existing rows stay valid.

The app's startup migration adds the same column when it is missing; a
database already migrated at startup can be stamped with
`alembic stamp 002` instead of upgraded.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "schools",
        sa.Column(
            "students",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
    )


def downgrade() -> None:
    op.drop_column("schools", "students")
