"""
School Directory — School SQLAlchemy Model
============================================

What:  Table definition for `schools`.
Who:   Used by the record store (Core statements against School.__table__)
       and by Alembic for the managed migrations.

Table Design:
    - Integer autoincrement primary key: store-assigned, monotonic
    - name/address/city/state/email_id: TEXT, required
    - contact: up to 15 digits
    - image: public reference (/uploads/schoolImages/<file>) or NULL
    - students: added by a later additive migration, default 0 for old rows
    - created_at: set at insert, never updated

    Index on created_at DESC serves the listing query (newest first).
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from school_directory.database import Base


class School(Base):
    """One school entry in the directory. Immutable once inserted."""

    __tablename__ = "schools"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[str] = mapped_column(Text, nullable=False)
    contact: Mapped[str] = mapped_column(String(15), nullable=False)
    email_id: Mapped[str] = mapped_column(Text, nullable=False)

    # Relative public path, e.g. /uploads/schoolImages/school-1700000000000-42.png
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    students: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_schools_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name='{self.name}', city='{self.city}')>"


# Core table used by the record store's SQL statements
schools_table = School.__table__
