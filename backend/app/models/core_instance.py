"""CoreInstance ORM - persists simulated AI cores.

Invariants:
    - id is a generated string primary key (core-prime-001, core-clone-<hex>)
    - capabilities is an ordered JSON list without duplicates
    - at most one row has (type='prime', status='active') after each pipeline phase

Design Decisions:
    - JSON column for capabilities: read and written as a whole list
    - type/status stored as plain strings, validated through the core enums
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class CoreInstanceRow(Base):
    """One core instance row."""
    __tablename__ = "core_instances"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    version: Mapped[str] = mapped_column(String(32), nullable=False)
    capabilities: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    last_active: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
