"""StrategicCommand ORM - persists admin commands and their pipeline progress.

Invariants:
    - status transitions: pending -> processing -> testing -> completed | failed
    - progress is 0-100
    - logs is an append-only JSON list of strings
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class StrategicCommandRow(Base):
    __tablename__ = "strategic_commands"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    command: Mapped[str] = mapped_column(Text, nullable=False)
    issued_by: Mapped[str] = mapped_column(String(100), nullable=False)
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    target_capabilities: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    logs: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
