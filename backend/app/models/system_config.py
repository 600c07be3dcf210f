"""SystemConfig ORM - singleton configuration row (id is always 1)."""

from sqlalchemy import Integer, Boolean, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

SINGLETON_ID = 1


class SystemConfigRow(Base):
    __tablename__ = "system_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)
    guest_word_limit: Mapped[int] = mapped_column(Integer, nullable=False)
    allowed_languages: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    maintenance_mode: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    custom_settings: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
