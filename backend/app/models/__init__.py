"""ORM Models - SQLAlchemy declarative models for persisted records.

Invariants:
    - All models inherit from Base (db/base.py)
    - Rows are a persistence detail: services convert them to core/records dataclasses

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from app.models.core_instance import CoreInstanceRow  # noqa: F401
from app.models.strategic_command import StrategicCommandRow  # noqa: F401
from app.models.system_config import SystemConfigRow  # noqa: F401
