"""Lifecycle Schemas - strategic command and core instance API contracts.

Invariants:
    - CommandCreate.command: 1-2000 chars, stripped, non-empty
    - Responses are built from core/records dataclasses (from_attributes)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import CommandStatus, CoreStatus, CoreType


class CommandCreate(BaseModel):
    """Strategic command submission from the admin console."""
    command: str = Field(min_length=1, max_length=2000)
    issued_by: str = Field("Father", min_length=1, max_length=100)

    @field_validator("command")
    @classmethod
    def strip_command(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("command cannot be empty or whitespace")
        return v


class CommandResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    command: str
    issued_at: datetime
    issued_by: str
    status: CommandStatus
    target_capabilities: list[str]
    progress: int = Field(ge=0, le=100)
    logs: list[str]


class CommandCancel(BaseModel):
    reason: str | None = Field(None, max_length=500)


class CoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: CoreType
    status: CoreStatus
    version: str
    capabilities: list[str]
    created_at: datetime
    last_active: datetime
