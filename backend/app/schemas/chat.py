"""Chat & Config Schemas - API contracts for the classifier and system config.

Invariants:
    - ChatRequest.message may be empty (classifier is total); max 10000 chars
    - ConfigUpdate is partial: only fields that are set get merged
    - guest_word_limit >= 0 everywhere
"""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    message: str = Field(max_length=10_000)
    is_authenticated: bool = False


class ChatResponse(BaseModel):
    response: str
    word_count: int
    word_limit_reached: bool


class ConfigResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    guest_word_limit: int = Field(ge=0)
    allowed_languages: list[str]
    maintenance_mode: bool
    custom_settings: dict[str, str | int | float | bool]


class ConfigUpdate(BaseModel):
    """Partial config update - shallow-merged into the stored config. Nulls are ignored."""
    guest_word_limit: int | None = Field(None, ge=0)
    allowed_languages: list[str] | None = None
    maintenance_mode: bool | None = None
    custom_settings: dict[str, str | int | float | bool] | None = None


class ConfigCommandRequest(BaseModel):
    command: str = Field(min_length=1, max_length=1000)


class ConfigCommandResponse(BaseModel):
    message: str
    config: ConfigResponse
