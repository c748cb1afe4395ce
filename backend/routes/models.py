"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel, Field


class ChooseBody(BaseModel):
    option_id: str


class JumpBody(BaseModel):
    scene_id: str


class TickBody(BaseModel):
    count: int = Field(default=1, ge=1, le=10_000)


class UpdateSettings(BaseModel):
    text_speed_ms: int | None = Field(default=None, ge=0)
    chars_per_tick: int | None = Field(default=None, ge=1)
    fade_out_ms: int | None = Field(default=None, ge=0)
    max_entry_jumps: int | None = Field(default=None, ge=1)
    autosave_on_choice: bool | None = None
