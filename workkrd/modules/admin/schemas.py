"""Admin route schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from workkrd.modules.templates import ResumeData


class PreviewPdfRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    resume_data: ResumeData
    template: str = Field(..., min_length=1, max_length=64)


class AuditLogEntry(BaseModel):
    id: int
    admin_id: str
    action: str
    target: str
    details: dict[str, Any] | None = None
    created_at: str


class AuditLogResponse(BaseModel):
    logs: list[AuditLogEntry]


class PoolStatsResponse(BaseModel):
    browser_connected: bool
    launching: bool
    active_pages: int
    queued: int
    max_concurrent: int
    idle_timer_armed: bool
    launches: int


class RecycleResponse(BaseModel):
    recycled: bool
    stats: PoolStatsResponse
