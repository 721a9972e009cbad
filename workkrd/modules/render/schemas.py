"""PDF route schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from workkrd.modules.templates import ResumeData
from workkrd.shared.types import RenderAction


class GeneratePdfRequest(BaseModel):
    """Body of POST /api/pdf/generate."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    resume_data: ResumeData
    template: str = Field(..., min_length=1, max_length=64)
    action: RenderAction = RenderAction.PREVIEW
    encoding: Literal["binary", "base64"] = Field(
        default="binary",
        description="binary returns application/pdf; base64 returns JSON",
    )


class Base64PdfResponse(BaseModel):
    pdf: str
    template: str
    watermarked: bool
