# app/api/v1/schemas/tags.py
from pydantic import Field
from typing import Optional
from datetime import datetime

from app.api.v1.schemas.base import CamelModel, TAG_NAME_PATTERN, HEX_COLOR_PATTERN


class TagCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, pattern=TAG_NAME_PATTERN)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN, description="Random palette colour when omitted")


class TagUpdate(CamelModel):
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)


class TagSummary(CamelModel):
    tag: str
    color: str


class TagResponse(TagSummary):
    created_at: datetime
    usage_count: int = 0

    @classmethod
    def from_model(cls, tag, usage_count: int = 0):
        return cls(tag=tag.tag, color=tag.color, created_at=tag.created_at, usage_count=usage_count)
