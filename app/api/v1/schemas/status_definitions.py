# app/api/v1/schemas/status_definitions.py
from pydantic import Field
from typing import Optional
from datetime import datetime

from app.api.v1.schemas.base import CamelModel, STATUS_CODE_PATTERN


class StatusDefinitionCreate(CamelModel):
    code: str = Field(..., max_length=25, pattern=STATUS_CODE_PATTERN, description="Uppercase snake case code")
    description: Optional[str] = Field(None, max_length=200)


class StatusDefinitionResponse(CamelModel):
    code: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
