# app/api/v1/schemas/images.py
from datetime import datetime

from app.api.v1.schemas.base import CamelModel


class ImageResponse(CamelModel):
    id: int
    task_id: int
    original_name: str
    content_type: str
    file_size: int
    url: str
    storage_type: str
    created_at: datetime
