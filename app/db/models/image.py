# app/db/models/image.py
"""Task image attachments stored in the database"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, LargeBinary
from sqlalchemy.orm import relationship

from app.db.models.base import Base, IDMixin, utc_now
from app.db.models.enums import StorageType


class ImageMetadata(Base, IDMixin):
    __tablename__ = "image_metadata"

    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    original_name = Column(String(255), nullable=False)
    content_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    url = Column(String(500), nullable=False, default="")
    storage_type = Column(String(20), nullable=False, default=StorageType.LOCAL.value)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    task = relationship("Task", back_populates="images")
    payload = relationship(
        "ImageData",
        back_populates="image",
        uselist=False,
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<ImageMetadata id={self.id} name={self.original_name}>"


class ImageData(Base):
    """Binary payload for locally stored images"""
    __tablename__ = "image_data"

    id = Column(Integer, ForeignKey("image_metadata.id", ondelete="CASCADE"), primary_key=True)
    data = Column(LargeBinary, nullable=False)

    image = relationship("ImageMetadata", back_populates="payload")
