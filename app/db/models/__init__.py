# app/db/models/__init__.py
"""
Database models package
Imports all models for easy access
"""

# Import base classes and mixins
from app.db.models.base import Base, TimestampMixin, IDMixin

# Import all enums
from app.db.models.enums import TaskPriority, StorageType

# Import kanban models
from app.db.models.user import User
from app.db.models.tag import Tag, task_tags
from app.db.models.project import Project
from app.db.models.task import Task
from app.db.models.status_definition import StatusDefinition
from app.db.models.translation import Translation
from app.db.models.image import ImageMetadata, ImageData

# Export all models and enums
__all__ = [
    # Base classes
    'Base', 'TimestampMixin', 'IDMixin',

    # Enums
    'TaskPriority', 'StorageType',

    # Kanban models
    'User', 'Project', 'Task', 'Tag', 'task_tags',
    'StatusDefinition', 'Translation', 'ImageMetadata', 'ImageData',
]
