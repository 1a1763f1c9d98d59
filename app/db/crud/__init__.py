"""CRUD operations for database models"""
from . import user
from . import status_definition
from . import tag
from . import project
from . import task
from . import image

__all__ = [
    "user",
    "status_definition",
    "tag",
    "project",
    "task",
    "image",
]
