# app/db/models/enums.py
import enum


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class StorageType(str, enum.Enum):
    """Where an image payload lives"""
    LOCAL = "local"
    S3 = "s3"
