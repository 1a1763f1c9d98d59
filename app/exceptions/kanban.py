# app/exceptions/kanban.py
from typing import List, Optional
from fastapi import HTTPException, status

from app.core.workflow import status_in_use_message


class KanbanError(HTTPException):
    """Base for domain failures; `extra` is merged into the JSON error body"""
    def __init__(self, status_code: int, detail: str, extra: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=detail)
        self.extra = extra or {}


class ValidationError(KanbanError):
    """Malformed input"""
    def __init__(self, detail: str = "Validation error", errors: Optional[list] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            extra={"errors": errors} if errors else None
        )


class NotFoundError(KanbanError):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ProjectNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(detail="Project not found")


class TaskNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(detail="Task not found")


class ForbiddenError(KanbanError):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(KanbanError):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidStatusCodesError(KanbanError):
    """Workflow references codes missing from the status catalog"""
    def __init__(self, invalid_statuses: List[str]):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid status codes",
            extra={"invalidStatuses": list(invalid_statuses)}
        )
        self.invalid_statuses = list(invalid_statuses)


class StatusInUseError(KanbanError):
    """Workflow edit would drop a status that tasks still hold"""
    def __init__(self, code: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=status_in_use_message(code))
        self.code = code


class InternalError(KanbanError):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
