"""API v1 endpoints"""
from fastapi import APIRouter
from .endpoints import users, projects, kanban, tasks, tags, images, status_definitions, translations

api_router = APIRouter()
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(kanban.router, prefix="/projects", tags=["kanban"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(images.router, tags=["images"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
api_router.include_router(status_definitions.router, prefix="/status-definitions", tags=["status-definitions"])
api_router.include_router(translations.router, prefix="/translations", tags=["translations"])
