"""FastAPI router aggregation."""

from fastapi import APIRouter

from api.auth import router as auth_router
from api.chat import router as chat_router
from api.health import router as health_router
from api.projects import router as projects_router
from api.prompts import router as prompts_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(projects_router, prefix="/projects", tags=["projects"])
api_router.include_router(prompts_router, prefix="/prompts", tags=["prompts"])
api_router.include_router(chat_router, prefix="/chat", tags=["chat"])
