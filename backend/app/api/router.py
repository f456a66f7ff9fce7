"""Central API router that aggregates all route modules."""

from fastapi import APIRouter

from app.api.health import router as health_router
from app.api.integrations import router as integrations_router
from app.api.proxy import router as proxy_router
from app.api.sessions import chat_router, codegen_router
from app.api.tasks import router as tasks_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(chat_router, prefix="/chatbot", tags=["chatbot"])
api_router.include_router(codegen_router, prefix="/codegen", tags=["codegen"])
api_router.include_router(integrations_router, prefix="/integrations", tags=["integrations"])
api_router.include_router(proxy_router, prefix="/proxy", tags=["proxy"])
api_router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
