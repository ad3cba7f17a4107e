from fastapi import APIRouter

from recovery_service.presentation.routers.v1.identity import router as identity_router
from recovery_service.presentation.routers.v1.recovery import router as recovery_router
from recovery_service.presentation.routes.health import router as health_router

api = APIRouter()

# Add all v1 routers here
routers = (recovery_router, identity_router)
for router in routers:
    api.include_router(router, prefix="/v1")

api.include_router(health_router)
