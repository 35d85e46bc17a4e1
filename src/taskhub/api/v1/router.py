from fastapi import APIRouter

from src.taskhub.api.v1 import audit, auth, invitations, organizations, tasks

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(organizations.router)
api_router.include_router(tasks.router)
api_router.include_router(invitations.router)
api_router.include_router(audit.router)
