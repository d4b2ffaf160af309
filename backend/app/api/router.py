from fastapi import APIRouter

from app.api.approvals import approvals_router
from app.api.submissions import submissions_router

api_router = APIRouter()
api_router.include_router(submissions_router)
api_router.include_router(approvals_router)
