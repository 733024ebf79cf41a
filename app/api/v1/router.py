from fastapi import APIRouter

from app.api.v1.routes.user_stats import router as user_stats_router

api_router = APIRouter()
api_router.include_router(user_stats_router)
