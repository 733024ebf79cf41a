from fastapi import FastAPI
from app.api.v1.router import api_router
from app.config.settings import get_settings
from app.logging_config import setup_logging

setup_logging(get_settings().log_level)

app = FastAPI(title="Player statistics service")
app.include_router(api_router, prefix="/api/v1")
