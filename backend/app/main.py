from fastapi import FastAPI

from app.config import settings
from app.api.v1 import credit
from app.core.logging import RequestLoggingMiddleware, setup_logging


def create_app() -> FastAPI:
    setup_logging(json_format=settings.log_json, debug=settings.debug)

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )

    application.add_middleware(RequestLoggingMiddleware)

    application.include_router(credit.router, prefix="/api/v1/credit", tags=["credit"])

    @application.get("/health")
    async def health_check() -> dict:
        return {"status": "ok", "environment": settings.environment}

    return application


app = create_app()
