"""
Medico Assistant - Main FastAPI Application
"""

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from .config import settings
from .api import (
    auth_router, users_router, chat_router, reports_router,
    health_router, devices_router, reminders_router, documents_router,
)
from .core.exceptions import MedicoError
from .core.logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .services.prompts import DISCLAIMER
from .storage import LocalStorage, init_user_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    setup_logging(settings)

    init_user_storage(LocalStorage(settings.local_storage_path))
    logger.info("User storage initialized")

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Storage path: {settings.local_storage_path}")
    logger.info(f"LLM provider: {settings.llm_provider}, configured: {bool(settings.resolved_llm_api_key)}")
    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="AI healthcare companion: chat, report analysis, risk profile and reminders",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(chat_router)
app.include_router(reports_router)
app.include_router(health_router)
app.include_router(devices_router)
app.include_router(reminders_router)
app.include_router(documents_router)


@app.exception_handler(MedicoError)
async def medico_error_handler(request: Request, exc: MedicoError):
    """Errors no router translated reach the client as their code and message."""
    logger.error(
        f"Unhandled {exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"extra_fields": {"error_code": exc.code, "status_code": exc.status_code}}
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "message": "Welcome to Medico Assistant - Your AI Healthcare Companion"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "storage": settings.storage_type,
        "version": settings.app_version
    }


@app.get("/settings")
async def get_settings():
    """Public app settings and the medical disclaimer."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "llm_provider": settings.llm_provider,
        "llm_model": settings.llm_model,
        "ai_configured": bool(settings.resolved_llm_api_key),
        "disclaimer": DISCLAIMER,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "medico.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
