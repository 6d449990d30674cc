"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import (admin_forms, auth, health, metrics, notifications,
                            public_forms, workspaces)
from app.core.config import get_settings
from app.core.logging_config import LoggingConfig
from app.core.middleware import LoggingContextMiddleware
from app.core.middleware_metrics import MetricsMiddleware
from app.core.tracing import configure_tracing, shutdown_tracing

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    shutdown_tracing()


_settings = get_settings()
app = FastAPI(
    title=_settings.app_name,
    description="Form building and submission platform",
    version="0.1.0",
    lifespan=lifespan,
)

configure_tracing(app)

app.add_middleware(LoggingContextMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid request bodies and parameters answer 400 with a message"""
    message = _format_validation_errors(exc)
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "validation_message": message}
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors and answer 500"""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Something went wrong. Please try again."}
    )


app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(auth.router)
app.include_router(workspaces.router)
app.include_router(admin_forms.router)
app.include_router(public_forms.router)
app.include_router(notifications.router)


@app.get("/api")
async def root():
    """Root API endpoint"""
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
        "environment": settings.app_env,
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )
