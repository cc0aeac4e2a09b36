"""
EduVerse Backend - FastAPI Application
Authentication gateway and role-gated routes for the EduVerse frontend
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from eduverse import __version__
from eduverse.config import Settings, get_settings
from eduverse.routes import auth, health, protected
from eduverse.services.providers import IdentityPlatform
from eduverse.utils.errors import GatewayError, ValidationFailed
from eduverse.utils.logger import RequestLogger, setup_logging
from eduverse.utils.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)
request_logger = RequestLogger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    settings: Settings = app.state.settings
    setup_logging(settings.logging_config_path, settings.log_level, settings.log_format)

    logger.info("EduVerse Backend starting up...")
    settings.log_config()
    logger.info(f"Server started successfully on http://localhost:{settings.port}")

    yield

    logger.info("EduVerse Backend shutting down...")


def validation_message(exc: RequestValidationError) -> str:
    """First validation error as 'field: reason'"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get('type') == 'json_invalid':
        return "Invalid JSON body"
    location = ".".join(str(part) for part in first.get('loc', ()) if part != 'body')
    return f"{location}: {first.get('msg')}" if location else str(first.get('msg'))


async def gateway_error_handler(request: Request, exc: GatewayError):
    """Render gateway errors as {success: false, error}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.message
        }
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return await gateway_error_handler(request, ValidationFailed(validation_message(exc)))


def create_app(settings: Optional[Settings] = None, platform: Optional[IdentityPlatform] = None) -> FastAPI:
    """
    Build the application

    Args:
        settings: Configuration; loaded from the environment when omitted
        platform: Identity platform; a SupabaseClient built from settings when omitted

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Authentication gateway and profile management for EduVerse",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings
    app.state.platform = platform or SupabaseClient(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        user = getattr(request.state, 'user', None)
        request_logger.log_request(
            request.method,
            request.url.path,
            response.status_code,
            time.perf_counter() - started,
            user_id=user.id if user else None,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent")
        )
        return response

    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Root endpoint"""
        return f"EduVerse Backend Server is Live on Port {settings.port}!"

    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(protected.router, prefix="/api", tags=["Protected"])

    return app


app = create_app()
