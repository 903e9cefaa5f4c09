"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.bookstore import __version__
from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.api.http.deps import require_bearer_token
from src.bookstore.api.http.routers.books import router as books_router
from src.bookstore.api.http.routers.health import router as health_router
from src.bookstore.api.utils.app_startup import configure_logging
from src.bookstore.core.errors import BookstoreError
from src.bookstore.core.services import DbSessionService, TokenVerificationService
from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config

INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"

# expose the factory and lifecycle hooks for tests
__all__ = ["create_app", "startup", "shutdown"]


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, production: bool = False):
        super().__init__(app)
        self._production = production

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if self._production:
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": INTERNAL_ERROR_MESSAGE},
                headers={"X-Request-ID": request_id},
            )


# --- Error translation ---
async def handle_bookstore_error(request: Request, exc: BookstoreError) -> JSONResponse:
    log = logger.bind(status_code=exc.status_code, error_type=type(exc).__name__)
    if exc.status_code >= 500:
        log.opt(exception=exc).error("request.failed: {}", exc.message)
    else:
        log.info("request.rejected: {}", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Dados inválidos"
    first = errors[0]
    # Drop the leading "body"/"path"/"query" marker from the location
    location = [str(part) for part in first.get("loc", ())[1:]]
    field = ".".join(location)
    message = first.get("msg", "invalid value")
    return f"{field}: {message}" if field else message


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = _describe_validation_error(exc)
    logger.bind(status_code=400, error_type=type(exc).__name__).info(
        "request.invalid: {}", message
    )
    return JSONResponse(status_code=400, content={"error": message})


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# --- Lifecycle hooks ---
async def startup(app: FastAPI, config: ConfigData) -> None:
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService(config)
    deps = ApplicationDependencies(
        config=config,
        database_service=database_service,
        token_verify_service=TokenVerificationService(config.jwt),
    )
    app.state.app_dependencies = deps

    # Report connectivity without aborting startup; requests fail with 500 until it recovers
    if database_service.health_check():
        logger.info("Conectado ao banco de dados!")
        if config.database.create_tables:
            database_service.create_all()
    else:
        logger.error("Não foi possível conectar ao banco de dados")

    if config.auth.protect_books and not config.jwt.secret:
        logger.warning("Book routes are protected but no JWT secret is configured")


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies = app.state.app_dependencies
    app_dependencies.database_service.dispose()


def create_app(config: ConfigData | None = None) -> FastAPI:
    """Build the application around an explicit configuration.

    Args:
        config: Configuration to use. Defaults to the current context's
            configuration (``config.yaml``).
    """
    config = config or get_config()
    configure_logging(config)
    production = config.app.environment == "production"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app, config)
        try:
            yield
        finally:
            await shutdown(app)

    app = FastAPI(
        title="Bookstore API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
        openapi_url=None if production else "/openapi.json",
    )

    # --- CORS configuration ---
    if production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(SecurityHeadersMiddleware, production=production)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(BookstoreError, handle_bookstore_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)

    # --- Router registration ---
    book_dependencies = (
        [Depends(require_bearer_token)] if config.auth.protect_books else []
    )
    if config.auth.protect_books:
        logger.info("Bearer token required on /books routes")
    app.include_router(
        books_router,
        prefix="/books",
        tags=["books"],
        dependencies=book_dependencies,
    )
    app.include_router(health_router)

    return app


if __name__ == "__main__":
    import uvicorn

    main_config = get_config()
    uvicorn.run(
        "src.bookstore.api.http.app:create_app",
        factory=True,
        host=main_config.app.host,
        port=main_config.app.port,
        access_log=False,  # We handle access logging in middleware
    )
