import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException

from app.api.routers.files import router as files_router
from app.common.auth import AuthConfig, AuthorizationError, BearerTokenAuthenticator
from app.common.config import Settings, get_settings
from app.common.logging import setup_logging
from app.infra.observability.metrics import metrics_endpoint
from app.infra.observability.middleware import MetricsMiddleware
from app.infra.storage.factory import build_storage_provider
from app.infra.storage.provider import StorageProvider, StorageWriteError

UNAUTHORIZED_BODY = "Unauthorized: Invalid or missing access token"
STORE_FAILED_BODY = "Failed to store file"

ERROR_CODE_BY_STATUS = {
    400: "bad_request",
    401: "unauthorized",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
    415: "unsupported_media_type",
    500: "internal_error",
    502: "bad_gateway",
    503: "service_unavailable",
}


def _resolve_error_code(status_code: int) -> str:
    if status_code == 422:
        return "validation_error"
    return ERROR_CODE_BY_STATUS.get(status_code, "unknown_error")


def _storage_failure_body(exc: StorageWriteError, expose_details: bool) -> str:
    if not expose_details:
        return STORE_FAILED_BODY
    return f"{STORE_FAILED_BODY}: {exc}"


def create_app(
    settings: Settings | None = None,
    storage_provider: StorageProvider | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)
    startup_logger = logging.getLogger("app.startup")

    provider = storage_provider or build_storage_provider(settings)
    if settings.AUTH_ENABLED and not (settings.AUTH_ACCESS_TOKEN or "").strip():
        startup_logger.warning(
            "AUTH_ENABLED is true but AUTH_ACCESS_TOKEN is not set; every upload "
            "will be rejected. [event=auth_token_unconfigured]"
        )

    app = FastAPI(
        title="Data Lake Receiver",
        version="1.0.0",
        description="Receives raw file uploads and stores them on the filesystem or S3",
    )
    app.state.settings = settings
    app.state.storage_provider = provider
    app.state.authenticator = BearerTokenAuthenticator(AuthConfig.from_settings(settings))

    # Optional CORS
    if settings.CORS_ENABLED:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS or ["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> PlainTextResponse:
        return PlainTextResponse(f"OK - Storage: {app.state.storage_provider.describe()}")

    # Metrics
    if settings.ENABLE_METRICS:
        app.add_middleware(MetricsMiddleware)
        app.add_route(
            "/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False
        )

    # Catch-all upload route, registered last
    app.include_router(files_router, tags=["files"])

    @app.on_event("startup")
    def on_startup() -> None:
        description = provider.describe()
        startup_logger.info(
            "Initializing storage provider. [event=storage_init_begin] (%s)",
            description,
        )
        try:
            provider.initialize()
        except Exception as exc:
            startup_logger.error(
                "Storage provider could not be initialized, aborting startup."
                " [event=storage_init_failed] (%s, error=%s)",
                description,
                exc,
            )
            raise
        startup_logger.info(
            "Storage provider initialized. [event=storage_init_succeeded] (%s)",
            description,
        )

    @app.exception_handler(AuthorizationError)
    async def authorization_exception_handler(
        request: Request, exc: AuthorizationError
    ):
        logging.getLogger("auth").warning(
            "Unauthorized access attempt method=%s path=%s request_id=%s",
            request.method,
            request.url.path,
            request.headers.get("X-Request-Id"),
        )
        return PlainTextResponse(UNAUTHORIZED_BODY, status_code=401)

    @app.exception_handler(StorageWriteError)
    async def storage_write_exception_handler(
        request: Request, exc: StorageWriteError
    ):
        logging.getLogger("app.ingest").error(
            "Failed to store file: %s",
            exc.key,
            exc_info=exc,
            extra={
                "extra": {
                    "key": exc.key,
                    "cause": repr(exc.__cause__ or exc),
                    "request_id": request.headers.get("X-Request-Id"),
                }
            },
        )
        return PlainTextResponse(
            _storage_failure_body(exc, app.state.settings.EXPOSE_ERROR_DETAILS),
            status_code=500,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger = logging.getLogger("http")
        logger.log(
            logging.WARNING if exc.status_code < 500 else logging.ERROR,
            "http_exception status=%s detail=%s method=%s path=%s request_id=%s",
            exc.status_code,
            exc.detail,
            request.method,
            request.url.path,
            request.headers.get("X-Request-Id"),
        )
        return JSONResponse(
            status_code=exc.status_code,
            media_type="application/problem+json",
            headers=getattr(exc, "headers", None),
            content={
                "type": "about:blank",
                "title": "HTTP Error",
                "status": exc.status_code,
                "detail": exc.detail,
                "error_code": _resolve_error_code(exc.status_code),
                "instance": str(request.url),
                "request_id": request.headers.get("X-Request-Id"),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return JSONResponse(
            status_code=422,
            media_type="application/problem+json",
            content={
                "type": "about:blank",
                "title": "Validation Error",
                "status": 422,
                "detail": jsonable_encoder(exc.errors()),
                "error_code": _resolve_error_code(422),
                "instance": str(request.url),
                "request_id": request.headers.get("X-Request-Id"),
            },
        )

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
