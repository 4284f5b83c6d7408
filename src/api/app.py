from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import (
    ClientError,
    ServerError,
    error_fields,
    kind_of,
    problem_details,
    status_for,
)
from .middleware import REQUEST_ID_HEADER, RequestContextMiddleware, trace_id_of
from src.app.repositories.errors import TransientStorageError
from src.domain.errors import AuthError, ErrorKind
import logging

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"


def _problem_response(
    request: Request, error, kind: ErrorKind, field_errors=None
) -> JSONResponse:
    trace_id = trace_id_of(request)
    body = problem_details(
        kind=kind,
        code=error.code,
        detail=error.message,
        instance=request.url.path,
        trace_id=trace_id,
        type_base_uri=request.app.state.problem_type_base_uri,
        field_errors=field_errors,
    )
    return JSONResponse(
        status_code=status_for(kind),
        content=body,
        media_type=PROBLEM_JSON,
        headers={REQUEST_ID_HEADER: trace_id},
    )


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return _problem_response(
        request, exc.base_error, kind_of(exc.base_error), error_fields(exc.base_error)
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(
        f"Server error: {exc.base_error.code} - {exc.base_error.message} "
        f"[{trace_id_of(request)}]"
    )
    return _problem_response(request, exc.base_error, ErrorKind.internal)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
):
    field_errors = {}
    for error in exc.errors():
        # Drop the leading "body"/"query" segment so keys match client field names
        loc = [str(part) for part in error["loc"][1:]] or [str(error["loc"][0])]
        field_errors.setdefault(".".join(loc), []).append(error["msg"])
    logger.warning(f"Request validation failed: {field_errors}")
    return _problem_response(
        request, AuthError.validation(field_errors), ErrorKind.validation, field_errors
    )


async def handle_transient_storage_error(
    request: Request, exc: TransientStorageError
):
    logger.error(f"Storage unavailable: {exc} [{trace_id_of(request)}]")
    return _problem_response(request, AuthError.storage_unavailable(), ErrorKind.internal)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error [{trace_id_of(request)}]", exc_info=exc)
    return _problem_response(request, AuthError.internal(), ErrorKind.internal)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from src.depends import init_db

    await init_db()
    yield


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Auth Service", version="0.1.0", lifespan=lifespan)
    app.state.problem_type_base_uri = ApplicationConfig.PROBLEM_TYPE_BASE_URI

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health

    app.include_router(health.router, tags=["Health"])
    app.include_router(
        auth.router, prefix=ApplicationConfig.API_PREFIX, tags=["Authentication"]
    )

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(TransientStorageError, handle_transient_storage_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
