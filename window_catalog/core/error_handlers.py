import logging
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from window_catalog.core.config import settings
from window_catalog.core.exceptions import CatalogError

RPC_PATH_PREFIX = f"{settings.API_V1_STR}/rpc"
logger = logging.getLogger("rpc.middleware")


def _is_rpc_request(request: Request) -> bool:
    return request.url.path.startswith(RPC_PATH_PREFIX)


def _procedure_name(request: Request) -> str:
    return request.url.path[len(RPC_PATH_PREFIX):].strip("/")


def _error_response(request: Request, status_code: int, error: str, detail) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, "path": request.url.path},
    )


class RpcRequestMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if not _is_rpc_request(request):
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled RPC exception",
                extra={"path": request.url.path, "method": request.method, "procedure": _procedure_name(request)},
            )
            response = _error_response(request, 500, "internal_error", "Internal server error")

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-RPC-Request-Duration-ms"] = f"{duration_ms:.2f}"
        logger.info(
            "RPC request completed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "procedure": _procedure_name(request),
                "duration_ms": duration_ms,
                "status_code": response.status_code,
            },
        )
        return response


def register_rpc_error_handlers(app: FastAPI) -> None:
    app.add_middleware(RpcRequestMiddleware)

    @app.exception_handler(RequestValidationError)
    async def rpc_validation_handler(request: Request, exc: RequestValidationError):
        if not _is_rpc_request(request):
            return await request_validation_exception_handler(request, exc)

        logger.warning(
            "RPC validation error",
            extra={"path": request.url.path, "method": request.method, "errors": jsonable_encoder(exc.errors())},
        )
        return _error_response(request, 422, "validation_error", jsonable_encoder(exc.errors()))

    @app.exception_handler(CatalogError)
    async def rpc_catalog_error_handler(request: Request, exc: CatalogError):
        return _error_response(request, exc.status_code, exc.error_code, exc.message)

    @app.exception_handler(SQLAlchemyError)
    async def rpc_store_error_handler(request: Request, exc: SQLAlchemyError):
        # Already logged with its traceback by the service that raised it
        logger.error(
            "RPC store error",
            extra={"path": request.url.path, "method": request.method, "error_type": type(exc).__name__},
        )
        return _error_response(request, 500, "store_error", "Internal server error")

    @app.exception_handler(StarletteHTTPException)
    async def rpc_http_exception_handler(request: Request, exc: StarletteHTTPException):
        if not _is_rpc_request(request):
            return await http_exception_handler(request, exc)
        return _error_response(request, exc.status_code, "rpc_error", exc.detail)
