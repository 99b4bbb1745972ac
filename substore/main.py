from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from substore.core.errors import ApiError, RequestInvalidError, failed, failed_message
from substore.core.logging_config import setup_logging
from substore.core.settings import S
from substore.metrics import metrics_endpoint, metrics_middleware, set_app_info
from substore.routers.collections import router as collections_router
from substore.routers.misc import router as misc_router
from substore.routers.subscriptions import router as subscriptions_router


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(failed(exc), status_code=exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(failed_message(str(exc.detail)), status_code=exc.status_code, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    err = RequestInvalidError("INVALID_REQUEST", "Request body is invalid", details=str(exc.errors()))
    return JSONResponse(failed(err), status_code=err.status_code)


def create_app() -> FastAPI:
    setup_logging(S.log_level, S.log_file or None)

    app = FastAPI(title="Sub-Store API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=S.cors_origin_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if S.metrics_enabled:
        app.middleware("http")(metrics_middleware)
        set_app_info(app.title, app.version)
        app.get("/metrics")(metrics_endpoint)

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(misc_router)
    app.include_router(subscriptions_router)
    app.include_router(collections_router)

    return app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=S.host, port=S.port)
