from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from devblog import config
from devblog.database import build_engine, init_db
from devblog.errors import (
    ConstraintViolationError,
    DevblogError,
    NotFoundError,
    SnippetSyncError,
    TransportFailureError,
)
from devblog.models.response import ErrorResponse, SyncErrorResponse, ValidationErrorResponse
from devblog.routers import editor, posts, snippets


logger = logging.getLogger(__name__)
logging.getLogger("devblog").setLevel(config.LOG_LEVEL)

_ERROR_STATUS = {
    ConstraintViolationError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    TransportFailureError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _status_for(error: DevblogError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _message_for(error: DevblogError, status_code: int) -> str:
    # Driver details of store failures stay in the log.
    if status_code >= 500:
        return "Internal Server Error" if status_code == 500 else "Store unavailable"
    return str(error)


async def devblog_error_handler(request: Request, error: DevblogError) -> JSONResponse:
    error_id = uuid.uuid4()
    if isinstance(error, SnippetSyncError):
        status_code = _status_for(error.cause)
        logger.warning("Snippet sync failed error_id=%s applied=%s", error_id, error.result.counts())
        body = SyncErrorResponse(
            status=status_code,
            id=error_id,
            message=_message_for(error.cause, status_code),
            applied=error.result.counts(),
            post_id=error.post_id,
        )
    else:
        status_code = _status_for(error)
        if status_code >= 500:
            logger.error("Received store error error_id=%s", error_id, exc_info=error)
        else:
            logger.warning("Received %s error_id=%s: %s", type(error).__name__, error_id, error)
        body = ErrorResponse(status=status_code, id=error_id, message=_message_for(error, status_code))
    return JSONResponse(content=jsonable_encoder(body), status_code=status_code)


async def http_exception_handler(request: Request, error: HTTPException) -> JSONResponse:
    error_id = uuid.uuid4()
    logger.info("Received http exception error_id=%s status=%s", error_id, error.status_code)
    return JSONResponse(
        content=jsonable_encoder(ErrorResponse(status=error.status_code, id=error_id, message=str(error.detail))),
        status_code=error.status_code,
    )


async def request_validation_error_handler(request: Request, error: RequestValidationError) -> JSONResponse:
    error_id = uuid.uuid4()
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    logger.info("Received request validation error error_id=%s", error_id)
    return JSONResponse(
        content=jsonable_encoder(
            ValidationErrorResponse(
                status=status_code,
                id=error_id,
                message="Request validation failed",
                errors=jsonable_encoder(error.errors()),
            )
        ),
        status_code=status_code,
    )


def create_app(database_url: Optional[str] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(database_url or config.DATABASE_URL)
        init_db(engine)
        app.state.engine = engine
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(title="DevBlog", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(posts.router)
    app.include_router(snippets.router)
    app.include_router(editor.router)

    app.add_exception_handler(DevblogError, devblog_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    @app.get("/health")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    uvicorn.run("devblog.main:app", host=config.HOST, port=config.PORT)
