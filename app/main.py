from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.exceptions import BookValidationError, InvalidArgumentError
from app.core.logging import configure_logging
from app.core.settings import get_settings
from app.db.session import engine
from app.models import Base
from app.routers.books import router as books_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Book Catalog API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()

    with logger.contextualize(request_id=request_id, method=request.method, path=request.url.path):
        logger.info("request.start")
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(status_code=response.status_code, duration_ms=round(duration_ms, 1)).info("request.end")

    response.headers.setdefault("X-Request-ID", request_id)
    return response


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"code": "invalid_argument", "message": str(exc)}},
    )


@app.exception_handler(BookValidationError)
async def book_validation_handler(request: Request, exc: BookValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "code": "validation_failed",
                "message": str(exc),
                "violations": [
                    {"field": violation.field, "message": violation.message} for violation in exc.violations
                ],
            }
        },
    )


@app.get("/")
def read_root():
    return {"message": "Book Catalog API"}


app.include_router(books_router)
