"""FastAPI application factory."""
import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from feedback_board.api.v1 import auth, comments, feedbacks, mentions
from feedback_board.config import settings
from feedback_board.database import Base, engine
from feedback_board.errors import register_exception_handlers
from feedback_board.logging_config import bind_request_context, clear_request_context, configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # No migrations; tables are created on startup
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield


def create_app() -> FastAPI:
    configure_logging(log_level=settings.LOG_LEVEL, json_output=settings.LOG_JSON)

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, debug=settings.DEBUG, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        bind_request_context(request_id, request.method, request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    app.include_router(auth.router, tags=["auth"])
    app.include_router(feedbacks.router, prefix="/product-feedbacks", tags=["product-feedbacks"])
    app.include_router(comments.router, prefix="/product-feedbacks", tags=["comments"])
    app.include_router(mentions.router, prefix="/mentions", tags=["mentions"])

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()
