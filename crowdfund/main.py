import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from crowdfund.core.config import Settings
from crowdfund.core.exceptions import CrowdfundError
from crowdfund.database import build_engine, build_session_factory, init_db
from crowdfund.routes.events import router as events_router
from crowdfund.routes.user import router as user_router
from crowdfund.services.storage_service import StorageService

logger = logging.getLogger(__name__)


def format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Collapse pydantic error entries into one line: ``field: message, ...``"""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "cookie")]
        field = loc[-1] if loc else ""
        msg = error.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return "Validation Error: " + ", ".join(messages)


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to a status code and an ``{"error": message}`` body."""

    @app.exception_handler(CrowdfundError)
    async def crowdfund_error_handler(request: Request, exc: CrowdfundError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": format_validation_errors(exc.errors())},
        )

    @app.exception_handler(PydanticValidationError)
    async def model_validation_handler(request: Request, exc: PydanticValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": format_validation_errors(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(settings: Settings) -> FastAPI:
    """Build the API application around an explicit configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(title="Crowdfund API")

    engine = build_engine(settings)
    init_db(engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.storage = StorageService(settings.upload_dir)

    # Uploaded campaign images
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    # Browser clients send the session cookie, so origins must be explicit
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(user_router, prefix="/api", tags=["auth"])
    app.include_router(events_router, prefix="/api", tags=["events"])

    @app.get("/")
    def read_root():
        return {"status": "ok"}

    @app.get("/api/test")
    def test_route():
        return "test ok"

    logger.info("Crowdfund API ready")
    return app
