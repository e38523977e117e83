"""
card_composer/main.py

FastAPI Entrypoint.

Responsibilities:
- Build the FastAPI app from immutable Settings
- Register routers (compose, health)
- Setup middleware (CORS) and logging
- Render every error as {"error": "<message>"}
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from card_composer import __version__
from card_composer.core.config import Settings
from card_composer.core.errors import ComposeError
from card_composer.core.logger import logger, setup_logger
from card_composer.routes import compose, health


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the application.

    Args:
        settings: Settings to serve with; read from the environment when omitted

    Returns:
        Configured FastAPI instance
    """
    if settings is None:
        settings = Settings.from_env()
    setup_logger(settings.log_level, settings.log_file)

    app = FastAPI(
        title=Settings.PROJECT_NAME,
        description="Composes a photo and uppercase text fields onto an ID card template",
        version=__version__,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(ComposeError)
    async def compose_error_handler(request: Request, exc: ComposeError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    app.include_router(health.router)
    app.include_router(compose.router)

    logger.info(
        f"{Settings.PROJECT_NAME} ready: template={settings.template_path}, "
        f"font={settings.font_family}, quality={settings.jpeg_quality}, "
        f"max_upload={settings.max_upload_bytes}"
    )
    return app
