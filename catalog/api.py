import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from config import settings
from catalog.errors import register_error_handlers
from catalog.library import Library
from catalog.logging_setup import configure_logging
from catalog.routes import router as books_router
from catalog.views import SECURITY_HEADERS, STATIC_DIR

logger = logging.getLogger(__name__)


def create_app(library: Optional[Library] = None) -> FastAPI:
    """Build the web application around a catalog.

    The catalog is initialized when the app starts and closed when it stops.
    Route handlers reach it through ``app.state.library``.
    """
    library = library or Library(settings.database_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        library.initialize()
        try:
            yield
        finally:
            library.close()

    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug, lifespan=lifespan)
    app.state.library = library

    # --- Request log ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
        return response

    # --- Response headers ---
    @app.middleware("http")
    async def add_headers(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/static/"):
            response.headers["Cache-Control"] = "public, max-age=31536000"  # 1 year
        response.headers.update(SECURITY_HEADERS)
        return response

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # Home route redirects to the book list
    @app.get("/", include_in_schema=False)
    def home():
        return RedirectResponse("/books", status_code=302)

    app.include_router(books_router)
    register_error_handlers(app)
    return app


configure_logging(settings.log_level)
app = create_app()
