"""FastAPI application for SightLog.

Server-rendered pages for reporting and browsing sightings:
- List, view, create, edit and delete sightings
- Browse sightings grouped by shape
- Unique visitor counting via cookie

Example:
    >>> from sightlog.api.app import create_app
    >>> from sightlog.storage.memory import MemoryDocumentStore
    >>> app = create_app(store=MemoryDocumentStore())
    >>> app.title
    'SightLog'

Run with::

    uvicorn --factory sightlog.api.app:create_app --port 3004

or ``sightlog serve``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from sightlog import __version__
from sightlog.api.middleware import MethodOverrideMiddleware
from sightlog.core.config import Settings, get_settings
from sightlog.core.exceptions import IndexOutOfRange, StorageError, UnknownField
from sightlog.core.log import setup_logging
from sightlog.core.visits import VisitCounter
from sightlog.protocols.storage import DocumentStore
from sightlog.service import SightingService
from sightlog.storage.json_file import JsonFileStore
from sightlog.utils.dates import form_max_date, from_now, parse_post_timestamp

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


def error_status(exc: StorageError) -> int:
    """HTTP status for a store failure.

    Example:
        >>> from sightlog.api.app import error_status
        >>> from sightlog.core.exceptions import IndexOutOfRange, ReadFailure
        >>> error_status(IndexOutOfRange("sightings", 3, 1))
        404
        >>> error_status(ReadFailure("data.json", "missing"))
        500
    """
    if isinstance(exc, IndexOutOfRange):
        return 404
    if isinstance(exc, UnknownField):
        return 400
    return 500


def posted_ago(stamp: Any) -> str:
    """Template filter: "3 days ago" for a creation stamp, "" if unparsable."""
    if not isinstance(stamp, str):
        return ""
    posted = parse_post_timestamp(stamp)
    return from_now(posted) if posted else ""


async def form_fields(request: Request) -> dict[str, str]:
    """Text fields of a submitted form; file uploads are ignored."""
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def create_app(
    store: DocumentStore | None = None,
    settings: Settings | None = None,
    visits: VisitCounter | None = None,
    title: str = "SightLog",
) -> FastAPI:
    """Create the SightLog web application.

    Args:
        store: Document store; defaults to a ``JsonFileStore`` at
            ``settings.storage_path``.
        settings: Application settings; defaults to ``get_settings()``.
        visits: Visitor counter; a fresh one is created per app.
        title: Page and OpenAPI title.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    store = store or JsonFileStore(settings.storage_path)
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["posted_ago"] = posted_ago
    templates.env.globals["site_title"] = title

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.store.initialize()
        logger.info(f"{title} started with {type(app.state.store).__name__}")
        yield
        await app.state.store.close()

    app = FastAPI(title=title, version=__version__, lifespan=lifespan)

    app.state.settings = settings
    app.state.store = store
    app.state.service = SightingService(store)
    app.state.visits = visits or VisitCounter()
    app.state.templates = templates

    app.add_middleware(MethodOverrideMiddleware)

    def render(request: Request, name: str, status_code: int = 200, **context: Any) -> HTMLResponse:
        return templates.TemplateResponse(request, name, context, status_code=status_code)

    # =========================================================================
    # Middleware & Error Handling
    # =========================================================================

    @app.middleware("http")
    async def count_visits(request: Request, call_next: Any) -> Any:
        cookie = settings.visit_cookie_name
        count = app.state.visits.register(has_cookie=cookie in request.cookies)
        request.state.visit_count = count
        response = await call_next(request)
        response.set_cookie(cookie, str(count))
        return response

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError) -> HTMLResponse:
        status = error_status(exc)
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {status}: {exc}")
        return render(request, "error.html", status_code=status, status=status, message=str(exc))

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> HTMLResponse:
        message = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        logger.info(f"{request.method} {request.url.path} -> 422: {message}")
        return render(request, "error.html", status_code=422, status=422, message=message)

    # =========================================================================
    # Listing
    # =========================================================================

    @app.get("/", response_class=HTMLResponse)
    async def list_sightings(request: Request) -> HTMLResponse:
        entries = await app.state.service.entries()
        return render(request, "index.html", entries=entries)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    # =========================================================================
    # Creating
    # =========================================================================

    @app.get("/sighting", response_class=HTMLResponse)
    async def new_sighting_form(request: Request) -> HTMLResponse:
        return render(request, "sighting.html", sighting={}, max_date=form_max_date())

    @app.post("/sighting")
    async def create_sighting(request: Request) -> RedirectResponse:
        await app.state.service.create(await form_fields(request))
        return RedirectResponse("/form-submit-successful", status_code=303)

    @app.get("/form-submit-successful", response_class=HTMLResponse)
    async def form_submitted(request: Request) -> HTMLResponse:
        return render(request, "form-submit-successful.html")

    # =========================================================================
    # Single Sighting
    # =========================================================================

    @app.get("/sighting/{index}", response_class=HTMLResponse)
    async def show_sighting(request: Request, index: int) -> HTMLResponse:
        sighting = await app.state.service.get(index)
        return render(request, "single-sighting.html", index=index, sighting=sighting)

    @app.get("/sighting/{index}/edit", response_class=HTMLResponse)
    async def edit_sighting_form(request: Request, index: int) -> HTMLResponse:
        sighting = await app.state.service.get(index)
        return render(
            request,
            "edit.html",
            index=index,
            sighting=sighting,
            max_date=form_max_date(),
        )

    @app.put("/sighting/{index}/edit")
    async def update_sighting(request: Request, index: int) -> RedirectResponse:
        await app.state.service.replace(index, await form_fields(request))
        return RedirectResponse(f"/sighting/{index}", status_code=303)

    @app.delete("/sighting/{index}")
    async def delete_sighting(index: int) -> RedirectResponse:
        await app.state.service.delete(index)
        return RedirectResponse("/", status_code=303)

    # =========================================================================
    # Shapes
    # =========================================================================

    @app.get("/shapes", response_class=HTMLResponse)
    async def list_shapes(request: Request) -> HTMLResponse:
        buckets = await app.state.service.shapes()
        return render(request, "shapes.html", buckets=buckets)

    @app.get("/shapes/{shape:path}", response_class=HTMLResponse)
    async def sightings_with_shape(request: Request, shape: str) -> HTMLResponse:
        entries = await app.state.service.with_shape(shape)
        return render(request, "sightings-shape.html", shape=shape.lower(), entries=entries)

    return app
