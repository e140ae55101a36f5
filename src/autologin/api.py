"""HTTP API for login automation.

Routes:
    POST   /api/login
    GET    /api/fetch-protected
    GET    /api/download-html/{url}
    DELETE /api/session/{session_id}
    GET    /api/health
"""

import logging
import time
import traceback
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote, unquote

import httpx
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from autologin import __version__
from autologin.config import Config
from autologin.constants import HTML_PREVIEW_LENGTH, SESSION_CLEARED_MESSAGE
from autologin.errors import (
    DownloadError,
    SessionError,
    UpstreamTransportError,
    ValidationError,
)
from autologin.login_executor import LoginExecutor
from autologin.models import Credentials
from autologin.protected_fetcher import ProtectedFetcher
from autologin.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["login"])


class LoginRequest(BaseModel):
    url: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    customSelectors: Optional[Dict[str, str]] = None


def _store(request: Request) -> SessionStore:
    return request.app.state.store


def _config(request: Request) -> Config:
    return request.app.state.config


def _transport(request: Request) -> Optional[httpx.AsyncBaseTransport]:
    return request.app.state.transport


def download_link(target_url: str, session_id: str) -> str:
    return f"/api/download-html/{quote(target_url, safe='')}?sessionId={session_id}"


@router.post("/login")
async def login(body: LoginRequest, request: Request):
    """Detect the login form at ``url``, submit credentials and store the session."""
    if not body.url or not body.email or not body.password:
        raise ValidationError("URL, email, and password are required")

    executor = LoginExecutor(
        _store(request),
        config=_config(request),
        transport=_transport(request),
    )
    result = await executor.execute(
        body.url,
        Credentials(identifier=body.email, secret=body.password),
        overrides=body.customSelectors,
    )
    return result.to_dict()


@router.get("/fetch-protected")
async def fetch_protected(
    request: Request,
    sessionId: Optional[str] = Query(default=None),
    path: Optional[str] = Query(default=None),
):
    """Fetch a page with a stored session and list its resources."""
    fetcher = ProtectedFetcher(
        _store(request),
        config=_config(request),
        transport=_transport(request),
    )
    document = await fetcher.fetch(sessionId, path)

    return {
        "success": True,
        "url": document.url,
        "title": document.title,
        "statusCode": document.status_code,
        "resources": document.resources.to_dict(),
        "htmlPreview": document.html[:HTML_PREVIEW_LENGTH],
        "fullSize": document.full_size,
        "downloadLink": download_link(document.url, sessionId),
    }


@router.get("/download-html/{url:path}")
async def download_html(
    url: str,
    request: Request,
    sessionId: Optional[str] = Query(default=None),
):
    """Return the raw HTML of a page as a file attachment."""
    fetcher = ProtectedFetcher(
        _store(request),
        config=_config(request),
        transport=_transport(request),
    )
    try:
        html = await fetcher.download(unquote(url), sessionId)
    except SessionError:
        return PlainTextResponse("Invalid session", status_code=400)

    filename = f"protected_page_{int(time.time() * 1000)}.html"
    return Response(
        content=html,
        media_type="text/html",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/session/{session_id}")
async def clear_session(session_id: str, request: Request):
    """Forget a session. Succeeds whether or not the session exists."""
    _store(request).delete(session_id)
    return {"success": True, "message": SESSION_CLEARED_MESSAGE}


@router.get("/health")
async def health_check(request: Request):
    """Simple health check endpoint."""
    return {"status": "ok", "sessions": len(_store(request))}


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(UpstreamTransportError)
    async def handle_transport_error(request: Request, exc: UpstreamTransportError):
        logger.error(f"{exc.message}: {exc.details}")
        content = {"error": exc.message, "details": exc.details}
        if app.state.config.is_development:
            content["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        return JSONResponse(status_code=500, content=content)

    @app.exception_handler(DownloadError)
    async def handle_download_error(request: Request, exc: DownloadError):
        return PlainTextResponse(exc.message, status_code=500)


def create_app(
    config: Optional[Config] = None,
    store: Optional[SessionStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application.

    Args:
        config: Service configuration
        store: Session store shared by all requests (a new one if omitted)
        transport: Optional httpx transport for outbound calls

    Returns:
        Configured FastAPI application
    """
    config = config or Config()

    app = FastAPI(title="autologin", version=__version__)
    app.state.config = config
    app.state.store = store if store is not None else SessionStore()
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    app.include_router(router)

    if config.public_dir and Path(config.public_dir).is_dir():
        app.mount("/", StaticFiles(directory=config.public_dir, html=True), name="public")
        logger.info(f"Serving static files from {config.public_dir}")

    return app
