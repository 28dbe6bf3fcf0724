"""FastAPI web server for lyntfeed."""

from contextlib import asynccontextmanager
from datetime import datetime
from uuid import uuid4

from fastapi import FastAPI, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lyntfeed import FeedConfig, FeedService, __version__
from lyntfeed.core.exporter import to_dict
from lyntfeed.exceptions import InvalidInput, LyntfeedError
from lyntfeed.logging import bind_request_context, get_logger


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


class UploadResponse(BaseModel):
    """Avatar upload acknowledgment."""

    message: str


_log = get_logger("api")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _failure(exc: Exception, failure_message: str, **context) -> JSONResponse:
    """
    Map an exception to a structured error body.

    Client errors carry their public message; everything else becomes
    a generic failure and is only detailed in the logs.
    """
    if isinstance(exc, LyntfeedError) and exc.status_code < 500:
        return _error(exc.public_message, exc.status_code)

    _log.error(
        "request_failed",
        error_type=type(exc).__name__,
        error=str(exc),
        exc_info=not isinstance(exc, LyntfeedError),
        **context,
    )
    return _error(failure_message, 500)


def _service(request: Request) -> FeedService:
    return request.app.state.service


def _token(request: Request) -> str | None:
    return request.cookies.get(_service(request).config.auth_cookie_name)


async def _read_upload(upload: UploadFile | None) -> bytes | None:
    if upload is None:
        return None
    data = await upload.read()
    return data or None


def create_app(config: FeedConfig | None = None, service: FeedService | None = None) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Used to build a FeedService when none is given
        service: Pre-built service; its lifecycle stays with the caller

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage service lifecycle."""
        if service is not None:
            yield
            return
        async with FeedService(config or FeedConfig()) as owned:
            app.state.service = owned
            yield

    app = FastAPI(
        title="lyntfeed API",
        description="Short-form post creation and retrieval",
        version=__version__,
        lifespan=lifespan,
    )
    if service is not None:
        app.state.service = service

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        """Tag every log event of a request with its id."""
        request_id = request.headers.get("X-Request-ID", "")[:64] or uuid4().hex
        bind_request_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        """
        Replace framework validation bodies with the error envelope.

        Credentials are still checked first so unauthenticated callers
        get 401 whatever they sent.
        """
        try:
            await _service(request).authenticate(_token(request))
        except LyntfeedError as e:
            return _failure(e, "Authentication failed")

        _log.info(
            "request_rejected",
            fields=[".".join(str(part) for part in err["loc"]) for err in exc.errors()],
        )
        return _failure(InvalidInput("malformed request fields"), "Invalid input")

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check API health status."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now().isoformat(),
        )

    @app.post("/api/lynt", status_code=201, tags=["Lynts"])
    async def create_lynt(
        request: Request,
        content: str | None = Form(None),
        image: UploadFile | None = File(None),
        reposted: str | None = Form(None),
    ):
        """
        Create a lynt, optionally reposting another and attaching an image.
        """
        try:
            item = await _service(request).create_item(
                _token(request),
                content=content,
                image=await _read_upload(image),
                reposted=reposted,
            )
        except Exception as e:
            return _failure(e, "Failed to create lynt")

        return JSONResponse(to_dict(item), status_code=201)

    @app.get("/api/lynt", tags=["Lynts"])
    async def get_lynt(
        request: Request,
        id: str | None = Query(None, description="Lynt id"),
    ):
        """
        Fetch a lynt with its chain of referenced originals.

        Each successful read counts one view.
        """
        try:
            result = await _service(request).read_item(_token(request), id)
        except Exception as e:
            return _failure(e, "Failed to fetch lynt", item_id=id)

        return to_dict(result)

    @app.post("/api/upload", response_model=UploadResponse, tags=["Users"])
    async def upload_avatar(
        request: Request,
        file: UploadFile | None = File(None),
    ):
        """Replace the caller's avatar."""
        try:
            await _service(request).upload_avatar(
                _token(request),
                await _read_upload(file),
            )
        except Exception as e:
            return _failure(e, "File upload failed")

        return UploadResponse(message="File uploaded successfully")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
