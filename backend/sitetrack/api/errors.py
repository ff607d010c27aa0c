from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sitetrack.core.errors import (
    DuplicateFullCodeError,
    FetchError,
    FetchTimeoutError,
    NotFoundError,
    SitetrackError,
)

_STATUS = [
    (FetchTimeoutError, 504),
    (FetchError, 503),
    (NotFoundError, 404),
    (DuplicateFullCodeError, 409),
]

def http_status(exc: SitetrackError) -> int:
    for cls, code in _STATUS:
        if isinstance(exc, cls):
            return code
    return 500

def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SitetrackError)
    def _sitetrack_error(_request: Request, exc: SitetrackError):
        return JSONResponse(
            status_code=http_status(exc),
            content={"detail": exc.message, "code": exc.code, "context": exc.details},
        )
