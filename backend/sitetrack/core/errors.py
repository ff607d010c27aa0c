"""Typed errors raised at the data boundary.

Parsing, matching, aggregation and classification never raise; only code
that talks to the database does, and the API layer maps these to HTTP
responses by ``code``.
"""


class SitetrackError(Exception):
    code: str = "sitetrack_error"

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(SitetrackError):
    code = "not_found"


class DuplicateFullCodeError(SitetrackError):
    """Another project already uses this full code."""

    code = "duplicate_full_code"


class FetchError(SitetrackError):
    """Backend still unreachable after one reconnect-and-retry."""

    code = "fetch_failed"


class FetchTimeoutError(FetchError):
    """The client-side fetch timeout elapsed; the fetch was abandoned."""

    code = "fetch_timeout"
