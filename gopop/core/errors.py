"""
gopop.core.errors - Error taxonomy
===================================

Local file and transport failures are not wrapped: they surface as the
builtin ``OSError`` (``requests.RequestException`` derives from it).
"""

from __future__ import annotations

from typing import Optional


class GopopError(Exception):
    """Base class for errors raised by the gopop client."""


class EncodingError(GopopError, ValueError):
    """A request or response body could not be (de)serialized."""


class UpstreamError(GopopError):
    """
    The database service answered with an error status.

    Attributes
    ----------
    status : int
        HTTP status code
    body : str
        Raw response body
    url : str
        The URL that was called
    """

    def __init__(self, status: int, body: str, url: str, detail: Optional[str] = None):
        snippet = (body or "")[:1200]
        super().__init__(detail or f"gopop upstream error {status} for {url}: {snippet}")
        self.status = status
        self.body = body or ""
        self.url = url


class DatabaseAlreadyExists(UpstreamError):
    """Create was called for a database name that is already taken."""

    def __init__(self, status: int, body: str, url: str):
        super().__init__(status, body, url, detail="database already exist")


class DatabaseNotFound(UpstreamError):
    """Get, query or exec was called for a database that does not exist."""

    def __init__(self, status: int, body: str, url: str):
        super().__init__(status, body, url, detail="database not found")


class UnexpectedStatusError(UpstreamError):
    """Error status whose body is not one of the known error messages."""
