"""
gopop.core - Connection, authentication and wire handling
==========================================================

- Connection: public client exposing create/get/drop/query/exec
- PopConfig: connection configuration
- PopSession: low-level HTTP session
- basic_auth_header / authenticate: Basic authentication helpers
- Error taxonomy rooted at GopopError

"""

from gopop.core.errors import (
    GopopError,
    EncodingError,
    UpstreamError,
    DatabaseAlreadyExists,
    DatabaseNotFound,
    UnexpectedStatusError,
)
from gopop.core.models import CreateRequest, QueryRequest, ResponseMessage
from gopop.core.session import PopConfig, PopSession, authenticate, basic_auth_header

from gopop.core.connection import Connection

__all__ = [
    "GopopError",
    "EncodingError",
    "UpstreamError",
    "DatabaseAlreadyExists",
    "DatabaseNotFound",
    "UnexpectedStatusError",
    "CreateRequest",
    "QueryRequest",
    "ResponseMessage",
    "PopConfig",
    "PopSession",
    "authenticate",
    "basic_auth_header",
    "Connection",
]
