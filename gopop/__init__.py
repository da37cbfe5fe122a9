"""
gopop Python client
===================

Client for the gopop database service: create a database from a
migration file, query it, run statements against it, fetch its
metadata and drop it over HTTP with Basic authentication.

Usage
-----
>>> from gopop import Connection, DatabaseNotFound
>>>
>>> with Connection("user", "pass", url="http://db.local") as conn:
...     conn.create("mydb", "migrations/001.sql")
...     conn.exec("mydb", "INSERT INTO t(x) VALUES (?)", 42)
...     print(conn.query("mydb", "SELECT x FROM t").message)
...     conn.drop("mydb")

Subpackages
-----------
- gopop.core: Connection, session, wire models and errors

"""

__version__ = "0.1.0"

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
    # Version
    "__version__",
    # Client
    "Connection",
    "PopConfig",
    "PopSession",
    "authenticate",
    "basic_auth_header",
    # Wire models
    "CreateRequest",
    "QueryRequest",
    "ResponseMessage",
    # Errors
    "GopopError",
    "EncodingError",
    "UpstreamError",
    "DatabaseAlreadyExists",
    "DatabaseNotFound",
    "UnexpectedStatusError",
]
