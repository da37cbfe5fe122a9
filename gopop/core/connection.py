"""
gopop.core.connection - Database service connection
====================================================

The Connection is the public entry point: create, get, drop, query and
exec a database hosted by a gopop service.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import os
from typing import Optional, Union

from requests import Session

from gopop.core.errors import DatabaseAlreadyExists, DatabaseNotFound, EncodingError
from gopop.core.models import ArgValue, CreateRequest, QueryRequest, ResponseMessage, encode_payload
from gopop.core.session import PopConfig, PopSession

logger = logging.getLogger(__name__)

DATABASES_PATH = "/v1/databases"
DATABASE_PATH = "/v1/databases/"
QUERY_PATH = "/v1/databases/query"
EXEC_PATH = "/v1/databases/exec"

ALREADY_EXISTS = {"database already exist": DatabaseAlreadyExists}
NOT_FOUND = {"database not found": DatabaseNotFound}


def _env_timeout() -> Optional[float]:
    raw = os.environ.get("GOPOP_TIMEOUT", "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        value = float("nan")
    if not math.isfinite(value) or value <= 0:
        logger.warning("Ignoring invalid GOPOP_TIMEOUT %r, requests will not time out", raw)
        return None
    return value


class Connection:
    """
    Authenticated connection to a gopop database service.

    Parameters
    ----------
    username : str, optional
        Basic auth user. Falls back to GOPOP_USER env var.
    password : str, optional
        Basic auth password. Falls back to GOPOP_PASS env var.
    url : str, optional
        Service base URL. Falls back to GOPOP_URL env var. Not validated;
        it may be left empty and assigned to ``url`` before the first call.
    timeout : float, optional
        Request timeout in seconds. Falls back to GOPOP_TIMEOUT env var,
        otherwise requests wait indefinitely.
    verify : bool, optional
        TLS verification. Falls back to GOPOP_VERIFY_TLS env var.
    strict_decode : bool
        Raise EncodingError when a success body is not a valid message.
    session : requests.Session, optional
        Transport to use instead of a freshly built one.

    Examples
    --------
    >>> conn = Connection("u", "p", url="http://db.local")
    >>> conn.create("mydb", "migrations/001.sql")
    >>> conn.exec("mydb", "INSERT INTO t(x) VALUES (?)", 1)
    >>> conn.query("mydb", "SELECT x FROM t").message

    >>> with Connection() as conn:  # reads GOPOP_* env vars
    ...     conn.drop("mydb")
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        verify: Optional[bool] = None,
        strict_decode: bool = False,
        session: Optional[Session] = None,
    ) -> None:
        if verify is None:
            verify = os.environ.get("GOPOP_VERIFY_TLS", "true").lower() != "false"

        cfg = PopConfig(
            url=url if url is not None else os.environ.get("GOPOP_URL", ""),
            username=username if username is not None else os.environ.get("GOPOP_USER", ""),
            password=password if password is not None else os.environ.get("GOPOP_PASS", ""),
            timeout=timeout if timeout is not None else _env_timeout(),
            verify=verify,
            strict_decode=strict_decode,
        )
        self._session = PopSession(cfg, session=session)

    @classmethod
    def from_config(cls, cfg: PopConfig, session: Optional[Session] = None) -> "Connection":
        """Build a connection from a copy of ``cfg``, ignoring the environment."""
        conn = cls.__new__(cls)
        conn._session = PopSession(dataclasses.replace(cfg), session=session)
        return conn

    def close(self) -> None:
        """Release the underlying transport."""
        self._session.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Connection(url={self.url!r}, username={self.username!r})"

    @property
    def session(self) -> PopSession:
        """The underlying HTTP session."""
        return self._session

    @property
    def url(self) -> str:
        """The service base URL."""
        return self._session.cfg.url

    @url.setter
    def url(self, value: str) -> None:
        self._session.cfg.url = value

    @property
    def username(self) -> str:
        return self._session.cfg.username

    @property
    def password(self) -> str:
        return self._session.cfg.password

    # ---------------- operations ----------------

    def create(self, name: str, migration_file: Union[str, os.PathLike]) -> ResponseMessage:
        """
        Create a database and apply a migration script to it.

        Parameters
        ----------
        name : str
            Database name
        migration_file : str or PathLike
            Path of the migration script, read as UTF-8 text

        Returns
        -------
        ResponseMessage
            Decoded service response

        Raises
        ------
        OSError
            The migration file cannot be read, or the transport failed
        EncodingError
            The file is not valid UTF-8 or the body cannot be encoded
        DatabaseAlreadyExists
            A database with this name already exists
        UnexpectedStatusError
            Any other error status
        """
        try:
            # newline="" keeps the script byte-exact
            with open(migration_file, encoding="utf-8", newline="") as fh:
                migration = fh.read()
        except UnicodeDecodeError as exc:
            raise EncodingError(f"migration file {migration_file} is not valid UTF-8") from exc

        data = encode_payload(CreateRequest, name=name, migration=migration)
        logger.debug("Creating database %s from %s", name, migration_file)
        return self._session.call("POST", DATABASES_PATH, data=data, known=ALREADY_EXISTS)

    def get(self, name: str) -> ResponseMessage:
        """
        Fetch metadata of a database.

        Raises DatabaseNotFound if the service does not know ``name``.
        """
        return self._session.call("GET", DATABASE_PATH, params={"name": name}, known=NOT_FOUND)

    def drop(self, name: str) -> None:
        """
        Drop a database.

        The response is not inspected: any completed round trip counts as
        success. Transport failures propagate.
        """
        self._session.request("DELETE", DATABASE_PATH, params={"name": name})

    def query(self, name: str, query: str, *args: ArgValue) -> ResponseMessage:
        """
        Run a read statement.

        Parameters
        ----------
        name : str
            Database name
        query : str
            Statement text
        *args
            Positional arguments (str, int, float, bool or None)

        Raises
        ------
        EncodingError
            An argument is not one of the supported value types
        DatabaseNotFound
            The database does not exist
        UnexpectedStatusError
            Any other error status
        """
        return self._statement(QUERY_PATH, name, query, args)

    def exec(self, name: str, query: str, *args: ArgValue) -> ResponseMessage:
        """Run a statement that changes state. Same contract as :meth:`query`."""
        return self._statement(EXEC_PATH, name, query, args)

    def _statement(self, path: str, name: str, query: str, args: tuple) -> ResponseMessage:
        data = encode_payload(QueryRequest, name=name, query=query, args=list(args))
        return self._session.call("POST", path, data=data, known=NOT_FOUND)
