"""
gopop.core.session - HTTP session for the gopop database service
=================================================================

Low-level request handling:
- Basic authentication on every request
- Compact JSON request bodies
- Mapping of error statuses to typed exceptions
- Lenient or strict decoding of the ``{"message": ...}`` body
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type, Union
import base64
import logging
import time

import requests
from pydantic import ValidationError
from requests import Response, Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from gopop.core.errors import EncodingError, UnexpectedStatusError, UpstreamError
from gopop.core.models import ResponseMessage


def basic_auth_header(username: str, password: str) -> str:
    """
    Return the ``Authorization`` value for HTTP Basic authentication.

    Examples
    --------
    >>> basic_auth_header("u", "p")
    'Basic dTpw'
    """
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def authenticate(request: requests.Request, connection: Any) -> None:
    """
    Set the Basic ``Authorization`` header on an unsent request.

    ``connection`` is anything exposing ``username`` and ``password``
    (a :class:`PopConfig` or a :class:`~gopop.core.connection.Connection`).
    """
    request.headers["Authorization"] = basic_auth_header(
        connection.username, connection.password
    )


@dataclass
class PopConfig:
    """
    Connection configuration for a gopop service.

    Parameters
    ----------
    url : str
        Base URL of the service, e.g. "http://db.local". May be empty
        until the caller wires it.
    username : str
        Basic auth user
    password : str
        Basic auth password
    timeout : float, optional
        Per-request timeout in seconds. None waits indefinitely.
    verify : bool or str
        TLS verification passed through to requests
    user_agent : str
        User-Agent header value
    strict_decode : bool
        Raise EncodingError on undecodable success bodies instead of
        returning an empty message.
    """
    url: str = ""
    username: str = ""
    password: str = ""
    timeout: Optional[float] = None
    verify: Union[bool, str] = True
    user_agent: str = "gopop-python/0.1"
    strict_decode: bool = False


class PopSession:
    """
    Low-level HTTP session for the gopop database service.

    Every call builds a fresh request; the only state shared between
    calls is the configuration and the pooled ``requests.Session``.

    Parameters
    ----------
    cfg : PopConfig
        Connection configuration. The base URL is read on every request.
    session : requests.Session, optional
        Transport to use instead of a freshly built one
    """

    def __init__(self, cfg: PopConfig, session: Optional[Session] = None) -> None:
        self.cfg = cfg
        self.logger = logging.getLogger("gopop.http")
        self.session = session if session is not None else self._build_session()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def __enter__(self) -> "PopSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------------- transport ----------------

    def _build_session(self) -> Session:
        sess = requests.Session()
        # failed round trips surface immediately
        retry = Retry(total=0, read=False, raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry)
        sess.mount("https://", adapter)
        sess.mount("http://", adapter)
        return sess

    def url_for(self, path: str) -> str:
        return f"{(self.cfg.url or '').rstrip('/')}{path}"

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.cfg.user_agent,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
    ) -> Response:
        """
        Send one authenticated request and return the raw response.

        Transport failures propagate as ``requests.RequestException``.
        """
        url = self.url_for(path)
        req = requests.Request(
            method=method,
            url=url,
            params=params,
            data=data,
            headers=self._headers(data is not None),
        )
        authenticate(req, self.cfg)
        prepped = req.prepare()

        t0 = time.perf_counter()
        r = self.session.send(prepped, timeout=self.cfg.timeout, verify=self.cfg.verify)
        dt = (time.perf_counter() - t0) * 1000.0
        self.logger.debug("%s %s %s %sms", method.upper(), prepped.url, r.status_code, round(dt, 1))
        return r

    # ---------------- responses ----------------

    def raise_for_error(
        self,
        r: Response,
        url: str,
        known: Mapping[str, Type[UpstreamError]],
    ) -> None:
        """
        Raise for any status >= 400.

        ``known`` maps body texts to the exception raised when the raw body
        bytes match them exactly; any other error body raises
        UnexpectedStatusError.
        """
        if r.status_code < 400:
            return
        err_cls: Type[UpstreamError] = UnexpectedStatusError
        for text, cls in known.items():
            if r.content == text.encode("utf-8"):
                err_cls = cls
                break
        body = r.text
        self.logger.debug("%s %s -> %s", r.status_code, url, err_cls.__name__)
        raise err_cls(r.status_code, body, url)

    def decode_message(self, r: Response, url: str) -> ResponseMessage:
        try:
            return ResponseMessage.model_validate_json(r.content)
        except ValidationError as exc:
            if self.cfg.strict_decode:
                raise EncodingError(f"cannot decode response from {url}: {exc}") from exc
            self.logger.warning("Undecodable response body from %s, returning empty message", url)
            return ResponseMessage()

    def call(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
        known: Optional[Mapping[str, Type[UpstreamError]]] = None,
    ) -> ResponseMessage:
        """Send a request, classify error statuses and decode the message body."""
        r = self.request(method, path, params=params, data=data)
        url = self.url_for(path)
        self.raise_for_error(r, url, known or {})
        return self.decode_message(r, url)
