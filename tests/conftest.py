"""
Pytest configuration and shared fixtures.
"""

import pytest
import requests
from unittest.mock import Mock

from gopop.core.connection import Connection


def _response(status: int = 200, body: str = '{"message":"ok"}') -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = body.encode("utf-8")
    r.encoding = "utf-8"
    return r


@pytest.fixture
def make_response():
    """Factory for real requests.Response objects with a given status and body."""
    return _response


@pytest.fixture
def mock_transport():
    """Mock requests.Session whose send() answers 200 {"message":"ok"}."""
    transport = Mock()
    transport.send = Mock(return_value=_response())
    return transport


@pytest.fixture
def respond(mock_transport):
    """Set the response the mock transport returns."""
    def _respond(status: int, body: str) -> None:
        mock_transport.send.return_value = _response(status, body)
    return _respond


@pytest.fixture
def sent(mock_transport):
    """Return the last PreparedRequest handed to the mock transport."""
    def _sent() -> requests.PreparedRequest:
        return mock_transport.send.call_args[0][0]
    return _sent


@pytest.fixture
def conn(mock_transport):
    """Connection to http://db.local as u:p over the mock transport."""
    return Connection("u", "p", url="http://db.local", timeout=5.0, verify=True, session=mock_transport)


@pytest.fixture
def migration_file(tmp_path):
    """Migration script containing a single CREATE TABLE statement."""
    path = tmp_path / "mig.sql"
    path.write_text("CREATE TABLE t(x);", encoding="utf-8")
    return path
