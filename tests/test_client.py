import pytest
import requests

from geowhd.bls.client import BLSDownloadClient
from geowhd.config import DataSourceSettings
from geowhd.exceptions import FetchError, FormatError

from conftest import FakeResponse, FakeSession

URL = "https://example.test/file.txt"


class BrokenSession(FakeSession):
    def get(self, url, timeout=None, stream=False):
        raise requests.ConnectionError("connection refused")


def _client(session):
    return BLSDownloadClient(session=session, data_sources=DataSourceSettings(), timeout=5)


def test_sets_user_agent_and_timeout():
    session = FakeSession({URL: FakeResponse(b"hello")})
    client = _client(session)
    assert client.get_text(URL) == "hello"
    assert "Mozilla" in session.headers["User-Agent"]
    assert session.requests == [{"url": URL, "timeout": 5, "stream": False}]


def test_non_success_status_raises_fetch_error():
    client = _client(FakeSession({URL: FakeResponse(status_code=403, reason="Forbidden")}))
    with pytest.raises(FetchError) as exc_info:
        client.get_bytes(URL)
    assert exc_info.value.status_code == 403
    assert exc_info.value.url == URL
    assert "HTTP 403" in str(exc_info.value)


def test_transport_failure_raises_fetch_error():
    client = _client(BrokenSession({}))
    with pytest.raises(FetchError) as exc_info:
        client.get_bytes(URL)
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_download_to_file_streams(tmp_path):
    payload = b"x" * 2500
    response = FakeResponse(payload)
    session = FakeSession({URL: response})
    client = _client(session)
    client.CHUNK_SIZE = 1000

    path = client.download_to_file(URL, tmp_path / "file.txt")

    assert path.read_bytes() == payload
    assert session.requests[0]["stream"] is True
    assert response.closed


def test_text_that_is_not_utf8_raises_format_error():
    client = _client(FakeSession({URL: FakeResponse(b"Do\xf1a Ana County")}))
    with pytest.raises(FormatError, match="utf-8"):
        client.get_text(URL)


def test_text_in_declared_encoding():
    session = FakeSession({URL: FakeResponse(b"Do\xf1a Ana County")})
    assert _client(session).get_text(URL, encoding="latin-1") == "Doña Ana County"

    client = BLSDownloadClient(session=session, data_sources=DataSourceSettings(BLS_FILE_ENCODING="latin-1"))
    assert client.get_text(URL) == "Doña Ana County"
