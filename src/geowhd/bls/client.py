# client.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional
import requests

from geowhd.config import DataSourceSettings, settings
from geowhd.exceptions import FetchError, FormatError

log = logging.getLogger(__name__)


class BLSDownloadClient:
    """
    Thin client for BLS file downloads (download.bls.gov, www.bls.gov/web,
    data.bls.gov/cew).

    Key points handled:
      - Browser-like User-Agent; BLS answers the default requests agent with 403.
      - One timeout for every request.
      - Text is decoded strictly in one declared encoding; bad bytes are a FormatError.
      - Transport failures and non-2xx responses surface as FetchError.

    No retries: a failed download is reported to the caller, who may ask again.

    Usage:
      client = BLSDownloadClient()
      text = client.get_text("https://www.bls.gov/web/metro/laucntycur14.txt")
    """

    CHUNK_SIZE = 1024 * 1024

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
        data_sources: Optional[DataSourceSettings] = None,
    ):
        data_sources = data_sources or settings.data_sources
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent or data_sources.user_agent})
        self.timeout = timeout or data_sources.timeout
        self.encoding = data_sources.encoding

    # ---------------------- Public methods ---------------------- #
    def get_bytes(self, url: str) -> bytes:
        """Fetch a resource fully into memory."""
        log.info(f"Fetching {url}")
        resp = self._get(url, stream=False)
        log.info(f"  Received {len(resp.content):,} bytes from {url}")
        return resp.content

    def get_text(self, url: str, encoding: Optional[str] = None) -> str:
        """Fetch a text resource in the declared encoding (BLS_FILE_ENCODING by default)."""
        encoding = encoding or self.encoding
        content = self.get_bytes(url)
        try:
            return content.decode(encoding)
        except UnicodeDecodeError as e:
            raise FormatError(url, f"not valid {encoding} text: {e}") from e

    def download_to_file(self, url: str, dest_path: Path) -> Path:
        """Stream a (large) resource to dest_path. Partial files are removed on failure."""
        dest_path = Path(dest_path)
        log.info(f"Downloading {url} -> {dest_path}")
        resp = self._get(url, stream=True)
        try:
            with open(dest_path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=self.CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except requests.RequestException as e:
            dest_path.unlink(missing_ok=True)
            raise FetchError(url, str(e)) from e
        finally:
            resp.close()
        log.info(f"  Downloaded {dest_path.stat().st_size:,} bytes")
        return dest_path

    def close(self) -> None:
        self.session.close()

    # ---------------------- Internals ---------------------- #
    def _get(self, url: str, stream: bool) -> requests.Response:
        try:
            resp = self.session.get(url, timeout=self.timeout, stream=stream)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e
        if not 200 <= resp.status_code < 300:
            reason = resp.reason or "unexpected status"
            resp.close()
            raise FetchError(url, reason, status_code=resp.status_code)
        return resp
