"""Binary fetching with requests."""

from __future__ import annotations

from loguru import logger
import requests

from core.services.interfaces import DownloadFetchError

DEFAULT_TIMEOUT = 20.0
DEFAULT_USER_AGENT = "FamilyPhotoSearch/1.0"


class HttpFetcher:
    """Fetch a resource's bytes, raising `DownloadFetchError` on any failure."""

    def __init__(
        self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = DEFAULT_USER_AGENT
    ) -> None:
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent}

    def fetch(self, url: str) -> bytes:
        try:
            resp = requests.get(url, headers=self._headers, timeout=self._timeout)
        except requests.RequestException as ex:
            raise DownloadFetchError(url, str(ex)) from ex
        if not resp.ok:
            raise DownloadFetchError(url, f"HTTP {resp.status_code}")
        logger.debug("Fetched {} ({} bytes)", url, len(resp.content))
        return resp.content
