"""Manifest retrieval over HTTP(S) or from a local JSON file.

The repository only fetches and decodes; turning raw records into entries is
`core.manifest.adapt`. Every failure surfaces as `ManifestLoadError`.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urljoin, urlsplit

from loguru import logger
import requests

from core.manifest import adapt
from core.models import PhotoEntry
from core.services.interfaces import ManifestLoadError

DEFAULT_TIMEOUT = 20.0
DEFAULT_USER_AGENT = "FamilyPhotoSearch/1.0"


def is_remote(source: str) -> bool:
    """True for http(s) sources."""
    return urlsplit(source).scheme.lower() in {"http", "https"}


def local_manifest_path(source: str) -> Path:
    """Filesystem path of a local or `file://` manifest source."""
    parts = urlsplit(source)
    if parts.scheme.lower() == "file":
        return Path(unquote(parts.path))
    return Path(source).expanduser()


def resolve_entry_url(source: str, url: str) -> str:
    """Resolve an entry URL against the manifest it came from.

    Remote and `file://` manifests use URL joining; plain-path manifests
    resolve relative entries against the manifest's directory. Absolute
    URLs and paths are returned unchanged.
    """
    if not url:
        return url
    try:
        if is_remote(source) or urlsplit(source).scheme.lower() == "file":
            return urljoin(source, url)
        scheme = urlsplit(url).scheme
    except ValueError:
        return url
    # One-letter schemes are Windows drive letters
    if len(scheme) > 1 or os.path.isabs(url):
        return url
    return str(local_manifest_path(source).parent / url)


class ManifestRepository:
    """Load raw manifest records from a URL or path."""

    def __init__(
        self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = DEFAULT_USER_AGENT
    ) -> None:
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}

    def load_raw(self, source: str) -> list[Any]:
        """Return the decoded manifest array at `source`.

        Raises:
            ManifestLoadError: On transport failure, non-success status,
                unparsable payload, or a payload that is not a JSON array.
        """
        if not source:
            raise ManifestLoadError("<unset>", "no manifest source configured")
        payload = self._read_remote(source) if is_remote(source) else self._read_local(source)
        if not isinstance(payload, list):
            raise ManifestLoadError(source, f"expected a JSON array, got {type(payload).__name__}")
        return payload

    def load(self, source: str) -> tuple[PhotoEntry, ...]:
        """Fetch `source` and adapt it into entries."""
        return adapt(self.load_raw(source))

    def _read_remote(self, source: str) -> Any:
        try:
            resp = requests.get(source, headers=self._headers, timeout=self._timeout)
        except requests.RequestException as ex:
            raise ManifestLoadError(source, str(ex)) from ex
        if not resp.ok:
            raise ManifestLoadError(source, f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as ex:
            raise ManifestLoadError(source, f"invalid JSON: {ex}") from ex

    def _read_local(self, source: str) -> Any:
        path = local_manifest_path(source)
        logger.debug("Reading manifest from {}", path)
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as ex:
            raise ManifestLoadError(source, str(ex)) from ex
        except ValueError as ex:
            raise ManifestLoadError(source, f"invalid JSON: {ex}") from ex
