"""Desktop save and open actions used by downloads.

`save_direct` copies photos that are already on disk, the desktop analogue of
a same-origin download link; remote URLs are left to the fetch path.
`save_bytes` writes fetched data into the downloads directory without
overwriting existing files, and `open_external` hands the URL to the
system's default handler.
"""

from __future__ import annotations

import os
from pathlib import Path
import shutil
from urllib.parse import unquote, urlsplit

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices
from loguru import logger


def _ensure_dir(p: Path) -> None:
    """Create directory `p` if missing (including parents)."""
    p.mkdir(parents=True, exist_ok=True)


def unique_path(directory: Path, filename: str) -> Path:
    """Return `directory/filename`, suffixed " (n)" when that name is taken."""
    candidate = directory / filename
    if not candidate.exists():
        return candidate
    stem, suffix = os.path.splitext(filename)
    n = 1
    while True:
        candidate = directory / f"{stem} ({n}){suffix}"
        if not candidate.exists():
            return candidate
        n += 1


def local_source(url: str) -> Path | None:
    """Return the filesystem path behind `url` when it is a local file."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme == "file":
        return Path(unquote(parts.path))
    # Windows drive letters parse as one-letter schemes
    if scheme == "" or (len(scheme) == 1 and os.name == "nt"):
        return Path(url)
    return None


class SaveService:
    """Save photos into `download_dir` and open URLs externally."""

    def __init__(self, download_dir: str | Path) -> None:
        self._dir = Path(download_dir)

    @property
    def download_dir(self) -> Path:
        return self._dir

    def save_direct(self, url: str, filename: str) -> None:
        src = local_source(url)
        if src is None:
            logger.debug("No direct save for remote {}; relying on fetch", url)
            return
        if not src.is_file():
            logger.debug("Direct save skipped, not a file: {}", src)
            return
        _ensure_dir(self._dir)
        target = unique_path(self._dir, filename)
        shutil.copyfile(src, target)
        logger.info("Saved {} -> {}", src, target)

    def save_bytes(self, data: bytes, filename: str) -> str:
        _ensure_dir(self._dir)
        target = unique_path(self._dir, filename)
        target.write_bytes(data)
        return str(target)

    def open_external(self, url: str) -> None:
        qurl = QUrl.fromUserInput(url)
        if not QDesktopServices.openUrl(qurl):
            logger.warning("System could not open {}", url)
