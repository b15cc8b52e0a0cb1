"""Card thumbnail loading with an in-memory LRU cache.

Bytes come from local files or through the binary fetcher; decoding and
scaling use Qt. Failures produce a neutral placeholder so cards never render
broken.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import threading
from typing import Any

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QImage
from loguru import logger

from core.services.interfaces import BinaryFetcher, DownloadFetchError
from infrastructure.save_service import local_source

PLACEHOLDER_SIDE = 64


@dataclass
class _MemCacheItem:
    key: str
    image: QImage


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> QImage | None:
        """Return cached QImage for key, moving it to the MRU position."""
        item = self._data.get(key)
        if not item:
            return None
        self._data.move_to_end(key)
        return item.image

    def put(self, key: str, image: QImage) -> None:
        """Insert or update `key` with `image`, evicting LRU when over capacity."""
        self._data[key] = _MemCacheItem(key, image)
        self._data.move_to_end(key)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)


def placeholder_image() -> QImage:
    img = QImage(PLACEHOLDER_SIDE, PLACEHOLDER_SIDE, QImage.Format_ARGB32)
    img.fill(QColor(220, 220, 220))
    return img


class ImageService:
    """Thumbnail provider for result cards."""

    def __init__(self, fetcher: BinaryFetcher, settings: Any | None = None) -> None:
        self._fetcher = fetcher
        capacity = 256
        if settings is not None:
            capacity = settings.get_int("thumbnail_mem_cache", 256)
        self._mem_cache = _LRUCache(capacity)
        # Thumbnails are requested from pool threads
        self._lock = threading.Lock()

    def get_thumbnail(self, url: str, side: int) -> QImage:
        """Return an image for `url` bounded by `side`, or a placeholder."""
        key = f"{url}|{int(side)}"
        with self._lock:
            img = self._mem_cache.get(key)
        if img is not None and not img.isNull():
            return img

        img = self._load(url, side)
        if img is None or img.isNull():
            return placeholder_image()
        with self._lock:
            self._mem_cache.put(key, img)
        return img

    def _read_bytes(self, url: str) -> bytes | None:
        src = local_source(url)
        if src is not None:
            try:
                return src.read_bytes()
            except OSError as ex:
                logger.debug("Thumbnail read failed for {}: {}", src, ex)
                return None
        try:
            return self._fetcher.fetch(url)
        except DownloadFetchError as ex:
            logger.debug("Thumbnail fetch failed: {}", ex)
            return None

    def _load(self, url: str, side: int) -> QImage | None:
        data = self._read_bytes(url)
        if not data:
            return None
        img = QImage.fromData(data)
        if img.isNull():
            logger.debug("Undecodable image data for {}", url)
            return None
        if side and side > 0 and (img.width() > side or img.height() > side):
            img = img.scaled(QSize(side, side), Qt.KeepAspectRatio, Qt.SmoothTransformation)
        return img
