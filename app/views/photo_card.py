from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QFrame, QLabel, QPushButton, QVBoxLayout, QWidget
from loguru import logger

from app.views.constants import DEFAULT_ALT_TEXT, DEFAULT_THUMB_SIZE, DOWNLOAD_ACCESSIBLE_NAME
from core.models import PhotoEntry
from core.services.download_service import LABEL_IDLE, DownloadService


class _ButtonControl:
    """`DownloadControl` backed by a QPushButton that may already be deleted."""

    def __init__(self, button: QPushButton) -> None:
        self._button = button

    def set_enabled(self, enabled: bool) -> None:
        try:
            self._button.setEnabled(enabled)
        except RuntimeError:
            # Card was cleared by a newer search while the download ran
            pass

    def set_label(self, text: str) -> None:
        try:
            self._button.setText(text)
        except RuntimeError:
            pass


class PhotoCard(QFrame):
    """One search result: a lazily loaded image and a Download button."""

    def __init__(
        self,
        entry: PhotoEntry,
        *,
        resolve_url: Any,
        image_service: Any,
        runner: Any,
        download_runner: Any | None = None,
        saver: Any,
        fetcher: Any,
        thumb_size: int | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("srCard")
        self.setFrameShape(QFrame.StyledPanel)
        self.entry = entry
        self._image_url = resolve_url(entry.url)
        self._img = image_service
        self._runner = runner
        self._thumb_size = int(thumb_size or DEFAULT_THUMB_SIZE)
        self._image_requested = False

        layout = QVBoxLayout(self)
        self.image_label = QLabel(entry.caption or DEFAULT_ALT_TEXT)
        self.image_label.setTextFormat(Qt.PlainText)
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setWordWrap(True)
        self.image_label.setMinimumSize(self._thumb_size // 2, self._thumb_size // 2)
        self.image_label.setAccessibleName(entry.caption or DEFAULT_ALT_TEXT)
        self.image_label.setToolTip(entry.caption or DEFAULT_ALT_TEXT)
        layout.addWidget(self.image_label)

        self.download_button = QPushButton(LABEL_IDLE)
        self.download_button.setObjectName("srDownload")
        self.download_button.setAccessibleName(DOWNLOAD_ACCESSIBLE_NAME)
        layout.addWidget(self.download_button)

        # One independent download subsystem per card
        self.downloader = DownloadService(
            entry,
            _ButtonControl(self.download_button),
            saver,
            fetcher,
            runner=download_runner or runner,
            resolve_url=resolve_url,
        )
        self.download_button.clicked.connect(lambda: self.downloader.download())

    @property
    def image_url(self) -> str:
        return self._image_url

    def showEvent(self, event) -> None:  # noqa: N802
        super().showEvent(event)
        self.request_image()

    def request_image(self) -> None:
        """Load the thumbnail the first time the card is shown."""
        if self._image_requested or self._img is None:
            return
        self._image_requested = True
        url, side = self._image_url, self._thumb_size
        self._runner.submit(
            lambda: self._img.get_thumbnail(url, side),
            self._on_image_loaded,
            lambda ex: logger.debug("Thumbnail for {} failed: {}", url, ex),
        )

    def _on_image_loaded(self, image: QImage) -> None:
        try:
            if image is None or image.isNull():
                return
            self.image_label.setPixmap(QPixmap.fromImage(image))
        except RuntimeError:
            # Card deleted before the image arrived
            pass
