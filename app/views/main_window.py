"""MainWindow: search box, error banner and the scrollable results region."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.search_vm import MANIFEST_ERROR_MESSAGE
from app.views.constants import (
    DEFAULT_COLUMNS,
    DEFAULT_THUMB_SIZE,
    ERROR_BANNER_STYLE,
    LOG_MENU_TEXT,
    NO_LOG_MESSAGE,
    OPEN_LATEST_LOG_TEXT,
    SEARCH_BUTTON_TEXT,
    SEARCH_PLACEHOLDER,
    WINDOW_TITLE,
)
from app.views.photo_card import PhotoCard
from app.views.results_panel import ResultsPanel
from core.models import PhotoEntry
from core.services.presentation_service import (
    DEFAULT_SCROLL_THRESHOLD,
    PresentationStateMachine,
)
from infrastructure.logging import open_latest_log


class MainWindow(QMainWindow):
    """Main application window.

    Wires the query box and Search button to the view-model and renders
    outcomes through a `PresentationStateMachine` bound to `ResultsPanel`.
    """

    def __init__(
        self,
        vm: Any,
        runner: Any,
        image_service: Any | None = None,
        saver: Any | None = None,
        fetcher: Any | None = None,
        settings: Any | None = None,
        download_runner: Any | None = None,
        log_dir: str | None = None,
    ) -> None:
        """Initialize MainWindow with all services.

        Args:
            vm: SearchVM instance holding the manifest
            runner: Task runner for background work
            image_service: Thumbnail provider for cards
            saver: Save/open actions for downloads
            fetcher: Binary fetcher for downloads
            settings: Settings instance for configuration
            download_runner: Task runner for downloads (defaults to `runner`)
            log_dir: Directory searched by the Open Latest Log action
        """
        super().__init__()
        self._vm = vm
        self._runner = runner
        self._download_runner = download_runner or runner
        self._img = image_service
        self._saver = saver
        self._fetcher = fetcher
        self._log_dir = log_dir

        self._thumb_size = DEFAULT_THUMB_SIZE
        self._columns = DEFAULT_COLUMNS
        scroll_threshold = DEFAULT_SCROLL_THRESHOLD
        if settings is not None:
            self._thumb_size = settings.get_int("thumbnail_size", DEFAULT_THUMB_SIZE)
            self._columns = settings.get_int("results.columns", DEFAULT_COLUMNS)
            scroll_threshold = settings.get_float("results.scroll_threshold", scroll_threshold)

        self._setup_ui()
        self._connect_signals()

        self._machine = PresentationStateMachine(
            self.results, self.make_card, scroll_threshold=scroll_threshold
        )
        self._vm.attach(self._machine)
        self.set_search_enabled(self._vm.loaded)

    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)

        log_menu = self.menuBar().addMenu(LOG_MENU_TEXT)
        self.open_log_action = log_menu.addAction(OPEN_LATEST_LOG_TEXT)

        central = QWidget(self)
        root = QVBoxLayout(central)

        bar = QHBoxLayout()
        self.search_box = QLineEdit()
        self.search_box.setObjectName("familySearch")
        self.search_box.setPlaceholderText(SEARCH_PLACEHOLDER)
        self.search_box.setClearButtonEnabled(True)
        bar.addWidget(self.search_box, 1)
        self.search_button = QPushButton(SEARCH_BUTTON_TEXT)
        self.search_button.setObjectName("familySearchBtn")
        bar.addWidget(self.search_button)
        root.addLayout(bar)

        self.error_banner = QLabel("")
        self.error_banner.setObjectName("manifestError")
        self.error_banner.setStyleSheet(ERROR_BANNER_STYLE)
        self.error_banner.setVisible(False)
        root.addWidget(self.error_banner)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        content = QWidget()
        content_layout = QVBoxLayout(content)
        content_layout.setAlignment(Qt.AlignTop)
        self.results = ResultsPanel(content, columns=self._columns)
        self.results.attach_scroll_area(self.scroll_area)
        content_layout.addWidget(self.results)
        self.scroll_area.setWidget(content)
        root.addWidget(self.scroll_area, 1)

        self.setCentralWidget(central)
        self.resize(1000, 760)

    def _connect_signals(self) -> None:
        # Search triggers: button click and Enter; no dismiss key
        self.search_button.clicked.connect(self.run_search)
        self.search_box.returnPressed.connect(self.run_search)
        self.open_log_action.triggered.connect(self.open_latest_log)

    # Public API
    def make_card(self, entry: PhotoEntry) -> PhotoCard:
        return PhotoCard(
            entry,
            resolve_url=self._vm.resolve_url,
            image_service=self._img,
            runner=self._runner,
            download_runner=self._download_runner,
            saver=self._saver,
            fetcher=self._fetcher,
            thumb_size=self._thumb_size,
        )

    def run_search(self) -> None:
        self._vm.search(self.search_box.text() or "")

    def open_latest_log(self) -> bool:
        if open_latest_log(self._log_dir):
            return True
        self.statusBar().showMessage(NO_LOG_MESSAGE, 3000)
        return False

    def set_search_enabled(self, enabled: bool) -> None:
        self.search_box.setEnabled(enabled)
        self.search_button.setEnabled(enabled)

    def start_manifest_load(self) -> None:
        """Load the manifest in the background; search is gated until it finishes."""
        self.set_search_enabled(False)
        self.statusBar().showMessage("Loading photos…")
        self._runner.submit(self._vm.fetch_entries, self._on_manifest_loaded, self._on_manifest_failed)

    def show_manifest_error(self, message: str = MANIFEST_ERROR_MESSAGE) -> None:
        self.error_banner.setText(message)
        self.error_banner.setVisible(True)

    def _on_manifest_loaded(self, entries: tuple[PhotoEntry, ...]) -> None:
        self._vm.apply_loaded(entries)
        self.set_search_enabled(True)
        self.statusBar().showMessage(f"{self._vm.manifest_length} photos loaded", 3000)
        self.search_box.setFocus()

    def _on_manifest_failed(self, error: Exception) -> None:
        self._vm.apply_load_error(error)
        self.show_manifest_error()
        # Searches keep working against the empty set
        self.set_search_enabled(True)
        self.statusBar().clearMessage()
        logger.info("Continuing with an empty manifest")
