"""ResultsPanel: the results region rendered by the presentation state machine."""

from __future__ import annotations

from PySide6.QtCore import QEasingCurve, QPoint, QPropertyAnimation, Qt
from PySide6.QtWidgets import QGridLayout, QLabel, QScrollArea, QVBoxLayout, QWidget

from app.views.constants import (
    DEFAULT_COLUMNS,
    GRID_SPACING_PX,
    NO_RESULTS_TEXT,
    PROP_ACCESSIBILITY_HIDDEN,
    PROP_EXPANDED,
    SCROLL_ANIMATION_MS,
)


class ResultsPanel(QWidget):
    """Qt implementation of the `ResultsSurface` protocol.

    The panel keeps an "expanded" flag and an accessibility-hidden flag as
    dynamic properties; the card body is only visible while expanded.
    """

    def __init__(self, parent: QWidget | None = None, columns: int | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("searchResults")
        self._columns = max(1, int(columns or DEFAULT_COLUMNS))
        self._scroll_area: QScrollArea | None = None
        self._animation: QPropertyAnimation | None = None
        self._cards: list[QWidget] = []

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self.caption_label = QLabel("")
        self.caption_label.setObjectName("resultsCount")
        self.caption_label.setTextFormat(Qt.PlainText)
        root.addWidget(self.caption_label)

        # Legacy count element; never shown by the current states
        self.count_label = QLabel("")
        self.count_label.setObjectName("searchCount")
        self.count_label.setVisible(False)
        root.addWidget(self.count_label)

        self.no_results_label = QLabel(NO_RESULTS_TEXT)
        self.no_results_label.setObjectName("noResults")
        self.no_results_label.setVisible(False)
        root.addWidget(self.no_results_label)

        self.body = QWidget()
        self.body.setObjectName("resultsBody")
        root.addWidget(self.body)

        self.cards_container = QWidget(self.body)
        self.cards_container.setObjectName("resultsGrid")
        self._grid = QGridLayout(self.cards_container)
        self._grid.setSpacing(GRID_SPACING_PX)
        body_layout = QVBoxLayout(self.body)
        body_layout.setContentsMargins(0, 0, 0, 0)
        body_layout.addWidget(self.cards_container)
        body_layout.addStretch(1)

        self.set_expanded(False)
        self.set_accessibility_hidden(True)

    def attach_scroll_area(self, area: QScrollArea) -> None:
        """Register the scroll area used for geometry and scrolling."""
        self._scroll_area = area

    @property
    def cards(self) -> list[QWidget]:
        return list(self._cards)

    # ResultsSurface
    def clear_cards(self) -> None:
        for card in self._cards:
            self._grid.removeWidget(card)
            card.deleteLater()
        self._cards.clear()

    def add_card(self, card: QWidget) -> None:
        index = len(self._cards)
        self._grid.addWidget(card, index // self._columns, index % self._columns)
        self._cards.append(card)

    def set_cards_visible(self, visible: bool) -> None:
        self.cards_container.setVisible(visible)

    def set_expanded(self, expanded: bool) -> None:
        self.setProperty(PROP_EXPANDED, bool(expanded))
        self.body.setVisible(bool(expanded))
        self._repolish()

    def set_accessibility_hidden(self, hidden: bool) -> None:
        self.setProperty(PROP_ACCESSIBILITY_HIDDEN, bool(hidden))
        self.setAccessibleDescription("" if hidden else "Search results")

    def set_caption(self, text: str) -> None:
        self.caption_label.setText(text)
        self.caption_label.setVisible(bool(text))

    def set_no_results_visible(self, visible: bool) -> None:
        self.no_results_label.setVisible(visible)

    def set_count_visible(self, visible: bool) -> None:
        self.count_label.setVisible(visible)

    def panel_top(self) -> int:
        if self._scroll_area is None:
            return 0
        return self.mapTo(self._scroll_area.viewport(), QPoint(0, 0)).y()

    def viewport_height(self) -> int:
        if self._scroll_area is None:
            return self.height()
        return self._scroll_area.viewport().height()

    def scroll_panel_into_view(self) -> None:
        if self._scroll_area is None:
            return
        bar = self._scroll_area.verticalScrollBar()
        target = max(bar.minimum(), min(bar.maximum(), bar.value() + self.panel_top()))
        self._animation = QPropertyAnimation(bar, b"value", self)
        self._animation.setDuration(SCROLL_ANIMATION_MS)
        self._animation.setEasingCurve(QEasingCurve.InOutQuad)
        self._animation.setStartValue(bar.value())
        self._animation.setEndValue(target)
        self._animation.start()

    # Internal helpers
    @property
    def is_expanded(self) -> bool:
        return bool(self.property(PROP_EXPANDED))

    @property
    def is_accessibility_hidden(self) -> bool:
        return bool(self.property(PROP_ACCESSIBILITY_HIDDEN))

    def _repolish(self) -> None:
        """Re-apply stylesheet rules that depend on dynamic properties."""
        style = self.style()
        style.unpolish(self)
        style.polish(self)
