from __future__ import annotations

import os

# Qt widgets are created in tests; no display is required
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402

from core.models import PhotoEntry  # noqa: E402


@pytest.fixture
def smith_jones() -> tuple[PhotoEntry, ...]:
    return (
        PhotoEntry(url="a.jpg", caption="Smith Family", last_name="Smith"),
        PhotoEntry(url="b.jpg", caption="Jones", last_name="Jones"),
    )


class FakeSurface:
    """Records calls made on a results surface."""

    def __init__(self, top: int = 100, height: int = 1000) -> None:
        self.cards: list[object] = []
        self.cards_visible = True
        self.expanded = True
        self.accessibility_hidden = False
        self.caption = "stale"
        self.no_results_visible = True
        self.count_visible = True
        self.top = top
        self.height = height
        self.scrolls = 0
        self.clears = 0

    def clear_cards(self) -> None:
        self.clears += 1
        self.cards.clear()

    def add_card(self, card: object) -> None:
        self.cards.append(card)

    def set_cards_visible(self, visible: bool) -> None:
        self.cards_visible = visible

    def set_expanded(self, expanded: bool) -> None:
        self.expanded = expanded

    def set_accessibility_hidden(self, hidden: bool) -> None:
        self.accessibility_hidden = hidden

    def set_caption(self, text: str) -> None:
        self.caption = text

    def set_no_results_visible(self, visible: bool) -> None:
        self.no_results_visible = visible

    def set_count_visible(self, visible: bool) -> None:
        self.count_visible = visible

    def panel_top(self) -> int:
        return self.top

    def viewport_height(self) -> int:
        return self.height

    def scroll_panel_into_view(self) -> None:
        self.scrolls += 1


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()
