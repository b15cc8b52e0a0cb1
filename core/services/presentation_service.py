"""Presentation state selection and rendering for search results.

`select_state` is the pure decision; `PresentationStateMachine` applies it to
a `ResultsSurface`, replacing whatever was rendered before.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from core.models import (
    IDLE,
    NO_MATCHES,
    PhotoEntry,
    PresentationState,
    SearchOutcome,
    StateKind,
)
from core.services.interfaces import ResultsSurface

DEFAULT_SCROLL_THRESHOLD = 0.6


def results_caption(count: int, raw_query: str) -> str:
    """Caption shown above the result cards, e.g. `2 results for "smith"`."""
    suffix = "s" if count > 1 else ""
    return f'{count} result{suffix} for "{raw_query.strip()}"'


def select_state(outcome: SearchOutcome) -> PresentationState:
    """Map a search outcome to the state the results region should show."""
    if not outcome.tokens:
        return IDLE
    if outcome.matches:
        n = len(outcome.matches)
        return PresentationState(StateKind.RESULTS, n, results_caption(n, outcome.query))
    return NO_MATCHES


def needs_scroll(
    panel_top: float, viewport_height: float, threshold: float = DEFAULT_SCROLL_THRESHOLD
) -> bool:
    """True when the panel sits above the viewport or below `threshold` of its height."""
    return panel_top < 0 or panel_top > viewport_height * threshold


class PresentationStateMachine:
    """Renders search outcomes into a results surface.

    The machine has no terminal state; each `apply` fully replaces the
    previous render. There is no dismiss gesture: only a new search changes
    what is shown.
    """

    def __init__(
        self,
        surface: ResultsSurface,
        card_factory: Callable[[PhotoEntry], Any],
        scroll_threshold: float = DEFAULT_SCROLL_THRESHOLD,
    ) -> None:
        self._surface = surface
        self._card_factory = card_factory
        self._scroll_threshold = float(scroll_threshold)
        self.state: PresentationState = IDLE

    def reset(self) -> PresentationState:
        """Render the initial idle state."""
        self._render_idle()
        self.state = IDLE
        return self.state

    def apply(self, outcome: SearchOutcome) -> PresentationState:
        """Select and render the state for `outcome`."""
        state = select_state(outcome)
        if state.kind is StateKind.IDLE:
            self._render_idle()
        elif state.kind is StateKind.RESULTS:
            self._render_results(outcome.matches, state.caption)
        else:
            self._render_no_matches()
        self.state = state
        logger.debug("Presentation state -> {} ({})", state.kind.value, state.count)
        return state

    def _collapse(self) -> None:
        self._surface.set_expanded(False)
        self._surface.set_accessibility_hidden(True)

    def _render_idle(self) -> None:
        s = self._surface
        s.clear_cards()
        s.set_cards_visible(False)
        s.set_no_results_visible(False)
        s.set_count_visible(False)
        s.set_caption("")
        self._collapse()

    def _render_results(self, entries: tuple[PhotoEntry, ...], caption: str) -> None:
        s = self._surface
        s.clear_cards()
        for entry in entries:
            s.add_card(self._card_factory(entry))
        s.set_cards_visible(True)
        s.set_caption(caption)
        s.set_count_visible(False)
        s.set_no_results_visible(False)
        s.set_expanded(True)
        s.set_accessibility_hidden(False)
        # Only freshly revealed content that is out of comfortable view is scrolled to
        if needs_scroll(s.panel_top(), s.viewport_height(), self._scroll_threshold):
            s.scroll_panel_into_view()

    def _render_no_matches(self) -> None:
        s = self._surface
        s.set_caption("")
        s.clear_cards()
        self._collapse()
        s.set_count_visible(False)
        s.set_no_results_visible(True)
