"""Core service interfaces and error types.

The protocols here describe the capabilities the core needs from its host
(a results region, a download button, save/open actions and a binary
fetcher). Views and infrastructure provide implementations; tests provide
fakes.
"""

from __future__ import annotations

from typing import Any, Protocol


class PhotoSearchError(Exception):
    """Base class for recoverable application errors."""


class ManifestLoadError(PhotoSearchError):
    """The manifest could not be fetched, read, or parsed.

    Attributes:
        source: URL or path the manifest was loaded from.
        reason: Human-readable cause.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to load manifest from {source}: {reason}")
        self.source = source
        self.reason = reason


class DownloadFetchError(PhotoSearchError):
    """A binary fetch for a download failed (network error or non-2xx status)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ResultsSurface(Protocol):
    """Render target for the results region."""

    def clear_cards(self) -> None:
        """Remove every rendered card."""
        ...

    def add_card(self, card: Any) -> None:
        """Append a card produced by the card factory."""
        ...

    def set_cards_visible(self, visible: bool) -> None:
        """Show or hide the card container."""
        ...

    def set_expanded(self, expanded: bool) -> None:
        """Toggle the visual expanded flag of the results region."""
        ...

    def set_accessibility_hidden(self, hidden: bool) -> None:
        """Toggle the accessibility-hidden flag of the results region."""
        ...

    def set_caption(self, text: str) -> None:
        """Set the results caption ("" clears it)."""
        ...

    def set_no_results_visible(self, visible: bool) -> None:
        """Show or hide the "no results" indicator."""
        ...

    def set_count_visible(self, visible: bool) -> None:
        """Show or hide the legacy count element."""
        ...

    def panel_top(self) -> int:
        """Return the results region's top relative to the viewport, in px."""
        ...

    def viewport_height(self) -> int:
        """Return the visible viewport height, in px."""
        ...

    def scroll_panel_into_view(self) -> None:
        """Smoothly scroll so the results region is aligned to the viewport top."""
        ...


class DownloadControl(Protocol):
    """The button that triggers a download."""

    def set_enabled(self, enabled: bool) -> None:
        ...

    def set_label(self, text: str) -> None:
        ...


class SaveCapabilities(Protocol):
    """Host actions used to persist or open a photo."""

    def save_direct(self, url: str, filename: str) -> None:
        """Best-effort save of `url` under `filename` without fetching its bytes."""
        ...

    def save_bytes(self, data: bytes, filename: str) -> str:
        """Write `data` under `filename` and return the saved path."""
        ...

    def open_external(self, url: str) -> None:
        """Open `url` in a new, unreferenced browsing context."""
        ...


class BinaryFetcher(Protocol):
    """Fetches a resource as bytes, raising `DownloadFetchError` on failure."""

    def fetch(self, url: str) -> bytes:
        ...
