"""ViewModel holding the loaded manifest and driving searches."""

from __future__ import annotations

from typing import Any

from loguru import logger

from core.models import PhotoEntry, PresentationState, SearchOutcome
from core.services.interfaces import ManifestLoadError
from core.services.presentation_service import PresentationStateMachine
from core.services.search_service import search
from infrastructure.manifest_repository import resolve_entry_url

MANIFEST_ERROR_MESSAGE = "Failed to load photo manifest. Check manifest URL."


class SearchVM:
    """Search context: the immutable entry set plus the presentation machine.

    Mediates between a repository providing entries and the results view.
    The manifest is loaded once; a failed load leaves an empty entry set and
    is not retried.
    """

    def __init__(self, repo, manifest_source: str) -> None:
        """Create a SearchVM.

        Args:
            repo: Repository with a `load(source)` method returning entries.
            manifest_source: URL or path of the manifest.
        """
        self._repo = repo
        self._source = manifest_source
        self._entries: tuple[PhotoEntry, ...] = ()
        self._machine: PresentationStateMachine | None = None
        self.loaded = False
        self.load_error: ManifestLoadError | None = None

    @property
    def entries(self) -> tuple[PhotoEntry, ...]:
        return self._entries

    @property
    def manifest_length(self) -> int:
        return len(self._entries)

    @property
    def manifest_source(self) -> str:
        return self._source

    def attach(self, machine: PresentationStateMachine) -> None:
        """Bind the presentation machine that renders search outcomes."""
        self._machine = machine
        machine.reset()

    # Loading
    def fetch_entries(self) -> tuple[PhotoEntry, ...]:
        """Fetch and adapt the manifest. Safe to call off the UI thread."""
        return self._repo.load(self._source)

    def apply_loaded(self, entries: tuple[PhotoEntry, ...]) -> None:
        self._entries = tuple(entries)
        self.loaded = True
        logger.info("Photo manifest loaded, items: {}", len(self._entries))

    def apply_load_error(self, error: Exception) -> None:
        if not isinstance(error, ManifestLoadError):
            error = ManifestLoadError(self._source, str(error))
        self._entries = ()
        self.loaded = True
        self.load_error = error
        logger.error("Failed to load manifest at {}: {}", self._source, error.reason)

    def load(self) -> bool:
        """Synchronously load the manifest. Returns False on a reported failure."""
        try:
            entries = self.fetch_entries()
        except ManifestLoadError as ex:
            self.apply_load_error(ex)
            return False
        self.apply_loaded(entries)
        return True

    # Searching
    def search(self, raw_query: str | None) -> SearchOutcome:
        """Search the loaded entries and render the outcome if a view is attached."""
        outcome = search(self._entries, raw_query)
        if self._machine is not None:
            self._machine.apply(outcome)
        return outcome

    @property
    def state(self) -> PresentationState | None:
        return self._machine.state if self._machine is not None else None

    def resolve_url(self, url: str) -> str:
        """Resolve an entry URL relative to the manifest's location."""
        return resolve_entry_url(self._source, url)

    def introspection(self) -> dict[str, Any]:
        """Read-only debug view: the search entry point and loaded entry count."""
        return {"search": self.search, "manifest_length": self.manifest_length}
