"""Per-card photo download with fetch and open-in-new-context fallbacks.

A download issues two independent attempts: a direct save of the URL and a
fetch of the bytes which are then saved locally. If the fetch fails the URL
is opened externally instead. The triggering control is disabled while the
fetch is in flight and is always restored afterwards.
"""

from __future__ import annotations

from collections.abc import Callable
import re
from typing import Any, Protocol
from urllib.parse import unquote, urlsplit

from loguru import logger

from core.models import PhotoEntry
from core.services.interfaces import BinaryFetcher, DownloadControl, SaveCapabilities

LABEL_IDLE = "Download"
LABEL_BUSY = "Downloading..."
DEFAULT_NAME = "photo"
DEFAULT_EXTENSION = ".jpg"

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[\x00-\x1f\x7f/\\]")


def _fallback_filename(caption: str | None) -> str:
    base = _WHITESPACE.sub("_", caption) if caption else DEFAULT_NAME
    return base + DEFAULT_EXTENSION


def derive_filename(url: str | None, caption: str | None = None) -> str:
    """Return a save name for `url`.

    Uses the URL's last path segment (query and fragment excluded). Falls back
    to the caption with whitespace replaced by underscores, or "photo", plus
    ".jpg".
    """
    if not url:
        return _fallback_filename(caption)
    try:
        path = urlsplit(url).path
    except ValueError:
        return _fallback_filename(caption)
    name = unquote(path.rsplit("/", 1)[-1]).split("?", 1)[0]
    # Decoded separators and control bytes (%2F, %00) must not reach the filesystem
    name = _UNSAFE_CHARS.sub("_", name)
    return name or _fallback_filename(caption)


class TaskRunner(Protocol):
    """Runs `job` and reports its result through exactly one of the callbacks."""

    def submit(
        self,
        job: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        ...


class InlineRunner:
    """Runs jobs synchronously on the calling thread."""

    def submit(
        self,
        job: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        try:
            result = job()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            on_error(ex)
            return
        on_success(result)


class BusyControl:
    """Holds a control in its busy state until released.

    Usable as a context manager; release is idempotent so it can guard every
    exit path of an asynchronous completion.
    """

    def __init__(self, control: DownloadControl) -> None:
        self._control = control
        self.held = False

    def acquire(self) -> None:
        self._control.set_enabled(False)
        self._control.set_label(LABEL_BUSY)
        self.held = True

    def release(self) -> None:
        if not self.held:
            return
        self.held = False
        self._control.set_enabled(True)
        self._control.set_label(LABEL_IDLE)

    def __enter__(self) -> BusyControl:
        if not self.held:
            self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class DownloadService:
    """Download subsystem owned by a single card."""

    def __init__(
        self,
        entry: PhotoEntry,
        control: DownloadControl,
        saver: SaveCapabilities,
        fetcher: BinaryFetcher,
        runner: TaskRunner | None = None,
        resolve_url: Callable[[str], str] | None = None,
    ) -> None:
        """Create a download service.

        Args:
            entry: Entry whose photo is downloaded.
            control: Button toggled between idle and busy.
            saver: Direct save, byte save and external open actions.
            fetcher: Binary fetcher used for the fallback save.
            runner: Where the fetch runs (defaults to inline).
            resolve_url: Maps the entry URL to an absolute URL.
        """
        self._entry = entry
        self._control = control
        self._saver = saver
        self._fetcher = fetcher
        self._runner = runner or InlineRunner()
        self._resolve = resolve_url or (lambda u: u)

    @property
    def entry(self) -> PhotoEntry:
        return self._entry

    def download(self) -> None:
        """Trigger the direct save and the fetch-based save for this entry."""
        url = self._resolve(self._entry.url)
        filename = derive_filename(url, self._entry.caption)
        self._save_direct(url, filename)
        # Issued regardless of the direct attempt; both may succeed
        self._start_fetch(url, filename)

    def _save_direct(self, url: str, filename: str) -> None:
        try:
            self._saver.save_direct(url, filename)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.debug("Direct save of {} failed: {}", url, ex)

    def _start_fetch(self, url: str, filename: str) -> None:
        if not url:
            return
        busy = BusyControl(self._control)
        busy.acquire()
        try:
            self._runner.submit(
                lambda: self._fetcher.fetch(url),
                lambda data: self._on_fetched(busy, url, filename, data),
                lambda error: self._on_fetch_failed(busy, url, error),
            )
        except Exception:
            busy.release()
            raise

    def _on_fetched(self, busy: BusyControl, url: str, filename: str, data: bytes) -> None:
        with busy:
            try:
                saved = self._saver.save_bytes(data, filename)
            except (OSError, ValueError) as ex:
                logger.warning("Saving fetched {} failed; opening externally: {}", url, ex)
                self._saver.open_external(url)
                return
            logger.info("Downloaded {} -> {}", url, saved)

    def _on_fetch_failed(self, busy: BusyControl, url: str, error: Exception) -> None:
        with busy:
            logger.warning("Fetch-download failed; opening {} externally: {}", url, error)
            self._saver.open_external(url)
