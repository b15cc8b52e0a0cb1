"""Token search over manifest entries.

Every query token must appear as a substring of an entry's haystack (its
caption, last name and first name, normalized). The scan is linear and is
repeated on every search; entries keep their manifest order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from core.models import PhotoEntry, SearchOutcome
from core.text import normalize


def tokenize(raw_query: str | None) -> list[str]:
    """Return normalized, non-empty whitespace-delimited tokens of `raw_query`."""
    q = normalize(raw_query or "")
    return [t for t in q.split() if t] if q else []


def haystack(entry: PhotoEntry) -> str:
    """Return the normalized text an entry is matched against."""
    return normalize(f"{entry.caption or ''} {entry.last_name or ''} {entry.first_name or ''}")


def matches(entry: PhotoEntry, tokens: Sequence[str]) -> bool:
    """True when every token is a substring of the entry's haystack."""
    hay = haystack(entry)
    return all(t in hay for t in tokens)


def search(entries: Iterable[PhotoEntry], raw_query: str | None) -> SearchOutcome:
    """Filter `entries` against `raw_query`.

    An empty token list yields an outcome with no tokens and no matches; the
    caller treats that as idle rather than as "no results".
    """
    query = raw_query or ""
    tokens = tuple(tokenize(query))
    if not tokens:
        return SearchOutcome(query=query)
    found = tuple(e for e in entries if matches(e, tokens))
    return SearchOutcome(query=query, tokens=tokens, matches=found)
