"""Core domain models for manifest entries and search presentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class PhotoEntry:
    """A single adapted manifest record. `url` is always non-empty."""

    url: str
    caption: str = ""
    first_name: str = ""
    last_name: str = ""
    # Carried through unchanged; search never looks at it
    family_id: str = ""


@dataclass(frozen=True)
class SearchOutcome:
    """Result of one search call.

    Attributes:
        query: Raw user text as typed.
        tokens: Normalized query tokens (empty for blank queries).
        matches: Matching entries in manifest order, duplicates kept.
    """

    query: str
    tokens: tuple[str, ...] = ()
    matches: tuple[PhotoEntry, ...] = field(default_factory=tuple)


class StateKind(Enum):
    IDLE = "idle"
    RESULTS = "results"
    NO_MATCHES = "no_matches"


@dataclass(frozen=True)
class PresentationState:
    """Visual state of the results region."""

    kind: StateKind
    count: int = 0
    caption: str = ""

    @property
    def is_expanded(self) -> bool:
        return self.kind is StateKind.RESULTS


IDLE = PresentationState(StateKind.IDLE)
NO_MATCHES = PresentationState(StateKind.NO_MATCHES)
