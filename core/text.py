"""Text canonicalization used for query/entry comparison."""

from __future__ import annotations

import re
import unicodedata
from typing import Any

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: Any) -> str:
    """Return `text` stripped of diacritics, whitespace-collapsed, lowercased and trimmed.

    `None` and empty input yield an empty string. Idempotent.
    """
    if not text:
        return ""
    # lower() can emit combining marks ("İ"), so it runs before decomposition
    decomposed = unicodedata.normalize("NFD", str(text).lower())
    stripped = _COMBINING_MARKS.sub("", decomposed)
    return _WHITESPACE.sub(" ", stripped).strip()
