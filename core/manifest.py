"""Adaptation of raw manifest records into `PhotoEntry` values.

Raw records are untyped mappings decoded from JSON. Legacy key aliases are
resolved by an explicit priority list; every field is coerced to a string and
only a missing URL causes a record to be dropped.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from core.models import PhotoEntry

URL_KEYS: tuple[str, ...] = ("url", "image", "src")
FAMILY_KEYS: tuple[str, ...] = ("familyId", "family")


def _first_present(record: Mapping[str, Any], keys: Iterable[str]) -> str:
    """Return the first truthy value among `keys` as a string, else ""."""
    for key in keys:
        value = record.get(key)
        if value:
            return str(value)
    return ""


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return str(value) if value else ""


def adapt_record(record: Mapping[str, Any]) -> PhotoEntry | None:
    """Adapt one raw record, or return None when it has no usable URL."""
    url = _first_present(record, URL_KEYS)
    if not url:
        return None
    return PhotoEntry(
        url=url,
        caption=_text(record, "caption").strip(),
        first_name=_text(record, "firstName"),
        last_name=_text(record, "lastName"),
        family_id=_first_present(record, FAMILY_KEYS),
    )


def adapt(raw_records: Iterable[Any]) -> tuple[PhotoEntry, ...]:
    """Adapt raw manifest records, preserving order and dropping URL-less ones."""
    entries: list[PhotoEntry] = []
    dropped = 0
    for index, record in enumerate(raw_records):
        if not isinstance(record, Mapping):
            logger.warning("Manifest record {} is not an object: {!r}", index, record)
            dropped += 1
            continue
        entry = adapt_record(record)
        if entry is None:
            logger.debug("Manifest record {} has no url; dropped", index)
            dropped += 1
            continue
        entries.append(entry)
    if dropped:
        logger.info("Manifest adaptation dropped {} record(s)", dropped)
    return tuple(entries)
