from __future__ import annotations

import json
import os

import pytest
import requests

from core.models import PhotoEntry
from core.services.download_service import DownloadService
from core.services.interfaces import DownloadFetchError, ManifestLoadError
from infrastructure import http_fetcher, manifest_repository
from infrastructure import logging as log_utils
from infrastructure.http_fetcher import HttpFetcher
from infrastructure.image_service import _LRUCache
from infrastructure.manifest_repository import ManifestRepository, is_remote, resolve_entry_url
from infrastructure.save_service import SaveService, local_source, unique_path
from infrastructure.settings import JsonSettings


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=b"", bad_json=False) -> None:
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self.content = content
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload


def _patch_get(monkeypatch, module, response=None, exc=None):
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append((url, headers, timeout))
        if exc is not None:
            raise exc
        return response

    monkeypatch.setattr(module.requests, "get", fake_get)
    return calls


# Manifest repository


def test_is_remote():
    assert is_remote("https://host/m.json")
    assert is_remote("HTTP://host/m.json")
    assert not is_remote("/tmp/m.json")
    assert not is_remote("file:///tmp/m.json")


def test_remote_manifest_is_adapted(monkeypatch):
    payload = [{"image": "a.jpg", "caption": " Smith "}, {"caption": "no url"}]
    calls = _patch_get(monkeypatch, manifest_repository, FakeResponse(payload=payload))
    entries = ManifestRepository(timeout=5).load("https://host/m.json")
    assert [(e.url, e.caption) for e in entries] == [("a.jpg", "Smith")]
    assert calls[0][0] == "https://host/m.json"
    assert calls[0][2] == 5


@pytest.mark.parametrize(
    ("response", "exc"),
    [
        (FakeResponse(status_code=404), None),
        (FakeResponse(bad_json=True), None),
        (FakeResponse(payload={"items": []}), None),
        (None, requests.ConnectionError("unreachable")),
    ],
)
def test_remote_manifest_failures_raise_load_error(monkeypatch, response, exc):
    _patch_get(monkeypatch, manifest_repository, response, exc)
    with pytest.raises(ManifestLoadError):
        ManifestRepository().load("https://host/m.json")


def test_local_manifest_path_and_file_url(tmp_path):
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps([{"url": "a.jpg", "lastName": "Smith"}]), encoding="utf-8")
    repo = ManifestRepository()
    assert repo.load(str(path))[0].last_name == "Smith"
    assert repo.load(path.as_uri())[0].url == "a.jpg"


def test_local_manifest_missing_or_invalid(tmp_path):
    repo = ManifestRepository()
    with pytest.raises(ManifestLoadError):
        repo.load(str(tmp_path / "missing.json"))
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ManifestLoadError):
        repo.load(str(bad))
    with pytest.raises(ManifestLoadError):
        repo.load("")


def test_resolve_entry_url_for_each_manifest_kind(tmp_path):
    local = str(tmp_path / "data" / "m.json")
    assert resolve_entry_url(local, "photos/a.jpg") == str(tmp_path / "data" / "photos" / "a.jpg")
    assert resolve_entry_url(local, "https://cdn/a.jpg") == "https://cdn/a.jpg"
    assert resolve_entry_url("https://host/d/m.json", "a.jpg") == "https://host/d/a.jpg"
    assert resolve_entry_url("file:///d/m.json", "a.jpg") == "file:///d/a.jpg"
    assert resolve_entry_url("https://host/m.json", "") == ""


# Fetcher


def test_fetcher_returns_content(monkeypatch):
    _patch_get(monkeypatch, http_fetcher, FakeResponse(content=b"\xff\xd8"))
    assert HttpFetcher().fetch("https://host/a.jpg") == b"\xff\xd8"


@pytest.mark.parametrize(
    ("response", "exc"),
    [(FakeResponse(status_code=500), None), (None, requests.Timeout("slow"))],
)
def test_fetcher_failures_raise_download_error(monkeypatch, response, exc):
    _patch_get(monkeypatch, http_fetcher, response, exc)
    with pytest.raises(DownloadFetchError) as info:
        HttpFetcher().fetch("https://host/a.jpg")
    assert info.value.url == "https://host/a.jpg"


# Save service


def test_unique_path_adds_numeric_suffix(tmp_path):
    assert unique_path(tmp_path, "a.jpg") == tmp_path / "a.jpg"
    (tmp_path / "a.jpg").write_bytes(b"1")
    (tmp_path / "a (1).jpg").write_bytes(b"2")
    assert unique_path(tmp_path, "a.jpg") == tmp_path / "a (2).jpg"


def test_local_source():
    assert local_source("https://host/a.jpg") is None
    assert str(local_source("file:///tmp/a.jpg")).endswith("a.jpg")
    assert local_source("photos/a.jpg") is not None


def test_save_bytes_never_overwrites(tmp_path):
    saver = SaveService(tmp_path / "dl")
    first = saver.save_bytes(b"one", "photo.jpg")
    second = saver.save_bytes(b"two", "photo.jpg")
    assert first != second
    assert (tmp_path / "dl" / "photo.jpg").read_bytes() == b"one"
    assert (tmp_path / "dl" / "photo (1).jpg").read_bytes() == b"two"


def test_save_direct_copies_local_files_only(tmp_path):
    src = tmp_path / "src.jpg"
    src.write_bytes(b"img")
    saver = SaveService(tmp_path / "dl")
    saver.save_direct(str(src), "copy.jpg")
    saver.save_direct("https://host/remote.jpg", "remote.jpg")
    assert (tmp_path / "dl" / "copy.jpg").read_bytes() == b"img"
    assert not (tmp_path / "dl" / "remote.jpg").exists()


def test_download_with_encoded_null_byte_saves_sanitized_name(tmp_path, monkeypatch):
    opened = []
    monkeypatch.setattr(SaveService, "open_external", lambda self, url: opened.append(url))
    saver = SaveService(tmp_path / "dl")

    class Fetcher:
        def fetch(self, url):
            return b"img"

    class Control:
        def set_enabled(self, enabled):
            pass

        def set_label(self, text):
            pass

    DownloadService(PhotoEntry(url="https://host/a%00b.jpg"), Control(), saver, Fetcher()).download()

    assert saver.download_dir == tmp_path / "dl"
    assert (saver.download_dir / "a_b.jpg").read_bytes() == b"img"
    assert opened == []


# Settings and cache


def test_settings_dotted_access(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "results": {"scroll_threshold": "0.5", "columns": "oops"},
                "downloads": {"directory": "~/pics"},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = JsonSettings(path)
    assert settings.get("results.scroll_threshold") == "0.5"
    assert settings.get("missing.key", 3) == 3
    assert settings.get_float("results.scroll_threshold", 0.6) == 0.5
    assert settings.get_int("results.columns", 3) == 3
    assert settings.get_path("downloads.directory", "/x") == tmp_path / "pics"
    assert str(settings.get_path("logging.directory", "/var/log/x")) == "/var/log/x"


def test_settings_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonSettings(tmp_path / "nope.json")


def test_lru_cache_evicts_least_recent():
    cache = _LRUCache(2)
    cache.put("a", "A")
    cache.put("b", "B")
    assert cache.get("a") == "A"
    cache.put("c", "C")
    assert cache.get("b") is None
    assert cache.get("a") == "A" and cache.get("c") == "C"
    assert len(cache) == 2


# Logging


def test_find_latest_log_file_picks_newest(tmp_path):
    assert log_utils.find_latest_log_file(str(tmp_path / "missing")) is None
    assert log_utils.find_latest_log_file(str(tmp_path)) is None
    old, new = tmp_path / "app_20250101.log", tmp_path / "app_20250102.log"
    old.write_text("old", encoding="utf-8")
    new.write_text("new", encoding="utf-8")
    (tmp_path / "other.txt").write_text("x", encoding="utf-8")
    os.utime(old, (1_000, 1_000))
    os.utime(new, (2_000, 2_000))
    assert log_utils.find_latest_log_file(str(tmp_path)) == new


def test_open_latest_log(tmp_path, monkeypatch):
    opened = []
    monkeypatch.setattr(log_utils, "open_file_in_default_app", lambda p: opened.append(p) or True)
    assert log_utils.open_latest_log(tmp_path) is False
    (tmp_path / "app_20250101.log").write_text("x", encoding="utf-8")
    assert log_utils.open_latest_log(tmp_path) is True
    assert opened == [str(tmp_path / "app_20250101.log")]
