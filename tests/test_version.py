"""Tests for asset versioning."""

import hashlib
import logging
from pathlib import Path

from pagewire.inertia.version import (
    manifest_version,
    resolve_version,
    versions_match,
)


class TestResolveVersion:
    def test_static(self) -> None:
        assert resolve_version("abc") == "abc"
        assert resolve_version(3) == 3

    def test_callable(self) -> None:
        assert resolve_version(lambda: "build-9") == "build-9"


class TestVersionsMatch:
    def test_missing_client_header_matches(self) -> None:
        assert versions_match(None, "abc") is True

    def test_equal(self) -> None:
        assert versions_match("abc", "abc") is True

    def test_different(self) -> None:
        assert versions_match("old", "new") is False

    def test_int_version_compares_as_text(self) -> None:
        assert versions_match("2", 2) is True

    def test_empty_header_is_a_mismatch(self) -> None:
        assert versions_match("", "1") is False


class TestManifestVersion:
    def test_hashes_file(self, tmp_path: Path) -> None:
        manifest = tmp_path / "manifest.json"
        manifest.write_bytes(b'{"app.js": "app-123.js"}')
        expected = hashlib.md5(b'{"app.js": "app-123.js"}').hexdigest()[:8]
        assert manifest_version(manifest)() == expected

    def test_changes_with_content(self, tmp_path: Path) -> None:
        manifest = tmp_path / "manifest.json"
        provider = manifest_version(manifest)
        manifest.write_text("a")
        first = provider()
        manifest.write_text("b")
        assert provider() != first

    def test_missing_file_uses_stable_startup_token(self, tmp_path: Path) -> None:
        provider = manifest_version(tmp_path / "missing.json")
        token = provider()
        assert token
        assert token.isalnum()
        assert provider() == token

    def test_unreadable_file_logs_and_falls_back(self, tmp_path: Path, caplog) -> None:
        provider = manifest_version(tmp_path)  # a directory cannot be read as bytes
        with caplog.at_level(logging.WARNING, logger="pagewire.inertia"):
            token = provider()
        assert token == manifest_version(tmp_path / "missing.json")()
        assert "asset versioning" in caplog.text
