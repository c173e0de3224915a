"""Asset versioning.

The client sends the version it was built against on every protocol
request; a mismatch on ``GET`` forces a full reload so new assets load.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import time
from collections.abc import Callable
from pathlib import Path

from pagewire.config import VersionProvider, VersionValue

logger = logging.getLogger("pagewire.inertia")


@functools.cache
def _startup_version() -> str:
    """Fallback token fixed at first use; changes on every process start."""
    return _base36(int(time.time() * 1000))


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while number:
        number, rem = divmod(number, 36)
        out = digits[rem] + out
    return out or "0"


def resolve_version(provider: VersionProvider) -> VersionValue:
    """Evaluate a configured version: call it if callable, else return as-is."""
    if callable(provider):
        return provider()
    return provider


def versions_match(client: str | None, current: VersionValue) -> bool:
    """Compare the client's header value against the server version.

    A missing header is not a mismatch (first protocol request after a
    deploy without a version yet, or a non-browser client).
    """
    if client is None:
        return True
    return client == str(current)


def manifest_version(path: str | Path) -> Callable[[], str]:
    """Version provider hashing a build manifest.

    Returns the first 8 hex characters of the file's MD5. While the file
    does not exist (first boot, assets not built), falls back to a token
    fixed at process start. Other read errors are logged and fall back too.

    Usage::

        AppConfig(version=manifest_version("public/manifest.json"))
    """
    manifest = Path(path)

    def provider() -> str:
        try:
            content = manifest.read_bytes()
        except FileNotFoundError:
            return _startup_version()
        except OSError as exc:
            logger.warning("Could not read %s for asset versioning: %s", manifest, exc)
            return _startup_version()
        return hashlib.md5(content, usedforsecurity=False).hexdigest()[:8]

    return provider
