"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

type VersionValue = str | int
type VersionProvider = VersionValue | Callable[[], VersionValue]


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    Override what you need::

        config = AppConfig(debug=True, version=manifest_version("dist/manifest.json"))

    ``version`` is either a static value or a zero-argument callable.
    The callable is invoked on every page build, so it should be cheap
    (cache inside it if reading files).
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Page protocol
    root_view: str = "app.html"  # Full-document template for first loads
    root_element_id: str = "app"  # DOM id the client mounts onto
    version: VersionProvider = "1"
    encrypt_history: bool = False
