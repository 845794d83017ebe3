"""Shared result records and error types for the SetUpForDebug core.

Every failure raised by the core derives from :class:`SetupForDebugError` and
carries the offending ``path`` plus a human readable ``reason`` so callers can
surface the problem without parsing messages.

Example
-------
>>> from pathlib import Path
>>> error = OverlayMissingError(Path("Web.csproj.user"), "file does not exist")
>>> error.path.name, error.reason
('Web.csproj.user', 'file does not exist')
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple


class SetupForDebugError(Exception):
    """Base class for failures tied to a specific project file."""

    kind = "error"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {self.reason}")

    def __repr__(self) -> str:  # pragma: no cover - trivial wrapper
        return f"{type(self).__name__}(path={str(self.path)!r}, reason={self.reason!r})"


class DescriptorNotFoundError(SetupForDebugError):
    """Raised when the project descriptor cannot be opened."""

    kind = "descriptor-not-found"


class MalformedDescriptorError(SetupForDebugError):
    """Raised when the project descriptor is not well-formed XML."""

    kind = "malformed-descriptor"


class UnsupportedDescriptorError(SetupForDebugError):
    """Raised when the path does not look like a supported project file."""

    kind = "unsupported-descriptor"


class NoUrlFoundError(SetupForDebugError):
    """Raised when the descriptor carries no URL to rewrite."""

    kind = "no-url-found"


class OverlayMissingError(SetupForDebugError):
    """Raised when the ``.user`` overlay does not exist."""

    kind = "overlay-missing"


class MalformedOverlayError(SetupForDebugError):
    """Raised when the ``.user`` overlay is not well-formed XML."""

    kind = "malformed-overlay"


class OverlayWriteError(SetupForDebugError):
    """Raised when the patched overlay could not be persisted."""

    kind = "overlay-write-failed"


class InvalidFlavorGuidError(ValueError):
    """Raised when a project flavor GUID is missing or cannot be parsed."""


@dataclass(frozen=True)
class SetupResult:
    descriptor_path: Path
    overlay_path: Path
    urls: Tuple[str, ...]
    start_url: str
    flavor_guid: str
    action: str

    @property
    def inserted(self) -> bool:
        return self.action == "inserted"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "descriptor": str(self.descriptor_path),
            "overlay": str(self.overlay_path),
            "urls": list(self.urls),
            "start_url": self.start_url,
            "flavor_guid": self.flavor_guid,
            "action": self.action,
        }


def error_payload(error: SetupForDebugError) -> Dict[str, Any]:
    """Return a JSON-safe mapping describing ``error``."""

    return {
        "error": error.kind,
        "path": str(error.path),
        "reason": error.reason,
    }
