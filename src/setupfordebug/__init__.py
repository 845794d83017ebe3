"""SetUpForDebug package.

Points a web project's debug launch at a shared remote debugging host by
rewriting the project's ``IISUrl`` and storing the result in the per-user
``.user`` overlay the IDE reads on the next launch.
"""

from __future__ import annotations

from .config import SetupSettings, load_settings
from .core import (
    DescriptorNotFoundError,
    InvalidFlavorGuidError,
    MalformedDescriptorError,
    MalformedOverlayError,
    NoUrlFoundError,
    OverlayMissingError,
    OverlayWriteError,
    SetupForDebugError,
    SetupResult,
    UnsupportedDescriptorError,
    extract_debug_urls,
    patch_overlay,
    rewrite_debug_url,
)
from .runner import DebugSetup

__all__ = [
    "DebugSetup",
    "DescriptorNotFoundError",
    "InvalidFlavorGuidError",
    "MalformedDescriptorError",
    "MalformedOverlayError",
    "NoUrlFoundError",
    "OverlayMissingError",
    "OverlayWriteError",
    "SetupForDebugError",
    "SetupResult",
    "SetupSettings",
    "UnsupportedDescriptorError",
    "extract_debug_urls",
    "load_settings",
    "patch_overlay",
    "rewrite_debug_url",
]
