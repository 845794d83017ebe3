"""SetUpForDebug core module exports."""

from .extractor import extract_debug_urls, join_debug_urls, read_project_flavors
from .flavors import WEB_APPLICATION_FLAVOR, choose_flavor_guid, normalise_flavor_guid
from .overlay import apply_debug_settings, build_web_project_properties, patch_overlay
from .rewrite import DEFAULT_REMOTE_HOST, LOOPBACK_HOST, rewrite_debug_url
from .types import (
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
)

__all__ = [
    "DEFAULT_REMOTE_HOST",
    "LOOPBACK_HOST",
    "WEB_APPLICATION_FLAVOR",
    "DescriptorNotFoundError",
    "InvalidFlavorGuidError",
    "MalformedDescriptorError",
    "MalformedOverlayError",
    "NoUrlFoundError",
    "OverlayMissingError",
    "OverlayWriteError",
    "SetupForDebugError",
    "SetupResult",
    "UnsupportedDescriptorError",
    "apply_debug_settings",
    "build_web_project_properties",
    "choose_flavor_guid",
    "extract_debug_urls",
    "join_debug_urls",
    "normalise_flavor_guid",
    "patch_overlay",
    "read_project_flavors",
    "rewrite_debug_url",
]
