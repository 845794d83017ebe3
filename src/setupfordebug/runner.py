"""Entry point tying extraction, rewriting and overlay patching together.

>>> from setupfordebug.config import SetupSettings
>>> setup = DebugSetup(SetupSettings(remote_host="http://debug.example.edu"))
>>> setup.overlay_path_for("Web/Web.csproj").as_posix()
'Web/Web.csproj.user'
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from .config import SetupSettings
from .core.extractor import extract_debug_urls, join_debug_urls, read_project_flavors
from .core.flavors import choose_flavor_guid, normalise_flavor_guid
from .core.overlay import patch_overlay
from .core.rewrite import rewrite_debug_url
from .core.types import NoUrlFoundError, SetupResult, UnsupportedDescriptorError

logger = logging.getLogger(__name__)


class DebugSetup:
    """Retarget a project's debug launch at the configured remote host.

    Instances hold settings only; every call re-reads the descriptor and the
    overlay from disk.
    """

    def __init__(self, settings: Optional[SetupSettings] = None) -> None:
        self.settings = settings or SetupSettings()

    def overlay_path_for(self, descriptor_path: Path | str) -> Path:
        path = Path(descriptor_path)
        return path.with_name(path.name + self.settings.overlay_suffix)

    def check_descriptor(self, descriptor_path: Path | str) -> Path:
        path = Path(descriptor_path)
        if path.suffix.lower() not in self.settings.project_suffixes:
            expected = ", ".join(self.settings.project_suffixes)
            raise UnsupportedDescriptorError(path, f"expected a project file ({expected})")
        return path

    def extract(self, descriptor_path: Path | str) -> Tuple[str, ...]:
        path = self.check_descriptor(descriptor_path)
        return extract_debug_urls(path, element_name=self.settings.url_element)

    def build_debug_url(self, descriptor_path: Path | str) -> Tuple[Tuple[str, ...], str]:
        """Return the extracted URLs and the rewritten start URL.

        Raises:
            NoUrlFoundError: The descriptor has no usable URL element.
        """

        path = Path(descriptor_path)
        urls = self.extract(path)
        joined = join_debug_urls(urls, separator=self.settings.url_separator)
        if not joined.strip():
            raise NoUrlFoundError(path, f"no <{self.settings.url_element}> value to rewrite")
        rewritten = rewrite_debug_url(
            joined,
            self.settings.remote_host,
            loopback_host=self.settings.loopback_host,
        )
        if rewritten == joined:
            logger.warning(
                "Debug URL %r does not contain %s; storing it unchanged.",
                joined,
                self.settings.loopback_host,
            )
        return urls, rewritten

    def resolve_flavor_guid(self, descriptor_path: Path | str, flavor_guid: Optional[str] = None) -> str:
        explicit = flavor_guid or self.settings.flavor_guid
        if explicit:
            return normalise_flavor_guid(explicit)
        guid = choose_flavor_guid(read_project_flavors(descriptor_path))
        logger.debug("Using flavor %s from ProjectTypeGuids", guid)
        return guid

    def run(self, descriptor_path: Path | str, flavor_guid: Optional[str] = None) -> SetupResult:
        """Extract, rewrite and patch in sequence for ``descriptor_path``."""

        path = Path(descriptor_path)
        urls, start_url = self.build_debug_url(path)
        guid = self.resolve_flavor_guid(path, flavor_guid)
        overlay_path = self.overlay_path_for(path)
        action = patch_overlay(overlay_path, start_url, guid)
        logger.info("Debug start URL for %s set to %s (%s)", path.name, start_url, action)
        return SetupResult(
            descriptor_path=path,
            overlay_path=overlay_path,
            urls=urls,
            start_url=start_url,
            flavor_guid=guid,
            action=action,
        )
