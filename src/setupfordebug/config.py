"""Settings for retargeting debug launches.

Settings come from an optional JSON file and can be overridden per call (the
CLI maps its flags onto :meth:`SetupSettings.merged`)::

    {
      "remote_host": "http://debug.$INSTITUTION.edu",
      "flavor_guid": "{349c5851-65df-11da-9384-00065b846f21}",
      "project_suffixes": [".csproj", ".vbproj"]
    }
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

from .core.extractor import DEFAULT_URL_ELEMENT
from .core.flavors import normalise_flavor_guid
from .core.rewrite import DEFAULT_REMOTE_HOST, LOOPBACK_HOST

DEFAULT_PROJECT_SUFFIXES: Tuple[str, ...] = (".csproj", ".vbproj")


def _non_empty(payload: Mapping[str, Any], key: str, default: str) -> str:
    value = payload.get(key, default)
    if value is None:
        return default
    text = str(value)
    if not text.strip():
        raise ValueError(f"'{key}' cannot be empty.")
    return text


@dataclass(frozen=True)
class SetupSettings:
    remote_host: str = DEFAULT_REMOTE_HOST
    loopback_host: str = LOOPBACK_HOST
    url_element: str = DEFAULT_URL_ELEMENT
    overlay_suffix: str = ".user"
    url_separator: str = "\n"
    flavor_guid: Optional[str] = None
    project_suffixes: Tuple[str, ...] = DEFAULT_PROJECT_SUFFIXES

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "SetupSettings":
        if not payload:
            return cls()
        if not isinstance(payload, Mapping):
            raise TypeError("Settings payload must be a mapping.")

        remote_host = os.path.expandvars(_non_empty(payload, "remote_host", DEFAULT_REMOTE_HOST))
        loopback_host = _non_empty(payload, "loopback_host", LOOPBACK_HOST)
        url_element = _non_empty(payload, "url_element", DEFAULT_URL_ELEMENT)
        overlay_suffix = _non_empty(payload, "overlay_suffix", ".user")

        separator = payload.get("url_separator", "\n")
        if not isinstance(separator, str):
            raise ValueError("'url_separator' must be a string.")

        flavor_guid = payload.get("flavor_guid")
        if flavor_guid is not None and str(flavor_guid).strip():
            flavor_guid = normalise_flavor_guid(str(flavor_guid))
        else:
            flavor_guid = None

        suffixes_payload = payload.get("project_suffixes")
        if suffixes_payload is None:
            suffixes = DEFAULT_PROJECT_SUFFIXES
        elif isinstance(suffixes_payload, (list, tuple)):
            suffixes = tuple(
                str(item).strip().lower() for item in suffixes_payload if str(item).strip()
            )
            if not suffixes:
                raise ValueError("'project_suffixes' must list at least one suffix.")
        else:
            raise ValueError("'project_suffixes' must be a list if provided.")

        return cls(
            remote_host=remote_host,
            loopback_host=loopback_host,
            url_element=url_element,
            overlay_suffix=overlay_suffix,
            url_separator=separator,
            flavor_guid=flavor_guid,
            project_suffixes=suffixes,
        )

    def merged(
        self,
        *,
        remote_host: Optional[str] = None,
        loopback_host: Optional[str] = None,
        flavor_guid: Optional[str] = None,
    ) -> "SetupSettings":
        """Return a copy with any explicitly supplied values applied.

        Supplied values follow the same rules as :meth:`from_dict`: blank
        hosts raise :class:`ValueError` instead of being ignored.
        """

        overrides = {"remote_host": remote_host, "loopback_host": loopback_host}
        updates: dict[str, Any] = {}
        for key, value in overrides.items():
            if value is not None:
                updates[key] = _non_empty(overrides, key, "")
        if "remote_host" in updates:
            updates["remote_host"] = os.path.expandvars(updates["remote_host"])
        if flavor_guid is not None:
            updates["flavor_guid"] = normalise_flavor_guid(flavor_guid)
        if not updates:
            return self
        return replace(self, **updates)


def load_settings(path: Path | str | None) -> SetupSettings:
    if path is None:
        return SetupSettings()
    path = Path(path)
    payload = json.loads(path.read_text(encoding="utf-8"))
    return SetupSettings.from_dict(payload)
