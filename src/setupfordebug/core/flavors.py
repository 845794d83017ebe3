"""Project flavor GUID helpers."""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

from .types import InvalidFlavorGuidError

# Web Application Project flavor; owns the WebProjectProperties block.
WEB_APPLICATION_FLAVOR = "{349c5851-65df-11da-9384-00065b846f21}"


def normalise_flavor_guid(value: str) -> str:
    """Return ``value`` as a braced, lower-case GUID string.

    >>> normalise_flavor_guid("349C5851-65DF-11DA-9384-00065B846F21")
    '{349c5851-65df-11da-9384-00065b846f21}'
    """

    text = (value or "").strip()
    if not text:
        raise InvalidFlavorGuidError("Flavor GUID cannot be empty.")
    try:
        parsed = uuid.UUID(text)
    except ValueError as exc:
        raise InvalidFlavorGuidError(f"Invalid flavor GUID: {value!r}") from exc
    return f"{{{parsed}}}"


def flavor_guids_match(left: Optional[str], right: Optional[str]) -> bool:
    if not left or not right:
        return False
    try:
        return normalise_flavor_guid(left) == normalise_flavor_guid(right)
    except InvalidFlavorGuidError:
        return left.strip().lower() == right.strip().lower()


def choose_flavor_guid(candidates: Sequence[str]) -> str:
    """Pick the flavor the overlay settings belong to from ``ProjectTypeGuids``."""

    normalised = []
    for candidate in candidates:
        try:
            normalised.append(normalise_flavor_guid(candidate))
        except InvalidFlavorGuidError:
            continue
    if not normalised:
        raise InvalidFlavorGuidError(
            "No flavor GUID supplied and the project lists no ProjectTypeGuids."
        )
    if WEB_APPLICATION_FLAVOR in normalised:
        return WEB_APPLICATION_FLAVOR
    return normalised[0]
