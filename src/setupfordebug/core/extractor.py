"""Read debug URLs and project flavors out of an MSBuild project descriptor.

Project descriptors differ in namespace usage: classic web application
projects declare the MSBuild 2003 namespace while SDK-style projects declare
none.  The namespace is therefore taken from the root element of each
document instead of being hard coded.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Tuple

from .types import DescriptorNotFoundError, MalformedDescriptorError
from .xmlio import default_namespace, load_document, qualify

logger = logging.getLogger(__name__)

DEFAULT_URL_ELEMENT = "IISUrl"
PROJECT_TYPE_GUIDS_ELEMENT = "ProjectTypeGuids"


def _load_descriptor(descriptor_path: Path):
    return load_document(
        Path(descriptor_path),
        missing=DescriptorNotFoundError,
        malformed=MalformedDescriptorError,
    )


def extract_debug_urls(
    descriptor_path: Path | str,
    *,
    element_name: str = DEFAULT_URL_ELEMENT,
) -> Tuple[str, ...]:
    """Return the text of every ``element_name`` element in document order.

    Args:
        descriptor_path: Project descriptor to read.
        element_name: Local name of the URL-carrying element.

    Returns:
        A tuple with one entry per matching element.  Empty elements
        contribute an empty string; a descriptor without matches yields an
        empty tuple.

    Raises:
        DescriptorNotFoundError: The descriptor does not exist.
        MalformedDescriptorError: The descriptor is not well-formed XML.
    """

    tree = _load_descriptor(Path(descriptor_path))
    root = tree.getroot()
    tag = qualify(default_namespace(root), element_name)
    urls = tuple("".join(element.itertext()) for element in root.iter(tag))
    logger.debug("Found %d <%s> element(s) in %s", len(urls), element_name, descriptor_path)
    return urls


def join_debug_urls(urls: Sequence[str], *, separator: str = "\n") -> str:
    """Collapse extracted URLs into the single value handed to the rewriter."""

    if len(urls) > 1:
        logger.warning(
            "Found %d debug URLs; joining them into one value. Only a single "
            "<IISUrl> is expected per project.",
            len(urls),
        )
    return separator.join(urls)


def read_project_flavors(descriptor_path: Path | str) -> Tuple[str, ...]:
    """Return the GUIDs listed in the descriptor's ``ProjectTypeGuids``."""

    tree = _load_descriptor(Path(descriptor_path))
    root = tree.getroot()
    tag = qualify(default_namespace(root), PROJECT_TYPE_GUIDS_ELEMENT)
    guids: List[str] = []
    seen: set[str] = set()
    for element in root.iter(tag):
        for token in (element.text or "").split(";"):
            cleaned = token.strip()
            if cleaned and cleaned.lower() not in seen:
                seen.add(cleaned.lower())
                guids.append(cleaned)
    return tuple(guids)
