"""XML load/save helpers shared by the extractor and the overlay patcher.

Parsing always goes through :mod:`defusedxml` so project files pulled from a
shared checkout cannot expand entities or reach external resources.  Saving
writes raw bytes: callers that edit a document splice the original text (see
:mod:`.xmltext`) rather than re-serialising a tree.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Type

from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser

from .types import OverlayWriteError, SetupForDebugError


def _build_parser() -> DefusedXMLParser:
    builder = ET.TreeBuilder(insert_comments=True, insert_pis=True)
    return DefusedXMLParser(target=builder)


def read_payload(path: Path, *, missing: Type[SetupForDebugError]) -> bytes:
    path = Path(path)
    if not path.is_file():
        raise missing(path, "file does not exist")
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise missing(path, str(exc)) from exc
    except OSError as exc:
        raise missing(path, f"unable to read ({exc})") from exc


def parse_payload(
    payload: bytes, path: Path, *, malformed: Type[SetupForDebugError]
) -> ET.Element:
    """Parse ``payload`` with the hardened parser and return its root."""

    parser = _build_parser()
    try:
        parser.feed(payload)
        return parser.close()
    except ET.ParseError as exc:
        raise malformed(Path(path), f"not well-formed XML ({exc})") from exc
    except DefusedXmlException as exc:
        raise malformed(Path(path), f"forbidden XML construct ({exc})") from exc


def load_document(
    path: Path,
    *,
    missing: Type[SetupForDebugError],
    malformed: Type[SetupForDebugError],
) -> ET.ElementTree:
    """Parse ``path`` and map failures onto the supplied error types."""

    payload = read_payload(path, missing=missing)
    return ET.ElementTree(parse_payload(payload, path, malformed=malformed))


def split_tag(tag: str) -> tuple[str, str]:
    """Return ``(namespace, local_name)`` for an ElementTree tag."""

    if tag.startswith("{") and "}" in tag:
        namespace, local = tag[1:].split("}", 1)
        return namespace, local
    return "", tag


def default_namespace(root: ET.Element) -> str:
    """Return the namespace of ``root`` (empty string when unqualified)."""

    return split_tag(root.tag)[0]


def qualify(namespace: str, local_name: str) -> str:
    if namespace:
        return f"{{{namespace}}}{local_name}"
    return local_name


def write_bytes_atomic(
    path: Path,
    payload: bytes,
    *,
    error: Type[SetupForDebugError] = OverlayWriteError,
) -> None:
    """Write ``payload`` beside ``path`` and swap it into place.

    The temporary file lives in the destination directory so ``os.replace``
    stays on one filesystem and an interrupted write never leaves ``path``
    truncated.
    """

    path = Path(path)
    try:
        handle, temp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
    except OSError as exc:
        raise error(path, f"unable to create temporary file ({exc})") from exc
    try:
        with os.fdopen(handle, "wb") as stream:
            stream.write(payload)
        if path.exists():
            shutil.copymode(path, temp_name)
        os.replace(temp_name, path)
    except OSError as exc:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise error(path, f"unable to write overlay ({exc})") from exc
