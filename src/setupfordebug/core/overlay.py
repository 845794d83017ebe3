"""Merge debug start settings into a project's ``.user`` overlay.

The overlay is owned by the IDE and usually holds settings unrelated to this
tool (other flavors, publish profiles, last-used configurations).  Patching
only ever touches the ``ProjectExtensions/VisualStudio/FlavorProperties``
node matching the project's flavor GUID:

* When that node already exists only its ``StartExternalURL`` leaf changes.
* Otherwise a complete ``WebProjectProperties`` block is added, reusing any
  ``ProjectExtensions`` / ``VisualStudio`` containers already present.

Edits are spliced into the original text, so everything outside the changed
span keeps its bytes: newline style, encoding and byte order mark, attribute
quoting, namespace prefixes and comments.  The overlay must exist beforehand;
a missing or unreadable overlay is reported instead of being replaced.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

from .flavors import flavor_guids_match, normalise_flavor_guid
from .types import MalformedOverlayError, OverlayMissingError
from .xmlio import parse_payload, read_payload, write_bytes_atomic
from .xmltext import TextElement, decode_document, line_indent, scan_document

logger = logging.getLogger(__name__)

START_URL_LEAF = "StartExternalURL"
DEFAULT_INDENT = "  "

# Leaf order matches what the IDE itself writes. ``None`` marks the start URL.
WEB_PROJECT_DEFAULTS: Tuple[Tuple[str, Optional[str]], ...] = (
    ("StartPageUrl", ""),
    ("StartAction", "URL"),
    ("AspNetDebugging", "True"),
    ("SilverlightDebugging", "False"),
    ("NativeDebugging", "False"),
    ("SQLDebugging", "False"),
    ("ExternalProgram", ""),
    (START_URL_LEAF, None),
    ("StartCmdLineArguments", ""),
    ("StartWorkingDirectory", ""),
    ("EnableENC", "True"),
    ("AlwaysStartWebServerOnDebug", "False"),
)

_SELF_CLOSE = re.compile(r"\s*/>$")
_QUOTE_ENTITIES = {'"': "&quot;"}


@dataclass
class NewElement:
    """Element about to be written into the overlay."""

    local_name: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    text: str = ""
    children: List["NewElement"] = field(default_factory=list)

    def render(self, prefix: str, depth: int = 0) -> List[Tuple[int, str]]:
        name = f"{prefix}:{self.local_name}" if prefix else self.local_name
        attrs = "".join(
            f' {key}="{escape(value, _QUOTE_ENTITIES)}"' for key, value in self.attributes
        )
        if self.children:
            lines = [(depth, f"<{name}{attrs}>")]
            for child in self.children:
                lines.extend(child.render(prefix, depth + 1))
            lines.append((depth, f"</{name}>"))
            return lines
        if self.text:
            return [(depth, f"<{name}{attrs}>{escape(self.text)}</{name}>")]
        return [(depth, f"<{name}{attrs} />")]


def build_web_project_properties(start_url: str) -> NewElement:
    """Return a fully populated ``WebProjectProperties`` element."""

    leaves = [
        NewElement(name, text=start_url if value is None else value)
        for name, value in WEB_PROJECT_DEFAULTS
    ]
    return NewElement("WebProjectProperties", children=leaves)


class _Layout:
    """Newline and indentation conventions observed in the overlay."""

    def __init__(self, text: str, root: TextElement) -> None:
        self.text = text
        self.compact = "\n" not in text[root.start:root.end]
        self.newline = "" if self.compact else ("\r\n" if "\r\n" in text else "\n")
        self.unit = "" if self.compact else self._detect_unit(root)

    def _detect_unit(self, root: TextElement) -> str:
        root_indent = line_indent(self.text, root.start) or ""
        for child in root.children:
            indent = line_indent(self.text, child.start)
            if indent and indent.startswith(root_indent) and len(indent) > len(root_indent):
                return indent[len(root_indent):]
        return DEFAULT_INDENT

    def indent_of(self, element: TextElement) -> str:
        if self.compact:
            return ""
        return line_indent(self.text, element.start) or ""

    def child_indent(self, parent: TextElement) -> str:
        if self.compact:
            return ""
        if parent.children:
            indent = line_indent(self.text, parent.children[-1].start)
            if indent is not None:
                return indent
        return self.indent_of(parent) + self.unit


def _insert_child(
    text: str, layout: _Layout, parent: TextElement, element: NewElement, prefix: str
) -> str:
    child_indent = layout.child_indent(parent)
    block = layout.newline.join(
        child_indent + layout.unit * depth + line for depth, line in element.render(prefix)
    )
    parent_indent = layout.indent_of(parent)

    if parent.self_closing:
        opening = _SELF_CLOSE.sub(">", text[parent.start:parent.end])
        replacement = (
            f"{opening}{layout.newline}{block}{layout.newline}{parent_indent}</{parent.name}>"
        )
        return text[: parent.start] + replacement + text[parent.end:]

    # Reuse the closing tag's own indented line when it has one.
    line_start = text.rfind("\n", 0, parent.close_start) + 1
    own_line = line_start > parent.open_end and not text[line_start:parent.close_start].strip()
    if own_line and not layout.compact:
        return text[:line_start] + block + layout.newline + text[line_start:]
    insertion = f"{layout.newline}{block}{layout.newline}{parent_indent}"
    return text[: parent.close_start] + insertion + text[parent.close_start:]


def _replace_content(text: str, element: TextElement, value: str) -> str:
    content = escape(value)
    if element.self_closing:
        opening = _SELF_CLOSE.sub(">", text[element.start:element.end])
        return text[: element.start] + f"{opening}{content}</{element.name}>" + text[element.end:]
    return text[: element.open_end] + content + text[element.close_start:]


def find_flavor_properties(
    visual_studio: TextElement, flavor_guid: str, *, namespace: str = ""
) -> Optional[TextElement]:
    for candidate in visual_studio.iter_children(namespace, "FlavorProperties"):
        if flavor_guids_match(candidate.attributes.get("GUID"), flavor_guid):
            return candidate
    return None


def apply_debug_settings(text: str, start_url: str, flavor_guid: str) -> Tuple[str, str]:
    """Return ``(patched_text, action)`` with ``start_url`` installed.

    ``action`` is ``"inserted"`` when a settings block was added and
    ``"updated"`` when an existing one was edited in place.  ``text`` must be
    a well-formed document.
    """

    root = scan_document(text)
    layout = _Layout(text, root)
    namespace = root.namespace
    prefix = root.prefix

    flavor_element = NewElement(
        "FlavorProperties",
        attributes=(("GUID", flavor_guid),),
        children=[build_web_project_properties(start_url)],
    )

    extensions = root.find(namespace, "ProjectExtensions")
    if extensions is None:
        wrapped = NewElement(
            "ProjectExtensions", children=[NewElement("VisualStudio", children=[flavor_element])]
        )
        logger.info("Inserted ProjectExtensions with debug settings for flavor %s", flavor_guid)
        return _insert_child(text, layout, root, wrapped, prefix), "inserted"

    visual_studio = extensions.find(namespace, "VisualStudio")
    if visual_studio is None:
        wrapped = NewElement("VisualStudio", children=[flavor_element])
        logger.info("Inserted VisualStudio with debug settings for flavor %s", flavor_guid)
        return _insert_child(text, layout, extensions, wrapped, prefix), "inserted"

    flavor = find_flavor_properties(visual_studio, flavor_guid, namespace=namespace)
    if flavor is None:
        logger.info("Inserted debug settings for flavor %s", flavor_guid)
        return _insert_child(text, layout, visual_studio, flavor_element, prefix), "inserted"

    properties = flavor.find(namespace, "WebProjectProperties")
    if properties is None:
        logger.info("Inserted WebProjectProperties under flavor %s", flavor_guid)
        block = build_web_project_properties(start_url)
        return _insert_child(text, layout, flavor, block, prefix), "inserted"

    leaf = properties.find(namespace, START_URL_LEAF)
    if leaf is None:
        logger.info("Added %s for flavor %s: %r", START_URL_LEAF, flavor_guid, start_url)
        new_leaf = NewElement(START_URL_LEAF, text=start_url)
        return _insert_child(text, layout, properties, new_leaf, prefix), "updated"

    previous = "" if leaf.self_closing else text[leaf.open_end:leaf.close_start]
    logger.info(
        "Updated %s for flavor %s: %r -> %r", START_URL_LEAF, flavor_guid, previous, start_url
    )
    return _replace_content(text, leaf, start_url), "updated"


def patch_overlay(overlay_path: Path | str, start_url: str, flavor_guid: str) -> str:
    """Merge ``start_url`` into the overlay at ``overlay_path`` and save it.

    Args:
        overlay_path: Existing ``<project>.user`` document.
        start_url: Rewritten URL stored as ``StartExternalURL``.
        flavor_guid: Project flavor keying the ``FlavorProperties`` node.

    Returns:
        ``"inserted"`` when a new settings block was added, ``"updated"`` when
        an existing one was edited in place.

    Raises:
        InvalidFlavorGuidError: ``flavor_guid`` is not a GUID.
        OverlayMissingError: The overlay does not exist.
        MalformedOverlayError: The overlay is not well-formed XML.
        OverlayWriteError: The patched document could not be saved.
    """

    path = Path(overlay_path)
    guid = normalise_flavor_guid(flavor_guid)
    payload = read_payload(path, missing=OverlayMissingError)
    parse_payload(payload, path, malformed=MalformedOverlayError)
    try:
        text, encoding = decode_document(payload)
        patched, action = apply_debug_settings(text, start_url, guid)
    except (UnicodeError, ValueError) as exc:
        raise MalformedOverlayError(path, f"unable to edit overlay ({exc})") from exc
    write_bytes_atomic(path, patched.encode(encoding))
    return action
