"""Lexical view of an XML document used for in-place edits.

ElementTree re-serialises everything it writes: newline style, attribute
quoting, self-closing tags and namespace prefixes all come out normalised.
The overlay patcher instead edits the original text, and this module gives
it element offsets to splice at.

The scanner assumes a well-formed document; callers validate with the
hardened parser in :mod:`.xmlio` first.  It tracks namespace declarations so
elements can be matched by ``(namespace, local_name)`` the same way the
parsed tree would resolve them.
"""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
from xml.sax.saxutils import unescape

_START_TAG = re.compile(
    r"<(?P<name>[^\s/>!?]+)"
    r"(?P<attrs>(?:\s+[^\s=/>]+\s*=\s*(?:\"[^\"]*\"|'[^']*'))*)"
    r"\s*(?P<empty>/?)>"
)
_END_TAG = re.compile(r"</(?P<name>[^\s>]+)\s*>")
_ATTRIBUTE = re.compile(
    r"(?P<name>[^\s=/>]+)\s*=\s*(?P<quote>['\"])(?P<value>.*?)(?P=quote)", re.DOTALL
)
_DECLARED_ENCODING = re.compile(
    r"^\s*<\?xml\b[^?>]*\bencoding\s*=\s*(?P<quote>['\"])(?P<encoding>[\w.:-]+)(?P=quote)"
)


@dataclass
class TextElement:
    name: str
    namespace: str
    start: int
    open_end: int
    self_closing: bool
    attributes: Dict[str, str] = field(default_factory=dict)
    scope: Dict[str, str] = field(default_factory=dict, repr=False)
    close_start: int = -1
    end: int = -1
    children: List["TextElement"] = field(default_factory=list, repr=False)

    @property
    def prefix(self) -> str:
        return self.name.split(":", 1)[0] if ":" in self.name else ""

    @property
    def local_name(self) -> str:
        return self.name.split(":", 1)[-1]

    def iter_children(self, namespace: str, local_name: str) -> Iterator["TextElement"]:
        for child in self.children:
            if child.namespace == namespace and child.local_name == local_name:
                yield child

    def find(self, namespace: str, local_name: str) -> Optional["TextElement"]:
        return next(self.iter_children(namespace, local_name), None)


def decode_document(payload: bytes) -> Tuple[str, str]:
    """Return ``(text, codec)`` so that ``text.encode(codec)`` round-trips.

    Byte order marks are kept by choosing the ``-sig``/BOM-writing codecs.
    """

    if payload.startswith(codecs.BOM_UTF8):
        return payload.decode("utf-8-sig"), "utf-8-sig"
    if payload.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return payload.decode("utf-16"), "utf-16"
    encoding = "utf-8"
    match = _DECLARED_ENCODING.match(payload[:256].decode("latin-1"))
    if match:
        try:
            encoding = codecs.lookup(match.group("encoding")).name
        except LookupError:
            encoding = "utf-8"
    return payload.decode(encoding), encoding


def _doctype_end(text: str, start: int) -> int:
    depth = 0
    for index in range(start, len(text)):
        character = text[index]
        if character == "[":
            depth += 1
        elif character == "]" and depth:
            depth -= 1
        elif character == ">" and depth == 0:
            return index + 1
    raise ValueError("unterminated DOCTYPE declaration")


def _skip_markup(text: str, start: int) -> Optional[int]:
    for opener, closer in (("<!--", "-->"), ("<![CDATA[", "]]>"), ("<?", "?>")):
        if text.startswith(opener, start):
            end = text.find(closer, start + len(opener))
            if end < 0:
                raise ValueError(f"unterminated {opener} at offset {start}")
            return end + len(closer)
    if text.startswith("<!", start):
        return _doctype_end(text, start)
    return None


def _open_element(match: "re.Match[str]", parent: Optional[TextElement]) -> TextElement:
    attributes: Dict[str, str] = {}
    for attribute in _ATTRIBUTE.finditer(match.group("attrs") or ""):
        attributes[attribute.group("name")] = unescape(
            attribute.group("value"), {"&quot;": '"', "&apos;": "'"}
        )

    scope = dict(parent.scope) if parent is not None else {}
    for name, value in attributes.items():
        if name == "xmlns":
            scope[""] = value
        elif name.startswith("xmlns:"):
            scope[name[len("xmlns:"):]] = value

    name = match.group("name")
    prefix = name.split(":", 1)[0] if ":" in name else ""
    empty = bool(match.group("empty"))
    element = TextElement(
        name=name,
        namespace=scope.get(prefix, ""),
        start=match.start(),
        open_end=match.end(),
        self_closing=empty,
        attributes=attributes,
        scope=scope,
    )
    if empty:
        element.close_start = match.end()
        element.end = match.end()
    return element


def scan_document(text: str) -> TextElement:
    """Return the root element of ``text`` with offsets for every element."""

    root: Optional[TextElement] = None
    stack: List[TextElement] = []
    position = 0
    while True:
        position = text.find("<", position)
        if position < 0:
            break
        skipped = _skip_markup(text, position)
        if skipped is not None:
            position = skipped
            continue
        if text.startswith("</", position):
            match = _END_TAG.match(text, position)
            if match is None or not stack or stack[-1].name != match.group("name"):
                raise ValueError(f"unexpected end tag at offset {position}")
            element = stack.pop()
            element.close_start = position
            element.end = match.end()
            position = match.end()
            continue
        match = _START_TAG.match(text, position)
        if match is None:
            raise ValueError(f"unreadable start tag at offset {position}")
        element = _open_element(match, stack[-1] if stack else None)
        if stack:
            stack[-1].children.append(element)
        elif root is None:
            root = element
        else:
            raise ValueError("document has more than one root element")
        if not element.self_closing:
            stack.append(element)
        position = match.end()

    if root is None or stack:
        raise ValueError("document has no complete root element")
    return root


def line_indent(text: str, offset: int) -> Optional[str]:
    """Return the whitespace before ``offset`` on its line, or ``None``."""

    line_start = text.rfind("\n", 0, offset) + 1
    prefix = text[line_start:offset]
    if prefix.strip():
        return None
    return prefix
