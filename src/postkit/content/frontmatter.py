"""Front-matter splitting, parsing and serialization.

A document may open with a block delimited by ``---`` lines::

    ---
    layout: post
    title: "Tips: navigation bars"
    tags:
      - ios
      - uikit
    ---
    Body text...

The block is a flat key/value mapping with optional lists. It is parsed
without a YAML dependency. Anything the parser does not understand makes
the whole input a plain body, so a post never fails to publish because
of its header.
"""

from __future__ import annotations

import logging
import re

from postkit.errors import FrontMatterError

logger = logging.getLogger(__name__)

DELIMITER = "---"
BOM = "\ufeff"

MetadataValue = str | list[str]
Metadata = dict[str, MetadataValue]

_KEY_RE = re.compile(r"^[A-Za-z_][\w.-]*$")
_LIST_ITEM_RE = re.compile(r"^\s*-(?:\s+(.*))?$")

# Scalars YAML would read as something other than a plain string.
_YAML_SPECIAL = {"", "~", "null", "true", "false", "yes", "no", "on", "off"}
_NUMBER_RE = re.compile(r"^[-+]?(\d[\d_]*)?(\.\d+)?([eE][-+]?\d+)?$")
_LEADING_INDICATORS = tuple("[]{}#&*!|>'\"%@`,?:-")
_ESCAPE_RE = re.compile(r"\\(x[0-9A-Fa-f]{2}|.)")
_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\x0b",
    "f": "\x0c",
    "N": "\x85",
    "L": "\u2028",
    "P": "\u2029",
}
# Everything str.splitlines() breaks on must be escaped inside a value.
_LINE_BREAKS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"
_QUOTE_ESCAPES = {"\\": "\\\\", '"': '\\"'}
_QUOTE_ESCAPES.update({char: f"\\{name}" for name, char in _ESCAPES.items() if char != "\t"})
_QUOTE_ESCAPES.update({char: f"\\x{ord(char):02x}" for char in "\x1c\x1d\x1e"})


def _is_delimiter(line: str) -> bool:
    return line.rstrip("\r\n").rstrip() == DELIMITER


def split_front_matter(text: str) -> tuple[str | None, str]:
    """Split raw front matter from the body.

    Returns ``(block, body)`` where ``block`` is the text between the
    delimiters, or ``(None, text)`` when there is no complete block.
    """
    candidate = text[len(BOM):] if text.startswith(BOM) else text
    lines = candidate.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        return None, text

    for index in range(1, len(lines)):
        if _is_delimiter(lines[index]):
            block = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return block, body

    return None, text


def _unescape(match: re.Match[str]) -> str:
    code = match.group(1)
    if len(code) == 3 and code[0] == "x":
        return chr(int(code[1:], 16))
    return _ESCAPES.get(code, code)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _ESCAPE_RE.sub(_unescape, value[1:-1])
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    return value


def _closing_quote(value: str) -> int:
    """Index of the quote that closes ``value[0]``, or -1."""
    quote = value[0]
    index = 1
    while index < len(value):
        char = value[index]
        if quote == '"' and char == "\\":
            index += 2
            continue
        if char == quote:
            if quote == "'" and value[index + 1 : index + 2] == "'":
                index += 2
                continue
            return index
        index += 1
    return -1


def _strip_comment(value: str) -> str:
    """Drop a trailing `` # comment`` from a scalar."""
    if value[:1] in ('"', "'"):
        end = _closing_quote(value)
        if end == -1:
            return value
        rest = value[end + 1 :]
        if rest[:1].isspace() and rest.strip().startswith("#"):
            return value[: end + 1]
        return value
    marker = value.find(" #")
    if marker == -1:
        return value
    return value[:marker].rstrip()


def _split_inline_items(inner: str) -> list[str]:
    """Split on commas that are not inside a quoted item."""
    items: list[str] = []
    start = 0
    index = 0
    while index < len(inner):
        char = inner[index]
        if char in "\"'" and not inner[start:index].strip():
            end = _closing_quote(inner[index:])
            if end != -1:
                index += end + 1
                continue
        if char == ",":
            items.append(inner[start:index])
            start = index + 1
        index += 1
    items.append(inner[start:])
    return items


def _parse_inline_list(value: str) -> list[str]:
    inner = value[1:-1].strip()
    if not inner:
        return []
    return [_unquote(item.strip()) for item in _split_inline_items(inner)]


def parse_block(block: str) -> Metadata:
    """Parse the text between the delimiters into a mapping.

    Raises:
        FrontMatterError: If a line is neither ``key: value`` nor a list item.
    """
    result: Metadata = {}
    current_key: str | None = None

    for number, raw_line in enumerate(block.splitlines(), start=1):
        line = raw_line.rstrip()
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        item = _LIST_ITEM_RE.match(line)
        if item is not None:
            if current_key is None:
                raise FrontMatterError("list item without a key", number)
            current = result[current_key]
            if not isinstance(current, list):
                current = []
                result[current_key] = current
            current.append(_unquote(_strip_comment((item.group(1) or "").strip())))
            continue

        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or line[:1].isspace() or not _KEY_RE.match(key):
            raise FrontMatterError(f"not a key/value pair: {stripped!r}", number)

        value = _strip_comment(value.strip())
        if not value:
            # Either an empty scalar or the header of a block list.
            result[key] = ""
            current_key = key
        elif value.startswith("[") and value.endswith("]"):
            result[key] = _parse_inline_list(value)
            current_key = None
        else:
            result[key] = _unquote(value)
            current_key = None

    return result


def parse_front_matter(text: str) -> tuple[Metadata, str]:
    """Split a document into its metadata mapping and body.

    The body is the exact text after the closing delimiter line. When the
    block is missing or malformed the metadata is empty and the body is
    the entire input.
    """
    block, body = split_front_matter(text)
    if block is None:
        return {}, text

    try:
        metadata = parse_block(block)
    except FrontMatterError as exc:
        logger.debug("Treating document as body-only: %s", exc)
        return {}, text

    return metadata, body


def _needs_quotes(value: str) -> bool:
    if value.lower() in _YAML_SPECIAL or _NUMBER_RE.match(value):
        return True
    if value != value.strip() or value.startswith(_LEADING_INDICATORS):
        return True
    if any(char in _LINE_BREAKS for char in value):
        return True
    return ": " in value or " #" in value or value.endswith(":")


def _quote(value: str) -> str:
    if not _needs_quotes(value):
        return value
    escaped = "".join(_QUOTE_ESCAPES.get(char, char) for char in value)
    return f'"{escaped}"'


def serialize_front_matter(metadata: Metadata) -> str:
    """Render a mapping as a ``---`` delimited block.

    Returns an empty string for an empty mapping.
    """
    if not metadata:
        return ""

    lines: list[str] = [DELIMITER]
    for key, value in metadata.items():
        if isinstance(value, list):
            if not value:
                lines.append(f"{key}: []")
                continue
            lines.append(f"{key}:")
            lines.extend(f"  - {_quote(item)}" for item in value)
        else:
            lines.append(f"{key}: {_quote(value)}")
    lines.append(DELIMITER)
    return "\n".join(lines) + "\n"


def compose_document(metadata: Metadata, body: str) -> str:
    """Join serialized front matter and a body into document text.

    With no metadata, a body that would itself parse as front matter is
    guarded by an empty block so it stays body text.
    """
    if not metadata and parse_front_matter(body) != ({}, body):
        return f"{DELIMITER}\n{DELIMITER}\n{body}"
    return serialize_front_matter(metadata) + body
