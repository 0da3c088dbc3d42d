"""Resolution of import specs and the local names they introduce."""

import re
from enum import Enum

from ..source.models import ImportSpec, SourceFile

BLANK_NAME = "_"
DOT_NAME = "."


class ImportMode(str, Enum):
    """How an import makes its package available in a file."""

    NAMED = "named"  # explicit alias
    GUESSED = "guessed"  # no alias, last path segment assumed
    BLANK = "blank"  # import _ "path"
    DOT = "dot"  # import . "path"


_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}

_ESCAPE = re.compile(
    r"\\(?:(?P<simple>[abfnrtv\\\"])"
    r"|x(?P<hex>[0-9a-fA-F]{2})"
    r"|(?P<octal>[0-7]{3})"
    r"|u(?P<u4>[0-9a-fA-F]{4})"
    r"|U(?P<u8>[0-9a-fA-F]{8}))"
)


def unquote(literal: str) -> str | None:
    """Decode a Go string literal, or return None if it is malformed."""
    if len(literal) < 2:
        return None

    quote = literal[0]
    if quote != literal[-1]:
        return None
    body = literal[1:-1]

    if quote == "`":
        if "`" in body:
            return None
        return body.replace("\r", "")

    if quote != '"' or "\n" in body:
        return None

    parts: list[str] = []
    pos = 0
    while True:
        backslash = body.find("\\", pos)
        if backslash == -1:
            tail = body[pos:]
            if '"' in tail:
                return None
            parts.append(tail)
            break

        chunk = body[pos:backslash]
        if '"' in chunk:
            return None
        parts.append(chunk)

        match = _ESCAPE.match(body, backslash)
        if match is None:
            return None
        if match.group("simple"):
            parts.append(_SIMPLE_ESCAPES[match.group("simple")])
        elif match.group("hex"):
            parts.append(chr(int(match.group("hex"), 16)))
        elif match.group("octal"):
            value = int(match.group("octal"), 8)
            if value > 255:
                return None
            parts.append(chr(value))
        else:
            value = int(match.group("u4") or match.group("u8"), 16)
            if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                return None
            parts.append(chr(value))
        pos = match.end()

    return "".join(parts)


def import_path(spec: ImportSpec) -> str:
    """Unquoted import path of spec, or "" if the literal is malformed."""
    return unquote(spec.path_literal) or ""


def resolve_imports(source_file: SourceFile, path: str) -> list[ImportSpec]:
    """All import specs of a file importing path, in source order."""
    return [spec for spec in source_file.imports if unquote(spec.path_literal) == path]


def effective_qualifier(spec: ImportSpec) -> tuple[str | None, ImportMode]:
    """Name used in the file to refer to the imported package.

    Without an alias the last path segment is used. That is a guess: the
    package may declare a different name.
    """
    if spec.name == BLANK_NAME:
        return None, ImportMode.BLANK
    if spec.name == DOT_NAME:
        return None, ImportMode.DOT
    if spec.name:
        return spec.name, ImportMode.NAMED

    path = import_path(spec)
    return path.rsplit("/", 1)[-1], ImportMode.GUESSED
