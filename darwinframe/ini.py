"""Reading and writing settings in INI files.

Sections and keys are matched without regard to ASCII case. Keys may be
separated from their values by ``=`` or ``:``; lines starting with ``;`` or
``#`` are comments, and an unquoted ``;`` or ``#`` starts a trailing comment.
Values holding comment characters, quotes or trailing spaces are written in
double quotes with embedded quotes escaped as ``\\"``.

Writing rewrites the file through a temporary file whose name is the target
name with its last character replaced by ``~``. Blank lines are dropped on
rewrite, except for one blank line kept before each section header.
"""

from __future__ import annotations

import os
import re
from typing import Iterable, Iterator, Optional, Union

PathLike = Union[str, "os.PathLike[str]"]

_BUFFER_SIZE = 512
_NUMBER_BUFFER_SIZE = 64
_LINE_TERM = "\n"
_ENCODING = "utf-8"

_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)

# Every character whose code is at or below the space is treated as blank.
_BLANKS = "".join(chr(code) for code in range(33))
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


def _skip_leading(text: str) -> str:
    return text.lstrip(_BLANKS)


def _skip_trailing(text: str) -> str:
    return text.rstrip(_BLANKS)


def _same_name(a: str, b: str) -> bool:
    return len(a) == len(b) and a.translate(_ASCII_LOWER) == b.translate(_ASCII_LOWER)


def _separator(line: str) -> int:
    pos = line.find("=")
    return pos if pos >= 0 else line.find(":")


def _header_name(line: str) -> Optional[str]:
    """The name inside a ``[...]`` header, or None if the line is not one."""
    if not line.startswith("["):
        return None
    close = line.find("]")
    if close < 0:
        return None
    return line[1:close]


def _copy_plain(text: str, size: int) -> str:
    return text[: size - 1]


def _copy_enquoted(text: str, size: int) -> str:
    if size < 3:
        return _copy_plain(text, size)
    out = ['"']
    length = 1
    for char in text:
        if length >= size - 2:
            break
        if char == '"':
            if length >= size - 3:
                break
            out.append("\\")
            length += 1
        out.append(char)
        length += 1
    out.append('"')
    return "".join(out)


def _copy_dequoted(text: str, size: int) -> str:
    out = []
    pos = 0
    while pos < len(text) and len(out) < size - 1:
        char = text[pos]
        if char in '"\\' and text[pos + 1 : pos + 2] == '"':
            pos += 1
            char = text[pos]
        out.append(char)
        pos += 1
    return "".join(out)


def _strip_comment(value: str) -> str:
    in_string = False
    pos = 0
    while pos < len(value):
        char = value[pos]
        if char in ";#" and not in_string:
            break
        if char == '"':
            if value[pos + 1 : pos + 2] == '"':
                pos += 1
            else:
                in_string = not in_string
        elif char == "\\" and value[pos + 1 : pos + 2] == '"':
            pos += 1
        pos += 1
    return value[:pos]


def _needs_quotes(value: str) -> bool:
    return any(char in value for char in '";#') or value.endswith(" ")


def _read_lines(path: str) -> list[str]:
    with open(path, "r", encoding=_ENCODING, newline="") as handle:
        return handle.readlines()


def _lookup(
    lines: Iterable[str],
    section: Optional[str],
    key: Optional[str],
    size: int,
    section_index: int = -1,
    key_index: int = -1,
) -> Optional[str]:
    """Find a value, a section name or a key name; None when there is none."""
    rows: Iterator[str] = iter(lines)
    wanted_section = section or ""

    if wanted_section or section_index >= 0:
        index = -1
        for line in rows:
            name = _header_name(_skip_leading(line))
            if name is None:
                continue
            if _same_name(name, wanted_section):
                break
            index += 1
            if index == section_index:
                break
        else:
            return None
        if section_index >= 0:
            return _copy_plain(name, size) if index == section_index else None

    wanted_key = key or ""
    index = -1
    for line in rows:
        text = _skip_leading(line)
        if text.startswith("["):
            return None
        if text.startswith((";", "#")):
            continue
        sep = _separator(text)
        if sep < 0:
            continue
        name = _skip_trailing(text[:sep])
        if _same_name(name, wanted_key):
            break
        index += 1
        if index == key_index:
            break
    else:
        return None
    if key_index >= 0:
        return _copy_plain(name, size) if index == key_index else None

    value = _skip_trailing(_strip_comment(_skip_leading(text[sep + 1 :])))
    if value.startswith('"') and value.endswith('"'):
        return _copy_dequoted(value[1:-1], size)
    return _copy_plain(value, size)


def _read_value(
    section: Optional[str], key: str, filename: PathLike, size: int
) -> Optional[str]:
    try:
        lines = _read_lines(os.fspath(filename))
    except OSError:
        return None
    return _lookup(lines, section, key, size)


def get_string(
    section: Optional[str], key: str, default: str, filename: PathLike
) -> str:
    """The value of ``key`` in ``section``, or ``default`` when it is absent.

    A ``section`` of None or "" looks at the keys above the first section.
    """
    value = _read_value(section, key, filename, _BUFFER_SIZE)
    return _copy_plain(default, _BUFFER_SIZE) if value is None else value


def get_int(
    section: Optional[str], key: str, default: int, filename: PathLike
) -> int:
    """The leading integer of a value; ``default`` when the value is absent or empty.

    A value that does not start with digits reads as 0.
    """
    value = _read_value(section, key, filename, _NUMBER_BUFFER_SIZE)
    if not value:
        return default
    match = _INT_PREFIX.match(value)
    if match is None:
        return 0
    return max(_LONG_MIN, min(_LONG_MAX, int(match.group(1))))


def get_float(
    section: Optional[str], key: str, default: float, filename: PathLike
) -> float:
    """The leading number of a value; ``default`` when the value is absent or empty.

    A value that does not start with a number reads as 0.0.
    """
    value = _read_value(section, key, filename, _NUMBER_BUFFER_SIZE)
    if not value:
        return default
    match = _FLOAT_PREFIX.match(value)
    return float(match.group(1)) if match else 0.0


def get_section(index: int, filename: PathLike) -> str:
    """The name of the section at zero-based ``index``, or "" if there is none."""
    if index < 0:
        return ""
    try:
        lines = _read_lines(os.fspath(filename))
    except OSError:
        return ""
    name = _lookup(lines, None, None, _BUFFER_SIZE, section_index=index)
    return name or ""


def get_key(section: Optional[str], index: int, filename: PathLike) -> str:
    """The name of the key at zero-based ``index`` in ``section``, or "" if there is none."""
    if index < 0:
        return ""
    try:
        lines = _read_lines(os.fspath(filename))
    except OSError:
        return ""
    name = _lookup(lines, section, None, _BUFFER_SIZE, key_index=index)
    return name or ""


def _section_line(section: Optional[str]) -> str:
    if not section:
        return ""
    return "[" + _copy_plain(section, _BUFFER_SIZE - 4) + "]" + _LINE_TERM


def _key_line(key: str, value: str) -> str:
    name = _copy_plain(key, _BUFFER_SIZE - 3)
    room = _BUFFER_SIZE - (len(name) + 1) - 2
    copy = _copy_enquoted if _needs_quotes(value) else _copy_plain
    return name + "=" + copy(value, room) + _LINE_TERM


def _quoted(value: str) -> str:
    if not _needs_quotes(value):
        return value
    return '"' + value.replace('"', '\\"') + '"'


def _temp_name(path: str) -> str:
    name = _copy_plain(path, _BUFFER_SIZE)
    return name[:-1] + "~"


def _commit(path: str, parts: list[str]) -> None:
    temp = _temp_name(path)
    with open(temp, "w", encoding=_ENCODING, newline="") as handle:
        handle.write("".join(parts))
    os.replace(temp, path)


def put_string(
    section: Optional[str],
    key: Optional[str],
    value: Optional[str],
    filename: PathLike,
) -> None:
    """Set ``key`` in ``section`` to ``value``, creating the file if needed.

    A ``value`` of None removes the key; a ``key`` of None removes every key
    of the section together with its header. Raises OSError when the file
    cannot be written.
    """
    path = os.fspath(filename)
    storing = key is not None and value is not None
    try:
        lines = _read_lines(path)
    except OSError:
        if storing:
            with open(path, "w", encoding=_ENCODING, newline="") as handle:
                handle.write(_section_line(section) + _key_line(key, value))
        return

    if storing and _lookup(lines, section, key, _BUFFER_SIZE) == value:
        return

    out: list[str] = []
    rows = iter(lines)

    if section:
        count = 0
        for line in rows:
            text = _skip_leading(line)
            name = _header_name(text)
            match = name is not None and _same_name(name, section)
            if (not match or key is not None) and text:
                if text.startswith("[") and count > 0:
                    out.append(_LINE_TERM)
                out.append(text)
                count += 1
            if match:
                break
        else:
            if storing:
                out.extend((_LINE_TERM, _section_line(section), _key_line(key, value)))
            _commit(path, out)
            return

    text = ""
    for line in rows:
        text = _skip_leading(line)
        sep = _separator(text)
        match = (
            key is not None
            and sep >= 0
            and _same_name(_skip_trailing(text[:sep]), key)
        )
        if match or text.startswith("["):
            break
        if key is not None and text:
            out.append(text)
    else:
        if storing:
            out.extend((_LINE_TERM, _key_line(key, value)))
        _commit(path, out)
        return

    if text.startswith("["):
        if storing:
            out.extend((key, "=", _quoted(value), _LINE_TERM + _LINE_TERM))
        out.append(text)
    elif storing:
        out.append(_key_line(key, value))

    for line in rows:
        text = _skip_leading(line)
        if text:
            if text.startswith("["):
                out.append(_LINE_TERM)
            out.append(text)
    _commit(path, out)


def put_int(
    section: Optional[str], key: Optional[str], value: int, filename: PathLike
) -> None:
    """Store an integer as its decimal text."""
    put_string(section, key, str(int(value)), filename)


def put_float(
    section: Optional[str], key: Optional[str], value: float, filename: PathLike
) -> None:
    """Store a number with six decimals."""
    put_string(section, key, "%f" % value, filename)