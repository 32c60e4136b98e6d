"""An INI file bound to one path, with typed getters and a single ``put``."""

from __future__ import annotations

import os
from typing import Optional, Union

from darwinframe import ini

PathLike = Union[str, "os.PathLike[str]"]


class IniFile:
    """Settings stored in one INI file on disk.

    Every call reads or rewrites the file, so changes made by other writers
    are seen immediately.
    """

    def __init__(self, filename: PathLike) -> None:
        self.filename = os.fspath(filename)

    def __repr__(self) -> str:
        return f"IniFile({self.filename!r})"

    def get_float(self, section: Optional[str], key: str, default: float = 0.0) -> float:
        """The number stored under ``key``, or ``default`` when it is absent."""
        return ini.get_float(section, key, default, self.filename)

    def get_int(self, section: Optional[str], key: str, default: int = 0) -> int:
        """The integer stored under ``key``, or ``default`` when it is absent."""
        return ini.get_int(section, key, default, self.filename)

    def get_string(self, section: Optional[str], key: str, default: str = "") -> str:
        """The text stored under ``key``, or ``default`` when it is absent."""
        return ini.get_string(section, key, default, self.filename)

    def get_section(self, index: int) -> str:
        """The name of the section at zero-based ``index``, or "" if there is none."""
        return ini.get_section(index, self.filename)

    def get_key(self, section: Optional[str], index: int) -> str:
        """The name of the key at zero-based ``index`` in ``section``, or ""."""
        return ini.get_key(section, index, self.filename)

    def put(self, section: Optional[str], key: str, value: Union[str, int, float]) -> None:
        """Store ``value`` under ``key``; integers as decimals, floats with six decimals.

        Raises TypeError for other value types and OSError when the file
        cannot be written.
        """
        if isinstance(value, str):
            ini.put_string(section, key, value, self.filename)
        elif isinstance(value, int):
            ini.put_int(section, key, value, self.filename)
        elif isinstance(value, float):
            ini.put_float(section, key, value, self.filename)
        else:
            raise TypeError(f"cannot store a value of type {type(value).__name__}")

    def delete(self, section: Optional[str], key: Optional[str] = None) -> None:
        """Remove ``key`` from ``section``, or the whole section when ``key`` is None."""
        ini.put_string(section, key, None, self.filename)