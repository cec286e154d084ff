# config.py - Reading and writing Git config files
# Copyright (C) 2011-2013 Jelmer Vernooij <jelmer@jelmer.uk>
# Copyright (C) 2026 The loosegit contributors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# loosegit is dual-licensed under the Apache License, Version 2.0 and the GNU
# General Public License as published by the Free Software Foundation; version 2.0
# or (at your option) any later version. You can redistribute it and/or
# modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#

"""Reading and writing Git configuration files.

Todo:
 * preserve formatting when updating configuration files
"""

__all__ = [
    "CaseInsensitiveOrderedDict",
    "Config",
    "ConfigDict",
    "ConfigFile",
    "lower_key",
]

import os
import sys
from collections.abc import Iterator, Mapping, MutableMapping
from typing import IO, TypeVar

from .file import GitFile

Section = tuple[bytes, ...]
SectionLike = bytes | str | tuple[bytes | str, ...]
Name = bytes
NameLike = bytes | str
Value = bytes
ValueLike = bytes | str

K = TypeVar("K", bytes, tuple[bytes, ...])
V = TypeVar("V")


def lower_key(key: K) -> K:
    """Lower-case a variable name, or the section part of a section key.

    Subsection names stay case sensitive.
    """
    if isinstance(key, bytes):
        return key.lower()
    return (key[0].lower(), *key[1:])


class CaseInsensitiveOrderedDict(MutableMapping[K, V]):
    """Ordered mapping whose keys compare without regard to case.

    The spelling used when a key was first set is the one reported back.
    """

    def __init__(self) -> None:
        self._real: dict[K, V] = {}
        self._keys: dict[K, K] = {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({dict(self.items())!r})"

    def __len__(self) -> int:
        return len(self._real)

    def __iter__(self) -> Iterator[K]:
        return iter(self._keys.values())

    def __getitem__(self, key: K) -> V:
        return self._real[lower_key(key)]

    def __setitem__(self, key: K, value: V) -> None:
        lowered = lower_key(key)
        self._keys.setdefault(lowered, key)
        self._real[lowered] = value

    def __delitem__(self, key: K) -> None:
        lowered = lower_key(key)
        del self._real[lowered]
        del self._keys[lowered]


class Config:
    """A Git configuration."""

    def get(self, section: SectionLike, name: NameLike) -> Value:
        """Retrieve the contents of a configuration setting.

        Args:
          section: Tuple with section name and optional subsection name
          name: Variable name
        Returns:
          Contents of the setting
        Raises:
          KeyError: if the value is not set
        """
        raise NotImplementedError(self.get)

    def get_boolean(
        self, section: SectionLike, name: NameLike, default: bool | None = None
    ) -> bool | None:
        """Retrieve a configuration setting as boolean.

        Args:
          section: Tuple with section name and optional subsection name
          name: Name of the setting
          default: Default value if setting is not found
        Returns:
          Contents of the setting
        """
        try:
            value = self.get(section, name)
        except KeyError:
            return default
        if value.lower() in (b"true", b"yes", b"on", b"1"):
            return True
        elif value.lower() in (b"false", b"no", b"off", b"0", b""):
            return False
        raise ValueError(f"not a valid boolean string: {value!r}")

    def get_int(
        self, section: SectionLike, name: NameLike, default: int | None = None
    ) -> int | None:
        """Retrieve a configuration setting as an integer.

        A trailing k, m or g multiplies the value by 1024, 1024**2 or 1024**3.
        """
        try:
            value = self.get(section, name)
        except KeyError:
            return default
        multiplier = _INT_SUFFIXES.get(value[-1:].lower(), 1)
        if multiplier != 1:
            value = value[:-1]
        try:
            return int(value) * multiplier
        except ValueError as exc:
            raise ValueError(f"not a valid integer: {value!r}") from exc

    def set(self, section: SectionLike, name: NameLike, value: ValueLike | bool) -> None:
        """Set a configuration value.

        Args:
          section: Tuple with section name and optional subsection name
          name: Name of the configuration value
          value: value of the setting
        """
        raise NotImplementedError(self.set)

    def items(self, section: SectionLike) -> Iterator[tuple[Name, Value]]:
        """Iterate over the configuration pairs for a specific section."""
        raise NotImplementedError(self.items)

    def sections(self) -> Iterator[Section]:
        """Iterate over the sections.

        Returns: Iterator over section tuples
        """
        raise NotImplementedError(self.sections)

    def has_section(self, name: Section | bytes) -> bool:
        """Check if a specified section exists."""
        if isinstance(name, bytes):
            name = (name,)
        wanted = lower_key(name)
        return any(lower_key(section) == wanted for section in self.sections())


_INT_SUFFIXES = {b"k": 1024, b"m": 1024**2, b"g": 1024**3}


class ConfigDict(Config):
    """Git configuration stored in a dictionary."""

    def __init__(
        self,
        values: Mapping[Section, Mapping[Name, Value]] | None = None,
        encoding: str | None = None,
    ) -> None:
        """Create a new ConfigDict.

        Args:
          values: Optional mapping of sections to their settings
          encoding: Encoding for str section and variable names
        """
        if encoding is None:
            encoding = sys.getdefaultencoding()
        self.encoding = encoding
        self._values: CaseInsensitiveOrderedDict[
            Section, CaseInsensitiveOrderedDict[Name, Value]
        ] = CaseInsensitiveOrderedDict()
        for section, settings in (values or {}).items():
            section_dict = self._values.setdefault(
                section, CaseInsensitiveOrderedDict()
            )
            section_dict.update(settings)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._values!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, self.__class__) and dict(
            (k, dict(v)) for k, v in other._values.items()
        ) == dict((k, dict(v)) for k, v in self._values.items())

    def __getitem__(self, key: Section) -> CaseInsensitiveOrderedDict[Name, Value]:
        return self._values[key]

    def __iter__(self) -> Iterator[Section]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def _check_section_and_name(
        self, section: SectionLike, name: NameLike
    ) -> tuple[Section, Name]:
        if not isinstance(section, tuple):
            section = (section,)

        checked_section = tuple(
            subsection.encode(self.encoding)
            if not isinstance(subsection, bytes)
            else subsection
            for subsection in section
        )

        if not isinstance(name, bytes):
            name = name.encode(self.encoding)

        return checked_section, name

    def get(self, section: SectionLike, name: NameLike) -> Value:
        section, name = self._check_section_and_name(section, name)

        if len(section) > 1:
            try:
                return self._values[section][name]
            except KeyError:
                pass

        return self._values[(section[0],)][name]

    def set(self, section: SectionLike, name: NameLike, value: ValueLike | bool) -> None:
        section, name = self._check_section_and_name(section, name)

        if isinstance(value, bool):
            value = b"true" if value else b"false"

        if not isinstance(value, bytes):
            value = value.encode(self.encoding)

        self._values.setdefault(section, CaseInsensitiveOrderedDict())[name] = value

    def items(self, section: SectionLike) -> Iterator[tuple[Name, Value]]:
        section_bytes, _ = self._check_section_and_name(section, b"")
        section_dict = self._values.get(section_bytes)
        if section_dict is not None:
            return iter(list(section_dict.items()))
        return iter([])

    def sections(self) -> Iterator[Section]:
        return iter(list(self._values))


def _format_string(value: bytes) -> bytes:
    if (
        value.startswith((b" ", b"\t"))
        or value.endswith((b" ", b"\t"))
        or b"#" in value
        or b";" in value
    ):
        return b'"' + _escape_value(value) + b'"'
    return _escape_value(value)


_ESCAPE_TABLE = {
    ord(b"\\"): ord(b"\\"),
    ord(b'"'): ord(b'"'),
    ord(b"n"): ord(b"\n"),
    ord(b"t"): ord(b"\t"),
    ord(b"b"): ord(b"\b"),
}
_COMMENT_CHARS = [ord(b"#"), ord(b";")]
_WHITESPACE_CHARS = [ord(b"\t"), ord(b" ")]


def _parse_string(value: bytes) -> bytes:
    value_array = bytearray(value.strip())
    ret = bytearray()
    whitespace = bytearray()
    in_quotes = False
    i = 0
    while i < len(value_array):
        c = value_array[i]
        if c == ord(b"\\"):
            i += 1
            if i >= len(value_array):
                raise ValueError("escape character at end of value")
            try:
                v = _ESCAPE_TABLE[value_array[i]]
            except KeyError as exc:
                raise ValueError(
                    f"escape character followed by unknown character {value_array[i:i + 1]!r}"
                ) from exc
            ret.extend(whitespace)
            whitespace = bytearray()
            ret.append(v)
        elif c == ord(b'"'):
            in_quotes = not in_quotes
        elif c in _COMMENT_CHARS and not in_quotes:
            # the rest of the line is a comment
            break
        elif c in _WHITESPACE_CHARS and not in_quotes:
            whitespace.append(c)
        else:
            ret.extend(whitespace)
            whitespace = bytearray()
            ret.append(c)
        i += 1

    if in_quotes:
        raise ValueError("missing end quote")

    return bytes(ret)


def _escape_value(value: bytes) -> bytes:
    """Escape a value."""
    value = value.replace(b"\\", b"\\\\")
    value = value.replace(b"\n", b"\\n")
    value = value.replace(b"\t", b"\\t")
    value = value.replace(b'"', b'\\"')
    return value


def _check_variable_name(name: bytes) -> bool:
    if not name[:1].isalpha():
        return False
    return name.replace(b"-", b"").isalnum()


def _check_section_name(name: bytes) -> bool:
    return name.replace(b"-", b"").replace(b".", b"").isalnum()


def _strip_comments(line: bytes) -> bytes:
    string_open = False
    for i, character in enumerate(line):
        # Comment characters outside balanced quotes denote comment start
        if character == ord(b'"'):
            string_open = not string_open
        elif not string_open and character in _COMMENT_CHARS:
            return line[:i]
    return line


def _parse_section_header_line(line: bytes) -> tuple[Section, bytes]:
    # Parse section header ("[bla]")
    line = _strip_comments(line).rstrip()
    in_quotes = False
    escaped = False
    for i, c in enumerate(line):
        if escaped:
            escaped = False
            continue
        if c == ord(b'"'):
            in_quotes = not in_quotes
        if c == ord(b"\\"):
            escaped = True
        if c == ord(b"]") and not in_quotes:
            last = i
            break
    else:
        raise ValueError("expected trailing ]")
    pts = line[1:last].split(b" ", 1)
    line = line[last + 1 :]
    section: Section
    if not _check_section_name(pts[0]):
        raise ValueError(f"invalid section name {pts[0]!r}")
    if len(pts) == 2:
        if pts[1][:1] != b'"' or pts[1][-1:] != b'"' or len(pts[1]) < 2:
            raise ValueError(f"Invalid subsection {pts[1]!r}")
        subsection = pts[1][1:-1].replace(b'\\"', b'"').replace(b"\\\\", b"\\")
        section = (pts[0], subsection)
    else:
        pts = pts[0].split(b".", 1)
        if len(pts) == 2:
            section = (pts[0], pts[1])
        else:
            section = (pts[0],)
    return section, line


class ConfigFile(ConfigDict):
    """A Git configuration file, like .git/config."""

    def __init__(
        self,
        values: Mapping[Section, Mapping[Name, Value]] | None = None,
        encoding: str | None = None,
    ) -> None:
        super().__init__(values=values, encoding=encoding)
        self.path: str | None = None

    @classmethod
    def from_file(cls, f: IO[bytes]) -> "ConfigFile":
        """Read configuration from a file-like object.

        Raises:
          ValueError: if the contents are not a valid configuration
        """
        ret = cls()
        section: Section | None = None
        for lineno, line in enumerate(f.readlines()):
            if lineno == 0 and line.startswith(b"\xef\xbb\xbf"):
                line = line[3:]
            line = line.lstrip()
            if line[:1] == b"[":
                section, line = _parse_section_header_line(line)
                ret._values.setdefault(section, CaseInsensitiveOrderedDict())
            if _strip_comments(line).strip() == b"":
                continue
            if section is None:
                raise ValueError(f"setting {line!r} without section")
            try:
                setting, value = line.split(b"=", 1)
            except ValueError:
                setting = _strip_comments(line)
                value = b"true"
            setting = setting.strip()
            if not _check_variable_name(setting):
                raise ValueError(f"invalid variable name {setting!r}")
            ret._values[section][setting] = _parse_string(value)
        return ret

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> "ConfigFile":
        """Read configuration from a file on disk."""
        abs_path = os.fspath(path)
        with GitFile(abs_path, "rb") as f:
            ret = cls.from_file(f)
        ret.path = abs_path
        return ret

    def write_to_path(self, path: str | os.PathLike[str] | None = None) -> None:
        """Write configuration to a file on disk."""
        if path is None:
            if self.path is None:
                raise ValueError("No path specified and no default path available")
            path = self.path
        with GitFile(path, "wb") as f:
            self.write_to_file(f)

    def write_to_file(self, f: IO[bytes]) -> None:
        """Write configuration to a file-like object."""
        for section, values in self._values.items():
            try:
                section_name, subsection_name = section
            except ValueError:
                (section_name,) = section
                subsection_name = None
            if subsection_name is None:
                f.write(b"[" + section_name + b"]\n")
            else:
                f.write(
                    b"["
                    + section_name
                    + b' "'
                    + subsection_name.replace(b"\\", b"\\\\").replace(b'"', b'\\"')
                    + b'"]\n'
                )
            for key, value in values.items():
                f.write(b"\t" + key + b" = " + _format_string(value) + b"\n")
