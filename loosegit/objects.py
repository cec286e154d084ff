# objects.py -- Access to base git objects
# Copyright (C) 2007 James Westby <jw+debian@jameswestby.net>
# Copyright (C) 2008-2013 Jelmer Vernooij <jelmer@jelmer.uk>
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

"""Access to base git objects.

Digests are kept as 20 raw bytes everywhere in this module. The 40 character
hex form only appears where text is needed: in KVLM fields, in file names and
when presenting objects to a user. ``sha_to_hex`` and ``hex_to_sha`` are the
only places where one is turned into the other.
"""

__all__ = [
    "HEX_LENGTH",
    "MESSAGE_KEY",
    "OBJECT_CLASSES",
    "SHA_LENGTH",
    "Blob",
    "Commit",
    "KVLMObject",
    "ShaFile",
    "Tag",
    "Tree",
    "TreeEntry",
    "compress",
    "decompress",
    "digest",
    "filename_to_hex",
    "format_kvlm",
    "frame",
    "hex_to_sha",
    "object_class",
    "object_header",
    "parse_header",
    "parse_kvlm",
    "parse_mode",
    "parse_tree",
    "pretty_format_tree_entry",
    "serialize_tree",
    "sha_to_filename",
    "sha_to_hex",
    "valid_hexsha",
]

import binascii
import hashlib
import os
import zlib
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import NamedTuple

from .errors import CorruptObjectError, FormatError, UnknownKindError

# Header fields for commits
_TREE_HEADER = "tree"
_PARENT_HEADER = "parent"
_AUTHOR_HEADER = "author"
_COMMITTER_HEADER = "committer"

# Header fields for tags
_OBJECT_HEADER = "object"
_TYPE_HEADER = "type"
_TAG_HEADER = "tag"
_TAGGER_HEADER = "tagger"

# KVLM key that holds the free-form message
MESSAGE_KEY = ""

SHA_LENGTH = 20
HEX_LENGTH = 40


def sha_to_hex(sha: bytes) -> str:
    """Takes a raw digest and returns its hex form."""
    if len(sha) != SHA_LENGTH:
        raise ValueError(f"Incorrect length of raw digest: {len(sha)}")
    return binascii.hexlify(sha).decode("ascii")


def hex_to_sha(hex: str | bytes) -> bytes:
    """Takes a hex digest and returns the raw digest."""
    if isinstance(hex, str):
        hex = hex.encode("ascii")
    if len(hex) != HEX_LENGTH:
        raise ValueError(f"Incorrect length of hexsha: {hex!r}")
    try:
        return binascii.unhexlify(hex)
    except binascii.Error as exc:
        raise ValueError(f"Invalid hexsha: {hex!r}") from exc


def valid_hexsha(hex: str | bytes) -> bool:
    """Check whether a string is a 40 character hex digest."""
    try:
        hex_to_sha(hex)
    except ValueError:
        return False
    return True


def sha_to_filename(path: str | os.PathLike[str], sha: bytes) -> str:
    """Return the loose object path for a digest under a store root."""
    hexsha = sha_to_hex(sha)
    return os.path.join(path, hexsha[:2], hexsha[2:])


def filename_to_hex(filename: str) -> str:
    """Takes an object filename and returns its corresponding hex sha."""
    names = filename.rsplit(os.path.sep, 2)[-2:]
    errmsg = f"Invalid object filename: {filename}"
    if len(names) != 2 or len(names[0]) != 2:
        raise ValueError(errmsg)
    hexsha = names[0] + names[1]
    if not valid_hexsha(hexsha):
        raise ValueError(errmsg)
    return hexsha


def compress(data: bytes, level: int = -1) -> bytes:
    """Deflate a byte string."""
    compobj = zlib.compressobj(level)
    return compobj.compress(data) + compobj.flush()


def decompress(data: bytes) -> bytes:
    """Inflate a complete zlib stream.

    Raises:
      CorruptObjectError: if the stream is malformed, truncated or followed
        by trailing bytes
    """
    dcomp = zlib.decompressobj()
    try:
        dcomped = dcomp.decompress(data)
        dcomped += dcomp.flush()
    except zlib.error as exc:
        raise CorruptObjectError(f"unable to decompress: {exc}") from exc
    if not dcomp.eof:
        raise CorruptObjectError("compressed stream is truncated")
    if dcomp.unused_data:
        raise CorruptObjectError("trailing data after compressed stream")
    return dcomped


def object_header(type_name: bytes, length: int) -> bytes:
    """Return an object header for the given kind and body length."""
    return type_name + b" " + str(length).encode("ascii") + b"\0"


def frame(type_name: bytes, body: bytes) -> bytes:
    """Prefix a body with its object header."""
    return object_header(type_name, len(body)) + body


def digest(framed: bytes) -> bytes:
    """Compute the raw digest of a framed object."""
    return hashlib.sha1(framed).digest()


def parse_header(framed: bytes) -> tuple[bytes, int, int]:
    """Split the header off a framed object.

    Args:
      framed: Header followed by the body
    Returns: Tuple of (kind, declared body length, offset of the body)
    Raises:
      FormatError: if either delimiter is missing or the length is not a
        canonical decimal number
    """
    space = framed.find(b" ")
    if space < 0:
        raise FormatError("object header has no kind/length separator")
    if b"\0" in framed[:space]:
        raise FormatError("object header has no kind/length separator")
    nul = framed.find(b"\0", space + 1)
    if nul < 0:
        raise FormatError("object header is not NUL-terminated")
    size_text = framed[space + 1 : nul]
    if not size_text.isdigit() or (len(size_text) > 1 and size_text[:1] == b"0"):
        raise FormatError(f"invalid object length {size_text!r}")
    return framed[:space], int(size_text), nul + 1


class TreeEntry(NamedTuple):
    """Named tuple encapsulating a single tree entry."""

    mode: bytes
    path: bytes
    sha: bytes


def _check_tree_entry(mode: bytes, path: bytes, sha: bytes) -> None:
    if len(mode) not in (5, 6) or not mode.isdigit():
        raise FormatError(f"invalid tree entry mode {mode!r}")
    if b"\0" in path:
        raise FormatError(f"tree entry path contains NUL: {path!r}")
    if len(sha) != SHA_LENGTH:
        raise FormatError(f"tree entry digest has {len(sha)} bytes")


def parse_tree(text: bytes) -> Iterator[TreeEntry]:
    """Parse a tree body.

    Args:
      text: Serialized tree body
    Returns: iterator of TreeEntry, in the order they are stored
    Raises:
      FormatError: if an entry is malformed or cut short
    """
    count = 0
    length = len(text)
    while count < length:
        mode_end = text.find(b" ", count)
        if mode_end < 0:
            raise FormatError("tree entry has no mode separator")
        mode = text[count:mode_end]
        if len(mode) not in (5, 6) or not mode.isdigit():
            raise FormatError(f"invalid tree entry mode {mode!r}")
        name_end = text.find(b"\0", mode_end + 1)
        if name_end < 0:
            raise FormatError("tree entry path is not NUL-terminated")
        count = name_end + 1 + SHA_LENGTH
        if count > length:
            raise FormatError("tree entry digest is truncated")
        yield TreeEntry(mode, text[mode_end + 1 : name_end], text[name_end + 1 : count])


def serialize_tree(items: Iterable[TreeEntry]) -> Iterator[bytes]:
    """Serialize tree entries, keeping their order.

    Args:
      items: Iterable over TreeEntry
    Returns: Serialized tree body as chunks
    """
    for mode, path, sha in items:
        _check_tree_entry(mode, path, sha)
        yield mode + b" " + path + b"\0" + sha


def parse_mode(mode: bytes) -> int:
    """Interpret a tree entry mode as an integer file mode."""
    try:
        return int(mode, 8)
    except ValueError as exc:
        raise FormatError(f"invalid tree entry mode {mode!r}") from exc


def pretty_format_tree_entry(entry: TreeEntry, kind: bytes | str) -> str:
    """Format a tree entry the way ls-tree prints it.

    Args:
      entry: The tree entry
      kind: Kind of the object the entry points at
    Returns: String describing the tree entry, newline terminated
    """
    if isinstance(kind, bytes):
        kind = kind.decode("ascii")
    return "{} {} {}\t{}\n".format(
        entry.mode.decode("ascii").rjust(6, "0"),
        kind,
        sha_to_hex(entry.sha),
        entry.path.decode("utf-8", "replace"),
    )


def _decode_kvlm(text: bytes, what: str) -> str:
    try:
        return text.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"{what} is not valid UTF-8: {exc}") from exc


def _encode_kvlm(text: str, what: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise FormatError(f"{what} cannot be encoded as UTF-8: {exc}") from exc


def parse_kvlm(text: bytes) -> dict[str, list[str]]:
    """Parse a key-value list with message.

    Field lines look like ``key SP value NEWLINE``; a value carries on over
    following lines that start with a single space. An empty line ends the
    fields and everything after it is the message, stored under
    ``MESSAGE_KEY``.

    Args:
      text: Commit or tag body
    Returns: Mapping of key to the list of its values, in first-seen order
    Raises:
      FormatError: if a line is malformed or the text is not UTF-8
    """
    kvlm: dict[str, list[str]] = {}
    pos = 0
    length = len(text)
    while pos < length:
        space = text.find(b" ", pos)
        newline = text.find(b"\n", pos)
        if space < 0 or 0 <= newline < space:
            if newline != pos:
                raise FormatError(f"field line without a value at offset {pos}")
            kvlm[MESSAGE_KEY] = [_decode_kvlm(text[pos + 1 :], "message")]
            return kvlm
        if space == pos:
            raise FormatError(f"field line without a key at offset {pos}")
        end = newline
        while end >= 0 and text[end + 1 : end + 2] == b" ":
            end = text.find(b"\n", end + 1)
        if end < 0:
            raise FormatError(f"field at offset {pos} is not newline-terminated")
        key = _decode_kvlm(text[pos:space], "field name")
        value = _decode_kvlm(text[space + 1 : end].replace(b"\n ", b"\n"), key)
        kvlm.setdefault(key, []).append(value)
        pos = end + 1
    if kvlm:
        raise FormatError("missing blank line after fields")
    return kvlm


def format_kvlm(kvlm: Mapping[str, Sequence[str]]) -> bytes:
    """Serialize a key-value list with message.

    Args:
      kvlm: Mapping of key to values; ``MESSAGE_KEY`` holds the message
    Returns: Serialized body
    """
    if not kvlm:
        return b""
    chunks = []
    for key, values in kvlm.items():
        if key == MESSAGE_KEY:
            continue
        if " " in key or "\n" in key:
            raise FormatError(f"invalid field name {key!r}")
        name = _encode_kvlm(key, "field name")
        for value in values:
            chunks.append(
                name
                + b" "
                + _encode_kvlm(value, key).replace(b"\n", b"\n ")
                + b"\n"
            )
    chunks.append(b"\n")
    message = kvlm.get(MESSAGE_KEY)
    if message is not None:
        if len(message) != 1:
            raise FormatError(f"message must be a single value, got {len(message)}")
        chunks.append(_encode_kvlm(message[0], "message"))
    return b"".join(chunks)


def _hex_field_to_sha(value: str | None, field: str) -> bytes:
    if value is None:
        raise FormatError(f"missing {field} field")
    try:
        return hex_to_sha(value)
    except ValueError as exc:
        raise FormatError(f"{field} field is not a digest: {value!r}") from exc


class ShaFile:
    """A git SHA file."""

    type_name: bytes

    @staticmethod
    def from_raw_string(type_name: bytes, string: bytes) -> "ShaFile":
        """Creates an object of the indicated kind from the raw body given.

        Args:
          type_name: The kind of the object.
          string: The raw uncompressed body.
        Raises:
          UnknownKindError: if type_name is not a known kind
          FormatError: if the body does not follow the kind's grammar
        """
        cls = object_class(type_name)
        if cls is None:
            raise UnknownKindError(type_name)
        obj = cls()
        obj.set_raw_string(string)
        return obj

    @staticmethod
    def from_framed_string(framed: bytes, sha: bytes | None = None) -> "ShaFile":
        """Create an object from a header followed by its body.

        Args:
          framed: Uncompressed object file contents
          sha: Digest the contents were stored under, for error messages
        """
        type_name, size, start = parse_header(framed)
        actual = len(framed) - start
        if size != actual:
            raise CorruptObjectError(
                f"header declares {size} bytes but the body has {actual}", sha
            )
        return ShaFile.from_raw_string(type_name, framed[start:])

    @classmethod
    def from_string(cls, string: bytes) -> "ShaFile":
        """Create a ShaFile of this kind from its body."""
        obj = cls()
        obj.set_raw_string(string)
        return obj

    def set_raw_string(self, text: bytes) -> None:
        """Set the contents of this object from its serialized body."""
        if not isinstance(text, bytes):
            raise TypeError(f"Expected bytes for text, got {text!r}")
        self._deserialize(text)

    def _deserialize(self, text: bytes) -> None:
        raise NotImplementedError(self._deserialize)

    def _serialize(self) -> bytes:
        raise NotImplementedError(self._serialize)

    def as_raw_string(self) -> bytes:
        """Return the serialized body of this object."""
        return self._serialize()

    def raw_length(self) -> int:
        """Returns the length of the serialized body of this object."""
        return len(self.as_raw_string())

    def as_framed_string(self) -> bytes:
        """Return the header followed by the body."""
        return frame(self.type_name, self.as_raw_string())

    def as_legacy_object(self, compression_level: int = -1) -> bytes:
        """Return the compressed form used for loose object files."""
        return compress(self.as_framed_string(), compression_level)

    @property
    def digest(self) -> bytes:
        """The raw digest that addresses this object."""
        return digest(self.as_framed_string())

    @property
    def id(self) -> str:
        """The hex digest of this object."""
        return sha_to_hex(self.digest)

    def copy(self) -> "ShaFile":
        """Create a new copy of this object."""
        return ShaFile.from_raw_string(self.type_name, self.as_raw_string())

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.id}>"

    def __hash__(self) -> int:
        return hash(self.digest)

    def __eq__(self, other: object) -> bool:
        """Return true if the digests of the two objects match."""
        return isinstance(other, ShaFile) and self.digest == other.digest


class Blob(ShaFile):
    """A Git Blob object."""

    type_name = b"blob"

    def __init__(self) -> None:
        self._data = b""

    def _deserialize(self, text: bytes) -> None:
        self._data = text

    def _serialize(self) -> bytes:
        return self._data

    def _get_data(self) -> bytes:
        return self._data

    def _set_data(self, data: bytes) -> None:
        self.set_raw_string(data)

    data = property(
        _get_data, _set_data, doc="The contents of the blob object as a string."
    )


class Tree(ShaFile):
    """A Git tree object.

    Entries are kept in the order they were added or parsed in; the tree
    never sorts them.
    """

    type_name = b"tree"

    def __init__(self) -> None:
        self._entries: list[TreeEntry] = []

    def _deserialize(self, text: bytes) -> None:
        self._entries = list(parse_tree(text))

    def _serialize(self) -> bytes:
        return b"".join(serialize_tree(self._entries))

    def add(self, mode: bytes, path: bytes, sha: bytes) -> None:
        """Append an entry to the tree.

        Args:
          mode: Mode as 5 or 6 ASCII digits, e.g. b"100644" or b"40000"
          path: Name of the entry, without NUL bytes
          sha: Raw digest of the object the entry points at
        """
        _check_tree_entry(mode, path, sha)
        self._entries.append(TreeEntry(mode, path, sha))

    def entries(self) -> list[TreeEntry]:
        """Return a list of the tree entries."""
        return list(self._entries)

    def lookup(self, path: bytes) -> TreeEntry:
        """Find the first entry with the given name.

        Raises:
          KeyError: if no entry has that name
        """
        for entry in self._entries:
            if entry.path == path:
                return entry
        raise KeyError(path)

    def __iter__(self) -> Iterator[TreeEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _kvlm_property(key: str, docstring: str | None = None) -> property:
    def get(obj: "KVLMObject") -> str | None:
        return obj._get_single(key)

    def set(obj: "KVLMObject", value: str | None) -> None:
        obj._set_single(key, value)

    return property(get, set, doc=docstring)


class KVLMObject(ShaFile):
    """Base class for the objects whose body is a key-value list with message."""

    def __init__(self) -> None:
        self._kvlm: dict[str, list[str]] = {}

    def _deserialize(self, text: bytes) -> None:
        self._kvlm = parse_kvlm(text)

    def _serialize(self) -> bytes:
        return format_kvlm(self._kvlm)

    @property
    def kvlm(self) -> dict[str, list[str]]:
        """The parsed fields, including the message under MESSAGE_KEY."""
        return self._kvlm

    def get_values(self, key: str) -> list[str]:
        """Return all values of a field, in order."""
        return list(self._kvlm.get(key, []))

    def _get_single(self, key: str) -> str | None:
        values = self._kvlm.get(key)
        if not values:
            return None
        return values[0]

    def _set_single(self, key: str, value: str | None) -> None:
        if value is None:
            self._kvlm.pop(key, None)
        else:
            self._kvlm[key] = [value]

    def _get_message(self) -> str:
        return self._get_single(MESSAGE_KEY) or ""

    def _set_message(self, value: str) -> None:
        self._kvlm[MESSAGE_KEY] = [value]

    message = property(_get_message, _set_message, doc="The free-form message")


class Commit(KVLMObject):
    """A git commit object."""

    type_name = b"commit"

    tree = _kvlm_property(_TREE_HEADER, "Hex digest of the tree of this commit")
    author = _kvlm_property(_AUTHOR_HEADER, "The author line of the commit")
    committer = _kvlm_property(_COMMITTER_HEADER, "The committer line of the commit")

    def _get_parents(self) -> list[str]:
        """Return a list of parents of this commit."""
        return self.get_values(_PARENT_HEADER)

    def _set_parents(self, value: Sequence[str]) -> None:
        """Set a list of parents of this commit."""
        if value:
            self._kvlm[_PARENT_HEADER] = list(value)
        else:
            self._kvlm.pop(_PARENT_HEADER, None)

    parents = property(_get_parents, _set_parents)

    @property
    def tree_digest(self) -> bytes:
        """Raw digest of the tree of this commit."""
        return _hex_field_to_sha(self.tree, _TREE_HEADER)

    @property
    def parent_digests(self) -> list[bytes]:
        """Raw digests of the parents of this commit, in order."""
        return [_hex_field_to_sha(p, _PARENT_HEADER) for p in self.parents]


class Tag(KVLMObject):
    """A Git Tag object."""

    type_name = b"tag"

    object = _kvlm_property(_OBJECT_HEADER, "Hex digest of the tagged object")
    tag_type = _kvlm_property(_TYPE_HEADER, "Kind of the tagged object")
    name = _kvlm_property(_TAG_HEADER, "The name of this tag")
    tagger = _kvlm_property(_TAGGER_HEADER, "The person who created this tag")

    @property
    def object_digest(self) -> bytes:
        """Raw digest of the tagged object."""
        return _hex_field_to_sha(self.object, _OBJECT_HEADER)


OBJECT_CLASSES: tuple[type[ShaFile], ...] = (
    Commit,
    Tree,
    Blob,
    Tag,
)

_TYPE_MAP: dict[bytes | str, type[ShaFile]] = {}

for cls in OBJECT_CLASSES:
    _TYPE_MAP[cls.type_name] = cls
    _TYPE_MAP[cls.type_name.decode("ascii")] = cls


def object_class(type_name: bytes | str) -> type[ShaFile] | None:
    """Get the object class corresponding to the given kind.

    Args:
      type_name: A kind name, as bytes or str
    Returns: The ShaFile subclass for that kind, or None if it is unknown
    """
    return _TYPE_MAP.get(type_name)
