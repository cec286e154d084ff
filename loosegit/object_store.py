# object_store.py -- Object store for git objects
# Copyright (C) 2008-2013 Jelmer Vernooij <jelmer@jelmer.uk>
#                         and others
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

"""Git-style loose object store that lives on disk."""

__all__ = [
    "DiskObjectStore",
]

import logging
import os
import tempfile
from collections.abc import Iterator

from .errors import CorruptObjectError, NotFoundError
from .file import FileLocked, GitFile
from .objects import (
    SHA_LENGTH,
    ShaFile,
    compress,
    decompress,
    digest,
    filename_to_hex,
    frame,
    hex_to_sha,
    parse_header,
    sha_to_filename,
    sha_to_hex,
)

logger = logging.getLogger(__name__)

# Loose object files are never modified once written
OBJECT_MODE = 0o444


def _check_sha(sha: bytes) -> None:
    if not isinstance(sha, bytes) or len(sha) != SHA_LENGTH:
        raise ValueError(f"Expected a {SHA_LENGTH} byte raw digest, got {sha!r}")


class DiskObjectStore:
    """Git-style object store that exists on disk.

    Objects live in ``<path>/<first two hex digits>/<remaining 38>`` as
    zlib-compressed framed buffers. All methods take raw 20 byte digests.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        loose_compression_level: int = -1,
        fsync_object_files: bool = False,
    ) -> None:
        """Open an object store.

        Args:
          path: Path of the object store.
          loose_compression_level: zlib compression level for loose objects
          fsync_object_files: whether to fsync object files for durability
        """
        self.path = path
        self.loose_compression_level = loose_compression_level
        self.fsync_object_files = fsync_object_files

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.path!r})>"

    def _get_shafile_path(self, sha: bytes) -> str:
        _check_sha(sha)
        return sha_to_filename(os.fspath(self.path), sha)

    def contains_loose(self, sha: bytes) -> bool:
        """Check if a particular object is present by digest."""
        return os.path.exists(self._get_shafile_path(sha))

    def __contains__(self, sha: bytes) -> bool:
        return self.contains_loose(sha)

    def __iter__(self) -> Iterator[bytes]:
        """Iterate over the digests of all stored objects."""
        for base in sorted(os.listdir(self.path)):
            if len(base) != 2:
                continue
            for rest in sorted(os.listdir(os.path.join(self.path, base))):
                try:
                    hexsha = filename_to_hex(os.path.join(base, rest))
                except ValueError:
                    # Lock files and other strays
                    continue
                yield hex_to_sha(hexsha)

    def iter_prefix(self, prefix: str) -> Iterator[bytes]:
        """Iterate over the digests of all objects whose hex starts with prefix.

        Args:
          prefix: Hex prefix, at least two characters long
        """
        prefix = prefix.lower()
        if len(prefix) < 2:
            for sha in self:
                if sha_to_hex(sha).startswith(prefix):
                    yield sha
            return
        dir = prefix[:2]
        rest = prefix[2:]
        try:
            names = sorted(os.listdir(os.path.join(self.path, dir)))
        except FileNotFoundError:
            return
        for name in names:
            if not name.startswith(rest):
                continue
            try:
                yield hex_to_sha(dir + name)
            except ValueError:
                continue

    def get_raw(self, sha: bytes) -> tuple[bytes, bytes]:
        """Obtain the raw kind and body of an object.

        Args:
          sha: Raw digest of the object
        Returns: tuple with kind and body
        Raises:
          NotFoundError: if there is no object file for sha
          CorruptObjectError: if the file does not decompress or its header
            disagrees with the body length
          FormatError: if the header itself is malformed
        """
        path = self._get_shafile_path(sha)
        try:
            with GitFile(path, "rb") as f:
                compressed = f.read()
        except FileNotFoundError as exc:
            raise NotFoundError(sha) from exc
        try:
            framed = decompress(compressed)
        except CorruptObjectError as exc:
            raise CorruptObjectError(str(exc), sha) from exc
        type_name, size, start = parse_header(framed)
        actual = len(framed) - start
        if size != actual:
            raise CorruptObjectError(
                f"header declares {size} bytes but the body has {actual}", sha
            )
        return type_name, framed[start:]

    def read(self, sha: bytes) -> ShaFile:
        """Obtain an object.

        Args:
          sha: Raw digest of the object
        Returns: A ShaFile subclass instance
        Raises:
          NotFoundError: if there is no object file for sha
          UnknownKindError: if the header names an unknown kind
          FormatError: if the body does not follow its kind's grammar
        """
        type_name, body = self.get_raw(sha)
        return ShaFile.from_raw_string(type_name, body)

    def __getitem__(self, sha: bytes) -> ShaFile:
        return self.read(sha)

    def write(self, obj: ShaFile, persist: bool = True) -> bytes:
        """Add a single object to this object store.

        Args:
          obj: Object to add
          persist: If false, only compute the digest
        Returns: the raw digest of the object
        """
        framed = frame(obj.type_name, obj.as_raw_string())
        sha = digest(framed)
        if not persist:
            return sha
        path = self._get_shafile_path(sha)
        if os.path.exists(path):
            return sha  # Already there, no need to write again
        data = compress(framed, self.loose_compression_level)
        dir = os.path.dirname(path)
        try:
            os.mkdir(dir)
        except FileExistsError:
            pass
        try:
            with GitFile(
                path, "wb", mask=OBJECT_MODE, fsync=self.fsync_object_files
            ) as f:
                f.write(data)
        except FileLocked:
            if os.path.exists(path):
                return sha  # Another writer got there first
            # Another writer holds the lock, or a crashed one left it behind
            self._write_via_tempfile(dir, path, data)
        logger.debug(
            "wrote %s object %s (%d bytes)",
            obj.type_name.decode("ascii"),
            sha_to_hex(sha),
            len(framed),
        )
        return sha

    def _write_via_tempfile(self, dir: str, path: str, data: bytes) -> None:
        fd, tmppath = tempfile.mkstemp(dir=dir, prefix="tmp_obj_")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                if self.fsync_object_files:
                    f.flush()
                    os.fsync(f.fileno())
            os.chmod(tmppath, OBJECT_MODE)
            os.replace(tmppath, path)
        except BaseException:
            try:
                os.remove(tmppath)
            except FileNotFoundError:
                pass
            raise

    @classmethod
    def init(cls, path: str | os.PathLike[str]) -> "DiskObjectStore":
        """Initialize a new disk object store.

        Args:
          path: Path where the object store should be created
        Returns:
          New DiskObjectStore instance
        """
        try:
            os.mkdir(path)
        except FileExistsError:
            pass
        return cls(path)
