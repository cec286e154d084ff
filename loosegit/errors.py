# errors.py -- errors for loosegit
# Copyright (C) 2007 James Westby <jw+debian@jameswestby.net>
# Copyright (C) 2009-2012 Jelmer Vernooij <jelmer@jelmer.uk>
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

"""Exception classes raised by the object store and the graph walks."""

__all__ = [
    "CorruptObjectError",
    "DestinationNotDirectoryError",
    "DestinationNotEmptyError",
    "FileFormatException",
    "FormatError",
    "NotFoundError",
    "TypeMismatchError",
    "UnknownKindError",
]

import binascii
import os


def _sha_for_display(sha: bytes | str) -> str:
    if isinstance(sha, str):
        return sha
    if len(sha) == 20:
        return binascii.hexlify(sha).decode("ascii")
    return sha.decode("ascii", "replace")


class FileFormatException(Exception):
    """Base class for exceptions relating to reading stored objects."""


class FormatError(FileFormatException):
    """An object header or body does not follow its grammar."""


class CorruptObjectError(FileFormatException):
    """An object file failed to decompress or has an inconsistent length."""

    def __init__(self, message: str, sha: bytes | None = None) -> None:
        """Initialize a CorruptObjectError.

        Args:
            message: Description of the damage.
            sha: Digest of the object being read, if known.
        """
        self.sha = sha
        if sha is not None:
            message = f"{_sha_for_display(sha)}: {message}"
        super().__init__(message)


class UnknownKindError(FileFormatException):
    """An object header names a kind that is not blob, tree, commit or tag."""

    def __init__(self, kind: bytes) -> None:
        """Initialize an UnknownKindError.

        Args:
            kind: The kind as found in the header.
        """
        self.kind = kind
        super().__init__(f"unknown object kind {kind.decode('ascii', 'replace')!r}")


class NotFoundError(Exception):
    """No object is stored under the requested digest."""

    def __init__(self, sha: bytes) -> None:
        """Initialize a NotFoundError.

        Args:
            sha: The digest that has no object file.
        """
        self.sha = sha
        super().__init__(f"{_sha_for_display(sha)} is not in the object store")


class TypeMismatchError(Exception):
    """A walk expected one kind of object and found another."""

    def __init__(self, sha: bytes, expected: str, actual: bytes | str) -> None:
        """Initialize a TypeMismatchError.

        Args:
            sha: Digest of the offending object.
            expected: Human-readable description of the accepted kinds.
            actual: Kind that was found.
        """
        if isinstance(actual, bytes):
            actual = actual.decode("ascii", "replace")
        self.sha = sha
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{_sha_for_display(sha)} is a {actual}, expected {expected}"
        )


class DestinationNotEmptyError(Exception):
    """A checkout destination already has contents."""

    def __init__(self, path: str | bytes | os.PathLike[str]) -> None:
        """Initialize a DestinationNotEmptyError.

        Args:
            path: The destination directory.
        """
        self.path = path
        super().__init__(f"destination {os.fsdecode(path)} is not empty")


class DestinationNotDirectoryError(Exception):
    """A checkout destination exists but is not a directory."""

    def __init__(self, path: str | bytes | os.PathLike[str]) -> None:
        """Initialize a DestinationNotDirectoryError.

        Args:
            path: The destination path.
        """
        self.path = path
        super().__init__(f"destination {os.fsdecode(path)} is not a directory")
