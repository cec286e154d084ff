# repo.py -- For dealing with git repositories.
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

"""Repository access.

A repository is a working tree with a ``.git`` control directory next to
it. Only the object database under ``.git/objects`` is read and written by
loosegit; the other files are laid out so that the directory is also
recognisable by git.
"""

__all__ = [
    "BASE_DIRECTORIES",
    "CONTROLDIR",
    "OBJECTDIR",
    "NotGitRepository",
    "Repo",
    "UnsupportedVersion",
]

import logging
import os
from types import TracebackType

from .config import ConfigFile
from .file import GitFile
from .object_store import DiskObjectStore
from .objects import ShaFile

logger = logging.getLogger(__name__)

CONTROLDIR = ".git"
OBJECTDIR = "objects"
REFSDIR = "refs"
REFSDIR_TAGS = "tags"
REFSDIR_HEADS = "heads"

BASE_DIRECTORIES = [
    ["branches"],
    [REFSDIR],
    [REFSDIR, REFSDIR_TAGS],
    [REFSDIR, REFSDIR_HEADS],
]

DEFAULT_BRANCH = b"master"
DEFAULT_DESCRIPTION = (
    b"Unnamed repository; edit this file 'description' to name the repository.\n"
)


class NotGitRepository(Exception):
    """Indicates that no Git repository was found."""


class UnsupportedVersion(Exception):
    """Unsupported repository version."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Unsupported repositoryformatversion {version}")


class Repo:
    """A git repository backed by local disk.

    To open an existing repository, call the constructor with the path of
    the working tree. To create a new repository, use the Repo.init class
    method.

    Attributes:
      path: Path to the working tree
      object_store: Store for the repository's objects
    """

    path: str
    object_store: DiskObjectStore

    def __init__(self, root: str | bytes | os.PathLike[str]) -> None:
        """Open a repository on disk.

        Args:
          root: Path to the repository's working tree.
        Raises:
          NotGitRepository: if root has no control directory or config
          UnsupportedVersion: if the repository format is not version 0
        """
        root = os.fspath(root)
        if isinstance(root, bytes):
            root = os.fsdecode(root)
        self._controldir = os.path.join(root, CONTROLDIR)
        if not os.path.isdir(self._controldir):
            raise NotGitRepository(f"No git repository was found at {root}")
        self.path = root

        try:
            config = ConfigFile.from_path(os.path.join(self._controldir, "config"))
        except FileNotFoundError as exc:
            raise NotGitRepository(
                f"Configuration file missing in {self._controldir}"
            ) from exc
        try:
            format_version = config.get_int("core", "repositoryformatversion", 0)
        except ValueError as exc:
            raise UnsupportedVersion(-1) from exc
        if format_version != 0:
            raise UnsupportedVersion(format_version)

        self.object_store = DiskObjectStore(
            os.path.join(self._controldir, OBJECTDIR),
            loose_compression_level=config.get_int(
                "core", "loosecompression", -1
            ),
        )

    def __repr__(self) -> str:
        return f"<Repo at {self.path!r}>"

    @classmethod
    def discover(cls, start: str | bytes | os.PathLike[str] = ".") -> "Repo":
        """Iterate parent directories to discover a repository.

        Return a Repo object for the first parent directory that looks like a
        Git repository.

        Args:
          start: The directory to start discovery from (defaults to '.')
        """
        start = os.fsdecode(start)
        path = os.path.abspath(start)
        while True:
            if os.path.isdir(os.path.join(path, CONTROLDIR)):
                return cls(path)
            new_path, _tail = os.path.split(path)
            if new_path == path:  # Root reached
                break
            path = new_path
        raise NotGitRepository(f"No git repository was found at {start}")

    def controldir(self) -> str:
        """Return the path of the control directory."""
        return self._controldir

    def get_config(self) -> ConfigFile:
        """Retrieve the config object.

        Returns: `ConfigFile` object for the ``.git/config`` file.
        """
        return ConfigFile.from_path(os.path.join(self._controldir, "config"))

    def _put_named_file(self, path: str, contents: bytes) -> None:
        """Write a file to the control dir with the given name and contents."""
        with GitFile(os.path.join(self.controldir(), path), "wb") as f:
            f.write(contents)

    def __getitem__(self, sha: bytes) -> ShaFile:
        """Retrieve an object by raw digest."""
        return self.object_store[sha]

    def __contains__(self, sha: bytes) -> bool:
        return sha in self.object_store

    @classmethod
    def init(cls, path: str | bytes | os.PathLike[str], *, mkdir: bool = False) -> "Repo":
        """Create a new repository.

        Args:
          path: Path in which to create the repository
          mkdir: Whether to create the directory
        Returns: `Repo` instance
        Raises:
          ValueError: if path is a file or a directory that is not empty
        """
        path = os.fspath(path)
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        if mkdir:
            os.makedirs(path, exist_ok=True)
        if not os.path.isdir(path):
            raise ValueError(f"{path} is not a directory")
        if os.listdir(path):
            raise ValueError(f"{path} is not empty")
        controldir = os.path.join(path, CONTROLDIR)
        os.mkdir(controldir)
        for d in BASE_DIRECTORIES:
            os.mkdir(os.path.join(controldir, *d))
        DiskObjectStore.init(os.path.join(controldir, OBJECTDIR))

        with GitFile(os.path.join(controldir, "config"), "wb") as f:
            cf = ConfigFile()
            cf.set("core", "repositoryformatversion", "0")
            cf.set("core", "filemode", False)
            cf.set("core", "bare", False)
            cf.write_to_file(f)

        ret = cls(path)
        ret._put_named_file("description", DEFAULT_DESCRIPTION)
        ret._put_named_file("HEAD", b"ref: refs/heads/" + DEFAULT_BRANCH + b"\n")
        logger.debug("initialized empty repository in %s", controldir)
        return ret

    def close(self) -> None:
        """Close any files opened by this repository."""

    def __enter__(self) -> "Repo":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
