# porcelain.py -- Porcelain-like layer on top of loosegit
# Copyright (C) 2013 Jelmer Vernooij <jelmer@jelmer.uk>
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

"""Simple wrapper that provides porcelain-like functions on top of loosegit.

Currently implemented:
 * cat_file
 * checkout
 * hash_object
 * init
 * log
 * ls_tree
 * parse_object

These functions are meant to behave similarly to the git subcommands.
Differences in behaviour are considered bugs.

Functions should generally accept both unicode strings and bytestrings
"""

__all__ = [
    "cat_file",
    "checkout",
    "hash_object",
    "init",
    "log",
    "ls_tree",
    "open_repo_closing",
    "parse_object",
]

import os
import stat
import sys
from collections.abc import Iterator
from contextlib import AbstractContextManager, closing, contextmanager
from typing import BinaryIO, TextIO

from . import checkout as _checkout
from . import walk
from .errors import NotFoundError, TypeMismatchError
from .file import ensure_dir_exists
from .objects import (
    ShaFile,
    hex_to_sha,
    parse_mode,
    pretty_format_tree_entry,
    valid_hexsha,
)
from .repo import Repo

RepoPath = str | os.PathLike[str] | Repo

# Shortest abbreviated object name that is looked up
MIN_ABBREV_LENGTH = 4

_HEXDIGITS = frozenset("0123456789abcdef")


@contextmanager
def _noop_context_manager(obj: Repo) -> Iterator[Repo]:
    """Context manager that has the same api as closing but does nothing."""
    yield obj


def open_repo_closing(path_or_repo: RepoPath) -> AbstractContextManager[Repo]:
    """Open an argument that can be a repository or a path for a repository.

    returns a context manager that will close the repo on exit if the argument
    is a path, else does nothing if the argument is a repo.
    """
    if isinstance(path_or_repo, Repo):
        return _noop_context_manager(path_or_repo)
    return closing(Repo(path_or_repo))


def _binary_stdout() -> BinaryIO:
    return getattr(sys.stdout, "buffer", sys.stdout)


def parse_object(repo: RepoPath, name: str | bytes) -> bytes:
    """Resolve an object name to a raw digest.

    Args:
      repo: Path to the repository or a Repo
      name: Full 40 character hex digest, or an abbreviation of at least
        four characters that matches exactly one stored object
    Returns: the raw digest
    Raises:
      NotFoundError: if an abbreviation matches no object
      ValueError: if name is not hex, too short, or ambiguous
    """
    if isinstance(name, bytes):
        name = name.decode("ascii")
    name = name.lower()
    if valid_hexsha(name):
        return hex_to_sha(name)
    if len(name) < MIN_ABBREV_LENGTH or not set(name) <= _HEXDIGITS:
        raise ValueError(f"not a valid object name: {name!r}")
    with open_repo_closing(repo) as r:
        matches = list(r.object_store.iter_prefix(name))
    if not matches:
        raise NotFoundError(name.encode("ascii"))
    if len(matches) > 1:
        raise ValueError(f"short object name {name} is ambiguous")
    return matches[0]


def init(path: str | os.PathLike[str] = ".") -> Repo:
    """Create a new git repository.

    Args:
      path: Path to repository.
    Returns: A Repo instance
    """
    ensure_dir_exists(path)
    return Repo.init(path)


def cat_file(
    repo: RepoPath,
    object_type: str | bytes,
    name: str | bytes,
    outstream: BinaryIO | None = None,
) -> None:
    """Write the body of an object to a stream.

    Args:
      repo: Path to the repository
      object_type: Expected kind of the object
      name: Object name, see parse_object
      outstream: Binary stream to write to (defaults to stdout)
    Raises:
      TypeMismatchError: if the object is of another kind
    """
    if isinstance(object_type, str):
        object_type = object_type.encode("ascii")
    if outstream is None:
        outstream = _binary_stdout()
    with open_repo_closing(repo) as r:
        sha = parse_object(r, name)
        obj = r[sha]
    if obj.type_name != object_type:
        raise TypeMismatchError(sha, object_type.decode("ascii"), obj.type_name)
    outstream.write(obj.as_raw_string())


def hash_object(
    path: str | os.PathLike[str],
    object_type: str | bytes = "blob",
    write: bool = False,
    repo: RepoPath | None = None,
) -> bytes:
    """Compute the digest of a file's contents as an object of a given kind.

    Args:
      path: File to read
      object_type: Kind to frame the contents as
      write: Whether to store the object in the repository
      repo: Repository to write to; discovered from the working directory
        when omitted
    Returns: the raw digest
    Raises:
      UnknownKindError: if object_type is not a known kind
      FormatError: if the contents do not parse as that kind
    """
    if isinstance(object_type, str):
        object_type = object_type.encode("ascii")
    with open(path, "rb") as f:
        data = f.read()
    obj = ShaFile.from_raw_string(object_type, data)
    if not write:
        return obj.digest
    if repo is None:
        repo = Repo.discover()
    with open_repo_closing(repo) as r:
        return r.object_store.write(obj)


def log(
    repo: RepoPath,
    name: str | bytes,
    outstream: TextIO = sys.stdout,
) -> None:
    """Write the parent graph of a commit as graphviz.

    Args:
      repo: Path to the repository
      name: Object name of the commit to start from
      outstream: Stream to write to
    """
    with open_repo_closing(repo) as r:
        start = parse_object(r, name)
        # Nothing is written until the whole walk has succeeded
        edges = walk.log(r.object_store, start)
    for line in walk.format_graphviz(edges):
        outstream.write(line)


def _kind_for_mode(mode: bytes) -> str:
    file_mode = parse_mode(mode)
    if stat.S_ISDIR(file_mode):
        return "tree"
    if stat.S_IFMT(file_mode) == 0o160000:
        return "commit"
    return "blob"


def ls_tree(
    repo: RepoPath,
    treeish: str | bytes,
    outstream: TextIO = sys.stdout,
) -> None:
    """List contents of a tree.

    Args:
      repo: Path to the repository
      treeish: Object name of a tree, or a commit whose tree to list
      outstream: Output stream (defaults to stdout)
    """
    with open_repo_closing(repo) as r:
        tree = _checkout.resolve_tree(r.object_store, parse_object(r, treeish))
    for entry in tree:
        outstream.write(pretty_format_tree_entry(entry, _kind_for_mode(entry.mode)))


def checkout(
    repo: RepoPath,
    name: str | bytes,
    path: str | os.PathLike[str],
    honor_filemode: bool | None = None,
) -> None:
    """Write the contents of a commit or tree to an empty directory.

    Args:
      repo: Path to the repository
      name: Object name of a commit or tree
      path: Destination directory; must be missing or empty
      honor_filemode: Apply executable bits and symlinks; defaults to the
        repository's core.filemode setting
    """
    with open_repo_closing(repo) as r:
        if honor_filemode is None:
            honor_filemode = r.get_config().get_boolean("core", "filemode", True)
        _checkout.checkout(
            r.object_store, parse_object(r, name), path, honor_filemode=honor_filemode
        )
