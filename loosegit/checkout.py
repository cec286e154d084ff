# checkout.py -- Materialize trees into a directory
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

"""Write the contents of a commit or tree out to a fresh directory."""

__all__ = [
    "INVALID_DOTNAMES",
    "build_file_from_blob",
    "checkout",
    "checkout_permissions",
    "resolve_tree",
    "validate_path_element",
]

import logging
import os
import stat

from .errors import (
    DestinationNotDirectoryError,
    DestinationNotEmptyError,
    FormatError,
    TypeMismatchError,
)
from .object_store import DiskObjectStore
from .objects import Blob, Commit, Tree, parse_mode

logger = logging.getLogger(__name__)

INVALID_DOTNAMES = (b".git", b".", b"..", b"")


def validate_path_element(element: bytes) -> bool:
    """Check that a tree entry name is safe to create in a directory."""
    if b"/" in element:
        return False
    return element.lower() not in INVALID_DOTNAMES


def resolve_tree(object_store: DiskObjectStore, sha: bytes) -> Tree:
    """Find the tree to check out for a commit or tree digest.

    Raises:
      TypeMismatchError: if sha is neither a commit nor a tree, or the
        commit's tree field points at something other than a tree
    """
    obj = object_store[sha]
    if isinstance(obj, Commit):
        tree_sha = obj.tree_digest
        tree = object_store[tree_sha]
        if not isinstance(tree, Tree):
            raise TypeMismatchError(tree_sha, "tree", tree.type_name)
        return tree
    if isinstance(obj, Tree):
        return obj
    raise TypeMismatchError(sha, "commit or tree", obj.type_name)


def checkout_permissions(mode: int) -> int:
    """Return the permission bits to give a file checked out from mode.

    Only the owner executable bit of the tree entry is honoured; setuid,
    setgid, sticky and group or world write bits never reach the disk.
    """
    if mode & 0o100:
        return 0o755
    return 0o644


def build_file_from_blob(
    blob: Blob, mode: int, target_path: bytes, *, honor_filemode: bool = True
) -> None:
    """Build a file or symlink on disk based on a blob.

    Args:
      blob: The git object
      mode: File mode of the tree entry
      target_path: Path to write to; must not exist yet
      honor_filemode: Apply the executable bit and create symlinks
    """
    contents = blob.as_raw_string()
    if honor_filemode and stat.S_ISLNK(mode):
        os.symlink(contents, target_path)
        return
    with open(target_path, "xb") as f:
        f.write(contents)
    if honor_filemode:
        os.chmod(target_path, checkout_permissions(mode))


def _checkout_tree(
    object_store: DiskObjectStore,
    tree: Tree,
    path: bytes,
    honor_filemode: bool,
) -> int:
    count = 0
    for entry in tree:
        if not validate_path_element(entry.path):
            raise FormatError(f"refusing to check out unsafe path {entry.path!r}")
        full_path = os.path.join(path, entry.path)
        obj = object_store[entry.sha]
        if isinstance(obj, Tree):
            os.mkdir(full_path)
            count += _checkout_tree(object_store, obj, full_path, honor_filemode)
        elif isinstance(obj, Blob):
            build_file_from_blob(
                obj, parse_mode(entry.mode), full_path, honor_filemode=honor_filemode
            )
            count += 1
        else:
            raise TypeMismatchError(entry.sha, "tree or blob", obj.type_name)
    return count


def checkout(
    object_store: DiskObjectStore,
    start: bytes,
    destination: str | bytes | os.PathLike[str],
    honor_filemode: bool = True,
) -> None:
    """Materialize a commit or tree into a directory.

    Args:
      object_store: Store holding the commit, its tree and their contents
      start: Raw digest of a commit or a tree
      destination: Directory to create files in; must be missing or empty
      honor_filemode: Set the executable bit for 100755 entries and create
        symlinks for 120000 entries
    Raises:
      TypeMismatchError: if start or an entry is of the wrong kind
      DestinationNotDirectoryError: if destination exists as a file
      DestinationNotEmptyError: if destination is a non-empty directory
      FormatError: if an entry name cannot be created safely
    """
    tree = resolve_tree(object_store, start)

    root_path = os.fsencode(destination)
    if os.path.exists(root_path):
        if not os.path.isdir(root_path):
            raise DestinationNotDirectoryError(destination)
        if os.listdir(root_path):
            raise DestinationNotEmptyError(destination)
    else:
        os.makedirs(root_path)

    count = _checkout_tree(object_store, tree, root_path, honor_filemode)
    logger.debug("checked out %d files into %s", count, os.fsdecode(root_path))
