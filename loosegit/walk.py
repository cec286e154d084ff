# walk.py -- Walking the commit graph
# Copyright (C) 2010 Google, Inc.
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

"""Walking the commit graph.

The walk follows ``parent`` fields depth first, reporting each edge as it is
crossed. Every commit is read at most once, so a malformed history that
loops back on itself still terminates.
"""

__all__ = [
    "format_graphviz",
    "iter_parent_edges",
    "log",
]

from collections.abc import Iterable, Iterator

from .errors import TypeMismatchError
from .object_store import DiskObjectStore
from .objects import Commit, sha_to_hex


def _parent_digests(object_store: DiskObjectStore, sha: bytes) -> list[bytes]:
    obj = object_store[sha]
    if not isinstance(obj, Commit):
        raise TypeMismatchError(sha, "commit", obj.type_name)
    return obj.parent_digests


def iter_parent_edges(
    object_store: DiskObjectStore, start: bytes
) -> Iterator[tuple[bytes, bytes]]:
    """Iterate over the (child, parent) edges reachable from a commit.

    Edges come out in pre-order: a commit's edge to a parent is followed
    by everything reachable through that parent before the commit's next
    parent is looked at.

    Args:
      object_store: Store holding the commits
      start: Raw digest of the commit to start from
    Raises:
      TypeMismatchError: if a digest in the graph is not a commit
      FormatError: if a parent field is not a hex digest
    """
    seen = {start}
    # Each frame holds a commit and the parents it has left to visit
    stack = [(start, iter(_parent_digests(object_store, start)))]
    while stack:
        child, parents = stack[-1]
        for parent in parents:
            yield child, parent
            if parent not in seen:
                seen.add(parent)
                stack.append((parent, iter(_parent_digests(object_store, parent))))
                break
        else:
            stack.pop()


def log(object_store: DiskObjectStore, start: bytes) -> list[tuple[bytes, bytes]]:
    """Return the parent edges reachable from a commit, in pre-order."""
    return list(iter_parent_edges(object_store, start))


def format_graphviz(edges: Iterable[tuple[bytes, bytes]]) -> Iterator[str]:
    """Render parent edges as the lines of a graphviz digraph."""
    yield "digraph loosegitlog{\n"
    for child, parent in edges:
        yield f"  c_{sha_to_hex(child)} -> c_{sha_to_hex(parent)};\n"
    yield "}\n"
