# __init__.py -- The tests for loosegit
# Copyright (C) 2024 Jelmer Vernooij <jelmer@jelmer.uk>
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

"""Tests for loosegit."""

__all__ = [
    "TestCase",
    "make_commit",
    "test_suite",
]

import os
import unittest
from collections.abc import Sequence
from unittest import TestCase as _TestCase

from loosegit.objects import Commit, sha_to_hex


class TestCase(_TestCase):
    """Base test case that keeps the user's configuration out of the way."""

    def setUp(self) -> None:
        super().setUp()
        self._old_home = os.environ.get("HOME")
        os.environ["HOME"] = "/nonexistent"
        self.addCleanup(self._restore_home)

    def _restore_home(self) -> None:
        if self._old_home is not None:
            os.environ["HOME"] = self._old_home
        else:
            del os.environ["HOME"]


def make_commit(
    tree: bytes, parents: Sequence[bytes] = (), message: str = "Test message\n"
) -> Commit:
    """Build a commit pointing at a tree and parents given as raw digests."""
    c = Commit()
    c.tree = sha_to_hex(tree)
    c.parents = [sha_to_hex(p) for p in parents]
    c.author = c.committer = "Test Author <test@nodomain.com> 1174773719 +0000"
    c.message = message
    return c


def test_suite() -> unittest.TestSuite:
    names = [
        "checkout",
        "cli",
        "config",
        "file",
        "log_utils",
        "object_store",
        "objects",
        "porcelain",
        "repo",
        "walk",
    ]
    module_names = ["tests.test_" + name for name in names]
    loader = unittest.TestLoader()
    return loader.loadTestsFromNames(module_names)
