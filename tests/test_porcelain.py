# test_porcelain.py -- porcelain tests
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

"""Tests for loosegit.porcelain."""

import os
import shutil
import stat
import sys
import tempfile
from io import BytesIO, StringIO
from unittest import skipIf

from loosegit import porcelain
from loosegit.errors import (
    FormatError,
    NotFoundError,
    TypeMismatchError,
    UnknownKindError,
)
from loosegit.objects import Blob, Tree, sha_to_hex
from loosegit.repo import Repo

from . import TestCase, make_commit


class PorcelainTestCase(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.test_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.test_dir)
        self.repo_path = os.path.join(self.test_dir, "repo")
        self.repo = Repo.init(self.repo_path, mkdir=True)
        self.addCleanup(self.repo.close)

    def write_file(self, name: str, contents: bytes) -> str:
        path = os.path.join(self.test_dir, name)
        with open(path, "wb") as f:
            f.write(contents)
        return path

    def add_blob(self, data: bytes) -> bytes:
        return self.repo.object_store.write(Blob.from_string(data))

    def add_tree(self, *entries: tuple[bytes, bytes, bytes]) -> bytes:
        tree = Tree()
        for mode, path, sha in entries:
            tree.add(mode, path, sha)
        return self.repo.object_store.write(tree)


class InitTests(TestCase):
    def test_non_bare(self) -> None:
        repo_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, repo_dir)
        porcelain.init(repo_dir)
        self.assertTrue(os.path.isdir(os.path.join(repo_dir, ".git", "objects")))

    def test_creates_directory(self) -> None:
        parent = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, parent)
        repo_dir = os.path.join(parent, "a", "b")
        repo = porcelain.init(repo_dir)
        self.assertEqual(repo_dir, repo.path)

    def test_not_empty(self) -> None:
        repo_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, repo_dir)
        with open(os.path.join(repo_dir, "existing"), "wb"):
            pass
        self.assertRaises(ValueError, porcelain.init, repo_dir)


class ParseObjectTests(PorcelainTestCase):
    def test_full(self) -> None:
        sha = self.add_blob(b"data")
        self.assertEqual(sha, porcelain.parse_object(self.repo, sha_to_hex(sha)))
        self.assertEqual(
            sha, porcelain.parse_object(self.repo, sha_to_hex(sha).upper().encode())
        )

    def test_full_does_not_need_object(self) -> None:
        self.assertEqual(
            b"\xab" * 20, porcelain.parse_object(self.repo, "ab" * 20)
        )

    def test_abbreviated(self) -> None:
        sha = self.add_blob(b"data")
        self.assertEqual(sha, porcelain.parse_object(self.repo, sha_to_hex(sha)[:7]))
        self.assertEqual(
            sha, porcelain.parse_object(self.repo_path, sha_to_hex(sha)[:4])
        )

    def test_too_short(self) -> None:
        sha = self.add_blob(b"data")
        self.assertRaises(
            ValueError, porcelain.parse_object, self.repo, sha_to_hex(sha)[:3]
        )

    def test_not_hex(self) -> None:
        self.assertRaises(ValueError, porcelain.parse_object, self.repo, "master")

    def test_unknown(self) -> None:
        sha = self.add_blob(b"data")
        other = "0000" if not sha_to_hex(sha).startswith("0000") else "1111"
        self.assertRaises(NotFoundError, porcelain.parse_object, self.repo, other)

    def test_ambiguous(self) -> None:
        objects = self.repo.object_store.path
        os.mkdir(os.path.join(objects, "ab"))
        for rest in ["cd" + "0" * 36, "cd" + "1" * 36]:
            with open(os.path.join(objects, "ab", rest), "wb"):
                pass
        self.assertRaises(ValueError, porcelain.parse_object, self.repo, "abcd")
        self.assertEqual(
            b"\xab\xcd" + b"\x11" * 18,
            porcelain.parse_object(self.repo, "abcd1"),
        )


class CatFileTests(PorcelainTestCase):
    def test_blob(self) -> None:
        sha = self.add_blob(b"some contents\n")
        out = BytesIO()
        porcelain.cat_file(self.repo, "blob", sha_to_hex(sha), outstream=out)
        self.assertEqual(b"some contents\n", out.getvalue())

    def test_commit(self) -> None:
        tree = self.add_tree()
        commit = make_commit(tree)
        sha = self.repo.object_store.write(commit)
        out = BytesIO()
        porcelain.cat_file(self.repo_path, b"commit", sha_to_hex(sha)[:8], out)
        self.assertEqual(commit.as_raw_string(), out.getvalue())

    def test_wrong_type(self) -> None:
        sha = self.add_blob(b"x")
        out = BytesIO()
        with self.assertRaises(TypeMismatchError) as cm:
            porcelain.cat_file(self.repo, "tree", sha_to_hex(sha), outstream=out)
        self.assertEqual("blob", cm.exception.actual)
        self.assertEqual(b"", out.getvalue())

    def test_missing(self) -> None:
        self.assertRaises(
            NotFoundError,
            porcelain.cat_file,
            self.repo,
            "blob",
            "ab" * 20,
            BytesIO(),
        )


class HashObjectTests(PorcelainTestCase):
    def test_blob(self) -> None:
        path = self.write_file("file", b"test\n")
        sha = porcelain.hash_object(path)
        self.assertEqual("9daeafb9864cf43055ae93beb0afd6c7d144bfa4", sha_to_hex(sha))
        self.assertNotIn(sha, self.repo)

    def test_write(self) -> None:
        path = self.write_file("file", b"test\n")
        sha = porcelain.hash_object(path, write=True, repo=self.repo)
        self.assertEqual(b"test\n", self.repo[sha].as_raw_string())

    def test_tree(self) -> None:
        blob = self.add_blob(b"x")
        tree = Tree()
        tree.add(b"100644", b"x", blob)
        path = self.write_file("tree", tree.as_raw_string())
        sha = porcelain.hash_object(path, "tree", write=True, repo=self.repo_path)
        self.assertEqual(tree.digest, sha)
        self.assertEqual(tree, self.repo[sha])

    def test_malformed(self) -> None:
        path = self.write_file("tree", b"100644 x")
        self.assertRaises(FormatError, porcelain.hash_object, path, "tree")

    def test_unknown_kind(self) -> None:
        path = self.write_file("file", b"x")
        self.assertRaises(UnknownKindError, porcelain.hash_object, path, "note")


class LogTests(PorcelainTestCase):
    def test_simple(self) -> None:
        tree = self.add_tree()
        c1 = self.repo.object_store.write(make_commit(tree, message="1\n"))
        c2 = self.repo.object_store.write(make_commit(tree, [c1], message="2\n"))
        out = StringIO()
        porcelain.log(self.repo, sha_to_hex(c2), outstream=out)
        self.assertEqual(
            "digraph loosegitlog{\n"
            f"  c_{sha_to_hex(c2)} -> c_{sha_to_hex(c1)};\n"
            "}\n",
            out.getvalue(),
        )

    def test_no_parents(self) -> None:
        c1 = self.repo.object_store.write(make_commit(self.add_tree()))
        out = StringIO()
        porcelain.log(self.repo_path, sha_to_hex(c1), outstream=out)
        self.assertEqual("digraph loosegitlog{\n}\n", out.getvalue())

    def test_broken_history_writes_nothing(self) -> None:
        tree = self.add_tree()
        c1 = self.repo.object_store.write(make_commit(tree, [b"\x01" * 20]))
        out = StringIO()
        self.assertRaises(
            NotFoundError, porcelain.log, self.repo, sha_to_hex(c1), outstream=out
        )
        self.assertEqual("", out.getvalue())


class LsTreeTests(PorcelainTestCase):
    def test_tree(self) -> None:
        blob = self.add_blob(b"x")
        subtree = self.add_tree((b"100644", b"inner", blob))
        tree = self.add_tree(
            (b"100755", b"run", blob),
            (b"40000", b"dir", subtree),
            (b"160000", b"module", b"\x05" * 20),
        )
        out = StringIO()
        porcelain.ls_tree(self.repo, sha_to_hex(tree), outstream=out)
        self.assertEqual(
            f"100755 blob {sha_to_hex(blob)}\trun\n"
            f"040000 tree {sha_to_hex(subtree)}\tdir\n"
            f"160000 commit {'05' * 20}\tmodule\n",
            out.getvalue(),
        )

    def test_commit(self) -> None:
        blob = self.add_blob(b"x")
        tree = self.add_tree((b"100644", b"x", blob))
        commit = self.repo.object_store.write(make_commit(tree))
        out = StringIO()
        porcelain.ls_tree(self.repo, sha_to_hex(commit), outstream=out)
        self.assertEqual(f"100644 blob {sha_to_hex(blob)}\tx\n", out.getvalue())

    def test_blob(self) -> None:
        blob = self.add_blob(b"x")
        self.assertRaises(
            TypeMismatchError, porcelain.ls_tree, self.repo, sha_to_hex(blob), StringIO()
        )


class CheckoutTests(PorcelainTestCase):
    def setUp(self) -> None:
        super().setUp()
        blob = self.add_blob(b"#!/bin/sh\n")
        tree = self.add_tree((b"100755", b"run", blob))
        self.commit = sha_to_hex(self.repo.object_store.write(make_commit(tree)))
        self.target = os.path.join(self.test_dir, "target")

    def test_checkout(self) -> None:
        porcelain.checkout(self.repo, self.commit, self.target)
        with open(os.path.join(self.target, "run"), "rb") as f:
            self.assertEqual(b"#!/bin/sh\n", f.read())

    @skipIf(sys.platform == "win32", "executable bits are not supported")
    def test_filemode_from_config(self) -> None:
        # Repositories are created with core.filemode = false
        porcelain.checkout(self.repo, self.commit, self.target)
        mode = os.stat(os.path.join(self.target, "run")).st_mode
        self.assertFalse(mode & stat.S_IXUSR)

    @skipIf(sys.platform == "win32", "executable bits are not supported")
    def test_honor_filemode(self) -> None:
        porcelain.checkout(self.repo, self.commit, self.target, honor_filemode=True)
        mode = os.stat(os.path.join(self.target, "run")).st_mode
        self.assertTrue(mode & stat.S_IXUSR)
