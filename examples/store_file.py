#!/usr/bin/python
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

# Store a file as a blob, wrap it in a tree and commit, then check it out
# again somewhere else.
#
# Example usage:
#  python examples/store_file.py README.md /tmp/checkout

import os
import sys

from loosegit import porcelain
from loosegit.objects import Blob, Commit, Tree, sha_to_hex
from loosegit.repo import Repo

if len(sys.argv) < 3:
    print(f"usage: {sys.argv[0]} filename destination")
    sys.exit(1)

repo = Repo.discover()
store = repo.object_store

with open(sys.argv[1], "rb") as f:
    blob_sha = store.write(Blob.from_string(f.read()))

tree = Tree()
tree.add(b"100644", os.fsencode(os.path.basename(sys.argv[1])), blob_sha)
tree_sha = store.write(tree)

commit = Commit()
commit.tree = sha_to_hex(tree_sha)
commit.author = commit.committer = "Example <example@example.com> 0 +0000"
commit.message = f"Store {sys.argv[1]}\n"
commit_sha = store.write(commit)
print(sha_to_hex(commit_sha))

porcelain.checkout(repo, sha_to_hex(commit_sha), sys.argv[2])
