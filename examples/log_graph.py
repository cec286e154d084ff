#!/usr/bin/python
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

# Render the history of a commit with graphviz.
#
# Example usage:
#  python examples/log_graph.py <commit> | dot -Tsvg > history.svg

import sys

from loosegit import porcelain
from loosegit.objects import sha_to_hex
from loosegit.repo import Repo
from loosegit.walk import iter_parent_edges

if len(sys.argv) < 2:
    print(f"usage: {sys.argv[0]} commit")
    sys.exit(1)

repo = Repo.discover()
start = porcelain.parse_object(repo, sys.argv[1])

porcelain.log(repo, sys.argv[1])

parents = set()
for _child, parent in iter_parent_edges(repo.object_store, start):
    parents.add(parent)
print(f"// {sha_to_hex(start)} has {len(parents)} ancestors", file=sys.stderr)
