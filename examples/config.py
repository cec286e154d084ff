#!/usr/bin/python
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

# Read the config file for a git repository.
#
# Example usage:
#  python examples/config.py

from loosegit.repo import Repo

repo = Repo.discover()
config = repo.get_config()

print(config.get_int("core", "repositoryformatversion"))
print(config.get_boolean("core", "filemode", True))
print(config.get_int("core", "loosecompression", -1))
