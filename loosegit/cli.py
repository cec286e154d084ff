#
# loosegit - Simple command-line interface to loosegit
# Copyright (C) 2008-2011 Jelmer Vernooij <jelmer@jelmer.uk>
# Copyright (C) 2026 The loosegit contributors
# vim: expandtab
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

"""Simple command-line interface to loosegit.

Every command works on the repository found by walking up from the current
directory, except ``init`` which creates one.
"""

__all__ = [
    "Command",
    "main",
    "signal_int",
]

import argparse
import logging
import os
import signal
import sys
import types
from collections.abc import Sequence

from . import porcelain
from .errors import (
    CorruptObjectError,
    DestinationNotDirectoryError,
    DestinationNotEmptyError,
    FormatError,
    NotFoundError,
    TypeMismatchError,
    UnknownKindError,
)
from .log_utils import default_logging_config
from .objects import OBJECT_CLASSES, sha_to_hex
from .repo import NotGitRepository, Repo, UnsupportedVersion

logger = logging.getLogger(__name__)

OBJECT_TYPES = [cls.type_name.decode("ascii") for cls in OBJECT_CLASSES]


def signal_int(signal: int, frame: types.FrameType | None) -> None:
    """Handle interrupt signal by exiting."""
    sys.exit(1)


class Command:
    """A loosegit subcommand."""

    def run(self, args: Sequence[str]) -> int | None:
        """Run the command."""
        raise NotImplementedError(self.run)


class cmd_init(Command):
    """Create an empty Git repository."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="loosegit init")
        parser.add_argument(
            "path", nargs="?", default=os.getcwd(), help="Where to create the repository"
        )
        parsed_args = parser.parse_args(args)
        porcelain.init(parsed_args.path)


class cmd_cat_file(Command):
    """Provide content of repository objects."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="loosegit cat-file")
        parser.add_argument("type", choices=OBJECT_TYPES, help="Specify the type")
        parser.add_argument("object", help="The object to display")
        parsed_args = parser.parse_args(args)
        with Repo.discover() as repo:
            porcelain.cat_file(
                repo, parsed_args.type, parsed_args.object, outstream=sys.stdout.buffer
            )


class cmd_hash_object(Command):
    """Compute object ID and optionally create an object from a file."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="loosegit hash-object")
        parser.add_argument(
            "-t",
            dest="type",
            choices=OBJECT_TYPES,
            default="blob",
            help="Specify the type",
        )
        parser.add_argument(
            "-w",
            dest="write",
            action="store_true",
            help="Actually write the object into the database",
        )
        parser.add_argument("path", help="Read object from <file>")
        parsed_args = parser.parse_args(args)
        repo = Repo.discover() if parsed_args.write else None
        sha = porcelain.hash_object(
            parsed_args.path, parsed_args.type, write=parsed_args.write, repo=repo
        )
        sys.stdout.write(sha_to_hex(sha) + "\n")


class cmd_log(Command):
    """Display history of a given commit as a graphviz digraph."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="loosegit log")
        parser.add_argument("commit", help="Commit to start at")
        parsed_args = parser.parse_args(args)
        with Repo.discover() as repo:
            porcelain.log(repo, parsed_args.commit, outstream=sys.stdout)


class cmd_ls_tree(Command):
    """List the contents of a tree object."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="loosegit ls-tree")
        parser.add_argument("tree", help="A tree object, or a commit")
        parsed_args = parser.parse_args(args)
        with Repo.discover() as repo:
            porcelain.ls_tree(repo, parsed_args.tree, outstream=sys.stdout)


class cmd_checkout(Command):
    """Checkout a commit inside of an empty directory."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="loosegit checkout")
        parser.add_argument("commit", help="The commit or tree to checkout")
        parser.add_argument("path", help="The EMPTY directory to checkout on")
        parsed_args = parser.parse_args(args)
        with Repo.discover() as repo:
            porcelain.checkout(repo, parsed_args.commit, parsed_args.path)


class cmd_help(Command):
    """Display help information about loosegit."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="loosegit help")
        parser.parse_args(args)
        sys.stdout.write("Available commands:\n")
        for cmd in sorted(commands):
            sys.stdout.write(f"  {cmd:<12} {commands[cmd].__doc__}\n")


commands = {
    "cat-file": cmd_cat_file,
    "checkout": cmd_checkout,
    "hash-object": cmd_hash_object,
    "help": cmd_help,
    "init": cmd_init,
    "log": cmd_log,
    "ls-tree": cmd_ls_tree,
}

# Most specific classes first
_ERROR_PREFIXES: list[tuple[type[Exception], str]] = [
    (NotGitRepository, "fatal: not a git repository"),
    (UnsupportedVersion, "fatal: unsupported repository"),
    (CorruptObjectError, "error: corrupt object"),
    (UnknownKindError, "error: bad object"),
    (FormatError, "error: malformed object"),
    (NotFoundError, "error: no such object"),
    (TypeMismatchError, "error: wrong object type"),
    (DestinationNotDirectoryError, "error: cannot checkout"),
    (DestinationNotEmptyError, "error: cannot checkout"),
    (OSError, "error"),
    (ValueError, "error"),
]

_HANDLED_ERRORS = tuple(cls for cls, _prefix in _ERROR_PREFIXES)


def _report_error(exc: Exception) -> None:
    prefix = next(p for cls, p in _ERROR_PREFIXES if isinstance(exc, cls))
    sys.stderr.write(f"{prefix}: {exc}\n")


def main(argv: Sequence[str] | None = None) -> int | None:
    """Main entry point for the loosegit CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code or None
    """
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        parser = argparse.ArgumentParser(
            prog="loosegit", description="Simple command-line interface to loosegit"
        )
        parser.add_argument(
            "command",
            nargs="?",
            help=f"Command to run. Available: {', '.join(sorted(commands))}",
        )
        parser.print_help()
        return 1

    default_logging_config()

    cmd = argv[0]
    try:
        cmd_kls = commands[cmd]
    except KeyError:
        sys.stderr.write(f"No such subcommand: {cmd}\n")
        return 1
    try:
        logger.debug("running %s with %r", cmd, argv[1:])
        return cmd_kls().run(argv[1:])
    except _HANDLED_ERRORS as exc:
        _report_error(exc)
        return 1


def _main() -> None:
    signal.signal(signal.SIGINT, signal_int)
    sys.exit(main())


if __name__ == "__main__":
    _main()
