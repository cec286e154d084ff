import os
import shutil
import stat
import sys
import tempfile

import atheris

with atheris.instrument_imports():
    # We instrument `test_utils` as well, so it doesn't block coverage analysis in Fuzz Introspector:
    from test_utils import EnhancedFuzzedDataProvider

    from loosegit.checkout import checkout
    from loosegit.errors import FormatError
    from loosegit.object_store import DiskObjectStore
    from loosegit.objects import Blob, Commit, Tree, sha_to_hex
    from loosegit.walk import log


def TestOneInput(data: bytes) -> int | None:
    fdp = EnhancedFuzzedDataProvider(data)
    tempdir = tempfile.mkdtemp()
    try:
        store = DiskObjectStore.init(os.path.join(tempdir, "objects"))
        blob = Blob.from_string(fdp.ConsumeRandomBytes())
        mode = fdp.PickValueInList([b"100644", b"100755", b"120000"])
        if not stat.S_ISLNK(int(mode, 8)):
            blob_sha = store.write(blob)
        else:
            # Keep symlink targets inside the checkout
            blob_sha = store.write(Blob.from_string(b"target"))
        tree = Tree()
        try:
            tree.add(mode, fdp.ConsumeRandomBytes(64), blob_sha)
        except FormatError:
            return -1
        tree_sha = store.write(tree)

        commit = Commit()
        commit.tree = sha_to_hex(tree_sha)
        try:
            commit.author = fdp.ConsumeRandomString(64)
            commit.message = fdp.ConsumeRandomString()
            commit_sha = store.write(commit)
        except FormatError:
            return -1
        assert store[commit_sha] == commit
        assert store[blob_sha].as_raw_string() == store.get_raw(blob_sha)[1]
        assert log(store, commit_sha) == []

        try:
            checkout(store, commit_sha, os.path.join(tempdir, "target"))
        except FormatError:
            # Unsafe entry names are refused
            return -1
        except (OSError, UnicodeEncodeError):
            # Names the filesystem cannot represent
            return -1
        return None
    finally:
        shutil.rmtree(tempdir)


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
