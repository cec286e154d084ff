import os
import shutil
import sys
import tempfile
from io import BytesIO

import atheris

with atheris.instrument_imports():
    from test_utils import is_expected_exception

    from loosegit.config import ConfigFile
    from loosegit.repo import Repo, UnsupportedVersion

_PARSE_ERRORS = [
    "without section",
    "invalid variable name",
    "expected trailing ]",
    "invalid section name",
    "Invalid subsection",
    "escape character",
    "missing end quote",
]


def _open_repo(config_data: bytes) -> None:
    """Open a repository whose config file holds config_data."""
    tempdir = tempfile.mkdtemp()
    try:
        os.makedirs(os.path.join(tempdir, ".git", "objects"))
        with open(os.path.join(tempdir, ".git", "config"), "wb") as f:
            f.write(config_data)
        try:
            repo = Repo(tempdir)
        except UnsupportedVersion:
            return
        with repo:
            config = repo.get_config()
            assert config.get_int("core", "repositoryformatversion", 0) == 0
            assert repo.object_store.loose_compression_level == config.get_int(
                "core", "loosecompression", -1
            )
            try:
                config.get_boolean("core", "filemode", True)
            except ValueError as e:
                if not is_expected_exception(["not a valid boolean"], e):
                    raise e
    finally:
        shutil.rmtree(tempdir)


def TestOneInput(data: bytes) -> int | None:
    try:
        cf = ConfigFile.from_file(BytesIO(data))
    except ValueError as e:
        if is_expected_exception(_PARSE_ERRORS, e):
            return -1
        else:
            raise e
    out = BytesIO()
    cf.write_to_file(out)
    out.seek(0)
    assert ConfigFile.from_file(out) == cf

    try:
        _open_repo(data)
    except ValueError as e:
        # core.loosecompression that is not an integer
        if is_expected_exception(["not a valid integer"], e):
            return -1
        raise e
    return None


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
