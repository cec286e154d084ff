import sys

import atheris

with atheris.instrument_imports():
    from test_utils import EnhancedFuzzedDataProvider

    from loosegit.errors import FileFormatException
    from loosegit.objects import (
        OBJECT_CLASSES,
        ShaFile,
        format_kvlm,
        parse_kvlm,
    )


def TestOneInput(data: bytes) -> int | None:
    fdp = EnhancedFuzzedDataProvider(data)
    cls = fdp.PickValueInList(list(OBJECT_CLASSES))
    body = fdp.ConsumeRemainingBytes()

    try:
        obj = ShaFile.from_raw_string(cls.type_name, body)
    except FileFormatException:
        return -1

    # Serializing is stable once an object has been parsed
    raw = obj.as_raw_string()
    again = ShaFile.from_raw_string(cls.type_name, raw)
    assert again.as_raw_string() == raw
    assert ShaFile.from_framed_string(obj.as_framed_string()).digest == obj.digest
    if cls.type_name in (b"commit", b"tag"):
        assert format_kvlm(parse_kvlm(raw)) == raw
    return None


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
