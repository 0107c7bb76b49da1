import errno
import io
import os
import sys

import pytest

from typer_file import Output


@pytest.fixture
def stdin_bytes(monkeypatch):
    """Replace standard input with a stream over the given bytes."""

    def feed(data: bytes):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data), encoding="utf-8"))

    return feed


class FullWriter(io.RawIOBase):
    def writable(self):
        return True

    def write(self, b):
        raise OSError(errno.ENOSPC, os.strerror(errno.ENOSPC))


def dev_full_available() -> bool:
    try:
        with open("/dev/full", "wb", buffering=0) as f:
            f.write(b"x")
    except OSError as e:
        return e.errno == errno.ENOSPC
    return False


@pytest.fixture(params=["full-writer", "/dev/full"])
def failing_output(request, tmp_path):
    """An ``Output`` whose every write fails with ENOSPC."""
    if request.param == "full-writer":
        sink = Output.open(tmp_path / "full.bin")
        sink._writer.close()
        sink._writer = FullWriter()
    elif dev_full_available():
        sink = Output.open(request.param)
    else:
        pytest.skip("/dev/full does not fail writes here")
    yield sink
    sink.close()
