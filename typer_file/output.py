import errno
import logging
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

from attrs import define, field

from .common import Mode, NamedFile, Selector, Stdio, Token, open_selected, select
from .errors import FlushFailed
from .lock import STDOUT_LOCK, HandleLock
from .options import DEFAULT_OPTIONS, Options

logger = logging.getLogger(__name__)


@define(eq=False)
class Output:
    """
    An output sink, either standard output or a file opened for writing.

    Opening a file creates it if needed and truncates what was there before.
    """

    selector: Selector
    options: Options = DEFAULT_OPTIONS
    _writer: BinaryIO | None = field(default=None, init=False, repr=False)
    _lock: HandleLock = field(init=False, repr=False)
    _deferred: FlushFailed | None = field(default=None, init=False, repr=False)

    def __attrs_post_init__(self):
        match self.selector:
            case Stdio():
                self._lock = STDOUT_LOCK
            case NamedFile(path):
                self._writer = open_selected(self.selector, Mode.WRITE)
                self._lock = HandleLock(str(path))
            case _:
                raise TypeError(f"unknown selector: {self.selector!r}")

    @classmethod
    def stdout(cls, options: Options = DEFAULT_OPTIONS) -> "Output":
        return cls(Stdio(), options)

    @classmethod
    def open(cls, path: str | os.PathLike[str], options: Options = DEFAULT_OPTIONS) -> "Output":
        return cls(NamedFile(Path(path)), options)

    @classmethod
    def from_str(cls, token: Token, options: Options = DEFAULT_OPTIONS) -> "Output":
        match select(token):
            case Stdio():
                return cls.stdout(options)
            case NamedFile(path):
                return cls.open(path, options)

    @property
    def is_stdout(self) -> bool:
        return isinstance(self.selector, Stdio)

    @property
    def is_file(self) -> bool:
        return isinstance(self.selector, NamedFile)

    @property
    def path(self) -> Path | None:
        """The file this output writes to, ``None`` for standard output."""
        return self.selector.path if self.is_file else None

    @property
    def closed(self) -> bool:
        return self._writer is not None and self._writer.closed

    def lock(self, blocking: bool | None = None) -> "LockedOutput":
        """
        Lock the output and return a buffered writer over it.

        Buffered bytes are flushed when the returned ``LockedOutput`` leaves its
        ``with`` block or is released. ``blocking`` defaults to
        ``options.blocking``.
        """
        self._lock.acquire(self.options.blocking if blocking is None else blocking)
        try:
            return LockedOutput(self, self._sink())
        except BaseException:
            self._lock.release()
            raise

    def _sink(self) -> BinaryIO:
        if self.is_stdout:
            return sys.stdout.buffer
        if self._writer is None or self._writer.closed:
            raise ValueError(f"I/O operation on closed output {self.path}")
        return self._writer

    def _raise_deferred(self) -> None:
        error, self._deferred = self._deferred, None
        if error is not None:
            raise error

    def write(self, data: bytes) -> int:
        with self.lock() as f:
            return f.write(data)

    def flush(self) -> None:
        """Flush, raising a failure left behind by an earlier release first."""
        with self.lock() as f:
            f.flush()

    def close(self) -> None:
        # standard output belongs to the process
        if self._writer is not None:
            self._writer.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class LockedOutput:
    """A locked view of an ``Output`` that buffers writes in memory."""

    def __init__(self, handle: Output, writer: BinaryIO):
        self._handle = handle
        self._writer: BinaryIO | None = writer
        self._buffer = bytearray()

    def __repr__(self):
        state = "released" if self.released else f"{len(self._buffer)} bytes buffered"
        return f"<LockedOutput {self._handle.path or '<stdout>'} {state}>"

    @property
    def is_stdout(self) -> bool:
        return self._handle.is_stdout

    @property
    def is_file(self) -> bool:
        return self._handle.is_file

    @property
    def path(self) -> Path | None:
        return self._handle.path

    @property
    def released(self) -> bool:
        return self._writer is None

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def _checked(self) -> BinaryIO:
        if self._writer is None:
            raise ValueError("I/O operation on released output")
        return self._writer

    def write(self, data: bytes) -> int:
        self._checked()
        self._buffer += data
        if len(self._buffer) >= self._handle.options.buffer_size:
            self._commit()
        return len(data)

    def writelines(self, chunks: Iterable[bytes]) -> None:
        for chunk in chunks:
            self.write(chunk)

    def write_str(self, text: str) -> int:
        options = self._handle.options
        return self.write(text.encode(options.encoding, options.errors))

    def writeln(self, text: str = "") -> int:
        return self.write_str(text + "\n")

    def print(self, *values, sep: str = " ", end: str = "\n") -> None:
        self.write_str(sep.join(map(str, values)) + end)

    def flush(self) -> None:
        self._checked()
        self._handle._raise_deferred()
        self._commit()

    def _commit(self) -> None:
        writer = self._checked()
        data = bytes(self._buffer)
        written = 0
        try:
            if self._handle.is_stdout:
                sys.stdout.flush()
            while written < len(data):
                n = writer.write(data[written:])
                if n is None:
                    raise BlockingIOError(errno.EAGAIN, os.strerror(errno.EAGAIN))
                written += n
            writer.flush()
        except OSError as e:
            raise FlushFailed(e) from e
        finally:
            del self._buffer[:written]

    def release(self) -> None:
        """Flush and unlock; a failed flush raises ``FlushFailed`` after unlocking."""
        self._release(raising=True)

    def _release(self, raising: bool) -> None:
        if getattr(self, "_writer", None) is None:
            return
        try:
            self._commit()
        except FlushFailed as e:
            if raising:
                raise
            logger.warning("dropping %d buffered bytes for %s: %s", len(self._buffer), self, e)
            self._handle._deferred = e
        finally:
            self._writer = None
            self._buffer.clear()
            self._handle._lock.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self._release(raising=exc_type is None)

    def __del__(self):
        self._release(raising=False)
