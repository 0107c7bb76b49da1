import os
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from attrs import define, field

from .common import Mode, NamedFile, Selector, Stdio, Token, open_selected, select
from .lock import STDIN_LOCK, HandleLock
from .options import DEFAULT_OPTIONS, Options


@define(eq=False)
class Input:
    """
    An input source, either standard input or a file opened for reading.

    Typical use from a typer command::

        def main(input: Annotated[Input, typer.Argument(click_type=INPUT)] = "-"):
            with input.lock() as f:
                for line in f:
                    ...
    """

    selector: Selector
    options: Options = DEFAULT_OPTIONS
    _reader: BinaryIO | None = field(default=None, init=False, repr=False)
    _lock: HandleLock = field(init=False, repr=False)

    def __attrs_post_init__(self):
        match self.selector:
            case Stdio():
                self._lock = STDIN_LOCK
            case NamedFile(path):
                self._reader = open_selected(self.selector, Mode.READ)
                self._lock = HandleLock(str(path))
            case _:
                raise TypeError(f"unknown selector: {self.selector!r}")

    @classmethod
    def stdin(cls, options: Options = DEFAULT_OPTIONS) -> "Input":
        return cls(Stdio(), options)

    @classmethod
    def open(cls, path: str | os.PathLike[str], options: Options = DEFAULT_OPTIONS) -> "Input":
        return cls(NamedFile(Path(path)), options)

    @classmethod
    def from_str(cls, token: Token, options: Options = DEFAULT_OPTIONS) -> "Input":
        match select(token):
            case Stdio():
                return cls.stdin(options)
            case NamedFile(path):
                return cls.open(path, options)

    @property
    def is_stdin(self) -> bool:
        return isinstance(self.selector, Stdio)

    @property
    def is_file(self) -> bool:
        return isinstance(self.selector, NamedFile)

    @property
    def path(self) -> Path | None:
        """The file this input reads from, ``None`` for standard input."""
        return self.selector.path if self.is_file else None

    @property
    def closed(self) -> bool:
        return self._reader is not None and self._reader.closed

    def lock(self, blocking: bool | None = None) -> "LockedInput":
        """
        Lock the input and return a buffered reader over it.

        The lock is held until the returned ``LockedInput`` leaves its ``with``
        block or is released. ``blocking`` defaults to ``options.blocking``.
        """
        self._lock.acquire(self.options.blocking if blocking is None else blocking)
        try:
            return LockedInput(self, self._source())
        except BaseException:
            self._lock.release()
            raise

    def _source(self) -> BinaryIO:
        if self.is_stdin:
            return sys.stdin.buffer
        if self._reader is None or self._reader.closed:
            raise ValueError(f"I/O operation on closed input {self.path}")
        return self._reader

    def read(self, size: int = -1) -> bytes:
        with self.lock() as f:
            return f.read(size)

    def readline(self, size: int = -1) -> bytes:
        with self.lock() as f:
            return f.readline(size)

    def close(self) -> None:
        # standard input belongs to the process
        if self._reader is not None:
            self._reader.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class LockedInput:
    """A locked, buffered view of an ``Input``."""

    def __init__(self, handle: Input, reader: BinaryIO):
        self._handle = handle
        self._reader: BinaryIO | None = reader

    def __repr__(self):
        state = "released" if self.released else "locked"
        return f"<LockedInput {self._handle.path or '<stdin>'} {state}>"

    @property
    def is_stdin(self) -> bool:
        return self._handle.is_stdin

    @property
    def is_file(self) -> bool:
        return self._handle.is_file

    @property
    def path(self) -> Path | None:
        return self._handle.path

    @property
    def released(self) -> bool:
        return self._reader is None

    def _checked(self) -> BinaryIO:
        if self._reader is None:
            raise ValueError("I/O operation on released input")
        return self._reader

    def read(self, size: int = -1) -> bytes:
        return self._checked().read(size)

    def read1(self, size: int = -1) -> bytes:
        return self._checked().read1(size)

    def readline(self, size: int = -1) -> bytes:
        return self._checked().readline(size)

    def readinto(self, buffer) -> int:
        return self._checked().readinto(buffer)

    def read_text(self) -> str:
        options = self._handle.options
        return self.read().decode(options.encoding, options.errors)

    def lines(self) -> Iterator[str]:
        """
        Yield the remaining lines without their terminators.

        Both ``\\n`` and ``\\r\\n`` end a line. A last line without a
        terminator is still yielded.
        """
        options = self._handle.options
        while line := self._checked().readline():
            if line.endswith(b"\n"):
                line = line[:-1]
                if line.endswith(b"\r"):
                    line = line[:-1]
            yield line.decode(options.encoding, options.errors)

    def __iter__(self) -> Iterator[str]:
        return self.lines()

    def release(self) -> None:
        if getattr(self, "_reader", None) is None:
            return
        self._reader = None
        self._handle._lock.release()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.release()

    def __del__(self):
        self.release()
