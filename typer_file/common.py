import logging
import os
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from attrs import define

from .errors import OpenFailed

logger = logging.getLogger(__name__)

SENTINEL = "-"

type Token = str | os.PathLike[str]


@define(frozen=True)
class Stdio:
    pass


@define(frozen=True)
class NamedFile:
    path: Path


type Selector = Stdio | NamedFile


class Mode(Enum):
    READ = "rb"
    WRITE = "wb"

    @property
    def buffering(self) -> int:
        # LockedOutput does its own buffering
        return 0 if self is Mode.WRITE else -1


def select(token: Token) -> Selector:
    """
    Decide whether a token names the standard stream or a file.

    Only a ``str`` equal to the sentinel selects the standard stream. Path
    objects are already paths, and ``Path("./-")`` would otherwise collapse
    into the sentinel.
    """
    if isinstance(token, str):
        if token == SENTINEL:
            return Stdio()
        return NamedFile(Path(token))
    if isinstance(token, os.PathLike):
        return NamedFile(Path(token))
    raise TypeError(f"token must be str or os.PathLike, not {type(token).__name__!r}")


def open_selected(selector: Selector, mode: Mode) -> BinaryIO | None:
    match selector:
        case Stdio():
            logger.debug("resolved %s to the standard stream", mode.name.lower())
            return None
        case NamedFile(path):
            try:
                stream = path.open(mode.value, buffering=mode.buffering)
            except OSError as e:
                raise OpenFailed(path, e) from e
            logger.debug("opened %s for %s", path, mode.name.lower())
            return stream
        case _:
            raise TypeError(f"unknown selector: {selector!r}")
