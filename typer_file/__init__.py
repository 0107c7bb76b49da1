from .common import SENTINEL, Mode, NamedFile, Selector, Stdio, Token, select
from .errors import ContentionError, FlushFailed, IoError, OpenFailed
from .input import Input, LockedInput
from .lock import HandleLock
from .options import DEFAULT_OPTIONS, Options, load_options
from .output import LockedOutput, Output
from .params import INPUT, OUTPUT, InputType, OutputType


def resolve(token: Token, mode: Mode, options: Options = DEFAULT_OPTIONS) -> Input | Output:
    match mode:
        case Mode.READ:
            return Input.from_str(token, options)
        case Mode.WRITE:
            return Output.from_str(token, options)
        case _:
            raise ValueError(f"unknown mode: {mode!r}")
