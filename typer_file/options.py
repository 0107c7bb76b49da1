import io
from collections.abc import Mapping
from typing import TYPE_CHECKING

import yaml
from attrs import define, field, validators
from cattrs import Converter

from .common import Token

try:
    from yaml import CSafeLoader as SafeLoader
except ImportError:
    from yaml import SafeLoader

if TYPE_CHECKING:
    from .input import Input


@define(frozen=True)
class Options:
    encoding: str = "utf-8"
    errors: str = "strict"
    buffer_size: int = field(default=io.DEFAULT_BUFFER_SIZE, validator=validators.gt(0))
    blocking: bool = True


DEFAULT_OPTIONS = Options()

__converter = Converter(forbid_extra_keys=True)


def structure_options(data: Mapping | None) -> Options:
    if not data:
        return DEFAULT_OPTIONS
    return __converter.structure(data, Options)


def load_options(source: "Input | Token") -> Options:
    """
    Read options from a YAML (or JSON) mapping.

    ``source`` is either a resolved ``Input`` or a token to resolve; a handle
    resolved here is closed again before returning.
    """
    from .input import Input

    if isinstance(source, Input):
        return __read_options(source)
    with Input.from_str(source) as handle:
        return __read_options(handle)


def __read_options(source: "Input") -> Options:
    with source.lock() as f:
        data = yaml.load(f.read_text(), SafeLoader)
    if data is not None and not isinstance(data, Mapping):
        raise ValueError(f"options must be a mapping, not {type(data).__name__}")
    return structure_options(data)
