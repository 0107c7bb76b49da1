from typing import Any

import click
import typer
from click.shell_completion import CompletionItem

from .errors import IoError
from .input import Input
from .options import DEFAULT_OPTIONS, Options
from .output import Output


class _HandleType(click.ParamType):
    handle: type[Input] | type[Output]

    def __init__(self, options: Options = DEFAULT_OPTIONS):
        self.options = options

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None):
        if isinstance(value, self.handle):
            return value
        try:
            return self.handle.from_str(value, self.options)
        except IoError as e:
            # typer may bundle its own click
            raise typer.BadParameter(str(e), ctx=ctx, param=param) from e

    def shell_complete(self, ctx: click.Context, param: click.Parameter, incomplete: str) -> list[CompletionItem]:
        return [CompletionItem(incomplete, type="file")]


class InputType(_HandleType):
    """Resolve ``-`` to standard input and anything else to a file opened for reading."""

    name = "input"
    handle = Input


class OutputType(_HandleType):
    """Resolve ``-`` to standard output and anything else to a file opened for writing."""

    name = "output"
    handle = Output


INPUT = InputType()
OUTPUT = OutputType()
