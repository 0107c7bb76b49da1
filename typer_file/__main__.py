#!/usr/bin/env python
from typing import Annotated

import typer

from typer_file import INPUT, OUTPUT, Input, Output, load_options

app = typer.Typer(add_completion=False)


@app.command()
def main(
    source: Annotated[Input, typer.Argument(click_type=INPUT, metavar="INPUT", show_default=False)] = "-",
    output: Annotated[Output, typer.Option("--output", "-o", click_type=OUTPUT, show_default=False)] = "-",
    number: Annotated[bool, typer.Option("--number", "-n")] = False,
    config: Annotated[Input, typer.Option("--config", "-c", click_type=INPUT, show_default=False)] = None,
):
    """Copy INPUT to OUTPUT line by line; '-' means standard input or output."""
    if config is not None:
        with config:
            source.options = output.options = load_options(config)

    with source, output, source.lock() as reader, output.lock() as writer:
        for index, line in enumerate(reader, start=1):
            if number:
                writer.print(f"{index:6}", line, sep="\t")
            else:
                writer.writeln(line)


def run():
    app()


if __name__ == "__main__":
    run()
