import re

import pytest
import typer
from typer.testing import CliRunner

from typer_file import INPUT, OUTPUT, Input, Options, Output, OutputType
from typer_file.__main__ import app

runner = CliRunner()


def flatten(text: str) -> str:
    """Collapse whitespace and panel borders so wrapped messages compare as one line."""
    return re.sub(r"[\s│╭╮╰╯─]+", " ", text)


def test_convert_resolves_handles(tmp_path):
    path = tmp_path / "in.txt"
    path.write_text("a\n")
    source = INPUT.convert(str(path), None, None)
    assert isinstance(source, Input) and source.path == path
    assert INPUT.convert(source, None, None) is source
    assert INPUT.convert("-", None, None).is_stdin
    assert OUTPUT.convert("-", None, None).is_stdout
    source.close()


def test_convert_reports_open_failures(tmp_path):
    missing = tmp_path / "missing.txt"
    with pytest.raises(typer.BadParameter) as info:
        INPUT.convert(str(missing), None, None)
    assert f"failed to open '{missing}': No such file or directory" in info.value.message


def test_convert_passes_options(tmp_path):
    options = Options(buffer_size=16)
    sink = OutputType(options).convert(str(tmp_path / "out.txt"), None, None)
    assert isinstance(sink, Output)
    assert sink.options is options
    sink.close()


def test_cat_copies_standard_streams():
    result = runner.invoke(app, [], input="a\nb\nc")
    assert result.exit_code == 0, result.output
    assert result.stdout == "a\nb\nc\n"


def test_cat_copies_files(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("x\ny\n")
    target = tmp_path / "out.txt"
    target.write_text("stale content that must disappear\n")
    result = runner.invoke(app, [str(source), "-o", str(target), "--number"])
    assert result.exit_code == 0, result.output
    assert target.read_text() == "     1\tx\n     2\ty\n"


def test_cat_reads_options(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes("caf\xe9\n".encode("latin-1"))
    config = tmp_path / "options.yaml"
    config.write_text("encoding: latin-1\n")
    target = tmp_path / "out.txt"
    result = runner.invoke(app, [str(source), "-o", str(target), "-c", str(config)])
    assert result.exit_code == 0, result.output
    assert target.read_bytes() == "caf\xe9\n".encode("latin-1")


def test_cat_rejects_missing_input(tmp_path):
    missing = tmp_path / "missing.txt"
    result = runner.invoke(app, [str(missing)])
    assert result.exit_code == 2
    assert "No such file or directory" in flatten(result.output)
    assert not missing.exists()


def test_cat_rejects_unwritable_output(tmp_path):
    result = runner.invoke(app, ["-o", str(tmp_path / "no" / "out.txt")], input="a\n")
    assert result.exit_code == 2
    assert "No such file or directory" in flatten(result.output)
