from __future__ import annotations

import io

import pytest

from results import SteadyStateWriter, output_path, write_steady_states


def test_output_path_uses_model_name(tmp_path) -> None:
    assert output_path("toggle", tmp_path) == tmp_path / "toggle_stable.csv"
    assert output_path("toggle", tmp_path, suffix=".tsv") == tmp_path / "toggle.tsv"


def test_writer_streams_rows() -> None:
    buffer = io.StringIO()
    writer = SteadyStateWriter(buffer, ["A", "B"])
    writer.write((0, 0))
    writer.write((1, 1))

    assert buffer.getvalue() == "A,B\n0,0\n1,1\n"
    assert writer.rows == 2


def test_writer_rejects_wrong_width() -> None:
    writer = SteadyStateWriter(io.StringIO(), ["A", "B"])
    with pytest.raises(ValueError):
        writer.write((0,))


def test_write_steady_states_header_only_when_empty(tmp_path) -> None:
    target = tmp_path / "nested" / "empty_stable.csv"

    rows = write_steady_states(target, ["A", "B", "C"], [], delimiter=";")

    assert rows == 0
    assert target.read_text(encoding="utf-8") == "A;B;C\n"


@pytest.mark.parametrize("name", ["../escaped", "a/b", "..", "", "dir\\name"])
def test_output_path_rejects_names_leaving_the_directory(tmp_path, name) -> None:
    with pytest.raises(ValueError):
        output_path(name, tmp_path)
