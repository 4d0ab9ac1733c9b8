"""CSV writer for steady states: one header row of species names, one row per state."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import IO, Iterable, Sequence

_DEFAULT_SUFFIX = "_stable.csv"


def output_path(model_name: str, directory: str | Path, *, suffix: str = _DEFAULT_SUFFIX) -> Path:
    """Return ``<directory>/<model_name><suffix>``.

    The file name must stay inside ``directory``: a model name that is not a
    single path component raises :class:`ValueError`.
    """

    filename = f"{model_name}{suffix}"
    if not model_name or model_name in {".", ".."} or Path(filename).name != filename or "\\" in filename:
        raise ValueError(f"model name {model_name!r} cannot be used as a file name")
    return Path(directory) / filename


class SteadyStateWriter:
    """Streams configurations into a delimited text file as they are produced."""

    def __init__(self, handle: IO[str], names: Sequence[str], *, delimiter: str = ",") -> None:
        self._names = tuple(names)
        self._writer = csv.writer(handle, delimiter=delimiter, lineterminator="\n")
        self._writer.writerow(self._names)
        self.rows = 0

    def write(self, configuration: Sequence[int]) -> None:
        if len(configuration) != len(self._names):
            raise ValueError(
                f"configuration has {len(configuration)} values but the header lists {len(self._names)} species"
            )
        self._writer.writerow([int(value) for value in configuration])
        self.rows += 1


def write_steady_states(
    path: str | Path,
    names: Sequence[str],
    configurations: Iterable[Sequence[int]],
    *,
    delimiter: str = ",",
) -> int:
    """Write every configuration to ``path`` and return the number of rows."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8", newline="") as handle:
        writer = SteadyStateWriter(handle, names, delimiter=delimiter)
        for configuration in configurations:
            writer.write(configuration)
    return writer.rows


__all__ = ["SteadyStateWriter", "output_path", "write_steady_states"]
