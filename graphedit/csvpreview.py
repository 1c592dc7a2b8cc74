"""Preview of the first lines of a delimited text file split into cells."""

from __future__ import annotations

import enum
import errno
import itertools
import os
from dataclasses import dataclass, field

from graphedit.table import CellTable


class Delimiter(str, enum.Enum):
    """The common column separators."""

    COMMA = ","
    SEMICOLON = ";"
    TAB = "\t"


@dataclass
class CsvPreview:
    """The leading lines of a delimited file."""

    lines: list[str] = field(default_factory=list)

    @classmethod
    def load(cls, file_name: str, max_lines: int = 10) -> "CsvPreview":
        """Read up to ``max_lines`` lines of ``file_name``."""
        if not os.path.exists(file_name):
            raise FileNotFoundError(errno.ENOENT, f"{file_name} does not exist", file_name)
        try:
            with open(file_name, encoding="utf-8", errors="replace", newline="") as stream:
                lines = [
                    line.rstrip("\r\n") for line in itertools.islice(stream, max_lines)
                ]
        except OSError as exc:
            raise OSError(exc.errno, f"{file_name} cannot be read", file_name) from exc
        return cls(lines)

    def table(self, separator: Delimiter | str) -> CellTable:
        """Split every line at ``separator`` into the cells of a table."""
        sep = separator.value if isinstance(separator, Delimiter) else separator
        if not sep:
            raise ValueError("separator must not be empty")
        table = CellTable()
        for row, line in enumerate(self.lines):
            for column, text in enumerate(line.split(sep)):
                table.set_cell_text(row, column, text)
        return table

    def raw_text(self) -> str:
        """The previewed lines joined by newlines."""
        return "\n".join(self.lines)