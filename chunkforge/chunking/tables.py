"""
Table Extractor.

Finds tables in plain text by scanning for runs of row-like lines: a line
is a candidate row when a tab, a pipe or a run of two or more spaces splits
it into at least two non-empty cells. Runs of two or more candidate rows
become a table; any other line closes the run.

Rows are normalized to the widest row by right-padding with empty cells,
and each table is rendered to HTML with the first row as the header:

    >>> tables = TableExtractor().extract("A\\tB\\tC\\nD\\tE\\tF\\n")
    >>> tables[0].rows, tables[0].columns
    (2, 3)

Text carries no geometry, so every table gets the unit bounding box and a
fixed confidence.
"""

import html
import re
from typing import List, Sequence, Tuple

from chunkforge.chunking.models import BoundingBox, Table
from chunkforge.core.logging import get_logger

logger = get_logger(__name__)

TABLE_CONFIDENCE = 0.8
MIN_TABLE_ROWS = 2
MIN_ROW_CELLS = 2

_ROW_SEPARATORS = ("\t", "|", "  ")
_CELL_SPLIT = re.compile(r"\t|\||\s{2,}")


def is_table_row(line: str) -> bool:
    """Check if a (trimmed) line looks like a table row."""
    return any(
        separator in line
        and sum(1 for cell in line.split(separator) if cell.strip()) >= MIN_ROW_CELLS
        for separator in _ROW_SEPARATORS
    )


def parse_cells(line: str) -> List[str]:
    """Split a row into non-empty, trimmed cells."""
    return [cell.strip() for cell in _CELL_SPLIT.split(line) if cell.strip()]


def normalize_rows(rows: Sequence[Sequence[str]]) -> Tuple[Tuple[str, ...], ...]:
    """Right-pad every row with empty cells to the widest row."""
    width = max((len(row) for row in rows), default=0)
    return tuple(tuple(row) + ("",) * (width - len(row)) for row in rows)


def render_table_html(data: Sequence[Sequence[str]]) -> str:
    """Render a matrix as an HTML table, first row in <thead>."""
    if not data:
        return ""

    lines = ['<table border="1">', "  <thead>", "    <tr>"]
    lines.extend(f"      <th>{html.escape(cell, quote=True)}</th>" for cell in data[0])
    lines.extend(["    </tr>", "  </thead>"])

    if len(data) > 1:
        lines.append("  <tbody>")
        for row in data[1:]:
            lines.append("    <tr>")
            lines.extend(f"      <td>{html.escape(cell, quote=True)}</td>" for cell in row)
            lines.append("    </tr>")
        lines.append("  </tbody>")

    lines.append("</table>")
    return "\n".join(lines)


class TableExtractor:
    """Line-scan table detection over raw text."""

    def extract(self, text: str) -> List[Table]:
        """
        Extract all tables from the text.

        Args:
            text: Raw document text; form feeds mark page breaks

        Returns:
            Tables in document order, ids table_1, table_2, ...
        """
        tables: List[Table] = []
        run: List[str] = []
        run_page = 1
        page = 1

        for raw_line in text.split("\n"):
            page += raw_line.count("\f")
            line = raw_line.strip()

            if is_table_row(line):
                if not run:
                    run_page = page
                run.append(line)
                continue

            if len(run) >= MIN_TABLE_ROWS:
                tables.append(self._build_table(run, len(tables) + 1, run_page))
            run = []

        if len(run) >= MIN_TABLE_ROWS:
            tables.append(self._build_table(run, len(tables) + 1, run_page))

        logger.debug("Tables extracted", tables=len(tables))
        return tables

    def _build_table(self, rows: List[str], number: int, page_number: int) -> Table:
        cells = [parse_cells(row) for row in rows]
        data = normalize_rows([row for row in cells if row])
        columns = len(data[0]) if data else 0

        return Table(
            id=f"table_{number}",
            page_number=page_number,
            bounding_box=BoundingBox.unit(),
            rows=len(data),
            columns=columns,
            content=data,
            html_content=render_table_html(data),
            confidence=TABLE_CONFIDENCE,
        )
