"""Renderers for scan results: JSON, CSV and a terminal table."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .retrieval.scanner import StaleRepo

console = Console()


def _has_size(records: Sequence[StaleRepo]) -> bool:
    return any(r.size is not None for r in records)


def to_json(records: Sequence[StaleRepo]) -> str:
    """Pretty-printed JSON array of result objects."""
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)


def records_from_json(text: str) -> List[StaleRepo]:
    return [StaleRepo.from_dict(item) for item in json.loads(text)]


def csv_lines(records: Sequence[StaleRepo]) -> List[str]:
    """Header plus one comma-joined line per record; values are not quoted."""
    with_size = _has_size(records)
    header = ["Repo", "Commits"]
    if with_size:
        header.append("Size in kB")
    header += ["Last Updated", "Last Commit", "Author", "Author Email"]

    lines = [",".join(header)]
    for r in records:
        row = [r.name, str(r.commits)]
        if with_size:
            row.append("" if r.size is None else str(r.size))
        row += [r.pushed_at, r.last_commit_date, r.last_commit_author, r.last_commit_author_email]
        lines.append(",".join(row))
    return lines


def write_csv(path: str | Path, records: Sequence[StaleRepo]) -> None:
    """Write the CSV report to disk using UTF-8."""
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(csv_lines(records)) + "\n")


def build_table(records: Sequence[StaleRepo]) -> Table:
    with_size = _has_size(records)
    table = Table(title="Stale Repositories")
    table.add_column("Repo", style="cyan")
    table.add_column("Commits", justify="right")
    if with_size:
        table.add_column("Size", justify="right")
    table.add_column("Last Updated")
    table.add_column("Last Commit")
    table.add_column("Author")
    table.add_column("Email")

    for r in records:
        row = [r.name, str(r.commits)]
        if with_size:
            row.append("" if r.size is None else f"{r.size} kB")
        row += [r.pushed_at, r.last_commit_date, r.last_commit_author, r.last_commit_author_email]
        table.add_row(*[escape(cell) for cell in row])
    return table


def render_table(records: Sequence[StaleRepo], out: Optional[Console] = None) -> None:
    (out or console).print(build_table(records))


__all__ = [
    "to_json",
    "records_from_json",
    "csv_lines",
    "write_csv",
    "build_table",
    "render_table",
]
