"""Table rendering utilities for CLI output."""

from typing import Any

import click


def render_table(data: list[dict[str, Any]], title: str, max_col_width: int = 50) -> None:
    """Render a list of dictionaries sharing the same keys as a table.

    Args:
        data: Rows to display, the first row's keys are the columns
        title: Title for the table
        max_col_width: Maximum column width
    """
    click.echo(f"\n{click.style(f'📊 {title} ({len(data)} rows):', fg='cyan', bold=True)}\n")
    if not data:
        return

    columns = list(data[0].keys())

    col_widths = {}
    for col in columns:
        col_widths[col] = len(str(col))
        for row in data:
            val_len = len(str(row.get(col, "")))
            if val_len > col_widths[col]:
                col_widths[col] = val_len
        col_widths[col] = min(col_widths[col], max_col_width)

    header = " │ ".join(str(col).ljust(col_widths[col]) for col in columns)
    click.echo(header)
    click.echo("─" * len(header))

    for row in data:
        row_parts = []
        for col in columns:
            val = str(row.get(col, ""))
            if len(val) > col_widths[col]:
                val = val[: col_widths[col] - 3] + "..."
            row_parts.append(val.ljust(col_widths[col]))
        click.echo(" │ ".join(row_parts))
