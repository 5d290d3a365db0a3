"""
Result Formatters - Render query results as text

JsonLinesFormatter produces one compact JSON object per row and is what
``Database.execute_sql`` returns. TableFormatter draws aligned columns
for the interactive shell.
"""

import json
from typing import Any, Dict, List

from .errors import ErrorKind


class ResultFormatter:
    """Base formatter: messages, narrative lines, then rows"""

    def format_row(self, row: Dict[str, Any]) -> str:
        raise NotImplementedError

    def format_rows(self, rows: List[Dict[str, Any]]) -> str:
        return "\n".join(self.format_row(row) for row in rows)

    def format_error(self, result) -> str:
        if result.error_kind is ErrorKind.INTERNAL:
            return f"Error: {result.message}"
        return result.message

    def format_result(self, result) -> str:
        if not result.ok:
            return self.format_error(result)

        parts = []
        if result.message:
            parts.append(result.message)
        if result.lines:
            parts.extend(result.lines)
        elif result.rows:
            parts.append(self.format_rows(result.rows))
        return "\n".join(parts)


class JsonLinesFormatter(ResultFormatter):
    """One JSON mapping per row"""

    def format_row(self, row: Dict[str, Any]) -> str:
        return json.dumps(row, separators=(',', ':'), ensure_ascii=False)


class TableFormatter(ResultFormatter):
    """Aligned columns with a header, for terminals"""

    def __init__(self, max_width: int = 40):
        self.max_width = max_width

    def format_row(self, row: Dict[str, Any]) -> str:
        return " | ".join(f"{key}={value}" for key, value in row.items())

    def format_rows(self, rows: List[Dict[str, Any]], columns: List[str] = None) -> str:
        if not rows:
            return "(0 rows)"

        columns = columns or list(rows[0].keys())

        # Calculate column widths
        widths = {col: len(col) for col in columns}
        for row in rows:
            for col in columns:
                widths[col] = max(widths[col], len(str(row.get(col, ''))))

        # Limit column width for readability
        widths = {col: min(w, self.max_width) for col, w in widths.items()}

        header = " | ".join(col.ljust(widths[col])[:widths[col]] for col in columns)
        separator = "-+-".join("-" * widths[col] for col in columns)

        lines = [header, separator]
        for row in rows:
            values = [str(row.get(col, '')).ljust(widths[col])[:widths[col]] for col in columns]
            lines.append(" | ".join(values))

        lines.append(f"\n({len(rows)} row(s))")
        return "\n".join(lines)

    def format_result(self, result) -> str:
        if not result.ok:
            return self.format_error(result)

        parts = []
        if result.message:
            parts.append(result.message)
        if result.lines:
            parts.extend(result.lines)
        elif result.rows:
            parts.append(self.format_rows(result.rows, result.columns))
        elif not result.message:
            parts.append("(0 rows)")
        if result.affected_rows > 0:
            parts.append(f"({result.affected_rows} row(s) affected)")
        return "\n".join(parts)
