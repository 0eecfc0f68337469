"""Builds the HTML fragments that are rendered into converted PDFs."""

from typing import List, Optional, Sequence


class HtmlConverter:
    """Generates escaped HTML for documents, sheets and slides."""

    def heading(self, text: str, level: int = 1) -> str:
        level = min(max(level, 1), 6)
        return f'<h{level}>{self.escape_html(text)}</h{level}>'

    def paragraph(self, text: str) -> str:
        return f'<p>{self.escape_html(text)}</p>'

    def document(self, lines: Sequence[str], title: Optional[str] = None) -> str:
        """Render plain text lines as one paragraph each, with an optional title."""
        html = self.heading(title) if title else ''
        html += ''.join(self.paragraph(line) for line in lines)
        return html

    def table(self, rows: Sequence[Sequence[str]]) -> str:
        """Convert a list of rows to an HTML table, padding short rows."""
        if not rows:
            return ''

        columns = max(len(row) for row in rows)
        html = '<table><tbody>'
        for row in rows:
            html += '<tr>'
            for col_idx in range(columns):
                cell = row[col_idx] if col_idx < len(row) else ''
                html += f'<td>{self.escape_html(cell)}</td>'
            html += '</tr>'
        html += '</tbody></table>'
        return html

    def sheet(self, name: str, rows: Sequence[Sequence[str]]) -> str:
        return self.heading(f"Sheet: {name}", level=2) + self.table(rows)

    def slide(self, title: str, lines: List[str]) -> str:
        body = '<br>'.join(self.escape_html(line) for line in lines)
        return (
            f'<div class="slide"><h1>{self.escape_html(title)}</h1>'
            f'<p>{body}</p></div>'
        )

    def escape_html(self, text: str) -> str:
        """Escape HTML special characters."""
        return (
            text
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&#039;")
        )
