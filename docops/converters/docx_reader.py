"""Extracts DOCX body content as HTML using python-docx."""

import io
import re

from docx import Document
from docx.table import Table
from docx.text.paragraph import Paragraph

from .html_converter import HtmlConverter

HEADING_STYLE = re.compile(r"^Heading (\d)$")


class DocxReader:
    """Walks paragraphs and tables of a DOCX body in document order."""

    def __init__(self, html_converter: HtmlConverter = None):
        self.html = html_converter or HtmlConverter()

    def to_html(self, data: bytes) -> str:
        document = Document(io.BytesIO(data))

        parts = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                parts.append(self._table_to_html(block))
            elif isinstance(block, Paragraph):
                parts.append(self._paragraph_to_html(block))
        return "".join(parts)

    def _paragraph_to_html(self, paragraph: Paragraph) -> str:
        if not paragraph.text.strip():
            return ""

        content = ""
        for run in paragraph.runs:
            text = self.html.escape_html(run.text)
            if not text:
                continue
            if run.bold:
                text = f"<b>{text}</b>"
            if run.italic:
                text = f"<i>{text}</i>"
            content += text
        if not content:
            # Text held outside plain runs (hyperlinks, fields).
            content = self.html.escape_html(paragraph.text)

        tag = self._tag_for_style(paragraph.style.name if paragraph.style is not None else "")
        return f"<{tag}>{content}</{tag}>"

    def _table_to_html(self, table: Table) -> str:
        rows = [[cell.text for cell in row.cells] for row in table.rows]
        return self.html.table(rows)

    @staticmethod
    def _tag_for_style(style_name: str) -> str:
        """Map a paragraph style name to an HTML tag."""
        if style_name == "Title":
            return "h1"
        match = HEADING_STYLE.match(style_name)
        if match:
            return f"h{min(max(int(match.group(1)), 1), 6)}"
        return "p"
