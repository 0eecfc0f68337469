"""Renders HTML into PDF pages with the PyMuPDF Story API."""

import io
import logging
from typing import Sequence, Tuple

import pymupdf

logger = logging.getLogger(__name__)

POINTS_PER_MM = 72 / 25.4


class PdfRenderer:
    """Lays out HTML sections onto PDF pages; each section starts a new page."""

    def render(
        self,
        sections: Sequence[str],
        paper: str = "a4",
        margins_mm: Tuple[float, float, float, float] = (20, 20, 20, 20),
        css: str = "",
    ) -> bytes:
        """
        Render HTML sections to PDF bytes.

        Args:
            sections: HTML body fragments. Content that does not fit on one
                      page flows onto following pages.
            paper: PyMuPDF paper size name, e.g. "a4" or "a4-l" for landscape.
            margins_mm: (top, right, bottom, left) page margins in millimetres.
            css: Stylesheet applied to every section.
        """
        mediabox = pymupdf.paper_rect(paper)
        top, right, bottom, left = (margin * POINTS_PER_MM for margin in margins_mm)
        where = mediabox + (left, top, -right, -bottom)

        buffer = io.BytesIO()
        writer = pymupdf.DocumentWriter(buffer)
        pages = 0
        for section in sections or [""]:
            story = pymupdf.Story(html=section, user_css=css)
            more = True
            while more:
                device = writer.begin_page(mediabox)
                more, _ = story.place(where)
                story.draw(device)
                writer.end_page()
                pages += 1
        writer.close()

        logger.debug(f"Rendered {len(sections)} sections onto {pages} pages")
        return buffer.getvalue()
