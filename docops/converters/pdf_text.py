"""Plain text extraction from PDFs using PyMuPDF."""

import re
from typing import List, Tuple

from ..utils.pdf_io import open_pdf

BLANK_LINE = re.compile(r"\n\s*\n")


class PdfTextExtractor:
    """Extracts page text, non-empty lines and slide-sized chunks."""

    def page_texts(self, data: bytes) -> List[str]:
        doc = open_pdf(data)
        try:
            return [page.get_text("text") for page in doc]
        finally:
            doc.close()

    def lines(self, data: bytes) -> List[str]:
        return [
            line.strip()
            for text in self.page_texts(data)
            for line in text.split("\n")
            if line.strip()
        ]

    def slides(self, data: bytes) -> List[Tuple[str, List[str]]]:
        """
        Split the text into blank-line separated chunks.

        Pages are always separated, so every page yields at least one chunk
        when it has text. The first line of a chunk becomes its title.
        """
        text = "\n\n".join(self.page_texts(data))

        slides = []
        for chunk in BLANK_LINE.split(text):
            lines = [line.strip() for line in chunk.split("\n") if line.strip()]
            if lines:
                slides.append((lines[0], lines[1:]))
        return slides
