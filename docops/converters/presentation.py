"""Slide text extraction from PPTX files using python-pptx."""

import io
from typing import List, Tuple

from pptx import Presentation


class PresentationReader:
    """Reads the title and text lines of each slide."""

    def slides(self, data: bytes) -> List[Tuple[str, List[str]]]:
        presentation = Presentation(io.BytesIO(data))

        slides = []
        for number, slide in enumerate(presentation.slides, start=1):
            title_shape = slide.shapes.title
            title_id = title_shape.shape_id if title_shape is not None else None
            title = title_shape.text_frame.text.strip() if title_shape is not None else ""

            lines = []
            for shape in slide.shapes:
                if shape.shape_id == title_id:
                    continue
                if shape.has_text_frame:
                    lines.extend(
                        paragraph.text.strip()
                        for paragraph in shape.text_frame.paragraphs
                        if paragraph.text.strip()
                    )
                elif shape.has_table:
                    for row in shape.table.rows:
                        cells = [cell.text.strip() for cell in row.cells]
                        if any(cells):
                            lines.append(" | ".join(cells))

            slides.append((title or f"Slide {number}", lines))
        return slides
