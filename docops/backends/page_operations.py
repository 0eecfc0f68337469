"""Page-level PDF operations backend using PyMuPDF."""

import logging
from typing import Dict, List, Tuple

import pymupdf

from .base import Backend
from ..config import get_config
from ..errors import ClientInputError
from ..utils.page_filter import normalize_rotation, parse_page_range

logger = logging.getLogger(__name__)

WATERMARK_FONT = "hebo"  # Helvetica Bold
WATERMARK_COLOR = (0.5, 0.5, 0.5)


class PageOperationsBackend(Backend):
    """Backend for merging, splitting, rotating, watermarking and compressing PDFs."""

    SUPPORTED_OPERATIONS = ["merge", "split", "rotate", "watermark", "compress"]

    def process(
        self,
        documents: List[bytes],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, str]]:
        self._require_operation(operation)

        handler = getattr(self, f"_{operation}")
        return handler(documents, options)

    def _merge(self, documents: List[bytes], options: Dict[str, str]):
        if not documents:
            raise ClientInputError("No files uploaded.")

        merged = pymupdf.open()
        try:
            for data in documents:
                src = self._open_pdf(data)
                try:
                    merged.insert_pdf(src)
                finally:
                    src.close()

            page_count = merged.page_count
            output = merged.tobytes(garbage=3, deflate=True)
        finally:
            merged.close()

        logger.info(f"Merged {len(documents)} documents into {page_count} pages")
        return output, "pdf", {
            "documents": str(len(documents)),
            "total_pages": str(page_count),
        }

    def _split(self, documents: List[bytes], options: Dict[str, str]):
        ranges = options.get("ranges", "")
        if not ranges:
            raise ClientInputError("No page ranges provided.")

        src = self._open_pdf(self._single(documents))
        try:
            page_indices = parse_page_range(ranges, src.page_count)
            if not page_indices:
                raise ClientInputError("Invalid page ranges provided.")

            out = pymupdf.open()
            try:
                for index in page_indices:
                    out.insert_pdf(src, from_page=index, to_page=index)
                output = out.tobytes(garbage=3, deflate=True)
            finally:
                out.close()
            total_pages = src.page_count
        finally:
            src.close()

        logger.info(f"Split {len(page_indices)} of {total_pages} pages")
        return output, "pdf", {
            "pages_selected": str(len(page_indices)),
            "total_pages": str(total_pages),
        }

    def _rotate(self, documents: List[bytes], options: Dict[str, str]):
        angle_text = options.get("angle", "")
        if not angle_text:
            raise ClientInputError("No rotation angle provided.")
        try:
            angle = int(angle_text.strip())
        except ValueError:
            raise ClientInputError("Rotation angle must be an integer.")
        if angle % 90 != 0:
            raise ClientInputError("Rotation angle must be a multiple of 90 degrees.")

        doc = self._open_pdf(self._single(documents))
        try:
            for page in doc:
                page.set_rotation(normalize_rotation(page.rotation, angle))
            page_count = doc.page_count
            output = doc.tobytes(garbage=3, deflate=True)
        finally:
            doc.close()

        return output, "pdf", {
            "angle": str(angle),
            "pages_rotated": str(page_count),
        }

    def _watermark(self, documents: List[bytes], options: Dict[str, str]):
        text = options.get("text", "")
        if not text:
            raise ClientInputError("No watermark text provided.")

        config = get_config()
        font_size = config.processing.watermark_font_size
        opacity = config.processing.watermark_opacity
        text_width = pymupdf.get_text_length(text, fontname=WATERMARK_FONT, fontsize=font_size)

        doc = self._open_pdf(self._single(documents))
        try:
            for page in doc:
                # Centre is computed on the visible page, then mapped back to
                # unrotated coordinates so the text stays upright.
                rect = page.rect
                origin = pymupdf.Point(
                    (rect.width - text_width) / 2,
                    (rect.height + font_size) / 2,
                )
                page.insert_text(
                    origin * page.derotation_matrix,
                    text,
                    fontsize=font_size,
                    fontname=WATERMARK_FONT,
                    color=WATERMARK_COLOR,
                    fill_opacity=opacity,
                    rotate=page.rotation,
                )
            page_count = doc.page_count
            output = doc.tobytes(garbage=3, deflate=True)
        finally:
            doc.close()

        return output, "pdf", {"pages_watermarked": str(page_count)}

    def _compress(self, documents: List[bytes], options: Dict[str, str]):
        data = self._single(documents)
        doc = self._open_pdf(data)
        try:
            output = doc.tobytes(
                garbage=4,
                clean=True,
                deflate=True,
                deflate_images=True,
                deflate_fonts=True,
                use_objstms=1,
            )
        finally:
            doc.close()

        logger.info(f"Compressed {len(data)} -> {len(output)} bytes")
        return output, "pdf", {
            "original_bytes": str(len(data)),
            "output_bytes": str(len(output)),
            "size_reduced": str(len(output) < len(data)).lower(),
        }
