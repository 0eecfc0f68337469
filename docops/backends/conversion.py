"""Best-effort office format conversion backend."""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from .base import Backend
from ..converters.docx_reader import DocxReader
from ..converters.html_converter import HtmlConverter
from ..converters.pdf_renderer import PdfRenderer
from ..converters.pdf_text import PdfTextExtractor
from ..converters.presentation import PresentationReader
from ..converters.spreadsheet import SpreadsheetConverter
from ..errors import ClientInputError

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}

DOCUMENT_CSS = """
body { font-family: sans-serif; line-height: 1.6; color: #333; }
p { margin-bottom: 10px; }
h1, h2, h3, h4, h5, h6 { margin-top: 20px; margin-bottom: 10px; }
table { border-collapse: collapse; width: 100%; margin: 20px 0; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
th { background-color: #f5f5f5; }
"""

WORKBOOK_CSS = """
body { font-family: sans-serif; }
h2 { color: #333; border-bottom: 2px solid #333; padding-bottom: 10px; }
table { border-collapse: collapse; width: 100%; margin: 20px 0; }
td { border: 1px solid #ddd; padding: 8px; text-align: left; }
"""

SLIDE_CSS = """
body { font-family: sans-serif; margin: 0; }
.slide { padding: 40px; text-align: center; background-color: #667eea; color: white; }
.slide h1 { font-size: 32px; margin-bottom: 20px; }
.slide p { font-size: 18px; line-height: 1.6; }
"""


@dataclass(frozen=True)
class Conversion:
    """One supported (input extension, output format) pair."""
    input_extension: str
    output_format: str
    convert: Callable[[bytes], bytes]

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self.output_format]

    @property
    def label(self) -> str:
        return f"{self.input_extension.lstrip('.').upper()} to {self.output_format.upper()}"


class ConversionBackend(Backend):
    """Backend converting between PDF, DOCX, XLSX and PPTX.

    Conversions to DOCX and PPTX render a PDF and label it with the requested
    type; only PDF to XLSX writes a genuine workbook.
    """

    SUPPORTED_OPERATIONS = ["convert"]

    def __init__(self):
        self.html = HtmlConverter()
        self.renderer = PdfRenderer()
        self.text_extractor = PdfTextExtractor()
        self.docx_reader = DocxReader(self.html)
        self.spreadsheets = SpreadsheetConverter()
        self.presentations = PresentationReader()

        conversions = [
            Conversion(".docx", "pdf", self._docx_to_pdf),
            Conversion(".xlsx", "pdf", self._xlsx_to_pdf),
            Conversion(".pdf", "docx", self._pdf_to_docx),
            Conversion(".pdf", "xlsx", self._pdf_to_xlsx),
            Conversion(".pdf", "pptx", self._pdf_to_pptx),
            Conversion(".pptx", "pdf", self._pptx_to_pdf),
        ]
        self.conversions: Dict[Tuple[str, str], Conversion] = {
            (c.input_extension, c.output_format): c for c in conversions
        }

    @property
    def supported_conversions(self) -> List[str]:
        return [c.label for c in self.conversions.values()]

    def find_conversion(self, input_extension: str, output_format: str) -> Conversion:
        input_extension = input_extension.strip().lower()
        output_format = output_format.strip().lower().lstrip(".")

        conversion = self.conversions.get((input_extension, output_format))
        if conversion is None:
            raise ClientInputError(
                f"Unsupported conversion: {input_extension or '(no extension)'} to {output_format}. "
                f"Supported conversions: {', '.join(self.supported_conversions)}"
            )
        return conversion

    def process(
        self,
        documents: List[bytes],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, str]]:
        self._require_operation(operation)

        output_format = options.get("output_format", "")
        if not output_format:
            raise ClientInputError("No output format specified.")

        conversion = self.find_conversion(options.get("input_extension", ""), output_format)
        data = self._single(documents)

        output = conversion.convert(data)
        logger.info(f"Converted {conversion.label}: {len(data)} -> {len(output)} bytes")

        return output, conversion.output_format, {
            "conversion": conversion.label,
            "media_type": conversion.media_type,
        }

    def _docx_to_pdf(self, data: bytes) -> bytes:
        html = self.docx_reader.to_html(data)
        return self.renderer.render([html], margins_mm=(20, 20, 20, 20), css=DOCUMENT_CSS)

    def _xlsx_to_pdf(self, data: bytes) -> bytes:
        html = "".join(
            self.html.sheet(name, rows) for name, rows in self.spreadsheets.read_sheets(data)
        )
        return self.renderer.render([html], margins_mm=(20, 15, 20, 15), css=WORKBOOK_CSS)

    def _pdf_to_docx(self, data: bytes) -> bytes:
        html = self.html.document(self.text_extractor.lines(data), title="Converted from PDF")
        return self.renderer.render([html], margins_mm=(25, 25, 25, 25), css=DOCUMENT_CSS)

    def _pdf_to_xlsx(self, data: bytes) -> bytes:
        return self.spreadsheets.build_line_workbook(self.text_extractor.lines(data))

    def _pdf_to_pptx(self, data: bytes) -> bytes:
        return self._render_slides(self.text_extractor.slides(data))

    def _pptx_to_pdf(self, data: bytes) -> bytes:
        return self._render_slides(self.presentations.slides(data))

    def _render_slides(self, slides: List[Tuple[str, List[str]]]) -> bytes:
        sections = [self.html.slide(title, lines) for title, lines in slides]
        return self.renderer.render(
            sections, paper="a4-l", margins_mm=(0, 0, 0, 0), css=SLIDE_CSS
        )
