"""Tests for format conversion and the HTML/PDF converters."""

import io

import pymupdf
import pytest
from openpyxl import load_workbook

from docops.backends.conversion import MEDIA_TYPES, ConversionBackend
from docops.converters.docx_reader import DocxReader
from docops.converters.html_converter import HtmlConverter
from docops.converters.pdf_renderer import PdfRenderer
from docops.converters.pdf_text import PdfTextExtractor
from docops.converters.presentation import PresentationReader
from docops.converters.spreadsheet import SpreadsheetConverter
from docops.errors import ClientInputError

from factories import (
    create_test_docx,
    create_test_pdf,
    create_test_pptx,
    create_test_xlsx,
    page_texts,
)


def is_landscape(pdf_bytes):
    doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
    rect = doc[0].rect
    doc.close()
    return rect.width > rect.height


class TestHtmlConverter:
    """Tests for HtmlConverter."""

    def setup_method(self):
        self.converter = HtmlConverter()

    def test_escape_html(self):
        assert self.converter.escape_html('<a & "b">') == "&lt;a &amp; &quot;b&quot;&gt;"

    def test_paragraph_is_escaped(self):
        assert self.converter.paragraph("1 < 2") == "<p>1 &lt; 2</p>"

    def test_heading_level_is_clamped(self):
        assert self.converter.heading("Title", level=9) == "<h6>Title</h6>"

    def test_document_with_title(self):
        html = self.converter.document(["one", "two"], title="Doc")
        assert html == "<h1>Doc</h1><p>one</p><p>two</p>"

    def test_table_pads_short_rows(self):
        html = self.converter.table([["a", "b"], ["c"]])
        assert html.count("<td>") == 4
        assert "<tr><td>c</td><td></td></tr>" in html

    def test_empty_table(self):
        assert self.converter.table([]) == ""

    def test_slide(self):
        html = self.converter.slide("Intro", ["line 1", "line 2"])
        assert html == '<div class="slide"><h1>Intro</h1><p>line 1<br>line 2</p></div>'


class TestPdfRenderer:
    """Tests for PdfRenderer."""

    def test_each_section_starts_a_page(self):
        output = PdfRenderer().render(["<p>first</p>", "<p>second</p>"])

        assert page_texts(output) == ["first", "second"]

    def test_landscape_paper(self):
        output = PdfRenderer().render(["<p>wide</p>"], paper="a4-l")

        assert is_landscape(output)

    def test_no_sections_yields_blank_page(self):
        output = PdfRenderer().render([])

        assert page_texts(output) == [""]


class TestReaders:
    """Tests for the format-specific readers."""

    def test_docx_to_html(self):
        html = DocxReader().to_html(create_test_docx())

        assert "<h1>Quarterly Report</h1>" in html
        assert "<b>strongly</b>" in html
        assert "<td>North</td>" in html

    @pytest.mark.parametrize("style, tag", [
        ("Title", "h1"),
        ("Heading 2", "h2"),
        ("Heading 9", "h6"),
        ("Normal", "p"),
    ])
    def test_docx_style_tags(self, style, tag):
        assert DocxReader._tag_for_style(style) == tag

    def test_read_sheets(self):
        sheets = SpreadsheetConverter().read_sheets(create_test_xlsx())

        assert sheets == [("Data", [["Name", "Age"], ["Alice", "30"], ["Bob", "25"]])]

    def test_build_line_workbook(self):
        data = SpreadsheetConverter().build_line_workbook(["first", "second\x07"])

        sheet = load_workbook(io.BytesIO(data)).active
        assert sheet.title == "PDF Content"
        assert [list(row) for row in sheet.iter_rows(values_only=True)] == [
            ["Line", "Content"],
            [1, "first"],
            [2, "second"],
        ]

    def test_pdf_lines(self):
        pdf = create_test_pdf(2, texts=["Alpha", "Beta"])

        assert PdfTextExtractor().lines(pdf) == ["Alpha", "Beta"]

    def test_pdf_slides_split_by_page(self):
        pdf = create_test_pdf(2, texts=["Alpha", "Beta"])

        assert PdfTextExtractor().slides(pdf) == [("Alpha", []), ("Beta", [])]

    def test_pptx_slides(self):
        slides = PresentationReader().slides(create_test_pptx())

        assert slides == [
            ("Introduction", ["Welcome everyone"]),
            ("Roadmap", ["Ship the service"]),
        ]


class TestConversionBackend:
    """Tests for ConversionBackend dispatch and strategies."""

    def setup_method(self):
        self.backend = ConversionBackend()

    def convert(self, data, input_extension, output_format):
        return self.backend.process(
            [data],
            "convert",
            {"input_extension": input_extension, "output_format": output_format},
        )

    def test_supported_conversions(self):
        assert self.backend.supported_conversions == [
            "DOCX to PDF",
            "XLSX to PDF",
            "PDF to DOCX",
            "PDF to XLSX",
            "PDF to PPTX",
            "PPTX to PDF",
        ]

    def test_unsupported_pair_lists_supported(self):
        with pytest.raises(ClientInputError) as exc_info:
            self.backend.find_conversion(".txt", "pdf")

        message = str(exc_info.value)
        assert message.startswith("Unsupported conversion: .txt to pdf.")
        for label in self.backend.supported_conversions:
            assert label in message

    def test_output_format_is_normalized(self):
        conversion = self.backend.find_conversion(".PDF", " .DOCX ")

        assert conversion.output_format == "docx"
        assert conversion.media_type == MEDIA_TYPES["docx"]

    def test_missing_output_format(self):
        with pytest.raises(ClientInputError, match="No output format"):
            self.convert(create_test_pdf(), ".pdf", "")

    def test_docx_to_pdf(self):
        output, fmt, metadata = self.convert(create_test_docx(), ".docx", "pdf")

        assert fmt == "pdf"
        assert output.startswith(b"%PDF")
        text = " ".join(page_texts(output))
        assert "Quarterly Report" in text
        assert "North" in text
        assert metadata["media_type"] == "application/pdf"

    def test_xlsx_to_pdf(self):
        output, fmt, _ = self.convert(create_test_xlsx(), ".xlsx", "pdf")

        assert fmt == "pdf"
        text = " ".join(page_texts(output))
        assert "Sheet: Data" in text
        assert "Alice" in text

    def test_pdf_to_docx_is_labelled_docx(self):
        output, fmt, metadata = self.convert(create_test_pdf(texts=["Hello"]), ".pdf", "docx")

        assert fmt == "docx"
        assert metadata["media_type"] == MEDIA_TYPES["docx"]
        text = " ".join(page_texts(output))
        assert "Converted from PDF" in text
        assert "Hello" in text

    def test_pdf_to_xlsx(self):
        output, fmt, _ = self.convert(create_test_pdf(2), ".pdf", "xlsx")

        assert fmt == "xlsx"
        sheet = load_workbook(io.BytesIO(output))["PDF Content"]
        rows = [list(row) for row in sheet.iter_rows(values_only=True)]
        assert rows == [["Line", "Content"], [1, "Page 1"], [2, "Page 2"]]

    def test_pdf_to_pptx(self):
        output, fmt, metadata = self.convert(create_test_pdf(2), ".pdf", "pptx")

        assert fmt == "pptx"
        assert metadata["media_type"] == MEDIA_TYPES["pptx"]
        assert is_landscape(output)
        assert page_texts(output) == ["Page 1", "Page 2"]

    def test_pptx_to_pdf(self):
        output, fmt, _ = self.convert(create_test_pptx(), ".pptx", "pdf")

        assert fmt == "pdf"
        assert is_landscape(output)
        texts = page_texts(output)
        assert len(texts) == 2
        assert "Introduction" in texts[0]
        assert "Ship the service" in texts[1]
