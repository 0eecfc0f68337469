"""Helpers for loading PDF input."""

import pymupdf

from ..errors import ClientInputError


def open_pdf(data: bytes) -> pymupdf.Document:
    """Open PDF bytes, rejecting password-protected input."""
    doc = pymupdf.open(stream=data, filetype="pdf")
    if doc.needs_pass:
        doc.close()
        raise ClientInputError("PDF is password protected. Unlock it first.")
    return doc
