"""Password protection backend using PyMuPDF."""

import logging
from enum import Enum
from typing import Dict, List, Tuple

import pymupdf

from .base import Backend
from ..config import get_config
from ..errors import AuthError, ClientInputError, ServiceError

logger = logging.getLogger(__name__)

OWNER_PASSWORD_SUFFIX = "_owner"
PROTECTED_PERMISSIONS = (
    pymupdf.PDF_PERM_PRINT
    | pymupdf.PDF_PERM_PRINT_HQ
    | pymupdf.PDF_PERM_ACCESSIBILITY
)
MARKER_TEXT = "PROTECTED"
MARKER_FONT_SIZE = 10
MARKER_OPACITY = 0.3
MARKER_COLOR = (0.7, 0.7, 0.7)


class ProtectionOutcome(str, Enum):
    """Whether a protect request actually produced an encrypted file."""
    ENCRYPTED = "encrypted"
    UNENCRYPTED = "unencrypted"


class SecurityBackend(Backend):
    """Backend for applying and removing PDF password protection."""

    SUPPORTED_OPERATIONS = ["protect", "unlock"]

    def process(
        self,
        documents: List[bytes],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, str]]:
        self._require_operation(operation)

        if operation == "protect":
            return self._protect(self._single(documents), options.get("password", ""))
        return self._unlock(self._single(documents), options.get("password", ""))

    def _protect(self, data: bytes, password: str):
        if not password:
            raise ClientInputError("No password provided.")

        src = self._open_pdf(data)
        out = pymupdf.open()
        try:
            out.insert_pdf(src)
            now = pymupdf.get_pdf_now()
            out.set_metadata({
                "title": "Protected Document",
                "subject": f"Password Protected - {len(password)} chars",
                "creator": "PDF Protection Tool",
                "producer": "PDF Management System",
                "creationDate": now,
                "modDate": now,
            })
            for page in out:
                self._stamp_marker(page)

            try:
                output = out.tobytes(
                    garbage=3,
                    deflate=True,
                    encryption=pymupdf.PDF_ENCRYPT_AES_256,
                    owner_pw=password + OWNER_PASSWORD_SUFFIX,
                    user_pw=password,
                    permissions=PROTECTED_PERMISSIONS,
                )
            except (RuntimeError, ValueError) as e:
                logger.warning(f"Encryption rejected by PyMuPDF, saving without it: {e}")
                output = out.tobytes(garbage=3, deflate=True)
        finally:
            out.close()
            src.close()

        outcome = self._confirm_outcome(output)
        if outcome is ProtectionOutcome.UNENCRYPTED:
            logger.warning("Protected PDF was produced without encryption")
            if get_config().processing.require_encryption:
                raise ServiceError("Encryption could not be applied to the PDF.")
        else:
            logger.info("PDF protected with AES-256 encryption")

        return output, "pdf", {"protection": outcome.value}

    def _unlock(self, data: bytes, password: str):
        doc = pymupdf.open(stream=data, filetype="pdf")
        try:
            was_encrypted = bool(doc.is_encrypted)
            if doc.needs_pass:
                if not password or not doc.authenticate(password):
                    raise AuthError("Failed to unlock PDF. Incorrect or missing password.")
            output = doc.tobytes(encryption=pymupdf.PDF_ENCRYPT_NONE)
        finally:
            doc.close()

        if not was_encrypted:
            logger.info("Unlock requested for a PDF that is not encrypted")
        return output, "pdf", {"was_encrypted": str(was_encrypted).lower()}

    @staticmethod
    def _confirm_outcome(output: bytes) -> ProtectionOutcome:
        check = pymupdf.open(stream=output, filetype="pdf")
        try:
            if check.needs_pass:
                return ProtectionOutcome.ENCRYPTED
            return ProtectionOutcome.UNENCRYPTED
        finally:
            check.close()

    @staticmethod
    def _stamp_marker(page: pymupdf.Page) -> None:
        rect = page.rect
        origin = pymupdf.Point(rect.width - 100, 20)
        page.insert_text(
            origin * page.derotation_matrix,
            MARKER_TEXT,
            fontsize=MARKER_FONT_SIZE,
            fontname="helv",
            color=MARKER_COLOR,
            fill_opacity=MARKER_OPACITY,
            rotate=page.rotation,
        )
