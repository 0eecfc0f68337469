"""Base backend interface for document operations."""

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

import pymupdf

from ..errors import ClientInputError
from ..utils.pdf_io import open_pdf


class Backend(ABC):
    """Abstract base class for document operation backends."""

    SUPPORTED_OPERATIONS: List[str] = []

    def supports(self, operation: str, format: str = "") -> bool:
        """
        Check if this backend can handle the specified operation.

        Args:
            operation: The operation name (e.g., "merge", "convert")
            format: Optional format hint (e.g., "pdf")

        Returns:
            True if this backend supports the operation, False otherwise
        """
        return operation in self.SUPPORTED_OPERATIONS

    @abstractmethod
    def process(
        self,
        documents: List[bytes],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, str]]:
        """
        Run an operation over the uploaded documents.

        Args:
            documents: Raw bytes of each uploaded file, in upload order
            operation: Operation to perform
            options: Operation-specific options

        Returns:
            Tuple of (output_data, extension, metadata)
            - output_data: Resulting document bytes
            - extension: File extension of the result (e.g., "pdf", "xlsx")
            - metadata: Additional information about the processing

        Raises:
            ClientInputError: If the operation or its options are invalid
            AuthError: If a password check fails
        """
        pass

    def _require_operation(self, operation: str) -> None:
        if not self.supports(operation):
            raise ClientInputError(f"Operation '{operation}' not supported")

    @staticmethod
    def _single(documents: List[bytes]) -> bytes:
        if not documents:
            raise ClientInputError("No file uploaded.")
        return documents[0]

    @staticmethod
    def _open_pdf(data: bytes) -> pymupdf.Document:
        return open_pdf(data)
