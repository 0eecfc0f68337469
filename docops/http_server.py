"""HTTP server for the document operations service using FastAPI."""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from fastapi import APIRouter, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .backends.base import Backend
from .backends.conversion import MEDIA_TYPES, ConversionBackend
from .backends.page_operations import PageOperationsBackend
from .backends.security import SecurityBackend
from .config import get_config
from .errors import ClientInputError, ServiceError
from .utils.scratch import ScratchFileResponse, TransientFileStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# Download name prefix for each operation's result file
OUTPUT_PREFIXES = {
    "merge": "merged",
    "split": "split",
    "rotate": "rotated",
    "protect": "protected",
    "unlock": "unlocked",
    "watermark": "watermarked",
    "compress": "compressed",
    "convert": "converted",
}

FAILURE_MESSAGES = {
    "merge": "An error occurred while merging the PDFs.",
    "split": "An error occurred while splitting the PDF.",
    "rotate": "An error occurred while rotating the PDF.",
    "protect": "An error occurred while protecting the PDF.",
    "unlock": "An error occurred while unlocking the PDF.",
    "watermark": "An error occurred while adding the watermark.",
    "compress": "An error occurred while compressing the PDF.",
    "convert": "An error occurred during office conversion.",
}

# Backend metadata keys exposed to clients as response headers
METADATA_HEADERS = {
    "protection": "X-Protection-Status",
    "was_encrypted": "X-Was-Encrypted",
    "original_bytes": "X-Original-Bytes",
    "output_bytes": "X-Output-Bytes",
}


class HealthResponse(BaseModel):
    """Response body for GET /health."""
    status: str = "ok"
    operations: List[str]
    conversions: List[str]
    version: str = VERSION


def _require_file(file: Optional[UploadFile]) -> UploadFile:
    if file is None or not file.filename:
        raise ClientInputError("No file uploaded.")
    return file


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_config()
    app = FastAPI(
        title="Document Operations Service",
        description="Merge, split, rotate, watermark, protect, unlock, compress and convert documents",
        version=VERSION,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", *METADATA_HEADERS.values()],
    )

    store = TransientFileStore(config.processing.scratch_dir)
    store.initialize()

    conversion_backend = ConversionBackend()
    backends: List[Backend] = [
        PageOperationsBackend(),
        SecurityBackend(),
        conversion_backend,
    ]

    supported_operations = set()
    for backend in backends:
        supported_operations.update(backend.SUPPORTED_OPERATIONS)

    def find_backend(operation: str) -> Optional[Backend]:
        for backend in backends:
            if backend.supports(operation):
                return backend
        return None

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    async def read_uploads(files: List[UploadFile]) -> List[bytes]:
        max_file_size_mb = get_config().processing.max_file_size_mb
        max_bytes = max_file_size_mb * 1024 * 1024

        documents = []
        total = 0
        for upload in files:
            data = await upload.read()
            total += len(data)
            if total > max_bytes:
                raise ClientInputError(f"File exceeds {max_file_size_mb}MB limit")
            documents.append(data)
        return documents

    async def run_operation(
        operation: str,
        files: List[UploadFile],
        options: Dict[str, str],
    ) -> ScratchFileResponse:
        start_time = time.time()

        documents = await read_uploads(files)
        logger.info(
            f"{operation} request: files={len(documents)}, "
            f"size={sum(len(d) for d in documents)} bytes"
        )

        backend = find_backend(operation)
        if backend is None:
            raise ServiceError(f"{operation} backend not available")

        try:
            output_data, extension, metadata = await asyncio.to_thread(
                backend.process, documents, operation, options
            )
            path, filename = store.write(OUTPUT_PREFIXES[operation], extension, output_data)
        except ServiceError:
            raise
        except Exception as e:
            logger.exception(f"{operation} failed: {e}")
            raise ServiceError(FAILURE_MESSAGES[operation])

        processing_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"{operation} completed in {processing_time_ms}ms: "
            f"output_size={len(output_data)} bytes, file={filename}"
        )

        headers = {
            header: metadata[key]
            for key, header in METADATA_HEADERS.items()
            if key in metadata
        }
        headers["X-Processing-Time-Ms"] = str(processing_time_ms)
        return ScratchFileResponse(
            path,
            filename=filename,
            media_type=metadata.get("media_type", MEDIA_TYPES[extension]),
            headers=headers,
        )

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return "Backend server is running!"

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="ok",
            operations=sorted(supported_operations),
            conversions=conversion_backend.supported_conversions,
            version=VERSION,
        )

    @app.get("/ready")
    async def readiness_check():
        return {"status": "ready"}

    router = APIRouter()

    @router.post("/merge")
    async def merge(files: Optional[List[UploadFile]] = File(None)):
        """Concatenate the uploaded PDFs in upload order."""
        uploads = [f for f in files or [] if f.filename]
        if not uploads:
            raise ClientInputError("No files uploaded.")
        return await run_operation("merge", uploads, {})

    @router.post("/split")
    async def split(
        file: Optional[UploadFile] = File(None),
        ranges: Optional[str] = Form(None),
    ):
        """Extract the pages selected by a range expression such as "1-3,5"."""
        upload = _require_file(file)
        if not ranges:
            raise ClientInputError("No page ranges provided.")
        return await run_operation("split", [upload], {"ranges": ranges})

    @router.post("/rotate")
    async def rotate(
        file: Optional[UploadFile] = File(None),
        angle: Optional[str] = Form(None),
    ):
        upload = _require_file(file)
        if not angle:
            raise ClientInputError("No rotation angle provided.")
        return await run_operation("rotate", [upload], {"angle": angle})

    @router.post("/protect")
    async def protect(
        file: Optional[UploadFile] = File(None),
        password: Optional[str] = Form(None),
    ):
        upload = _require_file(file)
        if not password:
            raise ClientInputError("No password provided.")
        return await run_operation("protect", [upload], {"password": password})

    @router.post("/unlock")
    async def unlock(
        file: Optional[UploadFile] = File(None),
        password: Optional[str] = Form(None),
    ):
        upload = _require_file(file)
        return await run_operation("unlock", [upload], {"password": password or ""})

    @router.post("/watermark")
    async def watermark(
        file: Optional[UploadFile] = File(None),
        text: Optional[str] = Form(None),
    ):
        upload = _require_file(file)
        if not text:
            raise ClientInputError("No watermark text provided.")
        return await run_operation("watermark", [upload], {"text": text})

    @router.post("/compress")
    async def compress(file: Optional[UploadFile] = File(None)):
        upload = _require_file(file)
        return await run_operation("compress", [upload], {})

    @router.post("/convert-office")
    async def convert_office(
        file: Optional[UploadFile] = File(None),
        output_format: Optional[str] = Form(None, alias="outputFormat"),
    ):
        """Convert between PDF, DOCX, XLSX and PPTX based on the file extension."""
        upload = _require_file(file)
        if not output_format:
            raise ClientInputError("No output format specified.")

        input_extension = ""
        if "." in upload.filename:
            input_extension = "." + upload.filename.rsplit(".", 1)[1].lower()
        # Reject unsupported pairs before reading the upload.
        conversion_backend.find_conversion(input_extension, output_format)

        return await run_operation("convert", [upload], {
            "input_extension": input_extension,
            "output_format": output_format,
        })

    app.include_router(router)
    app.include_router(router, prefix="/api", include_in_schema=False)

    return app


def run_server():
    """Run the HTTP server."""
    import uvicorn
    config = get_config()
    logger.info(f"Starting HTTP server on {config.server.host}:{config.server.port}")
    uvicorn.run(
        "docops.http_server:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        log_level="info",
    )


if __name__ == "__main__":
    run_server()
