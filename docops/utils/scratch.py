"""Transient storage for results streamed back to the client."""

import logging
import time
import uuid
from pathlib import Path
from typing import Optional, Tuple

from starlette.responses import FileResponse
from starlette.types import Receive, Scope, Send

logger = logging.getLogger(__name__)


class TransientFileStore:
    """Writes operation results to a scratch directory and removes them after use."""

    def __init__(self, scratch_dir: str):
        self.scratch_dir = Path(scratch_dir)

    def initialize(self) -> Path:
        """Create the scratch directory if it does not exist yet."""
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        return self.scratch_dir

    def write(self, prefix: str, extension: str, data: bytes) -> Tuple[Path, str]:
        """
        Write result bytes to a new scratch file.

        Returns:
            Tuple of (scratch_path, download_name). The download name has the
            form "<prefix>-<timestamp>.<extension>"; the path on disk carries an
            extra random suffix so concurrent requests never share a file.
        """
        timestamp = int(time.time() * 1000)
        download_name = f"{prefix}-{timestamp}.{extension}"
        path = self.initialize() / f"{prefix}-{timestamp}-{uuid.uuid4().hex[:8]}.{extension}"
        path.write_bytes(data)
        logger.debug(f"Wrote scratch file {path} ({len(data)} bytes)")
        return path, download_name

    @staticmethod
    def discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove scratch file {path}: {e}")


class ScratchFileResponse(FileResponse):
    """FileResponse that deletes its file once streaming ends, successfully or not."""

    def __init__(self, path: Path, filename: str, media_type: Optional[str] = None, **kwargs):
        super().__init__(path, filename=filename, media_type=media_type, **kwargs)
        self.scratch_path = Path(path)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            TransientFileStore.discard(self.scratch_path)
