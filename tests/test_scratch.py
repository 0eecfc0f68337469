"""Tests for the transient file store."""

import asyncio
import re

import pytest

from docops.utils.scratch import ScratchFileResponse, TransientFileStore


class TestTransientFileStore:
    """Tests for TransientFileStore."""

    def test_initialize_is_idempotent(self, tmp_path):
        store = TransientFileStore(str(tmp_path / "a" / "b"))

        store.initialize()
        store.initialize()

        assert (tmp_path / "a" / "b").is_dir()

    def test_write(self, tmp_path):
        store = TransientFileStore(str(tmp_path))

        path, name = store.write("merged", "pdf", b"%PDF-data")

        assert path.read_bytes() == b"%PDF-data"
        assert re.fullmatch(r"merged-\d+\.pdf", name)
        assert path.parent == tmp_path

    def test_concurrent_writes_use_distinct_files(self, tmp_path):
        store = TransientFileStore(str(tmp_path))

        paths = {store.write("split", "pdf", b"x")[0] for _ in range(20)}

        assert len(paths) == 20

    def test_discard_missing_file(self, tmp_path):
        TransientFileStore.discard(tmp_path / "missing.pdf")


class TestScratchFileResponse:
    """Tests for ScratchFileResponse cleanup."""

    scope = {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.4"},
        "method": "GET",
        "path": "/",
        "headers": [],
    }

    async def _receive(self):
        await asyncio.sleep(0)
        return {"type": "http.disconnect"}

    def test_file_removed_after_send(self, tmp_path):
        path, name = TransientFileStore(str(tmp_path)).write("rotated", "pdf", b"data")
        response = ScratchFileResponse(path, filename=name, media_type="application/pdf")
        sent = []

        async def send(message):
            sent.append(message)

        asyncio.run(response(self.scope, self._receive, send))

        assert not path.exists()
        assert sent[0]["status"] == 200

    def test_file_removed_when_send_fails(self, tmp_path):
        path, name = TransientFileStore(str(tmp_path)).write("rotated", "pdf", b"data")
        response = ScratchFileResponse(path, filename=name, media_type="application/pdf")

        async def send(message):
            raise RuntimeError("client disconnected")

        with pytest.raises(RuntimeError):
            asyncio.run(response(self.scope, self._receive, send))

        assert not path.exists()
