import pytest

from docops.config import reload_config


@pytest.fixture(autouse=True)
def scratch_dir(tmp_path, monkeypatch):
    """Point the scratch directory at a per-test temporary directory."""
    directory = tmp_path / "scratch"
    monkeypatch.setenv("SCRATCH_DIR", str(directory))
    monkeypatch.delenv("PROTECT_REQUIRE_ENCRYPTION", raising=False)
    monkeypatch.delenv("MAX_FILE_SIZE_MB", raising=False)
    reload_config()
    yield directory
    monkeypatch.undo()
    reload_config()
