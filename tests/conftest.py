import pytest

from config import Settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep the shell environment, .env and config.yml out of Settings(...) in tests."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CONFIG_FILE", str(tmp_path / "config.yml"))
    monkeypatch.chdir(tmp_path)
    yield
