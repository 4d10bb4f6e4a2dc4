from __future__ import annotations

import os

import pytest

from watermark_eraser.config import DEFAULT_MODEL, load_settings

_ENV_VARS = (
    "GEMINI_API_KEY",
    "WATERMARK_ERASER_MODEL",
    "WATERMARK_ERASER_MAX_UPLOAD_MB",
    "WATERMARK_ERASER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for name in _ENV_VARS:
        os.environ.pop(name, None)


def test_defaults_without_environment(tmp_path) -> None:
    settings = load_settings(tmp_path / "missing.env")
    assert settings.api_key is None
    assert settings.model == DEFAULT_MODEL
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.log_level == "INFO"


def test_values_from_env_file(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "GEMINI_API_KEY=secret\n"
        "WATERMARK_ERASER_MODEL=custom-model\n"
        "WATERMARK_ERASER_MAX_UPLOAD_MB=2.5\n"
        "WATERMARK_ERASER_LOG_LEVEL=debug\n"
    )
    settings = load_settings(env_file)

    assert settings.api_key == "secret"
    assert settings.model == "custom-model"
    assert settings.max_upload_bytes == int(2.5 * 1024 * 1024)
    assert settings.log_level == "DEBUG"


def test_environment_overrides_env_file(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("WATERMARK_ERASER_MODEL=from-file\n")
    monkeypatch.setenv("WATERMARK_ERASER_MODEL", "from-env")
    assert load_settings(env_file).model == "from-env"


@pytest.mark.parametrize("value", ["ten", "0", "-3"])
def test_invalid_upload_limit_raises(tmp_path, monkeypatch, value) -> None:
    monkeypatch.setenv("WATERMARK_ERASER_MAX_UPLOAD_MB", value)
    with pytest.raises(ValueError):
        load_settings(tmp_path / "missing.env")
