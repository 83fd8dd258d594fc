"""Tests for environment-driven configuration."""
from __future__ import annotations

from pathlib import Path

import pytest

from config import AppConfig, ExtractionSettings, load_extraction_settings
from main import build_backend


def test_extraction_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
	for name in ("OCR_MERGE_MIN_LENGTH", "OCR_OPTION_SCAN_WINDOW", "OCR_MIN_WORD_CONFIDENCE", "OCR_PROSE_LINE_LENGTH"):
		monkeypatch.delenv(name, raising=False)
	assert load_extraction_settings() == ExtractionSettings()


def test_extraction_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.setenv("OCR_MERGE_MIN_LENGTH", "30")
	monkeypatch.setenv("OCR_MIN_WORD_CONFIDENCE", "55.5")
	monkeypatch.setenv("OCR_OPTION_SCAN_WINDOW", "not-a-number")
	settings = load_extraction_settings()
	assert settings.merge_min_length == 30
	assert settings.min_word_confidence == 55.5
	assert settings.option_scan_window == 8


def test_unconfigured_backend_is_rejected(tmp_path: Path) -> None:
	config = AppConfig(azure=None, aliyun=None, dashscope=None, output_dir=tmp_path, store_path=tmp_path / "s.json")
	with pytest.raises(RuntimeError, match="Azure"):
		build_backend("azure", config)
	with pytest.raises(RuntimeError, match="Aliyun"):
		build_backend("aliyun", config)
