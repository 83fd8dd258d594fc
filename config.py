"""Application configuration management for the homework OCR CLI."""


import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

ENV_FILE: Final[str] = ".env"
DEFAULT_REGION: Final[str] = "cn-hangzhou"
DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
DEFAULT_QWEN_MODEL: Final[str] = "qwen-plus"
DEFAULT_STORE_PATH: Final[str] = "homework_store.json"

# Question bodies shorter than this keep absorbing the following lines.
MERGE_MIN_LENGTH: Final[int] = 20
# Number of lines after the body that are inspected for A-D options.
OPTION_SCAN_WINDOW: Final[int] = 8
# Words at or below this confidence are ignored for answers, position and scoring.
MIN_WORD_CONFIDENCE: Final[float] = 30.0
# A non-option line longer than this ends the option block.
PROSE_LINE_LENGTH: Final[int] = 10
MAX_OPTIONS: Final[int] = 4


@dataclass(frozen=True)
class AzureCredentials:
	"""Container for Azure Computer Vision credential details."""
	endpoint: str
	api_key: str


@dataclass(frozen=True)
class AliyunCredentials:
	"""Container for Aliyun credential details."""
	access_key_id: str
	access_key_secret: str
	region_id: str = DEFAULT_REGION


@dataclass(frozen=True)
class DashScopeCredentials:
	"""Container for DashScope credential details."""
	api_key: str
	model: str = DEFAULT_QWEN_MODEL


@dataclass(frozen=True)
class ExtractionSettings:
	"""Heuristic thresholds used by the question extraction pipeline."""
	merge_min_length: int = MERGE_MIN_LENGTH
	option_scan_window: int = OPTION_SCAN_WINDOW
	min_word_confidence: float = MIN_WORD_CONFIDENCE
	prose_line_length: int = PROSE_LINE_LENGTH
	max_options: int = MAX_OPTIONS
	merge_lowercase_continuations: bool = True


@dataclass(frozen=True)
class AppConfig:
	"""Aggregate configuration for the CLI runtime."""
	azure: AzureCredentials | None
	aliyun: AliyunCredentials | None
	dashscope: DashScopeCredentials | None
	output_dir: Path
	store_path: Path
	extraction: ExtractionSettings = field(default_factory=ExtractionSettings)
	log_level: int = DEFAULT_LOG_LEVEL


def load_config() -> AppConfig:
	"""Load environment-based configuration values.

	Returns:
		AppConfig: Parsed configuration with credentials when available.
	"""
	load_dotenv(ENV_FILE)
	output_dir = Path(os.getenv("OCR_OUTPUT_DIR", "outputs")).resolve()
	output_dir.mkdir(parents=True, exist_ok=True)
	store_path = Path(os.getenv("HOMEWORK_STORE_PATH", DEFAULT_STORE_PATH)).resolve()

	return AppConfig(
		azure=_load_azure_credentials(),
		aliyun=_load_aliyun_credentials(),
		dashscope=_load_dashscope_credentials(),
		output_dir=output_dir,
		store_path=store_path,
		extraction=load_extraction_settings(),
		log_level=DEFAULT_LOG_LEVEL,
	)


def load_extraction_settings() -> ExtractionSettings:
	"""Read extraction threshold overrides from the environment."""
	return ExtractionSettings(
		merge_min_length=_env_int("OCR_MERGE_MIN_LENGTH", MERGE_MIN_LENGTH),
		option_scan_window=_env_int("OCR_OPTION_SCAN_WINDOW", OPTION_SCAN_WINDOW),
		min_word_confidence=_env_float("OCR_MIN_WORD_CONFIDENCE", MIN_WORD_CONFIDENCE),
		prose_line_length=_env_int("OCR_PROSE_LINE_LENGTH", PROSE_LINE_LENGTH),
	)


def configure_logging(level: int = DEFAULT_LOG_LEVEL) -> None:
	"""Configure the root logger for the application."""
	logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _env_int(name: str, default: int) -> int:
	value = os.getenv(name)
	if not value:
		return default
	try:
		return int(value)
	except ValueError:
		logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", name, value)
		return default


def _env_float(name: str, default: float) -> float:
	value = os.getenv(name)
	if not value:
		return default
	try:
		return float(value)
	except ValueError:
		logging.getLogger(__name__).warning("Ignoring non-numeric %s=%r", name, value)
		return default


def _load_azure_credentials() -> AzureCredentials | None:
	"""Load Azure Computer Vision credentials from the environment if available."""
	endpoint = os.getenv("AZURE_VISION_ENDPOINT")
	api_key = os.getenv("AZURE_VISION_KEY")
	if endpoint and api_key:
		return AzureCredentials(endpoint=endpoint.rstrip("/"), api_key=api_key)
	return None


def _load_aliyun_credentials() -> AliyunCredentials | None:
	"""Load Aliyun credentials from the environment if available."""
	access_key_id = os.getenv("ALIBABA_CLOUD_ACCESS_KEY_ID")
	access_key_secret = os.getenv("ALIBABA_CLOUD_ACCESS_KEY_SECRET")
	region_id = os.getenv("ALIBABA_CLOUD_REGION", DEFAULT_REGION)
	if access_key_id and access_key_secret:
		return AliyunCredentials(
			access_key_id=access_key_id,
			access_key_secret=access_key_secret,
			region_id=region_id,
		)
	return None


def _load_dashscope_credentials() -> DashScopeCredentials | None:
	"""Load DashScope credentials from the environment if available."""
	api_key = os.getenv("DASHSCOPE_API_KEY")
	if api_key:
		return DashScopeCredentials(api_key=api_key, model=os.getenv("QWEN_MODEL", DEFAULT_QWEN_MODEL))
	return None
