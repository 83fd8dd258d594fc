"""Aliyun OCR provider implementation."""


import io
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from config import AliyunCredentials
from providers.errors import OcrBackendError
from schemas import OcrLine, OcrPage, OcrWord

try:
	from alibabacloud_ocr_api20210707.client import Client as OcrClient
	from alibabacloud_ocr_api20210707 import models as ocr_models
	from alibabacloud_tea_openapi import models as open_api_models
	from alibabacloud_tea_util import models as util_models
except ImportError:
	OcrClient = None  # type: ignore[assignment]
	ocr_models = None  # type: ignore[assignment]
	open_api_models = None  # type: ignore[assignment]
	util_models = None  # type: ignore[assignment]

JsonDict = dict[str, Any]


@dataclass
class AliyunOcrClient:
	"""Client wrapper around the Aliyun RecognizeAdvanced API."""

	credentials: AliyunCredentials
	retries: int = 3
	backoff: float = 1.5

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		self._client = self._create_client()

	def recognize(self, image_bytes: bytes, content_type: str = "image/jpeg") -> list[OcrPage]:
		request = self._build_advanced_request(image_bytes)
		response = self._execute(lambda: self._invoke_client("recognize_advanced", request))
		pages = parse_advanced_result(self._to_dict(response))
		self._logger.info("RecognizeAdvanced returned %d line(s)", sum(len(page.lines) for page in pages))
		return pages

	def _create_client(self) -> Any:
		if not all([OcrClient, open_api_models]):
			raise ImportError("Aliyun OCR SDK is not installed. Please install alibabacloud-ocr-api20210707.")
		config = open_api_models.Config(
			access_key_id=self.credentials.access_key_id,
			access_key_secret=self.credentials.access_key_secret,
			region_id=self.credentials.region_id,
			endpoint=f"ocr-api.{self.credentials.region_id}.aliyuncs.com",
		)
		return OcrClient(config)

	def _build_advanced_request(self, image_bytes: bytes):
		if not ocr_models:
			raise ImportError("Aliyun OCR models unavailable. Install alibabacloud-ocr-api20210707.")
		return ocr_models.RecognizeAdvancedRequest(body=io.BytesIO(image_bytes), need_rotate=True)

	def _invoke_client(self, method_base: str, request: Any):
		method = getattr(self._client, method_base, None)
		if callable(method):
			return method(request)
		with_options = getattr(self._client, f"{method_base}_with_options", None)
		if callable(with_options):
			runtime = util_models.RuntimeOptions() if util_models else None
			return with_options(request, runtime)
		raise AttributeError(f"Aliyun client missing method for {method_base}")

	def _execute(self, call: Callable[[], Any]):
		for attempt in range(1, self.retries + 1):
			try:
				return call()
			except Exception as exc:  # noqa: BLE001
				wait = self.backoff ** attempt
				self._logger.warning("Aliyun OCR call failed (attempt %s/%s): %s", attempt, self.retries, exc)
				if attempt == self.retries:
					raise OcrBackendError(f"Aliyun OCR call failed: {exc}") from exc
				time.sleep(wait)

	def _to_dict(self, response: Any) -> JsonDict:
		if hasattr(response, "to_map"):
			return response.to_map()
		if hasattr(response, "body") and hasattr(response.body, "to_map"):
			return {"body": response.body.to_map()}
		if isinstance(response, dict):
			return response
		return {"body": response} if response is not None else {}


def parse_advanced_result(payload: JsonDict) -> list[OcrPage]:
	"""Convert a RecognizeAdvanced payload into a single page.

	Each ``prism_wordsInfo`` entry is one printed line; its text is split on
	whitespace into words that share the line's box and probability.
	"""
	data = _extract_data(payload)
	lines: list[OcrLine] = []
	for item in data.get("prism_wordsInfo") or []:
		if not isinstance(item, dict):
			continue
		text = str(item.get("word") or "").strip()
		if not text:
			continue
		confidence = float(item.get("prob") or 0.0)
		box = _extract_box(item)
		words = [OcrWord(text=token, confidence=confidence, bounding_box=box) for token in text.split()]
		lines.append(OcrLine(text=text, words=words, page_index=0))
	return [OcrPage(index=0, lines=lines, width=data.get("width"), height=data.get("height"))]


def _extract_data(payload: JsonDict) -> JsonDict:
	body = payload.get("body") if isinstance(payload, dict) else None
	data = body.get("Data", body) if isinstance(body, dict) else payload
	if isinstance(data, str):
		try:
			data = json.loads(data)
		except json.JSONDecodeError as exc:
			raise OcrBackendError("Aliyun OCR returned malformed Data.") from exc
	if not isinstance(data, dict):
		raise OcrBackendError("Unexpected Aliyun OCR result format.")
	return data


def _extract_box(item: JsonDict) -> list[float]:
	points = item.get("pos") or []
	box: list[float] = []
	for point in points[:4]:
		if isinstance(point, dict):
			box.extend([float(point.get("x", 0.0)), float(point.get("y", 0.0))])
	return box if len(box) == 8 else [0.0] * 8
