"""Azure Computer Vision Read API provider implementation."""


import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import requests

from config import AzureCredentials
from providers.errors import OcrBackendError, OcrTimeoutError
from schemas import OcrLine, OcrPage, OcrWord

JsonDict = dict[str, Any]

READ_PATH = "/vision/v3.2/read/analyze"
USER_AGENT = "homework-ocr/1.0"
STATUS_MESSAGES: dict[int, str] = {
	400: "Image format or size rejected. Use a clear JPG/PNG smaller than 4MB.",
	401: "Invalid API key. Check AZURE_VISION_KEY.",
	403: "Access denied. Check the subscription status and quota.",
	413: "Image file too large. Compress the image and retry.",
	429: "Rate limit exceeded. Retry later or upgrade the subscription.",
}


@dataclass
class AzureReadClient:
	"""Client for the asynchronous Read API: submit an image, then poll for the result."""

	credentials: AzureCredentials
	max_attempts: int = 60
	base_delay: float = 0.5
	timeout: float = 30.0
	session: requests.Session = field(default_factory=requests.Session)
	sleep: Callable[[float], None] = time.sleep

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	def recognize(self, image_bytes: bytes, content_type: str = "image/jpeg") -> list[OcrPage]:
		operation_url = self._submit(image_bytes, content_type)
		result = self._poll(operation_url)
		pages = parse_read_result(result)
		self._logger.info(
			"Read API returned %d page(s), %d line(s)",
			len(pages),
			sum(len(page.lines) for page in pages),
		)
		return pages

	def _headers(self, content_type: str | None = None) -> dict[str, str]:
		headers = {"Ocp-Apim-Subscription-Key": self.credentials.api_key, "User-Agent": USER_AGENT}
		if content_type:
			headers["Content-Type"] = content_type
		return headers

	def _submit(self, image_bytes: bytes, content_type: str) -> str:
		url = f"{self.credentials.endpoint}{READ_PATH}"
		self._logger.debug("Submitting %.2fMB image to %s", len(image_bytes) / 1024 / 1024, url)
		response = self.session.post(url, headers=self._headers(content_type), data=image_bytes, timeout=self.timeout)
		if not response.ok:
			message = STATUS_MESSAGES.get(response.status_code)
			self._logger.error("Read API submit failed: %s %s", response.status_code, response.text)
			raise OcrBackendError(message or f"Read API call failed: {response.status_code} - {response.text}")
		operation_url = response.headers.get("Operation-Location")
		if not operation_url:
			raise OcrBackendError("Read API response has no Operation-Location header.")
		return operation_url

	def _poll(self, operation_url: str) -> JsonDict:
		for attempt in range(self.max_attempts):
			self.sleep(self._delay(attempt))
			response = self.session.get(operation_url, headers=self._headers(), timeout=self.timeout)
			if not response.ok:
				raise OcrBackendError(f"Fetching the OCR result failed: {response.status_code}")
			payload = response.json()
			status = payload.get("status")
			self._logger.debug("Read API status (%s/%s): %s", attempt + 1, self.max_attempts, status)
			if status == "succeeded":
				return payload
			if status == "failed":
				raise OcrBackendError("OCR analysis failed. The image may be blurry or contain no readable text.")
		raise OcrTimeoutError(f"OCR analysis did not finish after {self.max_attempts} polls.")

	def _delay(self, attempt: int) -> float:
		# Poll quickly at first, then back off.
		if attempt < 3:
			return self.base_delay
		if attempt < 10:
			return self.base_delay * 2
		return self.base_delay * 4


def parse_read_result(payload: JsonDict) -> list[OcrPage]:
	"""Convert a succeeded Read API payload into pages of lines and words."""
	analyze = payload.get("analyzeResult") or {}
	read_results = analyze.get("readResults")
	if not isinstance(read_results, list):
		raise OcrBackendError("Unexpected OCR result format: no readResults in the response.")

	pages: list[OcrPage] = []
	for position, page in enumerate(read_results):
		index = int(page.get("page", position + 1)) - 1
		lines = [_parse_line(line, index) for line in page.get("lines") or []]
		pages.append(OcrPage(index=index, lines=lines, width=page.get("width"), height=page.get("height")))
	return pages


def _parse_line(line: JsonDict, page_index: int) -> OcrLine:
	words = [
		OcrWord(
			text=word.get("text", ""),
			confidence=float(word.get("confidence") or 0.0) * 100,
			bounding_box=[float(value) for value in word.get("boundingBox") or [0.0] * 8],
		)
		for word in line.get("words") or []
	]
	return OcrLine(text=line.get("text", "").strip(), words=words, page_index=page_index)
