"""Run homework images through optimization, OCR and question extraction."""


import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from PIL import UnidentifiedImageError

from config import ExtractionSettings
from extraction.normalizer import normalize, select_words
from extraction.pipeline import extract_questions
from extraction.scoring import average_confidence
from schemas import OcrPage, Question
from utils.image_io import ensure_image_path, guess_content_type, read_image_bytes
from utils.image_optimizer import ImageOptimizer, analyze_quality

LOW_QUALITY_SCORE = 50
LOW_CONFIDENCE = 70
SHORT_TEXT = 20

logger = logging.getLogger(__name__)


class OcrBackend(Protocol):
	def recognize(self, image_bytes: bytes, content_type: str = "image/jpeg") -> list[OcrPage]:
		...


@dataclass
class ImageRecognition:
	"""OCR output and extracted questions of one image."""
	path: Path
	text: str
	confidence: int
	questions: list[Question]


@dataclass
class RecognitionBatch:
	"""Questions of several images, numbered 1..N across the batch."""
	images: list[ImageRecognition] = field(default_factory=list)
	questions: list[Question] = field(default_factory=list)

	@property
	def text(self) -> str:
		return "\n".join(image.text for image in self.images if image.text)


@dataclass
class HomeworkRecognizer:
	"""Sequentially recognize homework images with one OCR backend."""

	backend: OcrBackend
	optimizer: ImageOptimizer | None = None
	settings: ExtractionSettings = field(default_factory=ExtractionSettings)

	def recognize_image(self, image: str | Path) -> ImageRecognition:
		path = ensure_image_path(image)
		data, content_type = self._prepare(path)
		pages = self.backend.recognize(data, content_type)

		lines = normalize(pages)
		text = "\n".join(lines)
		confidence = average_confidence(select_words(pages, self.settings.min_word_confidence))
		if len(text) < SHORT_TEXT:
			logger.warning("Very little text recognized in %s; check the image quality", path.name)
		elif confidence < LOW_CONFIDENCE:
			logger.warning("Low recognition confidence (%s%%) for %s", confidence, path.name)

		questions = extract_questions(pages, self.settings)
		logger.info("Recognized %d question(s) in %s", len(questions), path.name)
		return ImageRecognition(path=path, text=text, confidence=confidence, questions=questions)

	def recognize_images(self, images: Iterable[str | Path]) -> RecognitionBatch:
		batch = RecognitionBatch()
		next_id = 1
		for image in images:
			result = self.recognize_image(image)
			renumbered = []
			for question in result.questions:
				renumbered.append(question.model_copy(update={"id": next_id}))
				next_id += 1
			result.questions = renumbered
			batch.images.append(result)
			batch.questions.extend(renumbered)
		logger.info("Batch complete: %d question(s) from %d image(s)", len(batch.questions), len(batch.images))
		return batch

	def _prepare(self, path: Path) -> tuple[bytes, str]:
		data = read_image_bytes(path)
		content_type = guess_content_type(path)
		if self.optimizer is None:
			return data, content_type

		quality = analyze_quality(data)
		if quality.score < LOW_QUALITY_SCORE:
			logger.warning("Poor image quality for %s: %s", path.name, ", ".join(quality.issues))
		try:
			return self.optimizer.optimize(data)
		except (UnidentifiedImageError, OSError, ValueError) as exc:
			logger.warning("Image optimization failed for %s, using the original: %s", path.name, exc)
			return data, content_type
