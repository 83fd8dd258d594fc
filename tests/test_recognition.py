"""Tests for recognizing batches of images with a fake OCR backend."""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from recognition import HomeworkRecognizer
from schemas import OcrPage
from utils.image_optimizer import ImageOptimizer


class FakeBackend:
	def __init__(self, pages: list[list[OcrPage]]) -> None:
		self.pages = list(pages)
		self.calls: list[tuple[bytes, str]] = []

	def recognize(self, image_bytes: bytes, content_type: str = "image/jpeg") -> list[OcrPage]:
		self.calls.append((image_bytes, content_type))
		return self.pages.pop(0)


def _image(tmp_path: Path, name: str) -> Path:
	path = tmp_path / name
	path.write_bytes(b"raw-bytes")
	return path


def test_batch_renumbers_questions_across_images(tmp_path: Path, page_factory: Callable[..., OcrPage]) -> None:
	backend = FakeBackend(
		[
			[page_factory(["1. First question on page one", "2. Second question on page one"])],
			[page_factory(["1. First question on page two", "A. yes", "B. no"])],
		]
	)
	batch = HomeworkRecognizer(backend).recognize_images([_image(tmp_path, "a.jpg"), _image(tmp_path, "b.png")])

	assert [question.id for question in batch.questions] == [1, 2, 3]
	assert [question.question_number for question in batch.questions] == ["1", "2", "1"]
	assert [question.id for question in batch.images[1].questions] == [3]
	assert batch.questions[2].options == ["yes", "no"]
	assert backend.calls[1] == (b"raw-bytes", "image/png")
	assert "First question on page two" in batch.text


def test_image_summary_confidence(tmp_path: Path, page_factory: Callable[..., OcrPage]) -> None:
	backend = FakeBackend([[page_factory(["1. Question text long enough"], confidence=80.0)]])
	result = HomeworkRecognizer(backend).recognize_image(_image(tmp_path, "a.jpg"))

	assert result.confidence == 80
	assert result.text == "1. Question text long enough"
	assert result.questions[0].id == 1


def test_empty_recognition_is_not_an_error(tmp_path: Path) -> None:
	batch = HomeworkRecognizer(FakeBackend([[]])).recognize_images([_image(tmp_path, "a.jpg")])
	assert batch.questions == []
	assert batch.images[0].confidence == 0


def test_optimizer_failure_falls_back_to_original(tmp_path: Path, page_factory: Callable[..., OcrPage]) -> None:
	backend = FakeBackend([[page_factory(["1. Question"])]])
	recognizer = HomeworkRecognizer(backend, optimizer=ImageOptimizer())
	recognizer.recognize_image(_image(tmp_path, "scan.png"))
	assert backend.calls == [(b"raw-bytes", "image/png")]
