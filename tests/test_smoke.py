"""Smoke tests for the homework CLI scaffolding."""
from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from pydantic import ValidationError

import main
from config import AppConfig
from main import parse_arguments, run
from schemas import OcrPage, OcrWord, Position, Question


def test_schema_construction() -> None:
	"""Ensure schemas can be instantiated with expected fields."""
	word = OcrWord(text="hello", confidence=90.0, bounding_box=[0, 0, 10, 0, 10, 5, 0, 5])
	question = Question(
		id=1,
		question_number="1",
		question_text="What is 2+2?",
		options=["3", "4"],
		confidence=90,
		position=Position(x=0, y=0, width=10, height=5),
	)
	assert word.corners() == [(0.0, 0.0), (10.0, 0.0), (10.0, 5.0), (0.0, 5.0)]
	assert question.student_answer is None
	assert "student_answer" not in question.model_dump(exclude_none=True)


def test_question_options_are_absent_rather_than_empty() -> None:
	"""An empty options list is stored as no options."""
	question = Question(id=1, question_number="1", question_text="x", options=[])
	assert question.options is None


def test_question_rejects_more_than_four_options() -> None:
	with pytest.raises(ValidationError):
		Question(id=1, question_number="1", question_text="x", options=["a", "b", "c", "d", "e"])


def test_cli_parser_defaults() -> None:
	"""Validate argument parser accepts expected switches."""
	args = parse_arguments(
		[
			"--backend",
			"azure",
			"--image",
			"samples/page1.jpg",
			"--image",
			"samples/page2.jpg",
			"--grade",
			"--outdir",
			"outputs",
		]
	)
	assert args.backend == "azure"
	assert args.image == ["samples/page1.jpg", "samples/page2.jpg"]
	assert args.grade is True
	assert args.no_optimize is False
	assert args.store is None


def test_run_writes_extracted_questions(
	tmp_path: Path,
	monkeypatch: pytest.MonkeyPatch,
	page_factory: Callable[..., OcrPage],
) -> None:
	"""Run the CLI flow end to end with a stubbed OCR backend."""
	image = tmp_path / "homework.jpg"
	image.write_bytes(b"jpeg")

	class StubBackend:
		def recognize(self, image_bytes: bytes, content_type: str = "image/jpeg") -> list[OcrPage]:
			return [page_factory(["1. What is 2+2?", "A. 3", "B. 4"])]

	monkeypatch.setattr(main, "build_backend", lambda name, config: StubBackend())
	config = AppConfig(azure=None, aliyun=None, dashscope=None, output_dir=tmp_path, store_path=tmp_path / "s.json")
	args = parse_arguments(["--backend", "azure", "--image", str(image), "--no-optimize", "--outdir", str(tmp_path / "out")])
	payload = run(args, config)

	assert payload["questions"][0].options == ["3", "4"]
	written = list((tmp_path / "out").glob("azure_homework_*.json"))
	assert len(written) == 1
	saved = json.loads(written[0].read_text(encoding="utf-8"))
	assert saved["questions"][0]["question_text"] == "What is 2+2?"
	assert "grading" not in saved
