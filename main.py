"""Command-line interface for recognizing and grading homework photos."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from config import AppConfig, configure_logging, load_config
from providers.aliyun_ocr import AliyunOcrClient
from providers.azure_ocr import AzureReadClient
from providers.qwen_grader import QwenGrader
from recognition import HomeworkRecognizer, OcrBackend
from storage import ErrorBook, GradingHistory, JsonStore
from utils.image_optimizer import ImageOptimizer
from utils.io_json import dump_json, dumps


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
	"""Parse command-line arguments."""
	parser = argparse.ArgumentParser(description="Homework OCR question extraction and grading CLI")
	parser.add_argument("--backend", choices=["azure", "aliyun"], required=True, help="OCR backend to use")
	parser.add_argument("--image", action="append", required=True, help="Path to an image file (repeatable)")
	parser.add_argument("--grade", action="store_true", help="Grade the extracted questions with Qwen")
	parser.add_argument("--no-optimize", action="store_true", help="Send images to OCR without pre-processing")
	parser.add_argument("--outdir", default=None, help="Directory to store JSON outputs")
	parser.add_argument("--store", default=None, help="JSON file holding grading history and the error book")
	return parser.parse_args(argv)


def build_backend(name: str, config: AppConfig) -> OcrBackend:
	"""Create the OCR backend selected on the command line."""
	if name == "azure":
		if not config.azure:
			raise RuntimeError("Azure Computer Vision is not configured (AZURE_VISION_ENDPOINT, AZURE_VISION_KEY).")
		return AzureReadClient(config.azure)
	if not config.aliyun:
		raise RuntimeError("Aliyun credentials are not configured.")
	return AliyunOcrClient(config.aliyun)


def run(args: argparse.Namespace, config: AppConfig) -> dict[str, Any]:
	"""Recognize the images and optionally grade and store the result."""
	output_dir = Path(args.outdir).expanduser().resolve() if args.outdir else config.output_dir
	optimizer = None if args.no_optimize else ImageOptimizer()
	recognizer = HomeworkRecognizer(build_backend(args.backend, config), optimizer, config.extraction)
	batch = recognizer.recognize_images(args.image)
	if not batch.questions:
		logging.warning("No numbered questions were recognized.")

	payload: dict[str, Any] = {
		"backend": args.backend,
		"images": [image.path for image in batch.images],
		"questions": batch.questions,
	}

	if args.grade:
		if not config.dashscope:
			raise RuntimeError("DashScope API key is not configured.")
		result = QwenGrader(config.dashscope).grade(batch.questions, ocr_text=batch.text)
		store = JsonStore(Path(args.store).expanduser() if args.store else config.store_path)
		GradingHistory(store).save(result)
		added = ErrorBook(store).add_from_grading(result)
		logging.info("Stored grading result %s with %d new error book entries", result.id, len(added))
		payload["grading"] = result

	output_path = dump_json(payload, output_dir, f"{args.backend}_homework")
	logging.info("Saved output to %s", output_path)
	print(dumps(payload))
	return payload


def main(argv: list[str] | None = None) -> int:
	"""Entry point for the CLI application."""
	configure_logging()
	config = load_config()
	try:
		args = parse_arguments(argv)
		run(args, config)
	except Exception as exc:  # noqa: BLE001
		logging.exception("Homework processing failed: %s", exc)
		return 1
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
