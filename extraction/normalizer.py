"""Turn recognized OCR pages into clean text lines and a filtered word stream."""


import re
from collections.abc import Iterable

from config import MIN_WORD_CONFIDENCE
from schemas import OcrPage, OcrWord

LINE_BREAK = re.compile(r"[\r\n]+")


def normalize(pages: Iterable[OcrPage]) -> list[str]:
	"""Return the trimmed, non-empty text lines of all pages in page then line order."""
	text = "\n".join(line.text for page in pages for line in page.lines)
	return [piece.strip() for piece in LINE_BREAK.split(text) if piece.strip()]


def select_words(pages: Iterable[OcrPage], min_confidence: float = MIN_WORD_CONFIDENCE) -> list[OcrWord]:
	"""Flatten the word stream, dropping words at or below ``min_confidence``."""
	return [
		word
		for page in pages
		for line in page.lines
		for word in line.words
		if word.confidence > min_confidence
	]
