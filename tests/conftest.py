"""Shared builders for OCR pages used across the test suite."""
from __future__ import annotations

from collections.abc import Callable

import pytest

from schemas import OcrLine, OcrPage, OcrWord

WORD_WIDTH = 40.0
LINE_HEIGHT = 30.0


def make_page(lines: list[str], confidence: float = 90.0, index: int = 0) -> OcrPage:
	"""Build a page whose words are the whitespace-split line texts laid out on a grid."""
	ocr_lines = []
	for row, text in enumerate(lines):
		words = []
		for column, token in enumerate(text.split()):
			x0 = column * (WORD_WIDTH + 10)
			y0 = row * (LINE_HEIGHT + 10)
			x1, y1 = x0 + WORD_WIDTH, y0 + LINE_HEIGHT
			words.append(OcrWord(text=token, confidence=confidence, bounding_box=[x0, y0, x1, y0, x1, y1, x0, y1]))
		ocr_lines.append(OcrLine(text=text, words=words, page_index=index))
	return OcrPage(index=index, lines=ocr_lines)


@pytest.fixture
def page_factory() -> Callable[..., OcrPage]:
	return make_page
