"""Map a question back onto its OCR words for a bounding box and confidence."""


import math
from collections.abc import Sequence

from schemas import OcrWord, Position


def matching_words(question_text: str, words: Sequence[OcrWord]) -> list[OcrWord]:
	"""Words longer than one character that occur inside ``question_text``."""
	return [word for word in words if len(word.text) > 1 and word.text in question_text]


def bounding_position(words: Sequence[OcrWord]) -> Position:
	corners = [corner for word in words for corner in word.corners()]
	if not corners:
		return Position()
	xs = [x for x, _ in corners]
	ys = [y for _, y in corners]
	return Position(x=min(xs), y=min(ys), width=max(xs) - min(xs), height=max(ys) - min(ys))


def average_confidence(words: Sequence[OcrWord]) -> int:
	if not words:
		return 0
	mean = sum(word.confidence for word in words) / len(words)
	# Half-up rounding, clamped to the 0-100 scale.
	return max(0, min(100, math.floor(mean + 0.5)))


def score_question(question_text: str, words: Sequence[OcrWord]) -> tuple[Position, int]:
	"""Return the position and rounded mean confidence of the question's words."""
	matched = matching_words(question_text, words)
	if not matched:
		return Position(), 0
	return bounding_position(matched), average_confidence(matched)
