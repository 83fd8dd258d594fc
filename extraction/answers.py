"""Detection of the student's written answer next to a question."""


import re
from collections.abc import Sequence
from typing import Final

from schemas import OcrWord

ANSWER_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
	re.compile(r"答案[：:]\s*([ABCD0-9]+)", re.IGNORECASE),
	re.compile(r"选择[：:]\s*([ABCD])", re.IGNORECASE),
	re.compile(r"答[：:]\s*([ABCD0-9]+)", re.IGNORECASE),
	re.compile(r"我的答案[：:]\s*([ABCD0-9]+)", re.IGNORECASE),
	re.compile(r"选[：:]\s*([ABCD])", re.IGNORECASE),
)
ANSWER_MARKERS: Final[tuple[str, ...]] = ("答", "选")
SINGLE_ANSWER = re.compile(r"^[ABCD0-9]$")


def extract_answer(question_text: str, words: Sequence[OcrWord]) -> str | None:
	"""Return the student answer following an answer marker, or None.

	The question text is searched first; failing that, a marker word followed by
	a single letter or digit word in the OCR word stream is accepted.
	"""
	for pattern in ANSWER_PATTERNS:
		match = pattern.search(question_text)
		if match:
			return match.group(1)

	for word, next_word in zip(words, words[1:]):
		if any(marker in word.text for marker in ANSWER_MARKERS) and SINGLE_ANSWER.match(next_word.text):
			return next_word.text
	return None
