"""Question extraction over the recognized text of a single image."""


import logging
from collections.abc import Sequence

from config import ExtractionSettings
from extraction.answers import extract_answer
from extraction.assembler import assemble_body
from extraction.boundaries import is_boundary, match_boundary
from extraction.normalizer import normalize, select_words
from extraction.options import extract_options
from extraction.scoring import score_question
from schemas import OcrPage, OcrWord, Question

logger = logging.getLogger(__name__)


def extract_questions(pages: Sequence[OcrPage], settings: ExtractionSettings | None = None) -> list[Question]:
	"""Extract numbered questions from the OCR pages of one image.

	Ids start at 1 for every call; callers that merge several images renumber.
	"""
	settings = settings or ExtractionSettings()
	lines = normalize(pages)
	words = select_words(pages, settings.min_word_confidence)
	return extract_questions_from_lines(lines, words, settings)


def extract_questions_from_lines(
	lines: Sequence[str],
	words: Sequence[OcrWord] = (),
	settings: ExtractionSettings | None = None,
) -> list[Question]:
	"""Walk ``lines`` with a single cursor and build one question per boundary line."""
	settings = settings or ExtractionSettings()
	lines = list(lines)
	logger.debug("Scanning %d normalized lines", len(lines))

	questions: list[Question] = []
	cursor = 0
	while cursor < len(lines):
		boundary = match_boundary(lines[cursor])
		if not boundary.matched:
			cursor += 1
			continue

		body, cursor = assemble_body(lines, cursor, boundary.matched_length, settings)
		options, cursor = extract_options(lines, cursor, settings)
		trailing = _lines_before_next_boundary(lines, cursor)
		questions.append(_build_question(len(questions) + 1, boundary.label, body, options, trailing, words))

	logger.debug("Extracted %d questions", len(questions))
	return questions


def _build_question(
	question_id: int,
	label: str,
	body: str,
	options: list[str],
	trailing: list[str],
	words: Sequence[OcrWord],
) -> Question:
	text = body.strip()
	# Answer markers written under the options still belong to this question.
	answer_text = " ".join([text, *trailing])
	position, confidence = score_question(text, words)
	return Question(
		id=question_id,
		question_number=label,
		question_text=text,
		options=options or None,
		student_answer=extract_answer(answer_text, words),
		confidence=confidence,
		position=position,
	)


def _lines_before_next_boundary(lines: list[str], start: int) -> list[str]:
	end = start
	while end < len(lines) and not is_boundary(lines[end]):
		end += 1
	return lines[start:end]
