"""Assembly of a question body from its boundary line and short continuation lines."""


from typing import Final

from config import ExtractionSettings
from extraction.boundaries import is_boundary
from extraction.options import is_option

SENTENCE_END: Final[str] = ".?!。？！"


def assemble_body(
	lines: list[str],
	boundary_index: int,
	matched_length: int,
	settings: ExtractionSettings | None = None,
) -> tuple[str, int]:
	"""Merge the lines following a boundary into one question body.

	The body starts as the boundary line minus its numbering prefix. Following
	lines are appended while the body is shorter than ``merge_min_length``,
	stopping at a new question, an option line, or the end of input. Returns the
	body and the index of the first line not merged.
	"""
	settings = settings or ExtractionSettings()
	body = lines[boundary_index][matched_length:]
	cursor = boundary_index + 1

	while cursor < len(lines):
		next_line = lines[cursor].strip()
		if is_boundary(next_line) or is_option(next_line):
			break
		if len(body) >= settings.merge_min_length and not _continues_sentence(body, next_line, settings):
			break
		body = f"{body} {next_line}"
		cursor += 1

	return body, cursor


def _continues_sentence(body: str, next_line: str, settings: ExtractionSettings) -> bool:
	# A wrapped sentence: unterminated body followed by a lowercase Latin word.
	if not settings.merge_lowercase_continuations or not next_line:
		return False
	first = next_line[0]
	return first.isascii() and first.islower() and not body.rstrip().endswith(tuple(SENTENCE_END))
