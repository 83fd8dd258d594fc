"""Extraction of lettered A-D options following a question body."""


import re
from typing import Final

from config import ExtractionSettings
from extraction.boundaries import is_boundary

OPTION_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
	re.compile(r"^[ABCD][.．、]\s*(.+)", re.IGNORECASE),
	re.compile(r"^[ABCD][：:]\s*(.+)", re.IGNORECASE),
	re.compile(r"^\([ABCD]\)\s*(.+)", re.IGNORECASE),
	re.compile(r"^（[ABCD]）\s*(.+)", re.IGNORECASE),
	re.compile(r"^[ABCD]\s*[.．、]\s*(.+)", re.IGNORECASE),
)


def match_option(line: str) -> str | None:
	"""Return the option text of ``line`` with its letter label stripped, if any."""
	for pattern in OPTION_PATTERNS:
		match = pattern.match(line)
		if match:
			return match.group(1).strip()
	return None


def is_option(line: str) -> bool:
	return match_option(line) is not None


def extract_options(
	lines: list[str],
	start_index: int,
	settings: ExtractionSettings | None = None,
) -> tuple[list[str], int]:
	"""Collect up to ``max_options`` options starting at ``start_index``.

	Returns the options and the index of the first line not consumed. Lines that
	end the scan (a new question, or prose after the options) are left in place.
	"""
	settings = settings or ExtractionSettings()
	options: list[str] = []
	end_index = start_index
	window_end = min(start_index + settings.option_scan_window, len(lines))

	for index in range(start_index, window_end):
		if len(options) >= settings.max_options:
			break
		line = lines[index].strip()
		if is_boundary(line):
			break
		text = match_option(line)
		if text is not None:
			options.append(text)
			end_index = index + 1
			continue
		if options and len(line) > settings.prose_line_length:
			break

	return options, end_index
