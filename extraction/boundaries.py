"""Detection of lines that start a new numbered question."""


import re
from dataclasses import dataclass
from typing import Final

CHINESE_NUMERALS: Final[str] = "一二三四五六七八九十"

# Priority order matters: the first pattern that matches at the start of a line wins.
BOUNDARY_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
	re.compile(r"^([0-9]+)[.．、]\s*"),
	re.compile(r"^第([0-9]+)题[：:]\s*"),
	re.compile(r"^\(([0-9]+)\)\s*"),
	re.compile(r"^（([0-9]+)）\s*"),
	re.compile(rf"^[(（]([{CHINESE_NUMERALS}]+)[)）]\s*"),
	re.compile(r"^([0-9]+)\s*[、.．]\s*"),
)


@dataclass(frozen=True)
class BoundaryMatch:
	"""Outcome of testing one line against the numbering patterns."""
	matched: bool
	label: str = ""
	matched_length: int = 0
	pattern_index: int = -1


NO_MATCH: Final[BoundaryMatch] = BoundaryMatch(matched=False)


def match_boundary(line: str) -> BoundaryMatch:
	"""Classify ``line`` as a question boundary.

	``label`` is the captured numbering text (digits or Chinese numerals) and
	``matched_length`` the number of leading characters taken by the label, its
	separator and any whitespace that follows.
	"""
	for index, pattern in enumerate(BOUNDARY_PATTERNS):
		match = pattern.match(line)
		if match:
			return BoundaryMatch(matched=True, label=match.group(1), matched_length=match.end(), pattern_index=index)
	return NO_MATCH


def is_boundary(line: str) -> bool:
	"""Return True when ``line`` starts a new question."""
	return any(pattern.match(line) for pattern in BOUNDARY_PATTERNS)
