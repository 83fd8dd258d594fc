"""Pydantic schemas for OCR input, extracted questions and grading results."""


from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Difficulty = Literal["easy", "medium", "hard"]
MasteryLevel = Literal["needs_practice", "improving", "mastered"]


class OcrWord(BaseModel):
	"""A single recognized token with a 0-100 confidence and a four-corner box."""
	model_config = ConfigDict(frozen=True)

	text: str
	confidence: float = 0.0
	bounding_box: list[float] = Field(default_factory=lambda: [0.0] * 8)

	def corners(self) -> list[tuple[float, float]]:
		iterator = iter(self.bounding_box)
		return [(float(x), float(y)) for x, y in zip(iterator, iterator)]


class OcrLine(BaseModel):
	"""One visually detected text line and its words."""
	model_config = ConfigDict(frozen=True)

	text: str
	words: list[OcrWord] = Field(default_factory=list)
	page_index: int = 0


class OcrPage(BaseModel):
	"""All lines recognized on one page of an image."""
	model_config = ConfigDict(frozen=True)

	index: int = 0
	lines: list[OcrLine] = Field(default_factory=list)
	width: float | None = None
	height: float | None = None


class Position(BaseModel):
	"""Pixel-space rectangle of a question in the processed image."""
	x: float = 0
	y: float = 0
	width: float = 0
	height: float = 0


class Question(BaseModel):
	"""A numbered question extracted from recognized text."""
	id: int
	question_number: str
	question_text: str
	options: list[str] | None = None
	student_answer: str | None = None
	confidence: int = Field(default=0, ge=0, le=100)
	position: Position = Field(default_factory=Position)

	@field_validator("options")
	@classmethod
	def _no_empty_options(cls, value: list[str] | None) -> list[str] | None:
		if value is not None and len(value) > 4:
			raise ValueError("a question has at most 4 options")
		return value or None


class GradedQuestion(BaseModel):
	"""Grading verdict for one question as returned by the grading backend."""
	id: int
	question: str
	student_answer: str = ""
	correct_answer: str = ""
	is_correct: bool = False
	points: float = 0
	max_points: float = 1
	explanation: str = ""
	knowledge_points: list[str] = Field(default_factory=list)
	common_mistakes: list[str] = Field(default_factory=list)
	practice_questions: list[str] = Field(default_factory=list)
	difficulty: Difficulty = "medium"


class WeakPoint(BaseModel):
	topic: str
	mastery: float = 0
	questions: list[int] = Field(default_factory=list)
	suggestions: list[str] = Field(default_factory=list)


class WeaknessAnalysis(BaseModel):
	weak_points: list[WeakPoint] = Field(default_factory=list)
	strengths: list[str] = Field(default_factory=list)


class GradingResult(BaseModel):
	"""A graded assignment with totals and weakness analysis."""
	id: str
	title: str
	subject: str
	grade: str
	total_questions: int
	correct_answers: int
	score: float
	max_score: float
	questions: list[GradedQuestion]
	weakness_analysis: WeaknessAnalysis = Field(default_factory=WeaknessAnalysis)
	time_spent: str = "unknown"
	date: str


class ErrorBookEntry(BaseModel):
	"""An incorrectly answered question kept for later review."""
	id: str
	date: str
	subject: str
	topic: str
	question: str
	student_answer: str
	correct_answer: str
	explanation: str
	knowledge_points: list[str] = Field(default_factory=list)
	common_mistakes: list[str] = Field(default_factory=list)
	practice_questions: list[str] = Field(default_factory=list)
	review_count: int = 0
	mastery_level: MasteryLevel = "needs_practice"
	difficulty: Difficulty = "medium"
	source_assignment_id: str
	source_assignment_title: str
