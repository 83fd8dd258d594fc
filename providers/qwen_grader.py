"""DashScope Qwen grading backend."""


import json
import logging
import re
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from config import DashScopeCredentials
from providers.errors import GradingError
from schemas import GradedQuestion, GradingResult, Question, WeakPoint, WeaknessAnalysis

try:
	from dashscope import Generation
except ImportError:
	Generation = None  # type: ignore[assignment]

JsonDict = dict[str, Any]

REFUSAL_MARKERS: tuple[str, ...] = ("抱歉", "无法处理", "无法识别", "I'm sorry", "I cannot")
JSON_BLOCK = re.compile(r"```(?:json)?\s*\n(.*?)\n\s*```", re.DOTALL)
JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
TRAILING_COMMA = re.compile(r",(\s*[}\]])")
DIFFICULTIES = ("easy", "medium", "hard")

RESPONSE_FORMAT = """{
  "title": "assignment title",
  "subject": "subject",
  "grade": "grade level",
  "questions": [
    {
      "id": 1,
      "question": "question text",
      "student_answer": "student's answer",
      "correct_answer": "correct answer",
      "is_correct": true,
      "points": 1,
      "max_points": 1,
      "explanation": "worked solution and error analysis",
      "knowledge_points": ["topic"],
      "common_mistakes": ["mistake"],
      "practice_questions": ["similar exercise"],
      "difficulty": "easy|medium|hard"
    }
  ],
  "weakness_analysis": {
    "weak_points": [{"topic": "topic", "mastery": 40, "questions": [2], "suggestions": ["advice"]}],
    "strengths": ["strength"]
  }
}"""


@dataclass
class QwenGrader:
	"""Grade extracted questions with a Qwen chat model."""

	credentials: DashScopeCredentials
	retries: int = 3
	backoff: float = 1.5
	temperature: float = 0.1
	max_tokens: int = 4000

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	def grade(
		self,
		questions: list[Question],
		ocr_text: str | None = None,
		custom_prompt: str | None = None,
	) -> GradingResult:
		if Generation is None:
			raise ImportError("DashScope SDK is not installed. Please install dashscope.")
		prompt = custom_prompt or build_prompt(questions, ocr_text)
		self._logger.info("Grading %d question(s) with %s", len(questions), self.credentials.model)
		response = self._execute(lambda: self._call_model(prompt))
		reply = self._reply_text(response)
		return parse_grading_reply(reply)

	def _call_model(self, prompt: str):
		return Generation.call(
			model=self.credentials.model,
			messages=[{"role": "user", "content": prompt}],
			api_key=self.credentials.api_key,
			result_format="message",
			temperature=self.temperature,
			max_tokens=self.max_tokens,
		)

	def _execute(self, call: Callable[[], Any]):
		for attempt in range(1, self.retries + 1):
			try:
				response = call()
				if getattr(response, "status_code", 500) != 200:
					raise RuntimeError(getattr(response, "message", "Qwen grading request failed."))
				return response
			except Exception as exc:  # noqa: BLE001
				wait = self.backoff ** attempt
				self._logger.warning("Qwen grading call failed (attempt %s/%s): %s", attempt, self.retries, exc)
				if attempt == self.retries:
					raise GradingError(f"Grading failed: {exc}") from exc
				time.sleep(wait)

	def _reply_text(self, response: Any) -> str:
		try:
			content = response.output.choices[0].message.content
		except (AttributeError, IndexError, KeyError, TypeError) as exc:
			raise GradingError("No reply received from the grading model.") from exc
		if not content:
			raise GradingError("No reply received from the grading model.")
		return content


def build_prompt(questions: list[Question], ocr_text: str | None = None) -> str:
	"""Compose the grading instruction for the extracted questions."""
	parts = ["You are an experienced teacher. Grade the following homework."]
	if ocr_text:
		parts.append(f"Text recognized from the homework images:\n{ocr_text}")
	if questions:
		listing = []
		for question in questions:
			entry = f"{question.id}. [{question.question_number}] {question.question_text}"
			if question.options:
				entry += "\n" + "\n".join(f"   {letter}. {text}" for letter, text in zip("ABCD", question.options))
			if question.student_answer:
				entry += f"\n   Student answer: {question.student_answer}"
			listing.append(entry)
		parts.append("Extracted questions:\n" + "\n".join(listing))
	parts.append(
		"For every question decide whether it is correct, give the correct answer and score, "
		"explain mistakes, list knowledge points, and summarize the student's weak points. "
		"If the text is incomplete, infer from context and say so in the explanation."
	)
	parts.append(f"Reply with JSON only, in this format:\n{RESPONSE_FORMAT}")
	return "\n\n".join(parts)


def parse_grading_reply(reply: str, result_id: str | None = None, today: date | None = None) -> GradingResult:
	"""Turn the model's reply into a normalized GradingResult."""
	if "{" not in reply:
		if any(marker in reply for marker in REFUSAL_MARKERS):
			raise GradingError(f"The model could not process the content: {reply}")
		raise GradingError(f"The model returned unstructured data: {reply}")
	data = repair_json(extract_json_text(reply))
	return normalize_grading(data, result_id=result_id, today=today)


def extract_json_text(reply: str) -> str:
	match = JSON_BLOCK.search(reply)
	if match:
		return match.group(1)
	match = JSON_OBJECT.search(reply)
	return match.group(0) if match else reply


def repair_json(text: str) -> JsonDict:
	"""Parse model JSON, applying common fixes when it is not valid as-is."""
	candidates = [text.strip()]
	fixed = TRAILING_COMMA.sub(r"\1", text.strip().replace("\r", " ").replace("\n", " "))
	candidates.append(fixed)
	candidates.append(fixed.replace('\\"', '"'))
	for candidate in candidates:
		try:
			data = json.loads(candidate)
		except json.JSONDecodeError:
			continue
		if isinstance(data, dict):
			return data
	raise GradingError("The grading reply is not valid JSON.")


def normalize_grading(data: JsonDict, result_id: str | None = None, today: date | None = None) -> GradingResult:
	"""Fill defaults into the model's grading data and compute the totals."""
	raw_questions = _pick(data, "questions")
	if not isinstance(raw_questions, list):
		raise GradingError("The grading reply has no questions list.")
	questions = [_normalize_question(item, index) for index, item in enumerate(raw_questions) if isinstance(item, dict)]

	return GradingResult(
		id=result_id or str(int(time.time() * 1000)),
		title=str(_pick(data, "title") or "Homework grading"),
		subject=str(_pick(data, "subject") or "unknown"),
		grade=str(_pick(data, "grade") or "unknown"),
		total_questions=len(questions),
		correct_answers=sum(1 for question in questions if question.is_correct),
		score=sum(question.points for question in questions),
		max_score=sum(question.max_points for question in questions) or 100,
		questions=questions,
		weakness_analysis=_normalize_weakness(_pick(data, "weakness_analysis", "weaknessAnalysis")),
		date=(today or date.today()).isoformat(),
	)


def _normalize_question(item: JsonDict, index: int) -> GradedQuestion:
	difficulty = _pick(item, "difficulty")
	return GradedQuestion(
		id=_as_int(_pick(item, "id"), index + 1),
		question=str(_pick(item, "question") or "question text missing"),
		student_answer=str(_pick(item, "student_answer", "studentAnswer") or ""),
		correct_answer=str(_pick(item, "correct_answer", "correctAnswer") or ""),
		is_correct=bool(_pick(item, "is_correct", "isCorrect")),
		points=_as_float(_pick(item, "points"), 0.0),
		max_points=_as_float(_pick(item, "max_points", "maxPoints"), 1.0) or 1.0,
		explanation=str(_pick(item, "explanation") or "no explanation"),
		knowledge_points=_as_str_list(_pick(item, "knowledge_points", "knowledgePoints")),
		common_mistakes=_as_str_list(_pick(item, "common_mistakes", "commonMistakes")),
		practice_questions=_as_str_list(_pick(item, "practice_questions", "practiceQuestions")),
		difficulty=difficulty if difficulty in DIFFICULTIES else "medium",
	)


def _normalize_weakness(value: Any) -> WeaknessAnalysis:
	if not isinstance(value, dict):
		return WeaknessAnalysis()
	weak_points = []
	for item in _pick(value, "weak_points", "weakPoints") or []:
		if not isinstance(item, dict) or not item.get("topic"):
			continue
		weak_points.append(
			WeakPoint(
				topic=str(item["topic"]),
				mastery=_as_float(item.get("mastery"), 0.0),
				questions=[_as_int(q, 0) for q in item.get("questions") or [] if _as_int(q, 0)],
				suggestions=_as_str_list(item.get("suggestions")),
			)
		)
	return WeaknessAnalysis(weak_points=weak_points, strengths=_as_str_list(value.get("strengths")))


def _pick(data: JsonDict, *keys: str) -> Any:
	for key in keys:
		if key in data:
			return data[key]
	return None


def _as_int(value: Any, default: int) -> int:
	try:
		return int(value)
	except (TypeError, ValueError):
		return default


def _as_float(value: Any, default: float) -> float:
	try:
		return float(value)
	except (TypeError, ValueError):
		return default


def _as_str_list(value: Any) -> list[str]:
	if not isinstance(value, list):
		return []
	return [str(item) for item in value]
