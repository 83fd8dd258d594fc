"""Local JSON storage for grading history and the error book."""


import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any

from schemas import ErrorBookEntry, GradingResult, MasteryLevel

HISTORY_KEY = "gradingHistory"
ERROR_BOOK_KEY = "errorBook"
HISTORY_LIMIT = 100

logger = logging.getLogger(__name__)


class JsonStore:
	"""A key-value store persisted as one JSON document."""

	def __init__(self, path: str | Path) -> None:
		self.path = Path(path)

	def _load(self) -> dict[str, Any]:
		if not self.path.exists():
			return {}
		try:
			data = json.loads(self.path.read_text(encoding="utf-8"))
		except json.JSONDecodeError:
			logger.warning("Store %s is corrupt, starting empty", self.path)
			return {}
		return data if isinstance(data, dict) else {}

	def get(self, key: str, default: Any = None) -> Any:
		return self._load().get(key, default)

	def set(self, key: str, value: Any) -> None:
		data = self._load()
		data[key] = value
		self.path.parent.mkdir(parents=True, exist_ok=True)
		self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

	def delete(self, key: str) -> None:
		data = self._load()
		if data.pop(key, None) is not None:
			self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def _percent(part: float, whole: float) -> int:
	return round(part / whole * 100) if whole else 0


class GradingHistory:
	"""Graded assignments, newest first."""

	def __init__(self, store: JsonStore, limit: int = HISTORY_LIMIT) -> None:
		self.store = store
		self.limit = limit

	def all(self) -> list[GradingResult]:
		return [GradingResult.model_validate(item) for item in self.store.get(HISTORY_KEY, [])]

	def _save_all(self, results: list[GradingResult]) -> None:
		self.store.set(HISTORY_KEY, [result.model_dump() for result in results])

	def save(self, result: GradingResult) -> None:
		results = [result, *self.all()][: self.limit]
		self._save_all(results)

	def get(self, result_id: str) -> GradingResult | None:
		return next((result for result in self.all() if result.id == result_id), None)

	def recent(self, limit: int = 10) -> list[GradingResult]:
		return self.all()[:limit]

	def by_subject(self, subject: str) -> list[GradingResult]:
		return [result for result in self.all() if result.subject == subject]

	def by_date_range(self, start: str, end: str) -> list[GradingResult]:
		"""Results whose ISO date lies within [start, end]."""
		return [result for result in self.all() if start <= result.date <= end]

	def delete(self, result_id: str) -> None:
		self._save_all([result for result in self.all() if result.id != result_id])

	def stats(self) -> dict[str, Any]:
		results = self.all()
		total_questions = sum(result.total_questions for result in results)
		total_correct = sum(result.correct_answers for result in results)
		average = (
			sum(result.score / result.max_score * 100 for result in results if result.max_score) / len(results)
			if results
			else 0
		)

		subjects: dict[str, dict[str, float]] = {}
		for result in results:
			entry = subjects.setdefault(result.subject, {"count": 0, "score": 0.0, "max_score": 0.0})
			entry["count"] += 1
			entry["score"] += result.score
			entry["max_score"] += result.max_score

		return {
			"total_assignments": len(results),
			"total_questions": total_questions,
			"total_correct": total_correct,
			"average_score": round(average),
			"correct_rate": _percent(total_correct, total_questions),
			"subject_stats": {
				subject: {"count": int(entry["count"]), "average_score": _percent(entry["score"], entry["max_score"])}
				for subject, entry in subjects.items()
			},
			"recent_trend": [
				{"date": result.date, "score": _percent(result.score, result.max_score)}
				for result in reversed(results[:10])
			],
		}


class ErrorBook:
	"""Incorrectly answered questions and their review progress."""

	def __init__(self, store: JsonStore) -> None:
		self.store = store

	def all(self) -> list[ErrorBookEntry]:
		return [ErrorBookEntry.model_validate(item) for item in self.store.get(ERROR_BOOK_KEY, [])]

	def _save_all(self, entries: list[ErrorBookEntry]) -> None:
		self.store.set(ERROR_BOOK_KEY, [entry.model_dump() for entry in entries])

	def add_from_grading(self, result: GradingResult) -> list[ErrorBookEntry]:
		"""Record every incorrect question of ``result`` and return the new entries."""
		existing = self.all()
		known = {entry.id for entry in existing}
		added = []
		for question in result.questions:
			entry_id = f"{result.id}_{question.id}"
			if question.is_correct or entry_id in known:
				continue
			added.append(
				ErrorBookEntry(
					id=entry_id,
					date=result.date,
					subject=result.subject,
					topic=question.knowledge_points[0] if question.knowledge_points else "unknown topic",
					question=question.question,
					student_answer=question.student_answer,
					correct_answer=question.correct_answer,
					explanation=question.explanation,
					knowledge_points=question.knowledge_points,
					common_mistakes=question.common_mistakes,
					practice_questions=question.practice_questions,
					difficulty=question.difficulty,
					source_assignment_id=result.id,
					source_assignment_title=result.title,
				)
			)
		self._save_all(existing + added)
		return added

	def record_review(self, entry_id: str) -> ErrorBookEntry | None:
		entries = self.all()
		for index, entry in enumerate(entries):
			if entry.id != entry_id:
				continue
			count = entry.review_count + 1
			level: MasteryLevel = "mastered" if count >= 3 else "improving"
			entries[index] = entry.model_copy(update={"review_count": count, "mastery_level": level})
			self._save_all(entries)
			return entries[index]
		return None

	def by_date(self, day: str) -> list[ErrorBookEntry]:
		return [entry for entry in self.all() if entry.date == day]

	def by_subject(self, subject: str) -> list[ErrorBookEntry]:
		return [entry for entry in self.all() if entry.subject == subject]

	def by_mastery(self, level: MasteryLevel) -> list[ErrorBookEntry]:
		return [entry for entry in self.all() if entry.mastery_level == level]

	def stats(self) -> dict[str, Any]:
		entries = self.all()
		levels = Counter(entry.mastery_level for entry in entries)
		return {
			"total": len(entries),
			"needs_practice": levels["needs_practice"],
			"improving": levels["improving"],
			"mastered": levels["mastered"],
			"by_subject": dict(Counter(entry.subject for entry in entries)),
			"by_date": dict(Counter(entry.date for entry in entries)),
		}

	def delete(self, entry_id: str) -> None:
		self._save_all([entry for entry in self.all() if entry.id != entry_id])

	def clear(self) -> None:
		self.store.delete(ERROR_BOOK_KEY)
