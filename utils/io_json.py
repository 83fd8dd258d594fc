"""JSON persistence utilities for recognition and grading outputs."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel

DATE_PATTERN = "%Y%m%d_%H%M%S"

def build_output_path(output_dir: Path, name_hint: str) -> Path:
	"""Compose a UTC-timestamped output path within the output directory."""
	timestamp = datetime.now(timezone.utc).strftime(DATE_PATTERN)
	return output_dir.joinpath(f"{name_hint}_{timestamp}.json")

def to_jsonable(value: Any) -> Any:
	"""Encode models and paths that json cannot serialize on its own."""
	if isinstance(value, BaseModel):
		return value.model_dump(exclude_none=True)
	if isinstance(value, Path):
		return str(value)
	raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

def dumps(data: Any) -> str:
	return json.dumps(data, ensure_ascii=False, indent=2, default=to_jsonable)

def dump_json(data: dict[str, Any], output_dir: Path, name_hint: str) -> Path:
	"""Persist a payload of plain values and models as formatted JSON."""
	output_dir.mkdir(parents=True, exist_ok=True)
	path = build_output_path(output_dir, name_hint)
	path.write_text(dumps(data), encoding="utf-8")
	return path
