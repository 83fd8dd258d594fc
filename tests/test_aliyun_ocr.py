"""Tests for parsing Aliyun RecognizeAdvanced payloads."""
from __future__ import annotations

import json

import pytest

from providers.aliyun_ocr import parse_advanced_result
from providers.errors import OcrBackendError


def _payload(data: dict) -> dict:
	return {"headers": {}, "statusCode": 200, "body": {"Data": json.dumps(data, ensure_ascii=False), "RequestId": "r"}}


def test_parse_advanced_result_builds_lines_and_words() -> None:
	data = {
		"width": 1000,
		"height": 800,
		"prism_wordsInfo": [
			{
				"word": "1. 计算 下列各题",
				"prob": 97,
				"pos": [{"x": 10, "y": 20}, {"x": 300, "y": 20}, {"x": 300, "y": 50}, {"x": 10, "y": 50}],
			},
			{"word": "  ", "prob": 10, "pos": []},
			{"word": "A. 4", "prob": 88},
		],
	}
	pages = parse_advanced_result(_payload(data))

	assert len(pages) == 1
	assert pages[0].width == 1000
	lines = pages[0].lines
	assert [line.text for line in lines] == ["1. 计算 下列各题", "A. 4"]
	assert [word.text for word in lines[0].words] == ["1.", "计算", "下列各题"]
	assert lines[0].words[0].confidence == 97.0
	assert lines[0].words[0].bounding_box == [10.0, 20.0, 300.0, 20.0, 300.0, 50.0, 10.0, 50.0]
	assert lines[1].words[0].bounding_box == [0.0] * 8


def test_parse_advanced_result_accepts_decoded_data() -> None:
	pages = parse_advanced_result({"body": {"Data": {"prism_wordsInfo": [{"word": "2、填空", "prob": 90}]}}})
	assert pages[0].lines[0].text == "2、填空"


def test_parse_advanced_result_rejects_malformed_data() -> None:
	with pytest.raises(OcrBackendError):
		parse_advanced_result({"body": {"Data": "{not json"}})
