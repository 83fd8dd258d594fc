"""Errors raised by the OCR and grading backend adapters."""


class OcrBackendError(RuntimeError):
	"""The OCR service rejected a request or returned an unusable result."""


class OcrTimeoutError(OcrBackendError):
	"""The OCR service did not finish analysing an image in time."""


class GradingError(RuntimeError):
	"""The grading model returned no usable grading result."""
