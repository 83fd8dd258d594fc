"""Utility helpers for working with input images."""

import mimetypes
from pathlib import Path

CONTENT_TYPES = {
	".jpg": "image/jpeg",
	".jpeg": "image/jpeg",
	".png": "image/png",
	".bmp": "image/bmp",
	".gif": "image/gif",
}

def ensure_image_path(image: str | Path) -> Path:
	"""Validate that the provided path exists and points to a file."""
	path = Path(image).expanduser().resolve()
	if not path.exists():
		raise FileNotFoundError(f"Image path not found: {path}")
	if not path.is_file():
		raise ValueError(f"Image path is not a file: {path}")
	return path

def guess_content_type(path: Path) -> str:
	"""Infer the MIME type of an image from its extension, defaulting to JPEG."""
	suffix = path.suffix.lower()
	if suffix in CONTENT_TYPES:
		return CONTENT_TYPES[suffix]
	guessed, _ = mimetypes.guess_type(path.name)
	return guessed if guessed and guessed.startswith("image/") else "image/jpeg"

def read_image_bytes(path: Path) -> bytes:
	"""Read the raw bytes of an image."""
	return path.read_bytes()
