"""Tests for image pre-processing with Pillow."""
from __future__ import annotations

import io

from PIL import Image

from utils.image_optimizer import ImageOptimizer, analyze_quality, calculate_optimal_size


def _encode(image: Image.Image, fmt: str = "PNG") -> bytes:
	buffer = io.BytesIO()
	image.save(buffer, format=fmt)
	return buffer.getvalue()


def test_calculate_optimal_size() -> None:
	assert calculate_optimal_size(400, 300, 3000, 3000) == (1200, 900)
	assert calculate_optimal_size(4000, 3000, 3000, 3000) == (3000, 2250)
	assert calculate_optimal_size(1000, 800, 3000, 3000) == (1000, 800)


def test_optimize_upscales_and_reencodes_as_jpeg() -> None:
	data = _encode(Image.new("RGB", (400, 300), "white"))
	optimized, content_type = ImageOptimizer().optimize(data)

	assert content_type == "image/jpeg"
	with Image.open(io.BytesIO(optimized)) as image:
		assert image.format == "JPEG"
		assert image.size == (1200, 900)


def test_contrast_stretches_around_mid_gray() -> None:
	image = Image.new("RGB", (1, 1), (200, 100, 128))
	enhanced = ImageOptimizer()._enhance_contrast(image)
	assert enhanced.getpixel((0, 0)) == (214, 94, 128)


def test_analyze_quality_penalizes_small_images() -> None:
	quality = analyze_quality(_encode(Image.new("RGB", (400, 300), "white")))
	assert quality.score == 65
	assert "low resolution" in quality.issues


def test_analyze_quality_penalizes_aspect_ratio() -> None:
	quality = analyze_quality(_encode(Image.new("L", (2000, 500), 255)))
	assert "unusual aspect ratio" in quality.issues


def test_analyze_quality_unreadable_image() -> None:
	quality = analyze_quality(b"not an image")
	assert quality.score == 0
