"""Image pre-processing that makes photos of homework easier to recognize."""

import io
import logging
from dataclasses import dataclass, field

from PIL import Image, ImageFilter, UnidentifiedImageError

SHARPEN_KERNEL = ImageFilter.Kernel((3, 3), [0, -1, 0, -1, 5, -1, 0, -1, 0], scale=1)
MIN_PIXELS = 300_000
MB = 1024 * 1024

logger = logging.getLogger(__name__)


@dataclass
class ImageQuality:
	"""Heuristic suitability score (0-100) of an image for OCR."""
	score: int
	issues: list[str] = field(default_factory=list)
	recommendations: list[str] = field(default_factory=list)


def calculate_optimal_size(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
	"""Upscale small images towards 1200x900 and shrink large ones to fit the limits."""
	scaled_width, scaled_height = float(width), float(height)
	if scaled_width < 800 and scaled_height < 600:
		scale = min(1200 / scaled_width, 900 / scaled_height)
		scaled_width *= scale
		scaled_height *= scale
	if scaled_width > max_width or scaled_height > max_height:
		scale = min(max_width / scaled_width, max_height / scaled_height)
		scaled_width *= scale
		scaled_height *= scale
	return round(scaled_width), round(scaled_height)


def analyze_quality(data: bytes) -> ImageQuality:
	"""Score resolution, aspect ratio and file size of an encoded image."""
	try:
		with Image.open(io.BytesIO(data)) as image:
			width, height = image.size
	except (UnidentifiedImageError, OSError):
		return ImageQuality(score=0, issues=["image could not be loaded"], recommendations=["check the image format"])

	quality = ImageQuality(score=100)
	if width * height < MIN_PIXELS:
		quality.issues.append("low resolution")
		quality.recommendations.append("use a higher resolution camera or scanner")
		quality.score -= 20
	aspect_ratio = width / height
	if aspect_ratio > 3 or aspect_ratio < 0.3:
		quality.issues.append("unusual aspect ratio")
		quality.recommendations.append("keep the page proportions, avoid stretched crops")
		quality.score -= 15
	size_mb = len(data) / MB
	if size_mb > 10:
		quality.issues.append("file too large")
		quality.recommendations.append("compress the image to speed up processing")
		quality.score -= 10
	elif size_mb < 0.1:
		quality.issues.append("file too small to be sharp")
		quality.recommendations.append("use a higher quality image")
		quality.score -= 15
	quality.score = max(0, quality.score)
	return quality


@dataclass
class ImageOptimizer:
	"""Resize, raise contrast and sharpen an image, then re-encode it as JPEG."""

	max_width: int = 3000
	max_height: int = 3000
	quality: int = 95
	contrast: float = 1.2
	enable_contrast: bool = True
	enable_sharpening: bool = True

	def optimize(self, data: bytes) -> tuple[bytes, str]:
		with Image.open(io.BytesIO(data)) as source:
			image = source.convert("RGB")
		size = calculate_optimal_size(image.width, image.height, self.max_width, self.max_height)
		if size != image.size:
			image = image.resize(size, Image.LANCZOS)
		if self.enable_contrast:
			image = self._enhance_contrast(image)
		if self.enable_sharpening:
			image = image.filter(SHARPEN_KERNEL)

		buffer = io.BytesIO()
		image.save(buffer, format="JPEG", quality=self.quality)
		optimized = buffer.getvalue()
		logger.debug(
			"Optimized image to %sx%s, %.2fMB -> %.2fMB",
			image.width,
			image.height,
			len(data) / MB,
			len(optimized) / MB,
		)
		return optimized, "image/jpeg"

	def _enhance_contrast(self, image: Image.Image) -> Image.Image:
		# Stretch each channel around mid-gray.
		table = [max(0, min(255, round((value - 128) * self.contrast + 128))) for value in range(256)]
		return image.point(table * 3)
