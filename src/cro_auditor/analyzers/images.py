# src/cro_auditor/analyzers/images.py
import logging
from collections import Counter
from typing import Optional
from urllib.parse import urlparse

from cro_auditor.dom.core import AnalyzerDefinition
from cro_auditor.dom.models import ImageRecord, PageSnapshot
from cro_auditor.model import CategoryResult

logger = logging.getLogger(__name__)

MODERN_FORMATS = ("webp", "avif")
MAX_REASONABLE_SIZE = 2000  # px


def file_extension(url: str) -> str:
    path = urlparse(url).path if url else ""
    if "." not in path.rsplit("/", 1)[-1]:
        return "unknown"
    extension = path.rsplit(".", 1)[-1].lower()
    return "jpg" if extension == "jpeg" else extension


def has_proper_alt(img: ImageRecord) -> bool:
    alt = (img.alt or "").strip()
    if img.kind == "background":
        if not img.alt and img.role != "presentation":
            # small backgrounds are decorative
            return not (img.width > 100 and img.height > 100)
        return True
    return bool(alt) or (img.role == "presentation" and img.alt == "")


def is_properly_loaded(img: ImageRecord) -> bool:
    if img.is_above_fold:
        return img.loading != "lazy"
    return img.loading == "lazy"


def analyze_images(snapshot: PageSnapshot, screenshot: Optional[bytes] = None) -> CategoryResult:
    images = snapshot.images
    if not images:
        logger.info("No images found - returning N/A status")
        return CategoryResult.not_applicable(
            "images",
            recommendations=["Consider adding relevant images if appropriate for your content"],
            total_images=0,
        )

    total = len(images)
    formats = Counter(file_extension(img.src) for img in images)
    modern = sum(formats[f] for f in MODERN_FORMATS)
    with_alt = sum(1 for img in images if has_proper_alt(img))
    unknown_size = sum(1 for img in images if img.width == 0 or img.height == 0)
    sized = sum(
        1 for img in images
        if img.width > 0 and img.height > 0
        and img.width <= MAX_REASONABLE_SIZE and img.height <= MAX_REASONABLE_SIZE
    )

    tags = [img for img in images if img.kind == "img"]
    responsive = sum(1 for img in tags if img.has_srcset and img.has_sizes)
    loaded = sum(1 for img in tags if is_properly_loaded(img))
    placeholders = sum(1 for img in tags if img.has_blur_placeholder)
    above_fold_tags = [img for img in tags if img.is_above_fold]

    issues = []
    legacy = total - modern
    if legacy > 0:
        issues.append(f"{legacy} images using legacy formats (JPG/PNG)")
    missing_alt = total - with_alt
    if missing_alt > 0:
        issues.append(f"{missing_alt} images missing descriptive alt text")
    oversized = total - sized - unknown_size
    if oversized > 0:
        issues.append(f"{oversized} images may be oversized (>2000px width/height)")
    if unknown_size > 0:
        issues.append(f"{unknown_size} images have unknown dimensions")
    if tags and len(tags) - responsive > 0:
        issues.append(f"{len(tags) - responsive} images missing responsive attributes (srcset/sizes)")
    if tags and len(tags) - loaded > 0:
        issues.append(f"{len(tags) - loaded} images have suboptimal loading strategy")
    without_priority = sum(1 for img in above_fold_tags if img.fetch_priority != "high")
    if without_priority > 0:
        issues.append(f'{without_priority} above-fold images missing fetchpriority="high"')

    recommendations = []
    if missing_alt > 0:
        recommendations.append(
            f"Add descriptive alt text to {missing_alt} images. Screen readers need this for accessibility, "
            f"and it improves SEO."
        )
    if oversized > 0:
        recommendations.append(
            f"Resize {oversized} oversized images to their display dimensions. "
            f"Serving larger images than needed wastes bandwidth."
        )
    if legacy > 3:
        recommendations.append(
            f"Convert {legacy} images from JPG/PNG to WebP format. WebP provides 25-35% better compression."
        )

    score = (modern / total) * 25 + (with_alt / total) * 20 + (sized / total) * 15
    if tags:
        score += (responsive / len(tags)) * 20 + (loaded / len(tags)) * 10 + (placeholders / len(tags)) * 10
    score = max(0, min(100, round(score)))

    logger.info(f"Image optimization score: {score}/100 ({total} images, {modern} modern formats)")
    return CategoryResult(
        category="images",
        score=score,
        issues=issues,
        recommendations=recommendations,
        metrics={
            "total_images": total,
            "modern_formats": modern,
            "with_alt_text": with_alt,
            "appropriately_sized": sized,
            "responsive_images": responsive,
            "properly_loaded_images": loaded,
            "above_fold_images": len(above_fold_tags),
            "format_breakdown": dict(formats),
        },
    )


DEFINITION = AnalyzerDefinition(
    category="images",
    label="Image optimization",
    analyze=analyze_images,
    order=40
)
