# src/cro_auditor/dom/builder.py
import json
import logging
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from pydantic import ValidationError

from .core import ElementRecord, Viewport
from .models import ImageRecord, PageSnapshot, PageTimings
from ..utils.config_manager import config_manager

logger = logging.getLogger(__name__)


def extract_structured_data(html: Optional[str]) -> List[Dict[str, Any]]:
    """
    Collects the JSON-LD entries of a page. A script holding a list contributes
    each of its items; malformed scripts are skipped.
    """
    if not html:
        return []

    soup = BeautifulSoup(html.replace('\ufeff', ''), 'html.parser')
    entries: List[Dict[str, Any]] = []
    for script in soup.find_all('script', type='application/ld+json'):
        raw = script.string
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.debug(f"Skipping malformed JSON-LD block: {e}")
            continue

        if isinstance(data, list):
            entries.extend(item for item in data if isinstance(item, dict))
        elif isinstance(data, dict):
            entries.append(data)
    return entries


class SnapshotBuilder:
    """
    Builder responsible for turning a raw renderer payload (parsed JSON) into an
    immutable PageSnapshot.

    Element records are validated one by one so a single malformed record never
    discards the page. Surviving records are re-indexed in arena order.
    """

    def parse_snapshot(self, payload: Dict[str, Any]) -> PageSnapshot:
        if not isinstance(payload, dict):
            raise TypeError(f"Snapshot payload must be an object, got {type(payload).__name__}")

        errors: List[str] = []

        viewport = self._parse_viewport(payload.get("viewport"), errors)
        elements = self._parse_elements(payload.get("elements") or [], errors)
        images = self._parse_images(payload.get("images") or [], errors)
        timings = self._parse_timings(payload.get("timings"), errors)

        html = payload.get("html")
        structured_data = payload.get("structuredData", payload.get("structured_data"))
        if isinstance(structured_data, dict):
            structured_data = [structured_data]
        if not structured_data:
            structured_data = extract_structured_data(html)

        fonts = [str(f) for f in payload.get("fonts") or [] if f]

        if errors:
            logger.debug(f"Snapshot for {payload.get('url', '')!r} had {len(errors)} dropped entries")

        return PageSnapshot(
            url=str(payload.get("url") or ""),
            viewport=viewport,
            elements=elements,
            structured_data=[e for e in structured_data if isinstance(e, dict)],
            html=html if isinstance(html, str) else None,
            fonts=fonts,
            images=images,
            timings=timings,
            snapshot_errors=errors,
        )

    def _parse_viewport(self, raw: Any, errors: List[str]) -> Viewport:
        if isinstance(raw, dict):
            try:
                return Viewport.model_validate(raw)
            except ValidationError as e:
                errors.append(f"viewport: {e.error_count()} validation errors")
                logger.debug(f"Invalid viewport {raw!r}, using configured default")
        width = config_manager.get_nested("viewport.width", 1920)
        height = config_manager.get_nested("viewport.height", 1080)
        return Viewport(width=width, height=height)

    def _parse_elements(self, raw_elements: List[Any], errors: List[str]) -> List[ElementRecord]:
        elements: List[ElementRecord] = []
        for position, raw in enumerate(raw_elements):
            if not isinstance(raw, dict):
                errors.append(f"element {position}: not an object")
                continue
            try:
                record = ElementRecord.model_validate({**raw, "index": len(elements)})
            except ValidationError as e:
                errors.append(f"element {position}: {e.error_count()} validation errors")
                logger.debug(f"Dropping malformed element record at position {position}: {e}")
                continue
            elements.append(record)
        return elements

    def _parse_images(self, raw_images: List[Any], errors: List[str]) -> List[ImageRecord]:
        images = []
        for position, raw in enumerate(raw_images):
            try:
                images.append(ImageRecord.model_validate(raw))
            except ValidationError as e:
                errors.append(f"image {position}: {e.error_count()} validation errors")
                logger.debug(f"Dropping malformed image record at position {position}")
        return images

    def _parse_timings(self, raw: Any, errors: List[str]) -> Optional[PageTimings]:
        if raw is None:
            return None
        try:
            return PageTimings.model_validate(raw)
        except ValidationError as e:
            errors.append(f"timings: {e.error_count()} validation errors")
            logger.debug("Dropping malformed page timings")
            return None
