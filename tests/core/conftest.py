# tests/core/conftest.py
import io

import pytest
from PIL import Image

from cro_auditor.dom.core import ElementRecord, Viewport
from cro_auditor.utils.config_manager import config_manager


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts from the shipped settings.json."""
    config_manager.reset()
    yield
    config_manager.reset()


@pytest.fixture
def viewport():
    return Viewport(width=1920, height=1080)


@pytest.fixture
def make_record():
    """Factory for element records; index increments per call unless given."""
    counter = {"next": 0}

    def _make(tag="div", text="", classes=(), attributes=None, top=100, left=100, width=200, height=40,
              style=None, parent_style=None, ancestry=None, descendants=None, sibling_text="", index=None):
        if index is None:
            index = counter["next"]
        counter["next"] = index + 1
        return ElementRecord(
            index=index,
            tag=tag,
            text=text,
            class_tokens=list(classes),
            attributes=attributes or {},
            geometry={"top": top, "left": left, "width": width, "height": height},
            style=style or {},
            parent_style=parent_style,
            ancestry=ancestry or {},
            descendants=descendants or {},
            sibling_text=sibling_text,
        )

    return _make


@pytest.fixture
def png_bytes():
    """Builds an in-memory PNG of a single colour."""
    def _png(color, size=(10, 10)):
        buffer = io.BytesIO()
        Image.new("RGB", size, color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _png
