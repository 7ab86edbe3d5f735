from __future__ import annotations

import pytest
from PIL import Image


@pytest.fixture
def solid_image() -> Image.Image:
    return Image.new("RGB", (32, 32), color=(30, 120, 200))
