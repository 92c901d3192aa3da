import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# Qt widgets are tested without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to sys.path so we can import gridslice
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


def make_gradient(width: int, height: int) -> Image.Image:
    """RGB image whose pixels differ across the surface."""
    img = Image.new("RGB", (width, height))
    img.putdata([
        ((x * 255) // max(1, width - 1), (y * 255) // max(1, height - 1), 128)
        for y in range(height)
        for x in range(width)
    ])
    return img


# Common test fixtures
@pytest.fixture
def square_image():
    """300x300 source image."""
    return make_gradient(300, 300)


@pytest.fixture
def wide_image():
    """1000x200 source image."""
    return Image.new("RGB", (1000, 200), color=(30, 120, 200))


@pytest.fixture
def sample_image_path(tmp_path: Path):
    """A 200x200 PNG on disk."""
    img_path = tmp_path / "sample.png"
    make_gradient(200, 200).save(img_path)
    return img_path


@pytest.fixture
def gradient():
    """Factory for gradient images of any size."""
    return make_gradient
