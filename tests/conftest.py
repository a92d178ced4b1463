"""Shared fixtures: in-memory test images and a recording fake encoder."""
import io

import pytest
from PIL import Image, ImageDraw

EXIF_MAKE_TAG = 0x010F


def _noisy_rgb(size: tuple[int, int]) -> Image.Image:
    """Noise compresses badly, so encoded size reacts to quality."""
    channels = [Image.effect_noise(size, 64) for _ in range(3)]
    return Image.merge("RGB", channels)


def _to_bytes(img: Image.Image, fmt: str, **save_kw) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt, **save_kw)
    return buf.getvalue()


class RecordingEncoder:
    """Stands in for the codec encoder; output size in KB is a function of quality."""

    def __init__(self, kb_for_quality=lambda q: q):
        self.kb_for_quality = kb_for_quality
        self.calls: list[int] = []

    def __call__(self, image, fmt, quality, keep_metadata):
        self.calls.append(quality)
        return b"\0" * int(self.kb_for_quality(quality) * 1024)


@pytest.fixture
def make_encoder():
    return RecordingEncoder


@pytest.fixture
def png_800x600() -> bytes:
    img = Image.new("RGB", (800, 600), color="white")
    draw = ImageDraw.Draw(img)
    for i in range(40):
        x, y = (i * 20) % 800, (i * 15) % 600
        draw.rectangle([x, y, x + 60, y + 45], fill=(i * 5 % 256, i * 7 % 256, i * 11 % 256))
    return _to_bytes(img, "PNG")


@pytest.fixture
def noisy_jpeg() -> bytes:
    return _to_bytes(_noisy_rgb((640, 480)), "JPEG", quality=95)


@pytest.fixture
def jpeg_with_exif() -> bytes:
    exif = Image.Exif()
    exif[EXIF_MAKE_TAG] = "TestCam"
    return _to_bytes(_noisy_rgb((200, 150)), "JPEG", quality=90, exif=exif.tobytes())


@pytest.fixture
def transparent_png() -> bytes:
    img = Image.new("RGBA", (120, 120), color=(0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.ellipse([10, 10, 110, 110], fill=(200, 40, 40, 180))
    return _to_bytes(img, "PNG")


@pytest.fixture
def corrupt_bytes() -> bytes:
    return b"this is not an image"
