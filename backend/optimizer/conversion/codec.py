"""Pillow-backed decode / resize / encode used by the optimizer pipeline."""
import io
import logging
from dataclasses import dataclass, replace
from typing import Optional

from PIL import Image

from optimizer.config import ENCODE_EFFORT
from optimizer.conversion.models import OutputFormat
from optimizer.exceptions import wrap_codec_errors

logger = logging.getLogger("optimizer.codec")


@dataclass(frozen=True)
class DecodedImage:
    """Pixels normalised to RGB/RGBA, with the source metadata kept aside.

    ``image.info`` is always empty so nothing leaks into an encode unless
    ``keep_metadata`` asks for it.
    """

    image: Image.Image
    exif: Optional[bytes] = None
    icc_profile: Optional[bytes] = None
    source_format: Optional[str] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


@wrap_codec_errors("decode")
def decode(data: bytes) -> DecodedImage:
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        source_format = img.format
        exif = img.info.get("exif") or None
        icc_profile = img.info.get("icc_profile") or None
        if img.mode == "CMYK":
            # profile describes CMYK data and no longer matches after conversion
            icc_profile = None
        if img.mode in ("RGB", "RGBA"):
            frame = img.copy()
        elif img.mode in ("LA", "PA") or "transparency" in img.info:
            frame = img.convert("RGBA")
        else:
            frame = img.convert("RGB")
    frame.info = {}
    return DecodedImage(image=frame, exif=exif, icc_profile=icc_profile, source_format=source_format)


@wrap_codec_errors("resize")
def resize(decoded: DecodedImage, width: int, height: Optional[int] = None) -> DecodedImage:
    """Resize to width x height. Without a height the aspect ratio is kept."""
    w, h = decoded.image.size
    if height is None:
        height = max(1, int(round(h * width / w)))
    if (width, height) == (w, h):
        return decoded
    resized = decoded.image.resize((width, height), Image.Resampling.LANCZOS)
    resized.info = {}
    return replace(decoded, image=resized)


@wrap_codec_errors("encode")
def encode(decoded: DecodedImage, fmt: OutputFormat, quality: int, keep_metadata: bool) -> bytes:
    img = decoded.image
    if fmt is OutputFormat.JPEG and img.mode != "RGB":
        img = img.convert("RGB")

    if fmt is OutputFormat.WEBP:
        save_kw = {"format": "WEBP", "quality": quality, "method": ENCODE_EFFORT}
    elif fmt is OutputFormat.JPEG:
        save_kw = {"format": "JPEG", "quality": quality, "optimize": True}
    elif fmt is OutputFormat.PNG:
        save_kw = {"format": "PNG", "optimize": True}
    else:
        save_kw = {"format": "AVIF", "quality": quality}

    if keep_metadata:
        if decoded.exif:
            save_kw["exif"] = decoded.exif
        if decoded.icc_profile:
            save_kw["icc_profile"] = decoded.icc_profile

    buf = io.BytesIO()
    img.save(buf, **save_kw)
    data = buf.getvalue()
    logger.debug("Encoded %s q=%s -> %s bytes", fmt.value, quality, len(data))
    return data
