"""Raster image re-encoding and raster-to-PDF embedding."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .base import BaseConverter, ConversionOptions, ConversionRequest, Handler
from .errors import ConversionIOError, EncodingError
from .registry import FORMAT_CAPABILITIES, IMAGE_FORMATS, FormatCategory

logger = logging.getLogger(__name__)

# Target extension -> Pillow format name
PIL_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
    "bmp": "BMP",
    "tiff": "TIFF",
}

# Modes each codec can write as-is; anything else is converted to the fallback
_WRITABLE_MODES = {
    "JPEG": ({"L", "RGB", "CMYK"}, "RGB"),
    "PNG": ({"1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16"}, "RGBA"),
    "BMP": ({"1", "L", "P", "RGB", "RGBA"}, "RGBA"),
    "WEBP": ({"RGB", "RGBA"}, "RGBA"),
}

# Sources that can be handed to the PDF writer without re-encoding
DIRECT_EMBED_FORMATS = {"png", "jpg", "jpeg"}


def open_image(path: Path) -> Image.Image:
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except FileNotFoundError as e:
        raise ConversionIOError(f"Failed to read file {path}: {e.strerror}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise ConversionIOError(f"Cannot read image {path.name}: {e}") from e


def fit_size(size: tuple[int, int], width: int | None, height: int | None) -> tuple[int, int]:
    """Largest size with the same aspect ratio inside (width, height), never larger than size."""
    orig_w, orig_h = size
    scales = []
    if width:
        scales.append(width / orig_w)
    if height:
        scales.append(height / orig_h)
    scale = min(scales) if scales else 1.0
    if scale >= 1.0:
        return orig_w, orig_h
    return max(1, round(orig_w * scale)), max(1, round(orig_h * scale))


def resize(img: Image.Image, options: ConversionOptions) -> Image.Image:
    """Shrink the image to fit the requested box. No-op without width/height."""
    if not options.wants_resize:
        return img
    new_size = fit_size(img.size, options.width, options.height)
    if new_size == img.size:
        return img
    logger.debug("Resizing %sx%s -> %sx%s", img.width, img.height, *new_size)
    return img.resize(new_size, Image.Resampling.LANCZOS)


def _prepare_mode(img: Image.Image, pil_format: str) -> Image.Image:
    allowed = _WRITABLE_MODES.get(pil_format)
    if allowed is None:
        return img
    modes, fallback = allowed
    if img.mode in modes:
        return img
    if pil_format == "JPEG" and img.mode in ("RGBA", "LA", "P", "PA"):
        # flatten transparency onto white
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return img.convert(fallback)


def encode(img: Image.Image, target: io.BytesIO | Path, fmt: str, quality: int) -> None:
    """Write img in the given target format."""
    pil_format = PIL_FORMATS.get(fmt)
    if pil_format is None:
        raise AssertionError(f"Image encoder reached with non-image target: {fmt}")

    params: dict = {}
    if pil_format in ("JPEG", "WEBP"):
        params["quality"] = quality
    elif pil_format == "PNG":
        params["optimize"] = True

    try:
        _prepare_mode(img, pil_format).save(target, format=pil_format, **params)
    except (OSError, ValueError, KeyError) as e:
        raise EncodingError(f"Failed to encode {fmt.upper()}: {e}") from e


def embed_as_pdf(source_path: Path, img: Image.Image, output_path: Path, reencode: bool) -> None:
    """
    Write a one-page PDF showing the image at 1 point per pixel.

    PNG and JPEG files are embedded from disk unless reencode is set;
    everything else goes through an in-memory PNG first.
    """
    if reencode:
        buffer = io.BytesIO()
        encode(img, buffer, "png", quality=100)
        buffer.seek(0)
        reader = ImageReader(buffer)
    else:
        reader = ImageReader(str(source_path))

    try:
        width, height = reader.getSize()
        pdf = canvas.Canvas(str(output_path), pagesize=(width, height))
        pdf.drawImage(reader, 0, 0, width=width, height=height, mask="auto")
        pdf.showPage()
        pdf.save()
    except (OSError, ValueError) as e:
        raise EncodingError(f"Failed to embed image in PDF: {e}") from e


class ImageConverter(BaseConverter):
    """Resizes and re-encodes raster images, or places them on a PDF page."""

    category = FormatCategory.IMAGE

    def handlers(self) -> dict[tuple[str, str], Handler]:
        return {
            (source, target): self.convert_image
            for source in IMAGE_FORMATS
            for target in FORMAT_CAPABILITIES[source]
        }

    def convert_image(self, request: ConversionRequest, output: Path) -> None:
        img = open_image(request.source_path)
        resized = resize(img, request.options)

        if request.target_format == "pdf":
            reencode = request.source_format not in DIRECT_EMBED_FORMATS or resized is not img
            embed_as_pdf(request.source_path, resized, output, reencode=reencode)
        else:
            encode(resized, output, request.target_format, request.options.quality)
        logger.debug("Encoded %s as %s (%sx%s)", request.source_path.name, request.target_format, *resized.size)
