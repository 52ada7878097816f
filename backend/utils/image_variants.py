import io
from enum import Enum
from typing import Any

from PIL import Image, ImageOps

from errors import EncodeError


class SizeClass(str, Enum):
    FULL      = "original"
    THUMBNAIL = "thumb"

    @property
    def tag(self) -> str:
        return self.value


class FormatVariant(str, Enum):
    MODERN_LOSSY     = "webp"
    MODERN_EFFICIENT = "avif"
    UNIVERSAL        = "jpg"

    @property
    def ext(self) -> str:
        return self.value


FULL_MAX_PX   = 1200
THUMBNAIL_PX  = 256
PIL_FORMATS   = {
    FormatVariant.MODERN_LOSSY:     "WEBP",
    FormatVariant.MODERN_EFFICIENT: "AVIF",
    FormatVariant.UNIVERSAL:        "JPEG",
}
QUALITY = {
    (SizeClass.FULL,      FormatVariant.MODERN_LOSSY):     85,
    (SizeClass.FULL,      FormatVariant.MODERN_EFFICIENT): 65,
    (SizeClass.FULL,      FormatVariant.UNIVERSAL):        90,
    (SizeClass.THUMBNAIL, FormatVariant.MODERN_LOSSY):     85,
    (SizeClass.THUMBNAIL, FormatVariant.MODERN_EFFICIENT): 65,
    (SizeClass.THUMBNAIL, FormatVariant.UNIVERSAL):        85,
}


def open_image(buffer: bytes) -> Image.Image:
    """Decode ``buffer`` into an upright RGB or RGBA raster."""
    try:
        with Image.open(io.BytesIO(buffer)) as src:
            src.load()
            img = ImageOps.exif_transpose(src)
    except (OSError, ValueError, EOFError, SyntaxError, Image.DecompressionBombError) as e:
        raise EncodeError(f"Unreadable image data: {e}") from e

    if img.mode not in ("RGB", "RGBA"):
        has_alpha = img.mode in ("LA", "PA") or "transparency" in img.info
        img = img.convert("RGBA" if has_alpha else "RGB")
    return img


def resize(img: Image.Image, size_class: SizeClass) -> Image.Image:
    if size_class is SizeClass.THUMBNAIL:
        return ImageOps.fit(
            img,
            (THUMBNAIL_PX, THUMBNAIL_PX),
            method=Image.LANCZOS,
            centering=(0.5, 0.5),
        )
    out = img.copy()
    # thumbnail() only ever shrinks, so small sources keep their size
    out.thumbnail((FULL_MAX_PX, FULL_MAX_PX), resample=Image.LANCZOS)
    return out


def _flatten(img: Image.Image) -> Image.Image:
    if img.mode != "RGBA":
        return img
    background = Image.new("RGB", img.size, (255, 255, 255))
    background.paste(img, mask=img.getchannel("A"))
    return background


def encode_raster(img: Image.Image, size_class: SizeClass, fmt: FormatVariant) -> bytes:
    save_kwargs: dict[str, Any] = {"quality": QUALITY[(size_class, fmt)]}
    if fmt is FormatVariant.UNIVERSAL:
        img = _flatten(img)
        save_kwargs["optimize"] = True

    out = io.BytesIO()
    try:
        img.save(out, format=PIL_FORMATS[fmt], **save_kwargs)
    except (OSError, KeyError, ValueError) as e:
        raise EncodeError(f"Could not encode {size_class.tag} as {fmt.ext}: {e}") from e
    return out.getvalue()


def encode(buffer: bytes, size_class: SizeClass, fmt: FormatVariant) -> bytes:
    return encode_raster(resize(open_image(buffer), size_class), size_class, fmt)
