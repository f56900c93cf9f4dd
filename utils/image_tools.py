# utils/image_tools.py
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

THUMBNAIL_SIZE = (480, 480)


@dataclass
class ProcessedImage:
    data: bytes
    ext: str
    width: int
    height: int

    @property
    def content_type(self) -> str:
        return "image/webp" if self.ext == "webp" else "image/jpeg"


def _open_image(data: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError):
        raise ValueError("Unsupported file: not an image")
    return img


def _save(img: Image.Image, orig_fmt: str, quality: int) -> tuple[bytes, str]:
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    buf = BytesIO()
    if orig_fmt == "WEBP":
        img.save(buf, "WEBP", quality=quality, optimize=True)
        ext = "webp"
    else:
        img.save(buf, "JPEG", quality=quality, optimize=True, progressive=True)
        ext = "jpg"
    return buf.getvalue(), ext


def compress_image_bytes(data: bytes, quality: int = 90) -> ProcessedImage:
    """
    Готовит фото портфолио к хранению:
    - поворачивает по EXIF-ориентации и выбрасывает EXIF;
    - убирает альфа-канал;
    - WebP остаётся WebP, всё остальное сохраняется в JPEG.

    Бросает ValueError, если файл не распознан как изображение.
    """
    img = _open_image(data)
    orig_fmt = (img.format or "JPEG").upper()

    img = ImageOps.exif_transpose(img)
    img.info.pop("exif", None)

    out, ext = _save(img, orig_fmt, quality)
    return ProcessedImage(data=out, ext=ext, width=img.width, height=img.height)


def make_thumbnail(data: bytes, size: tuple[int, int] = THUMBNAIL_SIZE, quality: int = 80) -> ProcessedImage:
    """Уменьшенная копия для сетки в дашборде и шаблонах (пропорции сохраняются)."""
    img = _open_image(data)
    orig_fmt = (img.format or "JPEG").upper()

    img = ImageOps.exif_transpose(img)
    img.thumbnail(size)

    out, ext = _save(img, orig_fmt, quality)
    return ProcessedImage(data=out, ext=ext, width=img.width, height=img.height)
