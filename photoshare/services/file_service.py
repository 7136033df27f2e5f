"""
PhotoShare Backend - File Storage Service
===========================================

What:  Validates uploaded images, produces the stored original and its
       thumbnail, writes both to object storage and cleans up on failure.
How:   Pillow does the decoding, resizing and re-encoding (in the
       threadpool, so the event loop keeps serving); aiofiles writes the
       bytes under the storage root.
Who:   Called by PhotoService on upload and by the images route to locate
       stored objects.

Pipeline:
    1. Extension check        cheap rejection before decoding
    2. Size check             empty or over settings.max_file_size → 400
    3. Decode + verify        the bytes must really be a JPEG/PNG/WebP
    4. Normalize              EXIF rotation applied; longest edge capped at
                              settings.image_max_dimension
    5. Thumbnail              fits settings.thumbnail_size, always JPEG
    6. Store                  original then thumbnail; if the second write
                              fails the first object is removed

Key layout (relative to storage_root):
    photos/2026/10/19/<uuid>.jpg
    thumbnails/2026/10/19/<uuid>.jpg

Re-encoding strips whatever was appended after the image data, and UUID
names keep user input out of paths.
"""

import io
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiofiles
from PIL import Image, ImageOps
from starlette.concurrency import run_in_threadpool

from photoshare.config import settings
from photoshare.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
ALLOWED_FORMATS = {"JPEG", "PNG", "WEBP"}

PHOTOS_DIR = "photos"
THUMBNAILS_DIR = "thumbnails"


@dataclass(frozen=True)
class ProcessedImage:
    original: bytes
    thumbnail: bytes
    extension: str
    width: int
    height: int


@dataclass(frozen=True)
class StoredImage:
    image_key: str
    thumbnail_key: str
    width: int
    height: int


class FileService:

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    # ── Validation ────────────────────────────────────────────────────────

    def validate_extension(self, filename: str) -> str:
        """Returns the normalized extension (lowercase, with dot)."""
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                "PHOTO.UNSUPPORTED_TYPE",
                field="file",
                extension=ext or "none",
                allowed=", ".join(sorted(ALLOWED_EXTENSIONS)),
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Checks the Content-Length hint first, then the bytes actually read
        (clients can lie about the former).
        """
        if actual_size == 0:
            raise ValidationError("PHOTO.EMPTY_FILE", field="file")

        max_mb = settings.max_file_size // (1024 * 1024)
        for size in (content_length, actual_size):
            if size and size > settings.max_file_size:
                raise ValidationError(
                    "PHOTO.TOO_LARGE",
                    field="file",
                    context={"size": size},
                    max_mb=max_mb,
                )

    # ── Image processing (sync, run in threadpool) ────────────────────────

    def process_image(self, content: bytes) -> ProcessedImage:
        """
        Decode, normalize and resize an upload.

        PNG stays PNG to keep transparency; everything else becomes JPEG.

        Raises:
            ValidationError: not decodable, or a format outside ALLOWED_FORMATS
        """
        try:
            with Image.open(io.BytesIO(content)) as probe:
                probe.verify()
                source_format = probe.format
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise ValidationError(
                "PHOTO.INVALID_IMAGE", field="file", context={"error": str(e)}
            )

        if source_format not in ALLOWED_FORMATS:
            raise ValidationError(
                "PHOTO.UNSUPPORTED_TYPE",
                field="file",
                extension=(source_format or "unknown").lower(),
                allowed=", ".join(sorted(ALLOWED_EXTENSIONS)),
            )

        output_format = "PNG" if source_format == "PNG" else "JPEG"

        # verify() leaves the image unusable; decode again for real
        with Image.open(io.BytesIO(content)) as opened:
            image = ImageOps.exif_transpose(opened)
            if output_format == "JPEG" and image.mode != "RGB":
                image = image.convert("RGB")

            max_dim = settings.image_max_dimension
            image.thumbnail((max_dim, max_dim), Image.Resampling.LANCZOS)
            original = self._encode(image, output_format)

            thumb = image.copy()
            thumb.thumbnail((settings.thumbnail_size, settings.thumbnail_size), Image.Resampling.LANCZOS)
            if thumb.mode != "RGB":
                thumb = thumb.convert("RGB")
            thumbnail = self._encode(thumb, "JPEG")

            width, height = image.size

        return ProcessedImage(
            original=original,
            thumbnail=thumbnail,
            extension=".png" if output_format == "PNG" else ".jpg",
            width=width,
            height=height,
        )

    @staticmethod
    def _encode(image: Image.Image, image_format: str) -> bytes:
        buffer = io.BytesIO()
        if image_format == "JPEG":
            image.save(buffer, format="JPEG", quality=settings.jpeg_quality, optimize=True)
        else:
            image.save(buffer, format=image_format, optimize=True)
        return buffer.getvalue()

    # ── Storage ───────────────────────────────────────────────────────────

    def _generate_key(self, directory: str, name: str, extension: str) -> str:
        date_dir = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        return f"{directory}/{date_dir}/{name}{extension}"

    def resolve_path(self, key: str) -> Path:
        """
        Absolute path of a stored object.

        Raises:
            NotFoundError: key escapes the storage root or the file is gone
        """
        path = (self.storage_root / key).resolve()
        if self.storage_root not in path.parents or not path.is_file():
            raise NotFoundError("PHOTO.IMAGE_NOT_FOUND", context={"key": key})
        return path

    async def store_object(self, key: str, content: bytes) -> None:
        absolute_path = self.storage_root / key
        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store object at %s: %s", absolute_path, str(e))
            raise FileStorageError(context={"path": str(absolute_path), "os_error": str(e)})
        logger.info("Object stored: %s (%d bytes)", key, len(content))

    async def cleanup_file(self, key: str) -> None:
        """Best-effort removal; failures are logged, never raised."""
        path = self.storage_root / key
        try:
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up object: %s", key)
            else:
                logger.debug("Cleanup: object already gone: %s", key)
        except OSError as e:
            logger.warning("Failed to clean up object %s: %s", key, str(e))

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> StoredImage:
        """
        Full upload pipeline; returns the keys and final dimensions.

        Raises:
            ValidationError:  bad extension, size, or image data
            FileStorageError: a write failed (nothing is left behind)
        """
        self.validate_extension(filename)
        self.validate_size(content_length, len(content))

        processed = await run_in_threadpool(self.process_image, content)

        name = str(uuid.uuid4())
        image_key = self._generate_key(PHOTOS_DIR, name, processed.extension)
        thumbnail_key = self._generate_key(THUMBNAILS_DIR, name, ".jpg")

        await self.store_object(image_key, processed.original)
        try:
            await self.store_object(thumbnail_key, processed.thumbnail)
        except FileStorageError:
            await self.cleanup_file(image_key)
            raise

        return StoredImage(
            image_key=image_key,
            thumbnail_key=thumbnail_key,
            width=processed.width,
            height=processed.height,
        )


file_service = FileService()
