"""
Reference image processing for PoseKit

Resizes uploaded pose reference images into the catalog frame, re-encodes
them, and optionally cuts a square thumbnail. Built on Pillow.

Provides:
- Fit-inside resize without enlargement
- webp / jpeg / png re-encoding with quality
- Center cover-crop thumbnails
- Batch processing with a progress stream
- Responsive webp renditions and metadata inspection
"""

import io
import logging
import uuid
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError
from tqdm import tqdm

from ..core.config import ImageConfig, PoseKitConfig
from ..core.constants import (
    DEFAULT_IMAGE_QUALITY,
    EXIF_ORIENTATION_TAG,
    IMAGE_FORMATS,
    RESPONSIVE_IMAGE_SIZES,
    VALID_IMAGE_EXTENSIONS,
)
from ..core.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, str, Path]


@dataclass
class ProcessedImage:
    """Dataclass for a stored, processed image"""
    id: str
    filename: str
    original_filename: str
    width: int
    height: int
    size: int
    format: str
    url: str
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return asdict(self)


@dataclass
class BatchProgress:
    """One step of a batch run"""
    index: int
    total: int
    original_filename: str
    result: Optional[ProcessedImage] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


class ImageProcessor:
    """
    Process reference images into an upload directory

    Example:
        >>> processor = ImageProcessor("uploads", base_url="/uploads")
        >>> with open("bride.jpg", "rb") as f:
        ...     result = processor.process_image(f.read(), "bride.jpg")
        >>> result.url
        '/uploads/3f1c....webp'
    """

    def __init__(
        self,
        upload_dir: str = "uploads",
        base_url: str = "/uploads",
        options: Optional[ImageConfig] = None,
    ):
        self.upload_dir = Path(upload_dir)
        self.base_url = base_url.rstrip('/')
        self.options = options or ImageConfig()

    @classmethod
    def from_config(cls, config: PoseKitConfig) -> "ImageProcessor":
        """Build from the master config"""
        return cls(config.paths.upload_dir, config.paths.base_url, config.image)

    def ensure_upload_directory(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    # --- single image ---

    @staticmethod
    def _open(data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ImageProcessingError(f"Cannot decode image: {e}")
        return ImageOps.exif_transpose(image)

    @staticmethod
    def _resize(
        image: Image.Image,
        target_width: Optional[int],
        target_height: Optional[int],
    ) -> Image.Image:
        """Fit inside the target box, never enlarging"""
        width, height = image.size
        if target_width and target_height:
            box = (target_width, target_height)
        elif target_width:
            box = (target_width, height)
        elif target_height:
            box = (width, target_height)
        else:
            return image

        resized = image.copy()
        resized.thumbnail(box, Image.Resampling.LANCZOS)
        return resized

    @staticmethod
    def _encode(image: Image.Image, fmt: str, quality: int) -> bytes:
        pil_format = IMAGE_FORMATS[fmt]['pil_format']

        has_alpha = image.mode in ('RGBA', 'LA') or (
            image.mode == 'P' and 'transparency' in image.info
        )
        if fmt == 'jpeg':
            image = image.convert('RGB')
        elif image.mode not in ('RGB', 'RGBA', 'L'):
            image = image.convert('RGBA' if has_alpha else 'RGB')

        buffer = io.BytesIO()
        try:
            if fmt == 'png':
                image.save(buffer, format=pil_format, optimize=True)
            else:
                image.save(buffer, format=pil_format, quality=quality)
        except (OSError, ValueError) as e:
            raise ImageProcessingError(f"Cannot encode image as {fmt}: {e}")
        return buffer.getvalue()

    def process_image(
        self,
        data: bytes,
        original_filename: str,
        options: Optional[ImageConfig] = None,
    ) -> ProcessedImage:
        """
        Resize, re-encode and store one image

        Args:
            data: Encoded image bytes
            original_filename: Name of the uploaded file
            options: Overrides the processor's default options

        Returns:
            ProcessedImage describing the stored file

        Raises:
            ImageProcessingError: If decoding, encoding or writing fails
        """
        options = options or self.options
        fmt = options.format
        extension = IMAGE_FORMATS[fmt]['extension']

        image = self._open(data)
        resized = self._resize(image, options.target_width, options.target_height)
        encoded = self._encode(resized, fmt, options.quality)

        image_id = str(uuid.uuid4())
        filename = f"{image_id}.{extension}"

        try:
            self.ensure_upload_directory()
            (self.upload_dir / filename).write_bytes(encoded)
        except OSError as e:
            raise ImageProcessingError(f"Failed to write {filename}: {e}")

        result = ProcessedImage(
            id=image_id,
            filename=filename,
            original_filename=original_filename,
            width=resized.width,
            height=resized.height,
            size=len(encoded),
            format=fmt,
            url=f"{self.base_url}/{filename}",
        )

        if options.generate_thumbnail:
            thumbnail_filename = f"{image_id}_thumb.{extension}"
            size = options.thumbnail_size
            try:
                thumbnail = ImageOps.fit(
                    resized, (size, size), method=Image.Resampling.LANCZOS, centering=(0.5, 0.5)
                )
                (self.upload_dir / thumbnail_filename).write_bytes(
                    self._encode(thumbnail, fmt, options.quality)
                )
            except (OSError, ImageProcessingError) as e:
                # No half-processed uploads: drop the main image too
                (self.upload_dir / filename).unlink(missing_ok=True)
                raise ImageProcessingError(f"Failed to write {thumbnail_filename}: {e}")
            result.thumbnail_url = f"{self.base_url}/{thumbnail_filename}"

        logger.debug(
            "Processed %s -> %s (%dx%d, %d bytes)",
            original_filename, filename, result.width, result.height, result.size,
        )
        return result

    # --- batches ---

    @staticmethod
    def _read_source(source: ImageSource, name: Optional[str]) -> Tuple[bytes, str]:
        if isinstance(source, (str, Path)):
            path = Path(source)
            try:
                return path.read_bytes(), name or path.name
            except OSError as e:
                raise ImageProcessingError(f"Cannot read {path}: {e}")
        return source, name or "upload"

    def iter_batch(
        self,
        files: Iterable[Union[ImageSource, Tuple[bytes, str]]],
        options: Optional[ImageConfig] = None,
    ) -> Iterator[BatchProgress]:
        """
        Process files one by one, yielding progress after each

        Failed files are reported in the progress item and do not stop
        the batch.

        Args:
            files: Paths, raw bytes, or (bytes, original_filename) pairs
            options: Processing options

        Yields:
            BatchProgress per file
        """
        files = list(files)
        total = len(files)

        for index, item in enumerate(files):
            if isinstance(item, tuple):
                source, name = item
            else:
                source, name = item, None

            try:
                data, name = self._read_source(source, name)
                result = self.process_image(data, name, options)
            except ImageProcessingError as e:
                logger.warning("Failed to process image %s: %s", name or source, e)
                yield BatchProgress(index, total, str(name or source), error=str(e))
                continue

            yield BatchProgress(index, total, name, result=result)

    def process_batch(
        self,
        files: Iterable[Union[ImageSource, Tuple[bytes, str]]],
        options: Optional[ImageConfig] = None,
        show_progress: bool = True,
    ) -> List[ProcessedImage]:
        """
        Process multiple images with progress tracking

        Returns:
            Processed images, skipping failures
        """
        files = list(files)
        stream = self.iter_batch(files, options)
        if show_progress:
            stream = tqdm(stream, total=len(files), desc="Processing images")

        results = [progress.result for progress in stream if progress.ok]

        failed_count = len(files) - len(results)
        if failed_count > 0:
            logger.warning("Failed to process %d images", failed_count)

        return results

    def generate_responsive_sizes(
        self,
        data: bytes,
        original_filename: str,
        sizes: Sequence[int] = RESPONSIVE_IMAGE_SIZES,
    ) -> List[ProcessedImage]:
        """
        Store one webp rendition per box size

        Each size is a square bounding box; smaller sources are not
        enlarged. A size that fails is logged and skipped.

        Args:
            data: Encoded image bytes
            original_filename: Name of the uploaded file
            sizes: Box edges in pixels

        Returns:
            ProcessedImage per size that succeeded, in `sizes` order
        """
        results = []
        for size in sizes:
            options = replace(
                self.options,
                target_width=size,
                target_height=size,
                format='webp',
                quality=DEFAULT_IMAGE_QUALITY,
                generate_thumbnail=False,
            )
            try:
                results.append(self.process_image(data, original_filename, options))
            except ImageProcessingError as e:
                logger.warning("Failed to generate %dpx version of %s: %s", size, original_filename, e)
        return results

    @staticmethod
    def get_image_metadata(data: bytes) -> Dict[str, Any]:
        """
        Read basic metadata without storing anything

        Returns:
            Dict with format, mode, width, height, has_alpha, exif
            orientation (1 when absent) and size in bytes

        Raises:
            ImageProcessingError: If the bytes do not decode as an image
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                width, height = image.size
                return {
                    'format': (image.format or '').lower(),
                    'mode': image.mode,
                    'width': width,
                    'height': height,
                    'has_alpha': image.mode in ('RGBA', 'LA', 'PA')
                    or 'transparency' in image.info,
                    'orientation': image.getexif().get(EXIF_ORIENTATION_TAG, 1),
                    'size': len(data),
                }
        except (UnidentifiedImageError, OSError) as e:
            raise ImageProcessingError(f"Cannot read image metadata: {e}")

    # --- maintenance ---

    def delete_image(self, filename: str) -> None:
        """
        Delete a stored image and its thumbnail, if any

        Raises:
            ImageProcessingError: If the image itself cannot be deleted
        """
        path = self.upload_dir / filename
        try:
            path.unlink()
        except OSError as e:
            raise ImageProcessingError(f"Failed to delete image: {e}")

        thumbnail = self.upload_dir / f"{path.stem}_thumb{path.suffix}"
        if thumbnail.exists():
            thumbnail.unlink()

    def optimize_existing_image(
        self,
        filepath: str,
        options: Optional[ImageConfig] = None,
    ) -> ProcessedImage:
        """Re-process an image already on disk"""
        data, name = self._read_source(filepath, None)
        return self.process_image(data, name, options)

    @staticmethod
    def validate_image_bytes(data: bytes) -> bool:
        """Check that bytes decode as an image"""
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.verify()
        except (UnidentifiedImageError, OSError, SyntaxError):
            return False
        return True

    @staticmethod
    def validate_format(image_path: str) -> bool:
        """Check if a file name has a supported image extension"""
        return Path(image_path).suffix.lower() in VALID_IMAGE_EXTENSIONS
