"""
Thumbnail generation using Pillow
"""
import io
from typing import Dict, Any, Tuple
from PIL import Image, ImageOps, UnidentifiedImageError
from ..config import config
from ..constants import MediaConstants
from ..exceptions import ImageProcessingError
from ..logger import media_logger as logger
from ..utils import file_extension


class ThumbnailProcessor:
    """
    Fixed-width JPEG thumbnails, height following the source aspect ratio
    """

    def __init__(self, width: int = None, max_source_size: int = None):
        self.width = width or config.thumbnail_width
        self.max_source_size = max_source_size or config.max_thumbnail_source_size
        self.output_format = MediaConstants.THUMBNAIL_FORMAT
        self.output_quality = MediaConstants.THUMBNAIL_QUALITY

    def create_thumbnail(self, image_data: bytes) -> Tuple[bytes, Dict[str, Any]]:
        """
        Build a thumbnail from original image bytes

        Args:
            image_data: Raw image bytes as stored in the upload bucket

        Returns:
            Tuple of (jpeg_bytes, stats)

        Raises:
            ImageProcessingError: If the data is too large or cannot be decoded
        """
        image = self._load_image(image_data)
        original_size = image.size

        thumbnail = image.resize(self._target_size(original_size), Image.Resampling.LANCZOS)

        output_buffer = io.BytesIO()
        thumbnail.save(output_buffer, format=self.output_format, quality=self.output_quality, optimize=True)
        thumbnail_bytes = output_buffer.getvalue()

        stats = {
            'input_size': original_size,
            'output_size': thumbnail.size,
            'file_size': len(thumbnail_bytes),
            'format': self.output_format
        }
        logger.debug("Thumbnail created", **stats)
        return thumbnail_bytes, stats

    def _target_size(self, size: Tuple[int, int]) -> Tuple[int, int]:
        width, height = size
        target_height = max(1, round(height * self.width / width))
        return self.width, target_height

    def _load_image(self, image_data: bytes) -> Image.Image:
        """
        Decode, apply EXIF orientation and flatten to RGB for JPEG output
        """
        if len(image_data) > self.max_source_size:
            raise ImageProcessingError(
                f"Image too large: {len(image_data)} bytes (max: {self.max_source_size})",
                'load'
            )

        try:
            image = Image.open(io.BytesIO(image_data))
            image.load()
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
            raise ImageProcessingError('Invalid image data', 'load', str(e))

        image = ImageOps.exif_transpose(image)

        if image.mode in ('RGBA', 'LA', 'P'):
            # White background behind transparency
            if image.mode == 'P':
                image = image.convert('RGBA')
            background = Image.new('RGB', image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[-1])
            image = background
        elif image.mode != 'RGB':
            image = image.convert('RGB')

        return image


def is_image_file(file_name: str) -> bool:
    return file_extension(file_name) in MediaConstants.IMAGE_EXTENSIONS
