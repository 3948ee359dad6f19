"""
Image Processor

Ready-made edit hooks for the staging subsystem. Each hook takes the real
path of a staged picture and rewrites it in place, keeping its format.

Design Choices:
- Hooks are plain callables taking a path, so they can be passed as edit_hook
- Resizing keeps the aspect ratio and uses LANCZOS resampling
- Square output is centered on a white canvas, cropping overflow

Author: AI Creator Team
License: MIT
"""

import logging
from typing import Callable, Optional, Tuple

from PIL import Image

logger = logging.getLogger(__name__)

# Platform-specific dimensions
FEED_DIMENSIONS = (1080, 1080)  # 1:1 aspect ratio
STORY_DIMENSIONS = (1080, 1920)  # 9:16 aspect ratio

MIN_DIMENSION = 320
MAX_DIMENSION = 8192

_FORMATS = {'.jpg': 'JPEG', '.png': 'PNG', '.gif': 'GIF'}


def _format_for(path: str) -> str:
    for extension, image_format in _FORMATS.items():
        if path.lower().endswith(extension):
            return image_format
    raise ValueError(f"Can't tell image format of {path}")


def _save(image: Image.Image, path: str, quality: int = 95) -> None:
    image_format = _format_for(path)
    if image_format == 'JPEG':
        if image.mode not in ('RGB', 'L'):
            image = image.convert('RGB')
        image.save(path, format=image_format, quality=quality, optimize=True)
    else:
        image.save(path, format=image_format)


class ImageProcessor:
    """Edit hooks that resize staged pictures for posting.

    Attributes:
        quality: JPEG quality used when saving (1-100)
    """

    def __init__(self, quality: int = 95):
        if not 1 <= quality <= 100:
            raise ValueError(f"quality must be between 1 and 100, got {quality}")
        self.quality = quality

    def resize_to_dimensions(self, path: str, target_width: int, target_height: int) -> None:
        """Resize a picture in place to exact dimensions.

        Fits the shorter side, then crops the overflow or pads with white.
        """
        with Image.open(path) as original:
            image = original.convert('RGB')

        logger.debug(f"Resizing {path} from {image.size} to {target_width}x{target_height}")

        img_ratio = image.width / image.height
        target_ratio = target_width / target_height

        if img_ratio > target_ratio:
            new_height = target_height
            new_width = int(target_height * img_ratio)
        else:
            new_width = target_width
            new_height = int(target_width / img_ratio)

        resized = image.resize((new_width, new_height), Image.Resampling.LANCZOS)
        canvas = Image.new('RGB', (target_width, target_height), (255, 255, 255))

        if new_width > target_width or new_height > target_height:
            left = (new_width - target_width) // 2
            top = (new_height - target_height) // 2
            resized = resized.crop((left, top, left + target_width, top + target_height))
            canvas.paste(resized, (0, 0))
        else:
            canvas.paste(resized, ((target_width - new_width) // 2, (target_height - new_height) // 2))

        _save(canvas, path, self.quality)

    def resize_for_feed(self, path: str) -> None:
        """Edit hook: square 1080x1080 feed picture."""
        self.resize_to_dimensions(path, *FEED_DIMENSIONS)

    def resize_for_story(self, path: str) -> None:
        """Edit hook: vertical 1080x1920 story picture."""
        self.resize_to_dimensions(path, *STORY_DIMENSIONS)

    def shrink_to_fit(self, max_width: int, max_height: int) -> Callable[[str], None]:
        """Build an edit hook that shrinks pictures larger than the given box.

        Smaller pictures are left untouched.

        Example:
            bot.pic_post("hi", ["big.png"], edit_hook=processor.shrink_to_fit(2048, 2048))
        """
        def hook(path: str) -> None:
            with Image.open(path) as original:
                if original.width <= max_width and original.height <= max_height:
                    return
                image = original.copy()
            image.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)
            _save(image, path, self.quality)
            logger.debug(f"Shrunk {path} to {image.size}")
        return hook

    def fill(self, size: Tuple[int, int], color: Tuple[int, int, int] = (255, 255, 255)) -> Callable[[str], None]:
        """Build an edit hook that writes a plain picture into a blank staged file."""
        def hook(path: str) -> None:
            _save(Image.new('RGB', size, color), path, self.quality)
        return hook

    def validate_image(self, path: str) -> Tuple[bool, Optional[str]]:
        """Check a picture meets posting requirements.

        Returns:
            Tuple of (is_valid, error_message)
        """
        try:
            with Image.open(path) as image:
                width, height, mode = image.width, image.height, image.mode
        except (OSError, ValueError) as e:
            return False, f"Not a readable image: {e}"

        if width < MIN_DIMENSION or height < MIN_DIMENSION:
            return False, f"Image too small: {(width, height)}. Minimum: {MIN_DIMENSION}x{MIN_DIMENSION}"

        if width > MAX_DIMENSION or height > MAX_DIMENSION:
            return False, f"Image too large: {(width, height)}. Maximum: {MAX_DIMENSION}x{MAX_DIMENSION}"

        if mode not in ('RGB', 'RGBA', 'L', 'P'):
            return False, f"Unsupported image mode: {mode}"

        return True, None

    def require_valid(self, path: str) -> None:
        """Edit hook: raise ValueError if the picture fails validate_image()."""
        is_valid, error_message = self.validate_image(path)
        if not is_valid:
            raise ValueError(error_message)
