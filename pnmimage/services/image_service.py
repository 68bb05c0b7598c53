import logging
import os
from typing import Iterable, Optional

from dotenv import load_dotenv

from ..models.image import Image
from ..models.pixel import Pixel, PixelKind
from ..repositories.image_repository import ImageRepository, Source

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """Business-level read/write helpers on top of ImageRepository."""

    def __init__(self):
        kind = os.getenv("PNM_DEFAULT_KIND", PixelKind.RGB.value).strip().lower()
        try:
            self.default_kind = PixelKind(kind)
        except ValueError as err:
            raise ValueError(
                f"PNM_DEFAULT_KIND must be 'rgb' or 'gray', got {kind!r}"
            ) from err
        self.image_repository = ImageRepository()

    def read(self, source: Source = None, kind: Optional[PixelKind] = None) -> Image:
        """
        Read an image from `source` (stdin when None) as `kind`,
        falling back to the configured default kind.
        """
        kind = kind or self.default_kind
        image = self.image_repository.load(source, kind=kind)
        logger.debug(
            "Read %dx%d %s image (denominator %d) from %s",
            image.width, image.height, kind.value, image.denominator, source or "<stdin>",
        )
        return image

    def read_gray(self, source: Source = None) -> Image:
        return self.read(source, kind=PixelKind.GRAY)

    def read_rgb(self, source: Source = None) -> Image:
        return self.read(source, kind=PixelKind.RGB)

    def write(self, image: Image, sink: Source = None) -> None:
        """Write `image` as binary PPM to `sink` (stdout when None)."""
        if image.denominator != 255:
            logger.debug(
                "Writing image with denominator %d; channels are clamped to 255, not rescaled",
                image.denominator,
            )
        self.image_repository.save(image, sink)
        logger.debug("Wrote %dx%d image to %s", image.width, image.height, sink or "<stdout>")

    @staticmethod
    def replace_pixels(image: Image, new_pixels: Iterable[Pixel]) -> Image:
        """
        Return a new image of the same shape holding `new_pixels`.
        Images are immutable, so this never touches `image`.
        """
        return image.with_pixels(new_pixels)
