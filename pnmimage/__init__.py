from .errors import (
    BufferSizeError,
    FormatMismatchError,
    ImageCodecError,
    ImageIOError,
    ImageParseError,
    PixelKindError,
)
from .models.image import GrayImage, Image, Readable, RgbImage, Writable
from .models.pixel import Gray, Pixel, PixelKind, Rgb
from .repositories.image_repository import ImageRepository


def read(path=None, kind: PixelKind = PixelKind.RGB) -> Image:
    """Read a PGM/PPM from `path`, or stdin when omitted."""
    return ImageRepository.load(path, kind=kind)


def write(image: Image, path=None) -> None:
    """Write `image` as binary PPM to `path`, or stdout when omitted."""
    ImageRepository.save(image, path)
