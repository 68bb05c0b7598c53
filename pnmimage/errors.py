class ImageCodecError(Exception):
    """Base class for every failure raised by the PNM codec."""


class ImageIOError(ImageCodecError, OSError):
    """Source or sink could not be opened, read or written."""


class ImageParseError(ImageCodecError, ValueError):
    """Header or raster cannot be interpreted as a PNM image."""


class FormatMismatchError(ImageCodecError, ValueError):
    """Source pixel format does not match the requested pixel kind."""


class BufferSizeError(ImageCodecError, ValueError):
    """Pixel count does not equal width * height."""


class PixelKindError(ImageCodecError, TypeError):
    """An image holds pixels of more than one kind."""
