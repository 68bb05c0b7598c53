import sys
from io import BytesIO
from pathlib import Path
from typing import Iterator, List

import numpy as np
from PIL import Image as PILImage

from ..errors import BufferSizeError, FormatMismatchError, ImageIOError, ImageParseError
from ..models.header import MAX_SAMPLE_8BIT, PnmHeader
from ..models.image import IMAGE_TYPES, Image, Source
from ..models.pixel import Gray, Pixel, PixelKind, Rgb
from .pnm_header_repository import MAX_INT_DIGITS, PnmHeaderRepository


class ImageRepository:
    """
    Decodes PGM/PPM bytes into Image entities and encodes them back as binary PPM.
    No logging here; every failure is raised to the caller.
    """

    # ─── decode ───────────────────────────────────────────────────────
    @staticmethod
    def read_bytes(source: Source = None) -> bytes:
        """Buffer the whole source: a path, an open binary file, or stdin when None."""
        try:
            if source is None:
                data = sys.stdin.buffer.read()
            elif hasattr(source, "read"):
                data = source.read()
            else:
                with Path(source).open("rb") as fh:
                    data = fh.read()
        except OSError as err:
            raise ImageIOError(f"Cannot read image from {source or '<stdin>'}: {err}") from err

        if not isinstance(data, (bytes, bytearray)):
            raise ImageIOError("Image source must be opened in binary mode")
        return bytes(data)

    @staticmethod
    def _read_samples(buffer: bytes, header: PnmHeader, offset: int) -> np.ndarray:
        count = header.sample_count
        if header.plain:
            values: List[int] = []
            pos = offset
            while len(values) < count:
                token, pos = PnmHeaderRepository.next_token(buffer, pos)
                if not token:
                    raise ImageParseError(
                        f"Raster truncated: expected {count} samples, found {len(values)}"
                    )
                if not token.isdigit() or len(token) > MAX_INT_DIGITS:
                    raise ImageParseError(f"Invalid sample in raster: {token[:16]!r}")
                value = int(token)
                # Bounded by maxval, so the int64 array below cannot overflow.
                if value > header.maxval:
                    raise ImageParseError(
                        f"Sample {len(values)} is {value}, above maxval {header.maxval}"
                    )
                values.append(value)
            return np.array(values, dtype=np.int64)

        raster = buffer[offset:offset + count]
        if len(raster) < count:
            raise ImageParseError(
                f"Raster truncated: expected {count} bytes, found {len(raster)}"
            )
        # Widen before any arithmetic so channel sums cannot overflow.
        return np.frombuffer(raster, dtype=np.uint8).astype(np.int64)

    @staticmethod
    def _to_pixels(samples: np.ndarray, header: PnmHeader, kind: PixelKind) -> List[Pixel]:
        if header.kind is PixelKind.GRAY:
            if kind is PixelKind.RGB:
                raise FormatMismatchError("Grayscale source cannot be read as a color image")
            return [Gray(value=v) for v in samples.tolist()]

        triples = samples.reshape(-1, 3)
        if kind is PixelKind.RGB:
            return [Rgb(red=r, green=g, blue=b) for r, g, b in triples.tolist()]
        # Truncating average, never rounded.
        return [Gray(value=v) for v in (triples.sum(axis=1) // 3).tolist()]

    @classmethod
    def decode(cls, buffer: bytes, kind: PixelKind = PixelKind.RGB) -> Image:
        """
        Decode a complete PGM/PPM buffer into a GrayImage or RgbImage.

        Args:
            buffer: The whole file contents.
            kind: Pixel kind requested by the caller.

        Returns:
            Image: width/height from the header, denominator = declared maxval,
            samples copied verbatim (gray reads of color sources are averaged).
        """
        header, offset = PnmHeaderRepository.parse(buffer)
        if header.maxval > MAX_SAMPLE_8BIT:
            raise FormatMismatchError(
                f"16-bit sources are not supported (maxval={header.maxval})"
            )
        samples = cls._read_samples(buffer, header, offset)
        pixels = cls._to_pixels(samples, header, kind)
        return IMAGE_TYPES[kind](
            pixels=pixels,
            width=header.width,
            height=header.height,
            denominator=header.maxval,
        )

    @classmethod
    def load(cls, source: Source = None, kind: PixelKind = PixelKind.RGB) -> Image:
        return cls.decode(cls.read_bytes(source), kind)

    # ─── encode ───────────────────────────────────────────────────────
    @staticmethod
    def _clamp(value: int) -> int:
        # Fixed 8-bit saturation, independent of the image denominator.
        return 0 if value < 0 else min(value, 255)

    @classmethod
    def _flatten(cls, pixels) -> Iterator[int]:
        for pixel in pixels:
            if isinstance(pixel, Gray):
                channels = pixel.channels() * 3
            elif isinstance(pixel, Rgb):
                channels = pixel.channels()
            else:
                raise TypeError(f"Not a pixel: {pixel!r}")
            for value in channels:
                yield cls._clamp(value)

    @classmethod
    def encode(cls, image: Image) -> bytes:
        """
        Encode `image` as binary PPM (P6, maxval 255) in memory.
        Raises BufferSizeError before producing anything when the pixel
        count does not match width * height.
        """
        expected = image.width * image.height
        if len(image.pixels) != expected:
            raise BufferSizeError(
                f"Insufficient buffer size: {len(image.pixels)} pixels for a "
                f"{image.width}x{image.height} image"
            )
        if expected == 0:
            # Pillow refuses zero-area tiles.
            return b"P6\n%d %d\n255\n" % (image.width, image.height)

        arr = np.fromiter(cls._flatten(image.pixels), dtype=np.uint8, count=expected * 3)
        arr = arr.reshape(image.height, image.width, 3)
        out = BytesIO()
        PILImage.fromarray(arr).save(out, format="PPM")
        return out.getvalue()

    @classmethod
    def save(cls, image: Image, sink: Source = None) -> None:
        """Write `image` to a path (created/truncated), an open binary file, or stdout when None."""
        data = cls.encode(image)
        try:
            if sink is None:
                stream = sys.stdout.buffer
                stream.write(data)
                stream.flush()
            elif hasattr(sink, "write"):
                sink.write(data)
                if hasattr(sink, "flush"):
                    sink.flush()
            else:
                with Path(sink).open("wb") as fh:
                    fh.write(data)
        except OSError as err:
            raise ImageIOError(f"Failed to write image to {sink or '<stdout>'}: {err}") from err
