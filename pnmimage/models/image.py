from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import (
    BinaryIO, ClassVar, Iterable, Iterator, Optional, Protocol, Tuple, Type, TypeVar, Union,
    runtime_checkable,
)

from ..errors import PixelKindError
from .pixel import Pixel, PixelKind, kind_of

Source = Union[str, Path, BinaryIO, None]
T = TypeVar("T", bound="Image")


@runtime_checkable
class Readable(Protocol):
    """Decodable from a byte source (path, open binary file, or stdin)."""

    @classmethod
    def read(cls, path: Source = None) -> "Readable":
        ...


@runtime_checkable
class Writable(Protocol):
    """Encodable to a byte sink (path, open binary file, or stdout)."""

    def write(self, path: Source = None) -> None:
        ...


@dataclass(frozen=True)
class Image:
    """
    Row-major pixel grid plus the maximum channel value of its source.
    Pixels are never rescaled by `denominator`; it is metadata only.
    A plain Image accepts either pixel kind, as long as all pixels share it.
    """
    pixels: Tuple[Pixel, ...]
    width: int
    height: int
    denominator: int = 255

    pixel_kind: ClassVar[Optional[PixelKind]] = None

    def __post_init__(self):
        # Own a private copy of the buffer whatever iterable was handed in.
        object.__setattr__(self, "pixels", tuple(self.pixels))

        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative int, got {value!r}")

        expected = self.pixel_kind
        for index, pixel in enumerate(self.pixels):
            try:
                kind = kind_of(pixel)
            except TypeError as err:
                raise PixelKindError(f"pixel {index} is not a Gray or Rgb: {pixel!r}") from err
            if expected is None:
                expected = kind
            elif kind is not expected:
                raise PixelKindError(
                    f"pixel {index} is {kind.value}, image holds {expected.value} pixels"
                )

    @property
    def kind(self) -> Optional[PixelKind]:
        """Pixel kind of the image, None for an empty untyped image."""
        if self.pixel_kind is not None:
            return self.pixel_kind
        return kind_of(self.pixels[0]) if self.pixels else None

    def pixel_at(self, row: int, col: int) -> Pixel:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"({row}, {col}) outside {self.width}x{self.height} image")
        return self.pixels[row * self.width + col]

    def rows(self) -> Iterator[Tuple[Pixel, ...]]:
        for row in range(self.height):
            start = row * self.width
            yield self.pixels[start:start + self.width]

    def with_pixels(self: T, pixels: Iterable[Pixel]) -> T:
        """Return a new image of the same shape and denominator holding `pixels`."""
        return type(self)(pixels=tuple(pixels), width=self.width,
                          height=self.height, denominator=self.denominator)

    def write(self, path: Source = None) -> None:
        """
        Write the image as binary PPM to `path`, or to stdout when omitted.
        Channels saturate at 255 regardless of `denominator`.
        """
        from ..repositories.image_repository import ImageRepository
        ImageRepository.save(self, path)


@dataclass(frozen=True)
class GrayImage(Image):
    pixel_kind: ClassVar[Optional[PixelKind]] = PixelKind.GRAY

    @classmethod
    def read(cls: Type["GrayImage"], path: Source = None) -> "GrayImage":
        """
        Read a PGM or PPM from `path`, or from stdin when omitted.
        Color sources are reduced with a truncating (r + g + b) // 3.
        """
        from ..repositories.image_repository import ImageRepository
        return ImageRepository.load(path, kind=PixelKind.GRAY)


@dataclass(frozen=True)
class RgbImage(Image):
    pixel_kind: ClassVar[Optional[PixelKind]] = PixelKind.RGB

    @classmethod
    def read(cls: Type["RgbImage"], path: Source = None) -> "RgbImage":
        """Read a PPM from `path`, or from stdin when omitted. PGM sources are rejected."""
        from ..repositories.image_repository import ImageRepository
        return ImageRepository.load(path, kind=PixelKind.RGB)


IMAGE_TYPES = {
    PixelKind.GRAY: GrayImage,
    PixelKind.RGB: RgbImage,
}
