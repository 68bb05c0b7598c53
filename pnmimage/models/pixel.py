from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class PixelKind(Enum):
    GRAY = "gray"
    RGB = "rgb"


@dataclass(frozen=True)
class Gray:
    """
    Single-channel pixel. `value` lies in [0, denominator] of its image.
    """
    value: int

    def channels(self) -> Tuple[int, ...]:
        return (self.value,)


@dataclass(frozen=True)
class Rgb:
    """
    Three-channel pixel, same range convention as Gray.
    """
    red: int
    green: int
    blue: int

    def channels(self) -> Tuple[int, ...]:
        return (self.red, self.green, self.blue)


Pixel = Union[Gray, Rgb]


def kind_of(pixel: Pixel) -> PixelKind:
    if isinstance(pixel, Gray):
        return PixelKind.GRAY
    if isinstance(pixel, Rgb):
        return PixelKind.RGB
    raise TypeError(f"Not a pixel: {pixel!r}")
