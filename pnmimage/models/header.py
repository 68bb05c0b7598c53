from __future__ import annotations
from dataclasses import dataclass

from .pixel import PixelKind

GRAY_MAGICS = {b"P2", b"P5"}
RGB_MAGICS = {b"P3", b"P6"}
PLAIN_MAGICS = {b"P1", b"P2", b"P3"}
# Recognised members of the family that are not 8-bit gray/color rasters.
UNSUPPORTED_MAGICS = {b"P1", b"P4", b"P7"}

MAX_SAMPLE_8BIT = 255
MAX_SAMPLE_LIMIT = 65535


@dataclass(frozen=True)
class PnmHeader:
    magic: bytes      # b"P2", b"P3", b"P5" or b"P6"
    width: int
    height: int
    maxval: int       # declared maximum sample value, becomes the denominator

    @property
    def kind(self) -> PixelKind:
        return PixelKind.GRAY if self.magic in GRAY_MAGICS else PixelKind.RGB

    @property
    def channels(self) -> int:
        return 1 if self.kind is PixelKind.GRAY else 3

    @property
    def plain(self) -> bool:
        return self.magic in PLAIN_MAGICS

    @property
    def sample_count(self) -> int:
        return self.width * self.height * self.channels
