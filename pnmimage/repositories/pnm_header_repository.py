from typing import Tuple

from ..errors import FormatMismatchError, ImageParseError
from ..models.header import (
    GRAY_MAGICS,
    MAX_SAMPLE_LIMIT,
    RGB_MAGICS,
    UNSUPPORTED_MAGICS,
    PnmHeader,
)

WHITESPACE = frozenset(b" \t\n\r\x0b\x0c")
COMMENT = ord("#")
# Longest decimal token accepted for any header field or plain sample.
MAX_INT_DIGITS = 10


class PnmHeaderRepository:
    """
    Single-pass tokenizer for the textual part of a PNM file.
    Works on an in-memory buffer, so no rewind is ever needed.
    """

    @staticmethod
    def next_token(buffer: bytes, pos: int) -> Tuple[bytes, int]:
        """
        Return the next whitespace-delimited token at or after `pos` and the
        position just past it. `#` comments run to the end of the line.
        An empty token means the buffer ran out.
        """
        n = len(buffer)
        while pos < n:
            c = buffer[pos]
            if c == COMMENT:
                while pos < n and buffer[pos] not in (10, 13):
                    pos += 1
            elif c in WHITESPACE:
                pos += 1
            else:
                break

        start = pos
        while pos < n and buffer[pos] not in WHITESPACE and buffer[pos] != COMMENT:
            pos += 1
        return bytes(buffer[start:pos]), pos

    @classmethod
    def read_int(cls, buffer: bytes, pos: int, name: str) -> Tuple[int, int]:
        token, pos = cls.next_token(buffer, pos)
        if not token:
            raise ImageParseError(f"Header truncated before {name}")
        if not token.isdigit():
            raise ImageParseError(f"Invalid {name} in header: {token[:16]!r}")
        if len(token) > MAX_INT_DIGITS:
            raise ImageParseError(f"{name} has too many digits ({len(token)})")
        return int(token), pos

    @classmethod
    def parse(cls, buffer: bytes) -> Tuple[PnmHeader, int]:
        """
        Parse the header at the start of `buffer`.

        Returns:
            (PnmHeader, offset): the header and the offset of the first raster
            byte (binary) or of the text following maxval (plain).
        """
        magic, pos = cls.next_token(buffer, 0)
        if not magic:
            raise ImageParseError("Empty input, no PNM header found")
        if magic in UNSUPPORTED_MAGICS:
            raise FormatMismatchError(
                f"{magic.decode('ascii')} images are not 8-bit grayscale or color sources"
            )
        if magic not in GRAY_MAGICS and magic not in RGB_MAGICS:
            raise ImageParseError(f"Not a PGM/PPM image (magic={magic[:8]!r})")

        width, pos = cls.read_int(buffer, pos, "width")
        height, pos = cls.read_int(buffer, pos, "height")
        maxval, pos = cls.read_int(buffer, pos, "maxval")
        if not 1 <= maxval <= MAX_SAMPLE_LIMIT:
            raise ImageParseError(f"maxval must be in [1, {MAX_SAMPLE_LIMIT}], got {maxval}")

        header = PnmHeader(magic=magic, width=width, height=height, maxval=maxval)
        if header.plain:
            return header, pos

        # Binary rasters start right after the single whitespace byte following maxval.
        if pos < len(buffer):
            if buffer[pos] not in WHITESPACE:
                raise ImageParseError("Expected whitespace between maxval and raster data")
            pos += 1
        return header, pos
