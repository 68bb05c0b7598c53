import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..errors import ImageCodecError
from ..models.pixel import PixelKind
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def _configure_logging() -> bool:
    """Configure stderr logging; False when PNM_LOG_LEVEL is not a level name."""
    level_name = os.getenv("PNM_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(level_name)
    valid = isinstance(level, int)
    # stderr only: stdout may carry the image stream.
    logging.basicConfig(
        level=level if valid else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )
    if not valid:
        logger.error("PNM_LOG_LEVEL must be a logging level name, got %r", level_name)
    return valid


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pnm-copy",
        description="Read a PGM/PPM image and write it back as binary PPM.",
    )
    ap.add_argument("input", nargs="?", help="input image (stdin when omitted)")
    ap.add_argument("output", nargs="?", help="output image (stdout when omitted)")
    ap.add_argument("--gray", action="store_true",
                    help="read as grayscale, averaging color sources")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not _configure_logging():
        return 1

    try:
        image_service = ImageService()
    except ValueError as err:
        logger.error("%s", err)
        return 1

    kind = PixelKind.GRAY if args.gray else None
    try:
        image = image_service.read(args.input, kind=kind)
        image_service.write(image, args.output)
    except ImageCodecError as err:
        logger.error("%s", err)
        return 1

    logger.info("Copied %dx%d image", image.width, image.height)
    return 0


if __name__ == "__main__":
    sys.exit(main())
