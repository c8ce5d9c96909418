"""
CLI interface for screen-ocr.
"""

import argparse
import sys
import time
from pathlib import Path

from .config import (
    ENGINES,
    MIN_TEXT_LENGTH,
    PROXIMITY_THRESHOLD,
    RECOGNITION_LANGUAGES,
    UI_DENYLIST,
    UI_PATTERNS,
)
from .errors import OCRError
from .postprocess import process
from .recognition import create_recognizer
from .utils import has_supported_extension, load_image


def log(message):
    """Status and error messages go to stderr so stdout stays clean."""
    print(message, file=sys.stderr)


def load_denylist(path):
    """
    Read extra chrome patterns from a file, one per line.

    Blank lines and lines starting with '#' are ignored. Patterns are not
    stripped beyond the line ending, so leading or trailing spaces are kept.
    """
    try:
        with open(path, encoding="utf-8") as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise OCRError(f"Could not read denylist {path}: {e}") from e
    return [line for line in lines if line.strip() and not line.startswith("#")]


def build_denylist(denylist_file=None, use_default=True):
    denylist = list(UI_DENYLIST) if use_default else []
    if denylist_file:
        denylist.extend(load_denylist(denylist_file))
    return denylist


def run_ocr(
    image_path,
    engine="auto",
    languages=None,
    denylist=None,
    threshold=PROXIMITY_THRESHOLD,
    min_length=MIN_TEXT_LENGTH,
    min_confidence=None,
    filter_chrome=True,
    patterns=None,
    verbose=False,
):
    """
    Recognize one image and return the cleaned output lines.

    Raises:
        OCRError: If the image cannot be loaded or recognition fails
    """
    image_path = Path(image_path)
    if not has_supported_extension(image_path):
        log(f"⚠️  Unrecognized image extension: {image_path.suffix or '(none)'}")

    # Fail on unreadable images before spinning up an engine
    image = load_image(image_path)
    if verbose:
        log(f"🖼️  Loaded {image_path.name} ({image.size[0]}x{image.size[1]})")

    recognizer = create_recognizer(engine, languages=languages)

    start_time = time.time()
    fragments = recognizer.recognize(image_path, image=image)
    ocr_time = time.time() - start_time

    lines = process(
        fragments,
        denylist=UI_DENYLIST if denylist is None else denylist,
        threshold=threshold,
        min_length=min_length,
        min_confidence=min_confidence,
        filter_chrome=filter_chrome,
        patterns=UI_PATTERNS if patterns is None else patterns,
    )

    if verbose:
        kept = sum(1 for line in lines if line)
        log(
            f"⏱️  {recognizer.name} OCR in {round(ocr_time, 3)}s: "
            f"{len(fragments)} fragments, {kept} kept"
        )

    return lines


def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(
        prog="screen-ocr",
        description="Print the text in an image, without UI chrome",
    )
    parser.add_argument("image", type=Path, help="Path to the image file")
    parser.add_argument(
        "--engine",
        choices=ENGINES,
        default="auto",
        help="OCR engine (default: auto - Vision on macOS, otherwise PaddleOCR)",
    )
    parser.add_argument(
        "--languages",
        type=str,
        default=",".join(RECOGNITION_LANGUAGES),
        help=f"Comma-separated recognition languages, in priority order (default: {','.join(RECOGNITION_LANGUAGES)})",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Keep UI chrome lines (noise is still dropped)",
    )
    parser.add_argument(
        "--denylist",
        type=Path,
        default=None,
        help="File of extra chrome patterns, one per line",
    )
    parser.add_argument(
        "--no-default-denylist",
        action="store_true",
        help="Only use patterns from --denylist (also drops the built-in regex patterns)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=PROXIMITY_THRESHOLD,
        help=f"Vertical gap that starts a new block, as a fraction of image height (default: {PROXIMITY_THRESHOLD})",
    )
    parser.add_argument(
        "--min-length",
        type=positive_int,
        default=MIN_TEXT_LENGTH,
        help=f"Drop lines shorter than this (default: {MIN_TEXT_LENGTH})",
    )
    parser.add_argument(
        "--min-confidence",
        type=float,
        default=None,
        help="Drop lines the engine is less confident about (0..1)",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Print timing stats to stderr"
    )
    return parser


def main(argv=None):
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    languages = [lang.strip() for lang in args.languages.split(",") if lang.strip()]

    try:
        denylist = build_denylist(args.denylist, not args.no_default_denylist)
        lines = run_ocr(
            args.image,
            engine=args.engine,
            languages=languages,
            denylist=denylist,
            threshold=args.threshold,
            min_length=args.min_length,
            min_confidence=args.min_confidence,
            filter_chrome=not args.raw,
            patterns=[] if args.no_default_denylist else None,
            verbose=args.verbose,
        )
    except OCRError as e:
        log(f"❌ Error: {e}")
        sys.exit(1)

    for line in lines:
        print(line)
