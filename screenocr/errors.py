"""
Exceptions raised while loading and recognizing images.
"""


class OCRError(Exception):
    """Base class for screen-ocr failures."""


class ImageLoadError(OCRError):
    """The image could not be found, opened or decoded."""


class RecognitionError(OCRError):
    """The OCR engine failed to start, reported an error, or returned junk."""
