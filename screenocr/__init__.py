"""
screen-ocr: print the text in a screenshot, without the UI chrome.
"""

__version__ = "1.0.0"

from .errors import ImageLoadError, OCRError, RecognitionError
from .postprocess import process
from .recognition import Fragment, create_recognizer

__all__ = [
    "Fragment",
    "ImageLoadError",
    "OCRError",
    "RecognitionError",
    "create_recognizer",
    "process",
]
