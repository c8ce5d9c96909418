"""
OCR engine adapters.

Every recognizer returns the complete list of fragments for one image as an
ordinary return value, or raises RecognitionError. Fragment positions are
normalized to image height with the origin at the top, so 0.0 is the top edge
and 1.0 the bottom edge, whatever the engine's native coordinate space is.
"""

import platform
from collections.abc import Mapping
from pathlib import Path
from typing import List, NamedTuple, Optional

import numpy as np

from .config import PADDLE_LANG, RECOGNITION_LANGUAGES
from .errors import RecognitionError
from .utils import box_top, load_image, to_bgr_array


class Fragment(NamedTuple):
    """One unit of recognized text and its vertical position."""

    text: str
    y: float
    confidence: Optional[float] = None


class Recognizer:
    """Base class for OCR engine adapters."""

    name = "base"

    @classmethod
    def is_available(cls) -> bool:
        raise NotImplementedError

    def recognize(self, image_path, image=None) -> List[Fragment]:
        """
        Recognize text in one image.

        Args:
            image_path: Path to the image file
            image: Optional already-decoded PIL image, so engines that work on
                pixels do not decode the file a second time

        Returns:
            All fragments found, in engine order
        """
        raise NotImplementedError


class VisionRecognizer(Recognizer):
    """macOS Vision text recognition through pyobjc."""

    name = "vision"

    def __init__(self, languages=None, accurate=True, language_correction=True):
        self.languages = list(languages or RECOGNITION_LANGUAGES)
        self.accurate = accurate
        self.language_correction = language_correction

    @classmethod
    def is_available(cls) -> bool:
        if platform.system() != "Darwin":
            return False
        try:
            import Quartz  # noqa: F401
            import Vision  # noqa: F401
        except ImportError:
            return False
        return True

    def _load_cgimage(self, image_path):
        import Quartz
        from Foundation import NSURL

        url = NSURL.fileURLWithPath_(str(Path(image_path).resolve()))
        source = Quartz.CGImageSourceCreateWithURL(url, None)
        if source is None or Quartz.CGImageSourceGetCount(source) == 0:
            raise RecognitionError(f"Could not create CGImage from {image_path}")
        cg_image = Quartz.CGImageSourceCreateImageAtIndex(source, 0, None)
        if cg_image is None:
            raise RecognitionError(f"Could not create CGImage from {image_path}")
        return cg_image

    def _build_request(self):
        import Vision

        # No completion handler: results are read off the request once
        # performRequests_error_ returns, which blocks until recognition is done
        request = Vision.VNRecognizeTextRequest.alloc().init()
        if self.accurate:
            request.setRecognitionLevel_(Vision.VNRequestTextRecognitionLevelAccurate)
        else:
            request.setRecognitionLevel_(Vision.VNRequestTextRecognitionLevelFast)
        request.setRecognitionLanguages_(self.languages)
        request.setUsesLanguageCorrection_(self.language_correction)
        return request

    def recognize(self, image_path, image=None) -> List[Fragment]:
        import Vision

        cg_image = self._load_cgimage(image_path)
        handler = Vision.VNImageRequestHandler.alloc().initWithCGImage_options_(
            cg_image, {}
        )
        request = self._build_request()

        success, error = handler.performRequests_error_([request], None)
        if not success:
            detail = error.localizedDescription() if error is not None else "unknown"
            raise RecognitionError(f"Error performing OCR: {detail}")

        observations = request.results()
        if observations is None:
            raise RecognitionError("No text observations")

        fragments = []
        for observation in observations:
            candidates = observation.topCandidates_(1)
            if not candidates:
                continue
            candidate = candidates[0]
            bbox = observation.boundingBox()
            # Vision boxes are normalized with a bottom-left origin
            top = 1.0 - (bbox.origin.y + bbox.size.height)
            fragments.append(
                Fragment(
                    text=str(candidate.string()),
                    y=float(top),
                    confidence=float(candidate.confidence()),
                )
            )
        return fragments


class PaddleRecognizer(Recognizer):
    """PaddleOCR text recognition, for hosts without Vision."""

    name = "paddle"

    def __init__(self, lang=PADDLE_LANG):
        self.lang = lang
        self._model = None

    @classmethod
    def is_available(cls) -> bool:
        try:
            import paddleocr  # noqa: F401
        except ImportError:
            return False
        return True

    def _get_model(self):
        if self._model is None:
            from paddleocr import PaddleOCR

            try:
                self._model = PaddleOCR(
                    lang=self.lang,
                    use_textline_orientation=False,
                    use_doc_unwarping=False,
                    use_doc_orientation_classify=False,
                )
            except Exception as e:
                raise RecognitionError(f"Could not initialize PaddleOCR: {e}") from e
        return self._model

    def recognize(self, image_path, image=None) -> List[Fragment]:
        if image is None:
            image = load_image(image_path)
        height = float(image.size[1]) or 1.0
        model = self._get_model()

        try:
            ocr_result = model.predict(to_bgr_array(image))
        except Exception as e:
            raise RecognitionError(f"Error performing OCR: {e}") from e

        boxes, texts, scores = normalize_ocr_result(ocr_result)
        return fragments_from_boxes(boxes, texts, scores, height)


def fragments_from_boxes(boxes, texts, scores, height):
    """Turn pixel boxes into fragments with top-down normalized positions."""
    fragments = []
    for box, text, score in zip(boxes, texts, scores):
        if box is None:
            continue
        fragments.append(
            Fragment(text=str(text or ""), y=box_top(box) / height, confidence=score)
        )
    return fragments


def normalize_ocr_result(ocr_result):
    """
    Flatten PaddleOCR ``predict`` output into (boxes, texts, scores).

    ``predict`` returns one OCRResult mapping per input image, holding
    ``rec_texts``, ``rec_scores`` and either ``rec_polys`` (4-point polygons)
    or ``rec_boxes`` (x0, y0, x1, y1 rows). Boxes come back as (N, 2) point
    arrays. Anything else raises RecognitionError.
    """
    if ocr_result is None:
        raise RecognitionError("OCR engine returned no result")
    if isinstance(ocr_result, Mapping):
        ocr_result = [ocr_result]
    if not isinstance(ocr_result, (list, tuple)):
        raise RecognitionError("Unexpected OCR result shape")

    boxes, texts, scores = [], [], []
    for page in ocr_result:
        if page is None:
            continue
        if not isinstance(page, Mapping):
            raise RecognitionError("Unexpected OCR result shape")
        try:
            page_boxes, page_texts, page_scores = _normalize_page(page)
        except (TypeError, IndexError, ValueError, AttributeError) as e:
            raise RecognitionError("Unexpected OCR result shape") from e
        boxes.extend(page_boxes)
        texts.extend(page_texts)
        scores.extend(page_scores)
    return boxes, texts, scores


def _normalize_page(page):
    page_texts = page.get("rec_texts")
    raw_boxes = page.get("rec_polys")
    if raw_boxes is None:
        raw_boxes = page.get("rec_boxes")
    if page_texts is None or raw_boxes is None:
        raise RecognitionError("Unexpected OCR result shape")

    page_boxes = [_to_points(box) for box in raw_boxes]
    page_texts = [str(text) for text in page_texts]
    if len(page_boxes) != len(page_texts):
        raise RecognitionError(
            f"OCR result has {len(page_boxes)} boxes for {len(page_texts)} texts"
        )

    raw_scores = page.get("rec_scores")
    if raw_scores is None:
        raw_scores = []
    page_scores = [None if s is None else float(s) for s in raw_scores]
    page_scores.extend([None] * (len(page_boxes) - len(page_scores)))
    return page_boxes, page_texts, page_scores[: len(page_boxes)]


def _to_points(raw_box):
    points = np.asarray(raw_box, dtype=float)
    if points.size == 0 or points.size % 2:
        raise ValueError(f"bad box: {raw_box!r}")
    return points.reshape(-1, 2)


RECOGNIZERS = {
    VisionRecognizer.name: VisionRecognizer,
    PaddleRecognizer.name: PaddleRecognizer,
}


def create_recognizer(engine="auto", languages=None):
    """
    Build the recognizer for the requested engine.

    Args:
        engine: One of 'auto', 'vision' or 'paddle'
        languages: Prioritized recognition languages (Vision only)

    Returns:
        A Recognizer instance

    Raises:
        RecognitionError: If the engine is unknown or cannot run on this host
    """
    if engine == "auto":
        if VisionRecognizer.is_available():
            return VisionRecognizer(languages=languages)
        if PaddleRecognizer.is_available():
            return PaddleRecognizer()
        raise RecognitionError(
            "No OCR engine available (install pyobjc-framework-Vision on macOS, or paddleocr)"
        )

    recognizer_cls = RECOGNIZERS.get(engine)
    if recognizer_cls is None:
        raise RecognitionError(f"Unknown OCR engine: {engine}")
    if not recognizer_cls.is_available():
        raise RecognitionError(f"OCR engine '{engine}' is not available on this system")
    if recognizer_cls is VisionRecognizer:
        return VisionRecognizer(languages=languages)
    return recognizer_cls()
