"""Signature detectors used by the carver, in priority order."""

from modforge.detectors.json_object import JsonObjectDetector
from modforge.detectors.png import PngDetector
from modforge.detectors.tags import TagDetector, ogg_stream_detector, unity_bundle_detector
from modforge.protocols import SignatureDetector

# Registry of default detectors; earlier entries win at the same offset
_DETECTORS: list[SignatureDetector] = [
    JsonObjectDetector(),
    PngDetector(),
    unity_bundle_detector(),
    ogg_stream_detector(),
]


def default_detectors() -> list[SignatureDetector]:
    """Return the registered detectors in priority order."""
    return list(_DETECTORS)


def register_detector(detector: SignatureDetector) -> None:
    """Register a custom detector (lowest priority).

    Args:
        detector: An object implementing the SignatureDetector protocol
    """
    if not isinstance(detector, SignatureDetector):
        raise TypeError(f"{detector!r} does not implement SignatureDetector")
    _DETECTORS.append(detector)


__all__ = [
    "default_detectors",
    "register_detector",
    "JsonObjectDetector",
    "PngDetector",
    "TagDetector",
    "ogg_stream_detector",
    "unity_bundle_detector",
]
