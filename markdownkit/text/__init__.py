"""Line-level and document-level text passes.

This package provides the fence-aware line scanner, structure detection,
prose cleanup (basic and NLP-based), and final layout normalization.
"""

from .cleaners import BasicCleanup, SmartTypography, ensure_punctuation
from .context import ProcessingContext
from .nlp import NlpCleanup
from .normalizer import MultiLineNormalizer
from .scanner import LineScanner
from .structure import StructureDetector

__all__ = [
    "BasicCleanup",
    "LineScanner",
    "MultiLineNormalizer",
    "NlpCleanup",
    "ProcessingContext",
    "SmartTypography",
    "StructureDetector",
    "ensure_punctuation",
]
