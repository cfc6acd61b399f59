"""Top-level package for markdownkit.

This package turns loosely structured notes into normalized markdown through an
ordered, plugin-extensible rule engine. The main orchestration entry point is
`TextProcessor`.
"""

from .config import ProcessingOptions, ProcessingOptionsBuilder
from .errors import ValidationError
from .pipeline import TextProcessor

__all__ = [
    "ProcessingOptions",
    "ProcessingOptionsBuilder",
    "TextProcessor",
    "ValidationError",
    "__version__",
]

__version__ = "0.3.0"
