"""High-level processing steps: classify, validate and extract raw-data containers."""

from .classify import classify, classify_path  # noqa: F401
from .extract import extract_file  # noqa: F401
from .factory import Extractor, create_extractor  # noqa: F401
from .ptd import validate_ptd  # noqa: F401
from .validate import validate_container, validate_path  # noqa: F401

__all__ = [
    "classify",
    "classify_path",
    "extract_file",
    "Extractor",
    "create_extractor",
    "validate_ptd",
    "validate_container",
    "validate_path",
]
