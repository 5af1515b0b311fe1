"""Core processing modules for Skybox Beautifier."""

from .layout import (
    FACE_ORDER,
    FaceLayout,
    FaceName,
    InvalidLayoutError,
    Region,
    available_layouts,
    parse_layout,
    resolve_regions,
)
from .extract import (
    ExtractionConfig,
    ExtractionError,
    ExtractionOutcome,
    FaceExtractor,
    FaceResult,
    FailurePolicy,
    extract_faces,
)

__all__ = [
    "FACE_ORDER",
    "FaceLayout",
    "FaceName",
    "InvalidLayoutError",
    "Region",
    "available_layouts",
    "parse_layout",
    "resolve_regions",
    "ExtractionConfig",
    "ExtractionError",
    "ExtractionOutcome",
    "FaceExtractor",
    "FaceResult",
    "FailurePolicy",
    "extract_faces",
]
