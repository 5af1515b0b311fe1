"""Skybox Beautifier - Slice a cross skybox texture into six face images."""

__version__ = "0.1.0"
__author__ = "Skybox Beautifier Team"
__description__ = "Slice a cubemap cross texture into Left/Front/Right/Back/Top/Bottom faces"

from .core.layout import FaceLayout, FaceName, Region, resolve_regions
from .core.extract import ExtractionOutcome, FaceExtractor, extract_faces
from .utils.image import crop_to_file

__all__ = [
    "FaceLayout",
    "FaceName",
    "Region",
    "resolve_regions",
    "ExtractionOutcome",
    "FaceExtractor",
    "extract_faces",
    "crop_to_file",
]
