"""Image backend: decode, crop and encode faces with Pillow."""

from PIL import Image
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union
import logging

from .profiler import global_profiler

if TYPE_CHECKING:
    from ..core.layout import Region

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Pillow refuses anything above ~179M pixels; a cross with 4096px faces is 201M
DEFAULT_MAX_PIXELS = 0x3FFF * 0x3FFF


def set_max_image_pixels(max_pixels: Optional[int]) -> None:
    """Set the pixel count above which Pillow refuses to decode. None disables the check."""
    Image.MAX_IMAGE_PIXELS = max_pixels
    logger.debug(f"Pillow pixel limit set to {max_pixels}")


set_max_image_pixels(DEFAULT_MAX_PIXELS)


@global_profiler.profile_function("crop_to_file")
def crop_to_file(source_path: PathLike, region: "Region", destination_path: PathLike) -> None:
    """Decode the source, extract ``region`` and write it as PNG.

    Pillow pads crops that leave the image with black pixels, so a region
    outside the source bounds is reported as an error instead. Decode and
    file-system errors propagate unchanged.
    """
    source_path = Path(source_path)
    destination_path = Path(destination_path)

    with Image.open(source_path) as img:
        width, height = img.size
        if region.right > width or region.bottom > height:
            raise ValueError(
                f"bad extract area: region {region.box} exceeds "
                f"{width}×{height} image {source_path}"
            )

        face = img.crop(region.box)
        face.save(destination_path, format="PNG")

    logger.debug(f"Wrote {region.width}×{region.height} face to {destination_path}")


def get_image_info(path: PathLike) -> dict:
    """Get basic information about an image without decoding its pixels."""
    try:
        with Image.open(path) as img:
            return {
                "format": img.format,
                "mode": img.mode,
                "size": img.size,
                "width": img.width,
                "height": img.height,
            }
    except (OSError, Image.DecompressionBombError) as e:
        raise RuntimeError(f"Failed to get image info for {path}: {e}") from e


def suggest_face_size(path: PathLike) -> int:
    """Suggest a face size for a 4×3 cross texture at ``path``.

    Informational only; nothing checks that the texture matches it.
    """
    info = get_image_info(path)
    face_size = min(info["width"] // 4, info["height"] // 3)

    if info["width"] != face_size * 4 or info["height"] != face_size * 3:
        logger.info(
            f"{info['width']}×{info['height']} is not an exact 4×3 cross, "
            f"suggesting {face_size}px faces"
        )

    return max(face_size, 1)
