"""Cross layouts and the face regions they resolve to."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple, Union
import logging
import numbers

logger = logging.getLogger(__name__)


class InvalidLayoutError(ValueError):
    """Raised when a layout identifier is not one of the known layouts."""


class FaceName(Enum):
    """The six cube faces, in extraction order."""

    LEFT = "Left"
    FRONT = "Front"
    RIGHT = "Right"
    BACK = "Back"
    TOP = "Top"
    BOTTOM = "Bottom"

    @property
    def filename(self) -> str:
        return f"{self.value}.png"


# Region index i always belongs to FACE_ORDER[i]
FACE_ORDER: Tuple[FaceName, ...] = tuple(FaceName)


class FaceLayout(Enum):
    """Supported 4x3 cross arrangements."""

    TOP_FRONT_BOTTOM = "top-front-bottom"
    TOP_RIGHT_BOTTOM = "top-right-bottom"

    @property
    def description(self) -> str:
        return LAYOUT_DESCRIPTIONS[self]


@dataclass(frozen=True)
class GridPosition:
    """Cell coordinates inside the cross, in face-size units."""

    left: int
    top: int


@dataclass(frozen=True)
class Region:
    """Pixel rectangle of one face inside the source texture."""

    left: int
    top: int
    width: int
    height: int

    def __post_init__(self):
        if self.left < 0 or self.top < 0:
            raise ValueError(f"Invalid offset: left={self.left}, top={self.top}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid size: {self.width}x{self.height}")

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """Crop box in Pillow's (left, upper, right, lower) form."""
        return (self.left, self.top, self.right, self.bottom)

    def to_dict(self) -> dict:
        return {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
        }


LAYOUT_DESCRIPTIONS: Dict[FaceLayout, str] = {
    FaceLayout.TOP_FRONT_BOTTOM: (
        "Top/Up face above front face and bottom/down face below front face"
    ),
    FaceLayout.TOP_RIGHT_BOTTOM: (
        "Top/up face above right face and bottom/down face below right face"
    ),
}

# Positions follow FACE_ORDER: Left, Front, Right, Back, Top, Bottom
LAYOUT_POSITIONS: Dict[FaceLayout, Tuple[GridPosition, ...]] = {
    FaceLayout.TOP_FRONT_BOTTOM: (
        GridPosition(0, 1),
        GridPosition(1, 1),
        GridPosition(2, 1),
        GridPosition(3, 1),
        GridPosition(1, 0),
        GridPosition(1, 2),
    ),
    FaceLayout.TOP_RIGHT_BOTTOM: (
        GridPosition(0, 1),
        GridPosition(1, 1),
        GridPosition(2, 1),
        GridPosition(3, 1),
        GridPosition(2, 0),
        GridPosition(2, 2),
    ),
}


def parse_layout(value: Union[FaceLayout, str]) -> FaceLayout:
    """Coerce a layout value or member name to a FaceLayout."""
    if isinstance(value, FaceLayout):
        return value

    if isinstance(value, str):
        try:
            return FaceLayout(value)
        except ValueError:
            pass
        member = FaceLayout.__members__.get(value.upper().replace("-", "_"))
        if member is not None:
            return member

    known = ", ".join(layout.value for layout in FaceLayout)
    raise InvalidLayoutError(f"Unknown layout '{value}'. Known layouts: {known}")


def available_layouts() -> List[Tuple[str, str]]:
    """Return (name, description) pairs for every known layout."""
    return [(layout.value, layout.description) for layout in FaceLayout]


def resolve_regions(face_size: int, layout: Union[FaceLayout, str]) -> List[Region]:
    """Map a layout and face size to six face regions in FACE_ORDER."""
    if isinstance(face_size, bool) or not isinstance(face_size, numbers.Integral):
        raise ValueError(f"Face size must be an integer, got {face_size!r}")
    face_size = int(face_size)
    if face_size <= 0:
        raise ValueError(f"Face size must be positive, got {face_size}")

    layout = parse_layout(layout)
    positions = LAYOUT_POSITIONS.get(layout)
    if positions is None:
        raise InvalidLayoutError(f"No positions defined for layout '{layout.value}'")

    regions = [
        Region(
            left=position.left * face_size,
            top=position.top * face_size,
            width=face_size,
            height=face_size,
        )
        for position in positions
    ]

    logger.debug(f"Resolved {len(regions)} regions for {layout.value} at {face_size}px")
    return regions
