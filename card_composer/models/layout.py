"""
Layout table for the card template.

Responsibilities:
- Describe where the photo box sits on the template
- Describe the anchor and font size of every text field
- Provide the built-in layout and loading of a JSON override
"""

from pathlib import Path
from typing import Dict, Iterator, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Render order of the text fields on the card.
FIELD_NAMES: Tuple[str, ...] = (
    "name",
    "agentNumber",
    "city",
    "eyeColor",
    "cover",
    "recruitmentDate",
)


class PhotoBox(BaseModel):
    """Rectangle of the template that receives the cropped photo."""
    model_config = ConfigDict(frozen=True)

    x: int = Field(..., ge=0, description="Left edge in template pixels")
    y: int = Field(..., ge=0, description="Top edge in template pixels")
    width: int = Field(..., gt=0, description="Box width in pixels")
    height: int = Field(..., gt=0, description="Box height in pixels")

    @property
    def origin(self) -> Tuple[int, int]:
        return self.x, self.y

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


class TextPosition(BaseModel):
    """Anchor (top-left of the overlay) and font size of one text field."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    font_size: int = Field(..., gt=0, alias="fontSize")

    @property
    def origin(self) -> Tuple[int, int]:
        return self.x, self.y


class Layout(BaseModel):
    """Photo box plus the position of every known text field."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    photo_box: PhotoBox = Field(..., alias="photoBox")
    text: Dict[str, TextPosition]

    @model_validator(mode="after")
    def _check_field_names(self) -> "Layout":
        unknown = set(self.text) - set(FIELD_NAMES)
        if unknown:
            raise ValueError(f"Unknown text fields in layout: {sorted(unknown)}")
        return self

    def positions(self) -> Iterator[Tuple[str, TextPosition]]:
        """Yield (field, position) pairs in card render order."""
        for name in FIELD_NAMES:
            position = self.text.get(name)
            if position is not None:
                yield name, position

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Layout":
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


DEFAULT_LAYOUT = Layout.model_validate({
    "photoBox": {"x": 1250, "y": 770, "width": 846, "height": 1057},  # 4:5
    "text": {
        "name": {"x": 250, "y": 830, "fontSize": 65},
        "agentNumber": {"x": 930, "y": 1100, "fontSize": 40},
        "city": {"x": 450, "y": 1219, "fontSize": 48},
        "eyeColor": {"x": 550, "y": 1330, "fontSize": 48},
        "cover": {"x": 600, "y": 1463, "fontSize": 48},
        "recruitmentDate": {"x": 700, "y": 1587, "fontSize": 48},
    },
})
