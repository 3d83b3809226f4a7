"""Pydantic models for area-of-effect shape specs.

Ability data usually arrives as plain mappings (YAML, JSON), e.g.::

    {"shape": "cone", "dir": 0, "radius": 3, "widen": 1}

``parse_shape`` validates such a mapping once at the boundary and returns
the matching model; the ``shape`` tag selects the model.
"""

from __future__ import annotations

from typing import Any, Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from hextactics.models.hex import HexDomainError


class _Shape(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class CircleShape(_Shape):
    shape: Literal["circle"] = "circle"
    radius: int = Field(ge=0)


class DonutShape(_Shape):
    shape: Literal["donut"] = "donut"
    min: int = Field(ge=0)
    max: int = Field(ge=0)
    include_origin: bool = False


class LineShape(_Shape):
    shape: Literal["line"] = "line"
    direction: int = Field(alias="dir", ge=0, le=5)
    length: int = Field(ge=0)
    thickness: int = Field(default=1, ge=1)
    include_origin: bool = True


class ConeShape(_Shape):
    shape: Literal["cone"] = "cone"
    direction: int = Field(alias="dir", ge=0, le=5)
    radius: int = Field(ge=0)
    widen: int = Field(default=1, ge=0, le=3)
    include_origin: bool = False


class BoltShape(_Shape):
    shape: Literal["bolt"] = "bolt"
    to: tuple[int, int]
    max_length: Optional[int] = Field(default=None, ge=0)


ShapeSpec = Annotated[
    Union[CircleShape, DonutShape, LineShape, ConeShape, BoltShape],
    Field(discriminator="shape"),
]

SHAPE_TAGS = ("circle", "donut", "line", "cone", "bolt")

_shape_adapter: TypeAdapter = TypeAdapter(ShapeSpec)


def parse_shape(raw: Any) -> ShapeSpec:
    """Validate a shape mapping (or pass an existing model through).

    Raises:
        HexDomainError: Unknown ``shape`` tag or malformed fields.
    """
    if isinstance(raw, _Shape):
        return raw
    if isinstance(raw, dict) and raw.get("shape") not in SHAPE_TAGS:
        raise HexDomainError(f"Unknown AoE shape: {raw.get('shape')!r}")
    try:
        return _shape_adapter.validate_python(raw)
    except ValidationError as e:
        raise HexDomainError(f"Invalid AoE shape spec: {e}") from e
