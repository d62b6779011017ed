"""Sectional unit specifications and generated geometries."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from shapely.geometry import MultiPolygon

from surveycore.models.geometry import BoundingBox, Point, Ring


class SectionType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    PARKING = "parking"
    STORAGE = "storage"
    COMMON = "common"
    OTHER = "other"


class UnitDimensions(BaseModel):
    length: float | None = None
    width: float | None = None
    height: float | None = None


class ExclusiveUseArea(BaseModel):
    """A balcony, patio or parking bay attached to a section."""

    type: str
    coordinates: list[Point] = Field(default_factory=list)


class UnitSpecification(BaseModel):
    """A section as declared on the approved plan."""

    section_number: str
    section_type: SectionType = SectionType.RESIDENTIAL
    floor_level: int = 0
    """0 is ground; negative is basement."""

    coordinates: list[Point] = Field(default_factory=list)
    declared_area: float | None = None
    exclusive_use_areas: list[ExclusiveUseArea] = Field(default_factory=list)
    dimensions: UnitDimensions | None = None


class ExclusiveUsePolygon(BaseModel):
    type: str
    boundary: Ring
    area: float


class GeneratedUnitGeometry(BaseModel):
    """Computed geometry of one section.

    The two ``*_validated`` flags are set by the bounding-box pre-screen
    and then overwritten by full topology validation.
    """

    section_number: str
    section_type: SectionType
    floor_level: int = 0
    boundary: Ring
    computed_area: float
    declared_area: float | None = None
    area_difference: float | None = None
    dimensions: UnitDimensions = Field(default_factory=UnitDimensions)
    exclusive_use_areas: list[ExclusiveUsePolygon] = Field(default_factory=list)
    exclusive_use_area_total: float = 0.0
    containment_validated: bool = False
    overlap_validated: bool = False
    validation_errors: list[str] = Field(default_factory=list)
    validation_warnings: list[str] = Field(default_factory=list)

    @property
    def geometry(self) -> str:
        """Boundary as WKT."""
        return self.boundary.to_wkt()

    @property
    def bounds(self) -> BoundingBox:
        return self.boundary.bounds

    def exclusive_use_wkt(self) -> str | None:
        """Exclusive-use areas as one WKT ``MULTIPOLYGON``."""
        if not self.exclusive_use_areas:
            return None
        return MultiPolygon([e.boundary.to_shapely() for e in self.exclusive_use_areas]).wkt


class CommonProperty(BaseModel):
    area: float = 0.0
    geometry: str | None = None
    """Polygon is produced by an external spatial collaborator."""


class GenerationValidation(BaseModel):
    all_contained: bool = False
    no_overlaps: bool = False
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class GeometryGenerationResult(BaseModel):
    success: bool = False
    units: list[GeneratedUnitGeometry] = Field(default_factory=list)
    common_property: CommonProperty = Field(default_factory=CommonProperty)
    validation: GenerationValidation = Field(default_factory=GenerationValidation)
