"""Geometric validity: self-intersection and degenerate rings."""

from __future__ import annotations

import re

from shapely import is_valid_reason
from shapely.geometry import Polygon

from surveycore.topology.models import ErrorLocation, TopologyError, TopologyErrorType, TopologyOptions
from surveycore.topology.rules.base import TopologyContext, TopologyRule, point_location

_REASON_POINT = re.compile(r"\[\s*([-+\d.eE]+)\s+([-+\d.eE]+)")


def _reason_location(reason: str, polygon: Polygon, label: str) -> ErrorLocation:
    match = _REASON_POINT.search(reason)
    if match:
        return ErrorLocation(
            type="point",
            coordinates=[(float(match.group(1)), float(match.group(2)))],
            description=f"{label}: {reason}",
        )
    return point_location(polygon, f"{label}: {reason}")


class GeometryValidityRule(TopologyRule):
    """Every polygon must be simple, closed and enclose area."""

    @property
    def name(self) -> str:
        return "geometry_validity"

    def enabled(self, options: TopologyOptions) -> bool:
        return options.check_geometry

    def check(self, context: TopologyContext) -> list[TopologyError]:
        findings: list[TopologyError] = []
        shapes = [("parent parcel", None, context.parent_raw)]
        shapes.extend((f"section {u.section_number}", u.section_number, u.raw) for u in context.units)

        for label, section, polygon in shapes:
            affected = [section] if section else []
            if polygon.convex_hull.area == 0:
                findings.append(TopologyError(
                    type=TopologyErrorType.INVALID_GEOMETRY,
                    message=f"Degenerate polygon for {label}: encloses zero area",
                    affected_sections=affected,
                    location=point_location(polygon.exterior, f"{label}: degenerate ring"),
                    area=0.0,
                ))
                continue
            if polygon.is_valid:
                continue
            reason = is_valid_reason(polygon)
            kind = (
                TopologyErrorType.SELF_INTERSECTION
                if "self-intersection" in reason.lower()
                else TopologyErrorType.INVALID_GEOMETRY
            )
            findings.append(TopologyError(
                type=kind,
                message=f"Invalid geometry for {label}: {reason}",
                affected_sections=affected,
                location=_reason_location(reason, polygon, label),
            ))
        return findings
