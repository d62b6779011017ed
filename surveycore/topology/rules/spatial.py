"""Spatial relationship rules: overlap, shared walls, containment, gaps."""

from __future__ import annotations

import logging

from shapely.geometry import MultiPolygon, Polygon
from shapely.ops import unary_union

from surveycore.topology.models import TopologyError, TopologyErrorType, TopologyOptions
from surveycore.topology.rules.base import (
    TopologyContext,
    TopologyRule,
    point_location,
    polygon_location,
)

logger = logging.getLogger(__name__)


class OverlapRule(TopologyRule):
    """Units on the same floor must not share interior area.

    Zero-area contact is a shared wall (edge) or a touch (point) and is
    reported according to ``allow_shared_walls`` / ``allow_touching``.
    """

    @property
    def name(self) -> str:
        return "overlap"

    def enabled(self, options: TopologyOptions) -> bool:
        return options.check_overlaps

    def check(self, context: TopologyContext) -> list[TopologyError]:
        opts = context.options
        min_area = opts.tolerance**2
        findings: list[TopologyError] = []
        units = context.units

        for i in range(len(units)):
            for j in range(i + 1, len(units)):
                a, b = units[i], units[j]
                same_floor = a.floor_level == b.floor_level
                if not same_floor and not opts.cross_floor_overlaps:
                    continue
                if not a.polygon.intersects(b.polygon):
                    continue

                pair = [a.section_number, b.section_number]
                shared = a.polygon.intersection(b.polygon)
                if shared.area > min_area:
                    where = "" if same_floor else f" (floors {a.floor_level} and {b.floor_level})"
                    findings.append(TopologyError(
                        type=TopologyErrorType.OVERLAP,
                        severity="error" if same_floor else "warning",
                        message=(
                            f"Sections {a.section_number} and {b.section_number} overlap "
                            f"by {shared.area:.4f} m²{where}"
                        ),
                        affected_sections=pair,
                        location=polygon_location(shared, "Overlapping area"),
                        area=shared.area,
                    ))
                elif same_floor:
                    contact = self._contact(a.polygon, b.polygon, opts, pair)
                    if contact is not None:
                        findings.append(contact)
        return findings

    @staticmethod
    def _contact(a, b, opts: TopologyOptions, pair: list[str]) -> TopologyError | None:
        boundary = a.boundary.intersection(b.boundary)
        wall_length = boundary.length
        if wall_length > opts.tolerance:
            return TopologyError(
                type=TopologyErrorType.TOUCHING_BOUNDARY,
                severity="info" if opts.allow_shared_walls else "error",
                message=f"Sections {pair[0]} and {pair[1]} share a wall of {wall_length:.3f} m",
                affected_sections=pair,
                location=point_location(boundary, "Shared wall"),
            )
        if not opts.allow_touching:
            return TopologyError(
                type=TopologyErrorType.TOUCHING_BOUNDARY,
                severity="warning",
                message=f"Sections {pair[0]} and {pair[1]} touch at a point",
                affected_sections=pair,
                location=point_location(boundary, "Point of contact"),
            )
        return None


class ContainmentRule(TopologyRule):
    """Every unit must lie within the parent parcel (within tolerance)."""

    @property
    def name(self) -> str:
        return "containment"

    def enabled(self, options: TopologyOptions) -> bool:
        return options.check_containment

    def check(self, context: TopologyContext) -> list[TopologyError]:
        opts = context.options
        parent = context.parent
        envelope = parent.buffer(opts.tolerance)
        findings: list[TopologyError] = []

        for unit in context.units:
            if not envelope.covers(unit.polygon):
                outside = unit.polygon.difference(parent)
                findings.append(TopologyError(
                    type=TopologyErrorType.CONTAINMENT,
                    message=(
                        f"Section {unit.section_number} extends {outside.area:.4f} m² "
                        f"beyond the parent parcel"
                    ),
                    affected_sections=[unit.section_number],
                    location=polygon_location(outside, "Area outside parent parcel"),
                    area=outside.area,
                ))
                continue

            if not opts.allow_touching:
                contact = unit.polygon.boundary.intersection(parent.boundary)
                if contact.length > opts.tolerance:
                    findings.append(TopologyError(
                        type=TopologyErrorType.TOUCHING_BOUNDARY,
                        severity="warning",
                        message=(
                            f"Section {unit.section_number} runs along the parent boundary "
                            f"for {contact.length:.3f} m"
                        ),
                        affected_sections=[unit.section_number],
                        location=point_location(contact, "Contact with parent boundary"),
                    ))
        return findings


class GapRule(TopologyRule):
    """Report parent-parcel area not covered by any unit."""

    @property
    def name(self) -> str:
        return "gaps"

    def enabled(self, options: TopologyOptions) -> bool:
        return options.check_gaps

    def check(self, context: TopologyContext) -> list[TopologyError]:
        if not context.units:
            return []
        opts = context.options
        covered = unary_union([u.polygon for u in context.units])
        uncovered = context.parent.difference(covered)

        if isinstance(uncovered, Polygon):
            pieces = [uncovered]
        elif isinstance(uncovered, MultiPolygon):
            pieces = list(uncovered.geoms)
        else:
            pieces = [g for g in getattr(uncovered, "geoms", []) if isinstance(g, Polygon)]

        findings: list[TopologyError] = []
        for piece in pieces:
            if piece.is_empty or piece.area < opts.min_gap_area:
                continue
            findings.append(TopologyError(
                type=TopologyErrorType.GAP,
                severity="warning",
                message=f"Uncovered area of {piece.area:.4f} m² within the parent parcel",
                location=polygon_location(piece, "Gap between sections"),
                area=piece.area,
            ))
        logger.debug("Gap check found %d piece(s) above %.2f m²", len(findings), opts.min_gap_area)
        return findings
