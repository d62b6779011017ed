"""BoxScreen — pairwise unit comparison using AABB overlap.

Uses pure Python bounding box math.  This is a cheap pre-screen; the
topology validator repeats both checks on true polygon geometry.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from surveycore.models.geometry import BoundingBox
from surveycore.sections.models import GeneratedUnitGeometry

logger = logging.getLogger(__name__)

# Default screening tolerance in metres
DEFAULT_TOLERANCE_M = 0.001  # 1mm


class BoxConflict:
    """Two units whose bounding boxes share area."""

    def __init__(
        self,
        section_a: str,
        section_b: str,
        overlap_area: float,
        same_floor: bool,
        message: str,
    ) -> None:
        self.section_a = section_a
        self.section_b = section_b
        self.overlap_area = overlap_area
        self.same_floor = same_floor
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {
            "section_a": self.section_a,
            "section_b": self.section_b,
            "overlap_area": self.overlap_area,
            "same_floor": self.same_floor,
            "message": self.message,
        }


class BoxScreen:
    """Screen units for containment and overlap using bounding boxes.

    Parameters
    ----------
    tolerance_m:
        Boxes may exceed the parent, or overlap each other along an
        axis, by up to this distance without being flagged.
    """

    def __init__(self, tolerance_m: float = DEFAULT_TOLERANCE_M) -> None:
        self.tolerance_m = tolerance_m

    def outside_parent(
        self, parent: BoundingBox, units: Sequence[GeneratedUnitGeometry]
    ) -> list[str]:
        """Section numbers whose box is not inside *parent*."""
        return [u.section_number for u in units if not parent.contains(u.bounds, self.tolerance_m)]

    def detect(self, units: Sequence[GeneratedUnitGeometry]) -> list[BoxConflict]:
        """Run pairwise overlap detection over every unit.

        Boxes that only touch (shared walls) are not conflicts.
        """
        conflicts: list[BoxConflict] = []
        boxes = [(u.section_number, u.floor_level, u.bounds) for u in units]

        # Pairwise comparison: O(n^2) but fine for scheme-sized inputs
        for i in range(len(boxes)):
            for j in range(i + 1, len(boxes)):
                id_a, floor_a, box_a = boxes[i]
                id_b, floor_b, box_b = boxes[j]
                overlap = self._compute_overlap(box_a, box_b)
                if overlap > 0:
                    same_floor = floor_a == floor_b
                    where = "on the same floor" if same_floor else f"on floors {floor_a} and {floor_b}"
                    conflicts.append(BoxConflict(
                        section_a=id_a,
                        section_b=id_b,
                        overlap_area=round(overlap, 6),
                        same_floor=same_floor,
                        message=(
                            f"Bounding box overlap detected ({overlap:.4f} m²) between "
                            f"sections {id_a} and {id_b} {where}"
                        ),
                    ))

        return conflicts

    def _compute_overlap(self, a: BoundingBox, b: BoundingBox) -> float:
        """Overlap area, or 0.0 when either axis overlaps by no more than tolerance."""
        tol = self.tolerance_m
        real_x = min(a.max_x, b.max_x) - max(a.min_x, b.min_x)
        real_y = min(a.max_y, b.max_y) - max(a.min_y, b.min_y)
        if real_x <= tol or real_y <= tol:
            return 0.0
        return real_x * real_y
