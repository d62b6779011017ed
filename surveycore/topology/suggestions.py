"""Correction suggestions for topology findings."""

from __future__ import annotations

from surveycore.topology.models import CorrectionSuggestion, Priority, TopologyError, TopologyErrorType

_SUGGESTIONS: dict[TopologyErrorType, tuple[str, str, Priority]] = {
    TopologyErrorType.OVERLAP: (
        "adjust_boundaries",
        "Adjust the shared boundary so the sections no longer overlap",
        Priority.HIGH,
    ),
    TopologyErrorType.CONTAINMENT: (
        "clip_to_parent",
        "Move or clip the section boundary to lie within the parent parcel",
        Priority.HIGH,
    ),
    TopologyErrorType.INVALID_GEOMETRY: (
        "redraw_boundary",
        "Redraw the boundary as a simple closed polygon that encloses area",
        Priority.HIGH,
    ),
    TopologyErrorType.SELF_INTERSECTION: (
        "fix_vertex_order",
        "Reorder the boundary vertices so edges do not cross",
        Priority.HIGH,
    ),
    TopologyErrorType.GAP: (
        "assign_gap",
        "Extend an adjacent section or designate the area as common property",
        Priority.MEDIUM,
    ),
    TopologyErrorType.TOUCHING_BOUNDARY: (
        "confirm_shared_boundary",
        "Confirm the shared boundary is intended (e.g. a party wall)",
        Priority.LOW,
    ),
}


def suggest(error: TopologyError) -> CorrectionSuggestion:
    """Suggested correction for *error*."""
    action, description, priority = _SUGGESTIONS[error.type]
    if error.affected_sections:
        description = f"{description} (sections {', '.join(error.affected_sections)})"
    return CorrectionSuggestion(action=action, description=description, priority=priority)
