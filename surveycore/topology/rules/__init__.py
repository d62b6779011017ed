"""Topology rule registry."""

from surveycore.topology.rules.base import TopologyContext, TopologyRule, UnitShape
from surveycore.topology.rules.geometric import GeometryValidityRule
from surveycore.topology.rules.spatial import ContainmentRule, GapRule, OverlapRule


def default_rules() -> list[TopologyRule]:
    return [GeometryValidityRule(), ContainmentRule(), OverlapRule(), GapRule()]


__all__ = [
    "ContainmentRule",
    "GapRule",
    "GeometryValidityRule",
    "OverlapRule",
    "TopologyContext",
    "TopologyRule",
    "UnitShape",
    "default_rules",
]
