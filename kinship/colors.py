from __future__ import annotations
from typing import Dict

from .graph import GraphModel
from .models import Person
from .topology import TopologyResult

DECEASED_COLOR = "#E5E4E2"
CLAN_COLOR = "#FFD700"
DEFAULT_COLOR = "#6366f1"


def node_color(person: Person, clan_member: bool) -> str:
    if person.deceased:
        return DECEASED_COLOR
    if clan_member:
        return CLAN_COLOR
    return DEFAULT_COLOR


def build_node_colors(model: GraphModel, topology: TopologyResult) -> Dict[str, str]:
    return {
        node.person_id: node_color(model.get(node.person_id), node.clan_member)
        for node in topology
    }
