"""Per-request view state derived from a graph snapshot: focus and search."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .graph import GraphModel
from .models import Person, Relationship
from .topology import NodePlacement

FOCUSED_OPACITY = 1.0
GHOST_OPACITY = 0.4


@dataclass(frozen=True)
class Focus:
    node_id: Optional[str] = None
    node_ids: frozenset = field(default_factory=frozenset)
    links: tuple = ()

    @property
    def active(self) -> bool:
        return self.node_id is not None


def focus(model: GraphModel, node_id: Optional[str]) -> Focus:
    """The hovered node, everyone directly linked to it, and those links."""
    if node_id is None or node_id not in model:
        return Focus()
    ids = {node_id}
    links: List[Relationship] = []
    for rel in model.relationships:
        if node_id in (rel.from_id, rel.to_id):
            ids.add(rel.other(node_id))
            links.append(rel)
    return Focus(node_id=node_id, node_ids=frozenset(ids), links=tuple(links))


def label_opacity(placement: NodePlacement, current: Focus) -> float:
    if placement.person_id in current.node_ids:
        return FOCUSED_OPACITY
    if not current.active and placement.generation <= 1:
        return FOCUSED_OPACITY
    return GHOST_OPACITY


def search_people(model: GraphModel, query: str, limit: int = 5) -> List[Person]:
    q = (query or "").strip().lower()
    if not q:
        return []
    return [p for p in model if q in p.name.lower()][:limit]
