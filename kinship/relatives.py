"""Links to create when a new relative is added next to an existing person."""
from __future__ import annotations

from typing import List

from .graph import GraphModel
from .models import EdgeKind, Relationship, canonical_pair

RELATIONS = ("child", "parent", "spouse", "sibling")


def plan_relative(model: GraphModel, origin_id: str, new_id: str, relation: str) -> List[Relationship]:
    if origin_id not in model:
        raise ValueError(f"Unknown person {origin_id!r}")
    if new_id == origin_id:
        raise ValueError("A person cannot be their own relative")
    relation = (relation or "").strip().lower()

    if relation == "child":
        return [Relationship(origin_id, new_id, EdgeKind.PARENT_OF)]
    if relation == "parent":
        return [Relationship(new_id, origin_id, EdgeKind.PARENT_OF)]
    if relation == "spouse":
        a, b = canonical_pair(origin_id, new_id)
        return [Relationship(a, b, EdgeKind.MARRIED_TO)]
    if relation == "sibling":
        parents = model.parents_of(origin_id)
        if not parents:
            raise ValueError(
                "Cannot add sibling: this person has no parents recorded. Add a parent first."
            )
        return [Relationship(p, new_id, EdgeKind.PARENT_OF) for p in parents]

    raise ValueError(f"relation must be one of {', '.join(RELATIONS)} (got {relation!r})")
