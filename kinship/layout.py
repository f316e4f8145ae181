from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Set

if TYPE_CHECKING:
    from .graph import GraphModel

BASE_RADIUS = 1200.0
RADIUS_STEP = 50.0
LAYER_GAP = 250.0
ZIPPER = 40.0
SPOUSE_OFFSET = 0.04
ARC_SPAN = 1.5 * math.pi

VROOT = "__VIRTUAL_ROOT__"


@dataclass(frozen=True)
class Position:
    x: float
    y: float
    z: float
    index: Optional[float] = None
    partner_id: Optional[str] = None
    generation: Optional[int] = None


def clan_hierarchy(model: "GraphModel", clan: Set[str]) -> Dict[str, List[str]]:
    """parent -> clan children, every clan member under exactly one parent.

    A member is hung under its first recorded clan parent, or under VROOT
    when it has none. Children are sorted by id.
    """
    hierarchy: Dict[str, List[str]] = {}
    for pid in model.person_ids:
        if pid not in clan:
            continue
        parent = next((p for p in model.parents_of(pid) if p in clan), VROOT)
        hierarchy.setdefault(parent, []).append(pid)
    for kids in hierarchy.values():
        kids.sort()
    return hierarchy


def leaf_indices(hierarchy: Mapping[str, List[str]]) -> tuple[Dict[str, float], int]:
    """
    Leaves get sequential integers left to right; internal nodes sit at the
    midpoint of their first and last child. Iterative post-order walk from
    VROOT, so members caught in a parent cycle are simply left unindexed.
    Returns (index by id, leaf count).
    """
    index: Dict[str, float] = {}
    leaves = 0
    visited = {VROOT}
    stack = [(VROOT, iter(hierarchy.get(VROOT, [])))]

    while stack:
        node, kids = stack[-1]
        nxt = next((k for k in kids if k not in visited), None)
        if nxt is not None:
            visited.add(nxt)
            stack.append((nxt, iter(hierarchy.get(nxt, []))))
            continue

        stack.pop()
        if node == VROOT:
            continue
        child_xs = [index[k] for k in hierarchy.get(node, []) if k in index]
        if child_xs:
            index[node] = (child_xs[0] + child_xs[-1]) / 2.0
        else:
            index[node] = float(leaves)
            leaves += 1

    return index, leaves


def arc_angle(index: float, span_units: float, arc_span: float = ARC_SPAN) -> float:
    """Angle for a normalised index; 0 is the front of the arc."""
    return (index / span_units - 0.5) * arc_span


def arc_layout(
    model: "GraphModel",
    clan: Set[str],
    generation: Mapping[str, int],
    base_radius: float = BASE_RADIUS,
    radius_step: float = RADIUS_STEP,
    layer_gap: float = LAYER_GAP,
    zipper: float = ZIPPER,
    spouse_offset: float = SPOUSE_OFFSET,
    arc_span: float = ARC_SPAN,
) -> Dict[str, Position]:
    """
    Pinned fan-shaped layout:
    - clan members spread over an arc by leaf index, one tier per generation
    - deeper tiers sit lower and slightly further in
    - neighbours within a tier alternate +/- zipper vertically
    - non-clan spouses sit just beside their clan partner
    """
    hierarchy = clan_hierarchy(model, clan)
    index, leaves = leaf_indices(hierarchy)
    span_units = float(max(leaves - 1, 1))

    def radius(gen: int) -> float:
        return base_radius - gen * radius_step

    pos: Dict[str, Position] = {}

    tiers: Dict[int, List[str]] = {}
    for pid in model.person_ids:
        if pid in index:
            tiers.setdefault(generation[pid], []).append(pid)

    for gen, members in tiers.items():
        members.sort(key=lambda m: (index[m], m))
        for i, pid in enumerate(members):
            angle = arc_angle(index[pid], span_units, arc_span)
            r = radius(gen)
            offset = -zipper if i % 2 == 0 else zipper
            pos[pid] = Position(
                x=math.sin(angle) * r,
                y=-gen * layer_gap + offset,
                z=math.cos(angle) * r,
                index=index[pid],
                generation=gen,
            )

    for pid in model.person_ids:
        if pid in pos:
            continue
        partner = None
        if pid not in clan:
            partner = next((s for s in model.spouses_of(pid) if s in index), None)
        if partner is not None:
            anchor = pos[partner]
            angle = arc_angle(anchor.index, span_units, arc_span) + spouse_offset
            r = radius(anchor.generation)
            pos[pid] = Position(
                x=math.sin(angle) * r,
                y=anchor.y,
                z=math.cos(angle) * r,
                partner_id=partner,
                generation=anchor.generation,
            )
        else:
            gen = generation[pid]
            pos[pid] = Position(x=0.0, y=-gen * layer_gap, z=base_radius, generation=gen)

    return pos
