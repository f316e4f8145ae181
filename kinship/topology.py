"""Clan membership, generation depth and pinned 3D placement."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional

from .graph import GraphModel
from .layout import arc_layout
from .models import Gender

logger = logging.getLogger(__name__)

SPOUSE_PASSES = 3


@dataclass(frozen=True)
class NodePlacement:
    person_id: str
    generation: int
    clan_member: bool
    x: float
    y: float
    z: float
    size: int
    index: Optional[float] = None
    partner_id: Optional[str] = None


@dataclass(frozen=True)
class Generations:
    levels: Dict[str, int]
    seed_roots: List[str]
    reached: List[str]
    max_depth: int


@dataclass(frozen=True)
class TopologyResult:
    anchor_id: Optional[str]
    nodes: Mapping[str, NodePlacement]
    seed_roots: tuple
    max_depth: int
    clan_ids: frozenset = field(default_factory=frozenset)

    def __getitem__(self, person_id: str) -> NodePlacement:
        return self.nodes[person_id]

    def __iter__(self) -> Iterator[NodePlacement]:
        return iter(self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)


# ── clan ──

def patriarch_line(model: GraphModel, viewer_id: str) -> List[str]:
    """viewer, father, father's father ... up to the root of the paternal line."""
    if viewer_id not in model:
        return []
    line = [viewer_id]
    seen = {viewer_id}
    current = viewer_id
    while True:
        father = next(
            (p for p in model.parents_of(current) if model.get(p).gender is Gender.MALE),
            None,
        )
        if father is None or father in seen:
            break
        line.append(father)
        seen.add(father)
        current = father
    return line


def clan_members(model: GraphModel, viewer_id: str) -> set[str]:
    """Patrilineal closure around viewer_id.

    Every child of a clan man is a clan member; only sons pass it on.
    """
    line = patriarch_line(model, viewer_id)
    clan = set(line)
    # a female viewer is a member but does not carry the line
    queue = deque(p for p in line if model.get(p).gender is Gender.MALE)
    while queue:
        current = queue.popleft()
        for child in model.children_of(current):
            if child in clan:
                continue
            clan.add(child)
            if model.get(child).gender is Gender.MALE:
                queue.append(child)
    return clan


# ── generations ──

def subtree_depths(model: GraphModel) -> Dict[str, int]:
    """Longest downward parent->child chain below each person.

    Edges that close a cycle are ignored rather than followed.
    """
    depth: Dict[str, int] = {}
    for start in model.person_ids:
        if start in depth:
            continue
        on_path = {start}
        stack = [(start, iter(model.children_of(start)))]
        while stack:
            node, kids = stack[-1]
            nxt = next((k for k in kids if k not in depth and k not in on_path), None)
            if nxt is not None:
                on_path.add(nxt)
                stack.append((nxt, iter(model.children_of(nxt))))
                continue
            stack.pop()
            on_path.discard(node)
            depth[node] = max(
                (depth[k] + 1 for k in model.children_of(node) if k in depth), default=0
            )
    return depth


def assign_generations(model: GraphModel, roots: Optional[List[str]] = None) -> Generations:
    """
    BFS levels from the seed roots, then spouse passes, then a fallback
    layer below the deepest one. Without explicit roots the seeds are the
    parentless people whose lines run (nearly) deepest.
    """
    candidates = [pid for pid in model.person_ids if not model.parents_of(pid)]
    depths = subtree_depths(model)
    max_depth = max((depths[c] for c in candidates), default=0)

    if roots is None:
        # roots found a level short of the deepest still count as seeds
        threshold = max(1, max_depth - 1)
        seed_roots = [c for c in candidates if depths[c] >= threshold]
    else:
        seed_roots = [r for r in roots if r in model]

    levels: Dict[str, int] = {}
    reached: List[str] = []
    queue = deque()
    for root in seed_roots:
        levels[root] = 0
        reached.append(root)
        queue.append(root)
    while queue:
        current = queue.popleft()
        for child in model.children_of(current):
            if child not in levels:
                levels[child] = levels[current] + 1
                reached.append(child)
                queue.append(child)
    # the fallback layer must stay below everything reached
    max_depth = max([max_depth] + list(levels.values()))

    reached_set = set(reached)
    for _ in range(SPOUSE_PASSES):
        for pid in model.person_ids:
            if pid in reached_set:
                continue
            partner = model.spouse_of(pid)
            if partner is not None and partner in levels:
                levels[pid] = levels[partner]

    for pid in model.person_ids:
        levels.setdefault(pid, max_depth + 1)

    return Generations(levels=levels, seed_roots=seed_roots, reached=reached, max_depth=max_depth)


def node_size(generation: int, clan_member: bool) -> int:
    if clan_member and generation == 0:
        return 40
    if clan_member and generation == 1:
        return 25
    return 15


def compute_topology(model: GraphModel, root_id: Optional[str] = None, **layout_kwargs) -> TopologyResult:
    """
    Generation, clan flag and pinned coordinates for every person.

    With root_id (the viewer, or an explicit lineage root) the clan is the
    patrilineal closure around it, levelled from the top of its paternal
    line. Without one, the clan is everyone descending from the seed roots.
    """
    if root_id is None:
        gens = assign_generations(model)
        clan = set(gens.reached)
    else:
        line = patriarch_line(model, root_id)
        gens = assign_generations(model, roots=line[-1:])
        clan = clan_members(model, root_id)
        if not clan:
            logger.debug("Topology anchor %s is not in the graph", root_id)

    positions = arc_layout(model, clan, gens.levels, **layout_kwargs)

    ordered = [pid for pid in model.person_ids if pid in clan]
    ordered += [pid for pid in model.person_ids if pid not in clan]

    nodes: Dict[str, NodePlacement] = {}
    for pid in ordered:
        is_clan = pid in clan
        pos = positions[pid]
        generation = pos.generation if pos.generation is not None else gens.levels[pid]
        nodes[pid] = NodePlacement(
            person_id=pid,
            generation=generation,
            clan_member=is_clan,
            x=pos.x,
            y=pos.y,
            z=pos.z,
            size=node_size(gens.levels[pid], is_clan),
            index=pos.index,
            partner_id=pos.partner_id,
        )

    logger.debug("Topology: %d nodes, %d clan, max depth %d", len(nodes), len(clan), gens.max_depth)
    return TopologyResult(
        anchor_id=root_id,
        nodes=nodes,
        seed_roots=tuple(gens.seed_roots),
        max_depth=gens.max_depth,
        clan_ids=frozenset(clan),
    )
