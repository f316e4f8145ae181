"""Shortest kinship path between two people, rendered as an English phrase."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import List, Optional

from .graph import GraphModel, Step
from .models import Gender

logger = logging.getLogger(__name__)

SELF_PHRASE = "This is you."
NO_CONNECTION = "No connection found."

_LABELS = {
    (Step.PARENT, Gender.MALE): "Father",
    (Step.PARENT, Gender.FEMALE): "Mother",
    (Step.PARENT, Gender.UNSPECIFIED): "Parent",
    (Step.CHILD, Gender.MALE): "Son",
    (Step.CHILD, Gender.FEMALE): "Daughter",
    (Step.CHILD, Gender.UNSPECIFIED): "Child",
    (Step.SPOUSE, Gender.MALE): "Husband",
    (Step.SPOUSE, Gender.FEMALE): "Wife",
    (Step.SPOUSE, Gender.UNSPECIFIED): "Spouse",
}

PARENT_LABELS = frozenset(("Father", "Mother", "Parent"))
SIBLING_OF_CHILD = {"Son": "Brother", "Daughter": "Sister", "Child": "Sibling"}


@dataclass(frozen=True)
class PathStep:
    person_id: str
    step: Step
    gender: Gender


def find_path(model: GraphModel, source_id: str, target_id: str) -> Optional[List[PathStep]]:
    """BFS over parent, child and spouse hops. None when unreachable."""
    if source_id not in model or target_id not in model:
        return None
    if source_id == target_id:
        return []

    queue = deque([(source_id, [])])
    visited = {source_id}
    while queue:
        current, path = queue.popleft()
        if current == target_id:
            return path
        for neighbor, step in model.neighbors(current):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            queue.append((neighbor, path + [PathStep(neighbor, step, model.get(neighbor).gender)]))
    return None


def label_step(step: PathStep) -> str:
    return _LABELS[(step.step, step.gender)]


def reduce_siblings(labels: List[str]) -> List[str]:
    """Collapse parent-then-child into a sibling, one left-to-right pass.

    A produced sibling is never re-examined, so "Father Father Son Son"
    becomes "Father Brother Son".
    """
    reduced: List[str] = []
    for label in labels:
        if reduced and reduced[-1] in PARENT_LABELS and label in SIBLING_OF_CHILD:
            reduced.pop()
            reduced.append(SIBLING_OF_CHILD[label])
        else:
            reduced.append(label)
    return reduced


def describe_path(path: List[PathStep]) -> str:
    if not path:
        return SELF_PHRASE
    labels = reduce_siblings([label_step(s) for s in path])
    if len(labels) == 1:
        return labels[0]
    return "Your " + "'s ".join(labels)


def find_relationship(model: GraphModel, source_id: str, target_id: str) -> str:
    """How target is related to source, e.g. "Your Mother's Brother"."""
    if source_id == target_id:
        return SELF_PHRASE
    path = find_path(model, source_id, target_id)
    if path is None:
        logger.debug("No kinship path from %s to %s", source_id, target_id)
        return NO_CONNECTION
    return describe_path(path)
