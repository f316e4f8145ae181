"""Read-only kinship graph built from flat person and relationship records."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from pydantic import ValidationError

from .models import EdgeKind, Person, Relationship
from .schemas import PersonRecord, RelationshipRecord

logger = logging.getLogger(__name__)


class Step(enum.Enum):
    """Direction of a hop relative to the walk: up, down, or across a marriage."""
    PARENT = "parent"
    CHILD = "child"
    SPOUSE = "spouse"


@dataclass
class Diagnostics:
    missing_reference: int = 0
    unknown_kind: int = 0
    self_link: int = 0
    duplicate_edge: int = 0
    duplicate_person: int = 0
    invalid_person: int = 0

    @property
    def dropped(self) -> int:
        return self.missing_reference + self.unknown_kind + self.self_link + self.duplicate_edge


def _as_person(obj) -> Optional[Person]:
    """Returns None for a record with no usable id."""
    if isinstance(obj, Person):
        return obj
    try:
        return PersonRecord.model_validate(obj).to_person()
    except ValidationError as e:
        logger.debug("Skipped person record %r: %s", obj, e)
        return None


def _as_relationship(obj) -> Optional[Relationship]:
    if isinstance(obj, Relationship):
        return obj.canonical()
    try:
        return RelationshipRecord.model_validate(obj).to_relationship()
    except ValidationError:
        return None


class GraphModel:
    """Persons plus parent, child and spouse adjacency.

    Adjacency lists keep relationship input order so every traversal over
    the model is reproducible. Nothing is mutated after __init__.
    """

    def __init__(self, persons: Iterable, relationships: Iterable):
        self.diagnostics = Diagnostics()
        self._persons: dict[str, Person] = {}
        for raw in persons:
            p = _as_person(raw)
            if p is None:
                self.diagnostics.invalid_person += 1
                continue
            if p.id in self._persons:
                self.diagnostics.duplicate_person += 1
                continue
            self._persons[p.id] = p
        if self.diagnostics.invalid_person:
            logger.warning("Skipped %d person records without a usable id",
                           self.diagnostics.invalid_person)

        self._children: dict[str, list[str]] = {pid: [] for pid in self._persons}
        self._parents: dict[str, list[str]] = {pid: [] for pid in self._persons}
        self._spouses: dict[str, list[str]] = {pid: [] for pid in self._persons}
        self._neighbors: dict[str, list[tuple[str, Step]]] = {pid: [] for pid in self._persons}

        seen: set[Relationship] = set()
        kept: list[Relationship] = []
        for raw in relationships:
            rel = _as_relationship(raw)
            if rel is None:
                self.diagnostics.unknown_kind += 1
                logger.debug("Dropped relationship with unknown kind: %r", raw)
                continue
            if rel.from_id not in self._persons or rel.to_id not in self._persons:
                self.diagnostics.missing_reference += 1
                logger.debug("Dropped relationship to unknown person: %s -> %s", rel.from_id, rel.to_id)
                continue
            if rel.from_id == rel.to_id:
                self.diagnostics.self_link += 1
                continue
            if rel in seen:
                self.diagnostics.duplicate_edge += 1
                continue
            seen.add(rel)
            kept.append(rel)
            self._index(rel)

        self._relationships = tuple(kept)
        if self.diagnostics.dropped:
            logger.warning(
                "Dropped %d of %d relationships (missing=%d unknown_kind=%d self=%d duplicate=%d)",
                self.diagnostics.dropped, self.diagnostics.dropped + len(kept),
                self.diagnostics.missing_reference, self.diagnostics.unknown_kind,
                self.diagnostics.self_link, self.diagnostics.duplicate_edge,
            )

    def _index(self, rel: Relationship) -> None:
        a, b = rel.from_id, rel.to_id
        if rel.kind is EdgeKind.PARENT_OF:
            self._children[a].append(b)
            self._parents[b].append(a)
            self._neighbors[a].append((b, Step.CHILD))
            self._neighbors[b].append((a, Step.PARENT))
        elif rel.kind is EdgeKind.MARRIED_TO:
            self._spouses[a].append(b)
            self._spouses[b].append(a)
            self._neighbors[a].append((b, Step.SPOUSE))
            self._neighbors[b].append((a, Step.SPOUSE))

    # ── lookups ──

    def __contains__(self, person_id) -> bool:
        return person_id in self._persons

    def __len__(self) -> int:
        return len(self._persons)

    def __iter__(self) -> Iterator[Person]:
        return iter(self._persons.values())

    def get(self, person_id: str) -> Optional[Person]:
        return self._persons.get(person_id)

    @property
    def person_ids(self) -> tuple[str, ...]:
        return tuple(self._persons)

    @property
    def relationships(self) -> tuple[Relationship, ...]:
        return self._relationships

    def children_of(self, person_id: str) -> tuple[str, ...]:
        return tuple(self._children.get(person_id, ()))

    def parents_of(self, person_id: str) -> tuple[str, ...]:
        return tuple(self._parents.get(person_id, ()))

    def spouses_of(self, person_id: str) -> tuple[str, ...]:
        return tuple(self._spouses.get(person_id, ()))

    def spouse_of(self, person_id: str) -> Optional[str]:
        spouses = self._spouses.get(person_id)
        return spouses[0] if spouses else None

    def neighbors(self, person_id: str) -> tuple[tuple[str, Step], ...]:
        """Undirected kinship hops out of person_id, tagged by direction."""
        return tuple(self._neighbors.get(person_id, ()))


def build_graph(persons: Iterable, relationships: Iterable) -> GraphModel:
    return GraphModel(persons, relationships)
