from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Optional

_LATE_PREFIX = re.compile(r"^\s*late\b\.?\s*", re.IGNORECASE)


class Gender(enum.Enum):
    MALE = "male"
    FEMALE = "female"
    UNSPECIFIED = "unspecified"

    @classmethod
    def parse(cls, value) -> "Gender":
        """Lenient parse: anything unrecognised is UNSPECIFIED."""
        if isinstance(value, Gender):
            return value
        key = str(value or "").strip().lower()
        if key in ("male", "m"):
            return cls.MALE
        if key in ("female", "f"):
            return cls.FEMALE
        return cls.UNSPECIFIED


class EdgeKind(enum.Enum):
    PARENT_OF = "ParentOf"
    MARRIED_TO = "MarriedTo"

    @classmethod
    def parse(cls, value) -> Optional["EdgeKind"]:
        """Returns None for an unrecognised kind."""
        if isinstance(value, EdgeKind):
            return value
        key = str(value or "").strip().replace("_", "").lower()
        return _KIND_ALIASES.get(key)


_KIND_ALIASES = {
    "parentof": EdgeKind.PARENT_OF,
    "marriedto": EdgeKind.MARRIED_TO,
    "spouseof": EdgeKind.MARRIED_TO,
}


@dataclass(frozen=True)
class Person:
    id: str
    first_name: str = ""
    last_name: str = ""
    gender: Gender = Gender.UNSPECIFIED
    deceased: bool = False
    avatar_ref: Optional[str] = None

    @property
    def name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    @property
    def label(self) -> str:
        """Name without a leading 'Late' honorific."""
        return _LATE_PREFIX.sub("", self.name)


def canonical_pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a <= b else (b, a)


@dataclass(frozen=True)
class Relationship:
    from_id: str
    to_id: str
    kind: EdgeKind

    def canonical(self) -> "Relationship":
        """MarriedTo edges always run from the smaller identifier."""
        if self.kind is EdgeKind.MARRIED_TO and self.from_id > self.to_id:
            return Relationship(self.to_id, self.from_id, self.kind)
        return self

    def other(self, person_id: str) -> str:
        return self.to_id if person_id == self.from_id else self.from_id
