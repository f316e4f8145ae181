import re
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from .models import EdgeKind, Gender, Person, Relationship

_LATE_WORD = re.compile(r"\blate\b", re.IGNORECASE)
_TRUE_WORDS = {"true", "yes", "y", "1"}
_FALSE_WORDS = {"false", "no", "n", "0"}


class PersonRecord(BaseModel):
    id: str = Field(min_length=1)
    first_name: str = Field("", validation_alias=AliasChoices("first_name", "firstName"))
    last_name: str = Field("", validation_alias=AliasChoices("last_name", "lastName"))
    gender: Gender = Gender.UNSPECIFIED
    avatar_ref: Optional[str] = Field(
        None, validation_alias=AliasChoices("avatar_ref", "avatarRef", "avatar_url")
    )
    deceased: Optional[bool] = Field(
        None, validation_alias=AliasChoices("deceased", "deceasedFlag", "is_deceased")
    )
    notes: Optional[str] = None

    @field_validator("id", "avatar_ref", "notes", mode="before")
    @classmethod
    def coerce_text(cls, v):
        # uuids and ints arrive from some stores
        return v if v is None else str(v)

    @field_validator("deceased", mode="before")
    @classmethod
    def lenient_deceased(cls, v):
        """Unreadable flags become None so the notes/name rule decides."""
        if v is None or isinstance(v, bool):
            return v
        text = str(v).strip().lower()
        if text in _TRUE_WORDS:
            return True
        if text in _FALSE_WORDS:
            return False
        return None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def blank_names(cls, v):
        return (v or "").strip() if isinstance(v, str) or v is None else str(v)

    @field_validator("gender", mode="before")
    @classmethod
    def lenient_gender(cls, v):
        return Gender.parse(v)

    @model_validator(mode="after")
    def derive_deceased(self):
        # older records only mark the dead in notes or with a "Late" prefix
        if self.deceased is None:
            name = f"{self.first_name} {self.last_name}"
            self.deceased = "DECEASED" in (self.notes or "") or bool(_LATE_WORD.search(name))
        return self

    def to_person(self) -> Person:
        return Person(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            gender=self.gender,
            deceased=bool(self.deceased),
            avatar_ref=self.avatar_ref or None,
        )


class RelationshipRecord(BaseModel):
    from_id: str = Field("", validation_alias=AliasChoices("from_id", "fromId", "from_member_id"))
    to_id: str = Field("", validation_alias=AliasChoices("to_id", "toId", "to_member_id"))
    kind: str = Field("", validation_alias=AliasChoices("kind", "type"))

    @field_validator("from_id", "to_id", "kind", mode="before")
    @classmethod
    def as_text(cls, v):
        if isinstance(v, EdgeKind):
            return v.value
        # a missing endpoint is dropped by the graph, not rejected here
        return "" if v is None else str(v)

    def to_relationship(self) -> Optional[Relationship]:
        """Returns None when the kind is not recognised."""
        kind = EdgeKind.parse(self.kind)
        if kind is None:
            return None
        return Relationship(self.from_id, self.to_id, kind).canonical()
