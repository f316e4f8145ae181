"""Shared fixtures for the kinship test suite."""
import pytest
import kuzu

from kinship.db import init_schema
from kinship.graph import build_graph


def person(pid, gender, first=None, last="", **extra):
    return {"id": pid, "firstName": first or pid.capitalize(), "lastName": last,
            "gender": gender, **extra}


def parent(a, b):
    return {"fromId": a, "toId": b, "kind": "ParentOf"}


def married(a, b):
    return {"fromId": a, "toId": b, "kind": "MarriedTo"}


# ── Record fixtures ──

@pytest.fixture
def small_family():
    """R (m) with children S (m) and D (f); S has child G (m)."""
    persons = [
        person("r", "male"), person("s", "male"),
        person("d", "female"), person("g", "male"),
    ]
    rels = [parent("r", "s"), parent("r", "d"), parent("s", "g")]
    return build_graph(persons, rels)


@pytest.fixture
def cousins_family():
    """First cousins c1 (m) and c2 (f) who married each other."""
    persons = [
        person("r", "male"), person("a", "male"), person("b", "female"),
        person("c1", "male"), person("c2", "female"),
    ]
    rels = [
        parent("r", "a"), parent("r", "b"),
        parent("a", "c1"), parent("b", "c2"),
        married("c2", "c1"),
    ]
    return build_graph(persons, rels)


CLAN_PERSONS = [
    person("gf", "male"), person("gm", "female"),
    person("f", "male"), person("mo", "female"),
    person("aunt", "female"), person("unc", "male"),
    person("me", "male"), person("sis", "female"),
    person("son", "male"), person("cousin", "male"),
    person("nephew", "male"),
]

CLAN_RELS = [
    parent("gf", "f"), parent("gf", "aunt"), married("gf", "gm"),
    parent("f", "me"), parent("f", "sis"), married("f", "mo"),
    parent("aunt", "cousin"), parent("unc", "cousin"), married("aunt", "unc"),
    parent("me", "son"),
    parent("sis", "nephew"),
]


@pytest.fixture
def clan_family():
    """
    Three paternal generations under gf. Wives gm and mo and the aunt's
    husband unc are married in; the aunt's and sister's children sit outside
    the paternal line.
    """
    return build_graph(CLAN_PERSONS, CLAN_RELS)


# ── Database fixtures ──

@pytest.fixture
def db_path(tmp_path):
    """Temp location for a fresh KuzuDB."""
    return tmp_path / "test_db"


@pytest.fixture
def db(db_path):
    """KuzuDB with the member schema."""
    database = kuzu.Database(str(db_path))
    init_schema(database)
    return database


@pytest.fixture
def conn(db):
    return kuzu.Connection(db)
