"""Member and connection storage in KuzuDB, and snapshot loading for the engine."""
import logging
import uuid
from contextlib import contextmanager

import kuzu

from .graph import GraphModel, build_graph
from .models import EdgeKind, Gender, Relationship
from .relatives import plan_relative

logger = logging.getLogger(__name__)

REL_TABLES = {
    EdgeKind.PARENT_OF: "PARENT_OF",
    EdgeKind.MARRIED_TO: "MARRIED_TO",
}

_MEMBER_COLUMNS = (
    "m.id, m.first_name, m.last_name, m.gender, m.avatar_url, m.notes, m.is_deceased"
)


@contextmanager
def transaction(conn: kuzu.Connection):
    """Commit the enclosed writes together, or none of them."""
    conn.execute("BEGIN TRANSACTION")
    try:
        yield conn
    except Exception:
        try:
            conn.execute("ROLLBACK")
        except RuntimeError:
            # a failed query inside the transaction has already rolled it back
            logger.debug("Transaction was already rolled back")
        raise
    conn.execute("COMMIT")


def _row_to_member(row) -> dict:
    return {
        "id": row[0],
        "first_name": row[1] or "",
        "last_name": row[2] or "",
        "gender": row[3] or Gender.UNSPECIFIED.value,
        "avatar_url": row[4] or "",
        "notes": row[5] or "",
        # NULL leaves the notes/name rule to decide
        "is_deceased": None if row[6] is None else bool(row[6]),
    }


# ── Members ──

def create_member(conn: kuzu.Connection, first_name: str, last_name: str = "",
                  gender: str = "unspecified", notes: str = "", avatar_url: str = "",
                  is_deceased: bool | None = None, member_id: str | None = None) -> dict:
    mid = member_id or str(uuid.uuid4())
    params = {"id": mid, "fn": first_name, "ln": last_name or "", "g": Gender.parse(gender).value,
              "av": avatar_url or "", "notes": notes or ""}
    props = "id: $id, first_name: $fn, last_name: $ln, gender: $g, avatar_url: $av, notes: $notes"
    if is_deceased is not None:
        props += ", is_deceased: $dec"
        params["dec"] = bool(is_deceased)
    conn.execute(f"CREATE (m:Member {{{props}}})", params)
    return get_member(conn, mid)


def get_member(conn: kuzu.Connection, member_id: str) -> dict | None:
    result = conn.execute(
        f"MATCH (m:Member) WHERE m.id = $id RETURN {_MEMBER_COLUMNS}",
        {"id": member_id}
    )
    if result.has_next():
        return _row_to_member(result.get_next())
    return None


def list_members(conn: kuzu.Connection) -> list[dict]:
    result = conn.execute(f"MATCH (m:Member) RETURN {_MEMBER_COLUMNS} ORDER BY m.id")
    members = []
    while result.has_next():
        members.append(_row_to_member(result.get_next()))
    return members


def update_member(conn: kuzu.Connection, member_id: str, first_name: str,
                  last_name: str, gender: str) -> dict:
    if get_member(conn, member_id) is None:
        raise ValueError(f"Member {member_id!r} not found")
    conn.execute(
        "MATCH (m:Member) WHERE m.id = $id SET m.first_name = $fn, m.last_name = $ln, m.gender = $g",
        {"id": member_id, "fn": first_name, "ln": last_name or "", "g": Gender.parse(gender).value}
    )
    return get_member(conn, member_id)


def delete_member(conn: kuzu.Connection, member_id: str):
    """Delete a member together with every connection touching it."""
    conn.execute(
        "MATCH (m:Member) WHERE m.id = $id DETACH DELETE m",
        {"id": member_id}
    )


# ── Connections ──

def _edge_exists(conn: kuzu.Connection, rel: Relationship) -> bool:
    table = REL_TABLES[rel.kind]
    result = conn.execute(
        f"MATCH (a:Member)-[r:{table}]->(b:Member) WHERE a.id = $a AND b.id = $b RETURN count(r)",
        {"a": rel.from_id, "b": rel.to_id}
    )
    return result.has_next() and result.get_next()[0] > 0


def _insert_edge(conn: kuzu.Connection, rel: Relationship):
    table = REL_TABLES[rel.kind]
    conn.execute(
        f"MATCH (a:Member), (b:Member) WHERE a.id = $a AND b.id = $b "
        f"CREATE (a)-[:{table} {{id: $id}}]->(b)",
        {"a": rel.from_id, "b": rel.to_id, "id": str(uuid.uuid4())}
    )


def connect(conn: kuzu.Connection, from_id: str, to_id: str, kind) -> dict:
    """Store a connection. Marriages are written smaller-id first; repeats are ignored."""
    rel_kind = EdgeKind.parse(kind)
    if rel_kind is None:
        raise ValueError(f"Unknown connection kind {kind!r}")
    if from_id == to_id:
        raise ValueError("A member cannot be connected to themselves")
    for mid in (from_id, to_id):
        if get_member(conn, mid) is None:
            raise ValueError(f"Member {mid!r} not found")

    rel = Relationship(from_id, to_id, rel_kind).canonical()
    if _edge_exists(conn, rel):
        logger.debug("Connection already stored: %s", rel)
    else:
        _insert_edge(conn, rel)
    return {"from_id": rel.from_id, "to_id": rel.to_id, "kind": rel.kind.value}


def list_connections(conn: kuzu.Connection) -> list[dict]:
    connections = []
    for kind, table in REL_TABLES.items():
        result = conn.execute(
            f"MATCH (a:Member)-[:{table}]->(b:Member) RETURN a.id, b.id ORDER BY a.id, b.id"
        )
        while result.has_next():
            row = result.get_next()
            connections.append({"from_id": row[0], "to_id": row[1], "kind": kind.value})
    return connections


def load_graph(conn: kuzu.Connection) -> GraphModel:
    """Read-only snapshot of everything stored."""
    return build_graph(list_members(conn), list_connections(conn))


def add_relative(conn: kuzu.Connection, origin_id: str, first_name: str, last_name: str = "",
                 gender: str = "unspecified", relation: str = "child") -> dict:
    """Create a member linked to origin_id. Nothing is written if the plan is invalid."""
    new_id = str(uuid.uuid4())
    links = plan_relative(load_graph(conn), origin_id, new_id, relation)
    with transaction(conn):
        member = create_member(conn, first_name, last_name, gender, member_id=new_id)
        for rel in links:
            _insert_edge(conn, rel)
    logger.info("Added %s %s as %s of %s", first_name, last_name, relation, origin_id)
    return {
        "member": member,
        "connections": [
            {"from_id": r.from_id, "to_id": r.to_id, "kind": r.kind.value} for r in links
        ],
    }
