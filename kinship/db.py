"""KuzuDB embedded graph database connection for member records."""
import os
import logging
import kuzu
from pathlib import Path

logger = logging.getLogger(__name__)

DB_PATH = Path(os.environ.get("KINSHIP_DB_PATH", Path(__file__).resolve().parent.parent / "graph_data"))
_database = None


def get_database():
    global _database
    if _database is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _database = kuzu.Database(str(DB_PATH))
        init_schema(_database)
    return _database


def init_schema(db):
    conn = kuzu.Connection(db)
    conn.execute(
        "CREATE NODE TABLE IF NOT EXISTS Member("
        "id STRING, first_name STRING, last_name STRING, gender STRING, "
        "avatar_url STRING, notes STRING, is_deceased BOOL, "
        "PRIMARY KEY(id))"
    )
    conn.execute("CREATE REL TABLE IF NOT EXISTS PARENT_OF(FROM Member TO Member, id STRING)")
    conn.execute("CREATE REL TABLE IF NOT EXISTS MARRIED_TO(FROM Member TO Member, id STRING)")
    logger.info("Member schema ready")


def get_conn():
    return kuzu.Connection(get_database())
