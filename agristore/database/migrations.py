from agristore.utils.logging import get_logger
from typing import Dict, List, Any

log = get_logger(__name__)

CONSTRAINT_KEYS = ("FOREIGN KEY", "UNIQUE")

TYPE_MAP = {
    "INTEGER": {"sqlite": "INTEGER", "postgresql": "INTEGER", "mysql": "INT"},
    "TEXT": {"sqlite": "TEXT", "postgresql": "TEXT", "mysql": "TEXT"},
    "DECIMAL": {"sqlite": "NUMERIC", "postgresql": "NUMERIC(18,2)", "mysql": "DECIMAL(18,2)"},
    "TIMESTAMP": {"sqlite": "TEXT", "postgresql": "TIMESTAMP", "mysql": "DATETIME(6)"},
    "BOOL": {"sqlite": "INTEGER", "postgresql": "BOOLEAN", "mysql": "TINYINT(1)"},
}


def _map_type(col_type: str, backend: str) -> str:
    """Map schema type strings to DB-specific equivalents."""
    backend = str(backend)
    base_type, _, constraints = col_type.strip().partition(" ")
    base_key = base_type.upper()
    mapped_base = TYPE_MAP.get(base_key, {}).get(backend, base_type)

    upper = constraints.upper()
    if "PRIMARY KEY" in upper:
        if "AUTOINCREMENT" in upper or "AUTO_INCREMENT" in upper:
            if backend == "sqlite":
                return f"{mapped_base} PRIMARY KEY AUTOINCREMENT"
            if backend == "postgresql":
                return "SERIAL PRIMARY KEY"
            return f"{mapped_base} AUTO_INCREMENT PRIMARY KEY"
        return f"{mapped_base} PRIMARY KEY"

    if base_key == "BOOL" and backend == "postgresql":
        constraints = constraints.replace("DEFAULT 1", "DEFAULT TRUE").replace("DEFAULT 0", "DEFAULT FALSE")
    return f"{mapped_base} {constraints}".strip()


def _columns_of(cols_def: Dict[str, Any]) -> Dict[str, str]:
    return {name: col_type for name, col_type in cols_def.items() if name.upper() not in CONSTRAINT_KEYS}


def _foreign_keys(cols_def: Dict[str, Any]) -> List[Dict[str, str]]:
    fks = cols_def.get("FOREIGN KEY", [])
    return fks if isinstance(fks, list) else [fks]


def _table_exists(db: Any, cur: Any, table_name: str) -> bool:
    backend = db.backend
    if backend == "sqlite":
        query = "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?"
    elif backend == "postgresql":
        query = "SELECT 1 FROM information_schema.tables WHERE table_name = ? AND table_schema = current_schema()"
    elif backend == "mysql":
        query = "SELECT 1 FROM information_schema.tables WHERE table_name = ? AND table_schema = DATABASE()"
    else:
        raise ValueError(f"Unsupported backend: {backend}")
    return db.run(cur, query, (table_name,), fetch="one") is not None


def _existing_columns(db: Any, cur: Any, table_name: str) -> List[str]:
    if db.backend == "sqlite":
        rows = db.run(cur, f"PRAGMA table_info({table_name})")
        return [row["name"].lower() for row in rows]
    schema_expr = "current_schema()" if db.backend == "postgresql" else "DATABASE()"
    rows = db.run(
        cur,
        f"SELECT column_name FROM information_schema.columns WHERE table_name = ? AND table_schema = {schema_expr}",
        (table_name,),
    )
    return [str(row.get("column_name") or row.get("COLUMN_NAME")).lower() for row in rows]


def _constraint_exists(db: Any, cur: Any, table_name: str, constraint_name: str) -> bool:
    if db.backend == "sqlite":
        return True
    schema_expr = "current_schema()" if db.backend == "postgresql" else "DATABASE()"
    query = f"""
        SELECT 1 FROM information_schema.table_constraints
        WHERE table_name = ? AND constraint_name = ?
          AND table_schema = {schema_expr}
    """
    return db.run(cur, query, (table_name, constraint_name), fetch="one") is not None


def _create_table(cur: Any, table_name: str, cols_def: Dict[str, Any], backend: str) -> None:
    parts = [f"{name} {_map_type(col_type, backend)}" for name, col_type in _columns_of(cols_def).items()]

    unique = cols_def.get("UNIQUE")
    if isinstance(unique, list) and unique:
        parts.append(f"CONSTRAINT uniq_{table_name}_{'_'.join(unique)} UNIQUE ({', '.join(unique)})")

    for fk in _foreign_keys(cols_def):
        instr = fk.get("instruction", "").strip()
        parts.append(
            f"CONSTRAINT fk_{table_name}_{fk['key']} FOREIGN KEY ({fk['key']}) "
            f"REFERENCES {fk['parent_table']}({fk['parent_key']}) {instr}".strip()
        )
    cur.execute(f"CREATE TABLE {table_name} ({', '.join(parts)})")


def _recreate_table_for_sqlite(db: Any, cur: Any, table_name: str, cols_def: Dict[str, Any]) -> None:
    """Recreate a SQLite table with its current data when columns were added."""
    data = db.run(cur, f"SELECT * FROM {table_name}")

    temp_name = f"{table_name}_temp"
    _create_table(cur, temp_name, cols_def, "sqlite")

    new_cols = list(_columns_of(cols_def))
    insert_cols = ", ".join(new_cols)
    values = ", ".join("?" for _ in new_cols)
    for row in data:
        cur.execute(
            f"INSERT INTO {temp_name} ({insert_cols}) VALUES ({values})",
            [row.get(col) for col in new_cols],
        )

    cur.execute(f"DROP TABLE {table_name}")
    cur.execute(f"ALTER TABLE {temp_name} RENAME TO {table_name}")
    log.info("Recreated %s with %d rows", table_name, len(data))


def _sync_server_table(db: Any, cur: Any, table_name: str, cols_def: Dict[str, Any]) -> None:
    existing = _existing_columns(db, cur, table_name)
    for col_name, col_type in _columns_of(cols_def).items():
        if col_name.lower() in existing:
            continue
        mapped_type = _map_type(col_type, db.backend)
        if "NOT NULL" in mapped_type.upper() and "DEFAULT" not in mapped_type.upper():
            mapped_type = mapped_type.replace("NOT NULL", "").strip()
            log.warning("Column %s.%s added as nullable; backfill it before tightening", table_name, col_name)
        cur.execute(f"ALTER TABLE {table_name} ADD COLUMN {col_name} {mapped_type}")
        log.info("Added column %s.%s", table_name, col_name)

    unique = cols_def.get("UNIQUE")
    if isinstance(unique, list) and unique:
        uniq_name = f"uniq_{table_name}_{'_'.join(unique)}"
        if not _constraint_exists(db, cur, table_name, uniq_name):
            cur.execute(f"ALTER TABLE {table_name} ADD CONSTRAINT {uniq_name} UNIQUE ({', '.join(unique)})")
            log.info("Added UNIQUE %s", uniq_name)

    for fk in _foreign_keys(cols_def):
        fk_name = f"fk_{table_name}_{fk['key']}"
        if not _constraint_exists(db, cur, table_name, fk_name):
            instr = fk.get("instruction", "").strip()
            cur.execute(
                f"ALTER TABLE {table_name} ADD CONSTRAINT {fk_name} "
                f"FOREIGN KEY ({fk['key']}) REFERENCES {fk['parent_table']}({fk['parent_key']}) {instr}"
            )
            log.info("Added FK %s -> %s", fk["key"], fk["parent_table"])


def setup_db(schema: List[Dict[str, Any]], db: Any) -> None:
    """
    Synchronize DB schema safely:
    - Create missing tables with all columns/constraints.
    - Add missing columns to existing tables (recreate for SQLite).
    - Add missing UNIQUE/FK constraints on server backends.
    Safe to call at every start.
    """
    if not schema:
        log.error("No schema provided")
        return

    with db.connection(autocommit=False) as (conn, cur):
        if db.backend == "sqlite":
            cur.execute("PRAGMA foreign_keys = OFF")
        try:
            for table_def in schema:
                table_name = table_def["table_name"]
                cols_def = table_def["table_columns"]
                log.debug("Syncing %s", table_name)

                if not _table_exists(db, cur, table_name):
                    _create_table(cur, table_name, cols_def, db.backend)
                    log.info("Created table %s", table_name)
                    continue

                if db.backend == "sqlite":
                    existing = _existing_columns(db, cur, table_name)
                    if any(col.lower() not in existing for col in _columns_of(cols_def)):
                        _recreate_table_for_sqlite(db, cur, table_name, cols_def)
                    continue

                _sync_server_table(db, cur, table_name, cols_def)

            conn.commit()
            log.info("Schema sync complete")
        finally:
            if db.backend == "sqlite":
                cur.execute("PRAGMA foreign_keys = ON")
