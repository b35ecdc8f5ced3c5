from datetime import datetime, timezone
from typing import Any, Dict, List

import bcrypt

from agristore.utils.logging import get_logger

log = get_logger(__name__)

ADMIN_ROLE = "Admin"
CUSTOMER_ROLE = "Customer"

# Each entry is inserted unless a row with ``key == value`` already exists.
# ``role`` in data is resolved to ``role_id``; ``password`` is bcrypt hashed.
default_list: List[Dict[str, Any]] = [
    {"table_name": "role_table", "key": "name", "value": ADMIN_ROLE, "data": {}},
    {"table_name": "role_table", "key": "name", "value": CUSTOMER_ROLE, "data": {}},
    {
        "table_name": "user_table",
        "key": "username",
        "value": "admin",
        "data": {
            "full_name": "Store Administrator",
            "email": "admin@agristore.local",
            "role": ADMIN_ROLE,
            "password": None,
        },
    },
]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def seed_defaults(db: Any, admin_password: str, entries: List[Dict[str, Any]] = default_list) -> int:
    """Insert missing default rows. Returns how many rows were created."""
    created = 0
    with db.connection() as (conn, cur):
        for entry in entries:
            table = entry["table_name"]
            exists = db.run(
                cur, f"SELECT id FROM {table} WHERE {entry['key']} = ?", (entry["value"],), fetch="one"
            )
            if exists:
                continue

            row = dict(entry["data"])
            row[entry["key"]] = entry["value"]
            if "role" in row:
                role = db.run(cur, "SELECT id FROM role_table WHERE name = ?", (row.pop("role"),), fetch="one")
                row["role_id"] = role["id"]
            if "password" in row:
                row.pop("password")
                row["password_hash"] = hash_password(admin_password)
                row["created_at"] = datetime.now(timezone.utc).replace(tzinfo=None)
                row["is_active"] = True

            db.run(
                cur,
                f"INSERT INTO {table} ({', '.join(row)}) VALUES ({', '.join('?' for _ in row)})",
                tuple(row.values()),
                fetch="none",
            )
            log.info("Seeded default %s %s=%s", table, entry["key"], entry["value"])
            created += 1
    return created
