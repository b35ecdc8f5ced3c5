from .migrations import setup_db
from .schema import schema
from .defaults import seed_defaults

import os
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from enum import StrEnum, auto
from pathlib import Path
from typing import Any, ClassVar, Generator, Literal, Tuple, Type
from urllib.parse import urlparse
import uuid

import sqlite3, pymysql, pymysql.cursors, psycopg2, psycopg2.extras
from flask import Flask
from retry import retry

from agristore.utils.logging import get_logger

logger = get_logger(__name__)


Fetch = Literal["all", "one", "none", "rowcount"]


class Backend(StrEnum):
    SQLITE = auto()
    POSTGRESQL = auto()
    MYSQL = auto()


class DBClient:
    OperationalError: ClassVar[Tuple[Type[BaseException], ...]] = (
        sqlite3.OperationalError,
        psycopg2.OperationalError,
        pymysql.err.OperationalError
    )
    IntegrityError: ClassVar[Tuple[Type[BaseException], ...]] = (
        sqlite3.IntegrityError,
        psycopg2.IntegrityError,
        pymysql.err.IntegrityError
    )

    def __init__(self, app: Flask | None = None) -> None:
        self.uri: str | None = None
        self.backend: Backend | None = None
        self._sqlite_target: str | None = None
        self._keepalive = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        uri = app.config.get("DATABASE_URI") or os.getenv("DATABASE_URL")
        if not uri:
            raise RuntimeError("No Database config found")
        if uri.startswith("sqlite:///"):
            self.backend = Backend.SQLITE
        elif uri.startswith(("postgresql://", "postgres://")):
            self.backend = Backend.POSTGRESQL
        elif uri.startswith(("mysql://", "mariadb://")):
            self.backend = Backend.MYSQL
        else:
            raise ValueError(f"Unsupported DATABASE_URI: {uri}")
        self.uri = uri
        app.extensions["db"] = self

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------
    @staticmethod
    def _dict_factory(cursor, row):
        return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}

    def _sqlite_connect(self):
        if self._sqlite_target is None:
            path = self.uri.split(":///", 1)[-1] or ":memory:"
            if path == ":memory:":
                # Shared in-memory database, kept alive for the client's lifetime.
                self._sqlite_target = f"file:agristore-{uuid.uuid4().hex}?mode=memory&cache=shared"
            else:
                db_path = Path(path).expanduser().resolve()
                os.makedirs(db_path.parent, exist_ok=True)
                self._sqlite_target = str(db_path)
        memory = self._sqlite_target.startswith("file:")
        conn = sqlite3.connect(self._sqlite_target, timeout=30, check_same_thread=False, uri=memory)
        conn.execute("PRAGMA foreign_keys = ON")
        if not memory:
            conn.execute("PRAGMA journal_mode = WAL")
        elif self._keepalive is None:
            self._keepalive = sqlite3.connect(self._sqlite_target, check_same_thread=False, uri=True)
        conn.row_factory = self._dict_factory
        return conn

    @retry(tries=3,
           delay=1,
           backoff=2,
           exceptions=OperationalError,
           logger=logger,
           )
    def connect(self) -> Tuple[Any, Any]:
        """Establish connection/ cursor with timeout/retry."""
        if not self.uri:
            raise RuntimeError("DBClient not initialized. Call init_app() first.")

        if self.backend == Backend.SQLITE:
            conn = self._sqlite_connect()
            return conn, conn.cursor()

        if self.backend == Backend.POSTGRESQL:
            conn = psycopg2.connect(self.uri, connect_timeout=10)
            conn.set_session(autocommit=False)
            cur = conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
            cur.execute("SET client_min_messages TO WARNING;")
            return conn, cur

        if self.backend == Backend.MYSQL:
            parsed = urlparse(self.uri)
            conn = pymysql.connect(
                host=parsed.hostname or "localhost",
                port=parsed.port or 3306,
                user=parsed.username or "",
                password=parsed.password or "",
                database=parsed.path.lstrip("/") or None,
                charset="utf8mb4",
                autocommit=False,
                connect_timeout=10,
                cursorclass=pymysql.cursors.DictCursor,
            )
            return conn, conn.cursor()

        raise ValueError(f"Unsupported Database Backend: {self.backend}")

    @contextmanager
    def connection(self, autocommit: bool = True) -> Generator[Tuple[Any, Any], None, None]:
        """
        Short-lived connection for startup work (schema sync, seeding).
        Request handling goes through ``UnitOfWork`` instead.
        """
        conn, cur = self.connect()
        try:
            yield conn, cur
            if autocommit:
                conn.commit()
        except Exception as e:
            conn.rollback()
            if isinstance(e, self.OperationalError):
                logger.warning("Transient DB error: %s", e)
            elif isinstance(e, self.IntegrityError):
                logger.info("Integrity error during DB operation: %s", e)
            else:
                logger.exception("DB error, rolled back: %s", e)
            raise
        finally:
            self.close(conn, cur)

    @staticmethod
    def close(conn: Any, cur: Any) -> None:
        for resource in (cur, conn):
            try:
                resource.close()
            except Exception as e:
                logger.debug("Ignoring error on close: %s", e)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def prepare(self, query: str) -> str:
        """Queries are written with ``?`` placeholders; server backends want ``%s``."""
        if self.backend == Backend.SQLITE:
            return query
        return query.replace("?", "%s")

    def adapt(self, params: tuple | list | None) -> tuple:
        if not params:
            return ()
        if self.backend != Backend.SQLITE:
            return tuple(params)
        adapted = []
        for value in params:
            if isinstance(value, datetime):
                value = value.isoformat(sep=" ", timespec="microseconds")
            elif isinstance(value, Decimal):
                value = str(value)
            adapted.append(value)
        return tuple(adapted)

    def run(self, cur: Any, query: str, params: tuple | list | None = None, fetch: Fetch = "all") -> Any:
        cur.execute(self.prepare(query), self.adapt(params))
        if fetch == "all":
            return cur.fetchall()
        if fetch == "one":
            return cur.fetchone()
        if fetch == "rowcount":
            return cur.rowcount
        return None

    @staticmethod
    def is_duplicate(exc: Exception) -> bool:
        """True when a driver IntegrityError reports a unique-key violation."""
        msg = str(exc).lower()
        return any(marker in msg for marker in ("unique", "duplicate", "uniq_"))

