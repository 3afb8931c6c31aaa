"""Database engine factory.

Every Engine in UBIQA comes from `make_engine` so connections are configured
consistently. SQLite connections get PRAGMAs enforcing foreign keys and
enabling WAL; other backends are used as configured.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}


def is_sqlite(url: str | URL) -> bool:
    """Return True if the URL points at SQLite."""
    return make_url(str(url)).get_backend_name() in SQLITE_NAMES


def is_memory_sqlite(url: str | URL) -> bool:
    """Return True for an in-memory SQLite URL (``sqlite://`` or ``:memory:``)."""
    u = make_url(str(url))
    return is_sqlite(u) and u.database in (None, "", ":memory:")


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    SQLite connections run:
        - ``foreign_keys=ON`` (listings and payments reference their owners)
        - ``journal_mode=WAL``
        - ``synchronous=NORMAL``
        - ``temp_store=MEMORY``

    In-memory SQLite shares one connection across the engine so every unit of
    work sees the same database.

    Args:
        url: Database connection URL.
        echo: If True, log SQL statements.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """
    kwargs = {}
    if is_memory_sqlite(url):
        kwargs = {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    engine = create_engine(url, echo=echo, future=True, **kwargs)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute("PRAGMA temp_store=MEMORY;")
            cur.close()

    logger.debug("Created engine for backend %s", engine.dialect.name)
    return engine
