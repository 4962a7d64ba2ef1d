"""
Document datastore.

The loader talks to a minimal document-collection contract (find, bulk and
single insert, delete and count with equality / ``$in`` filters). The
PostgreSQL implementation stores each collection as a table of JSONB
documents guarded by a status check constraint and unique indexes on the
dedup keys.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

import psycopg2
from psycopg2 import sql
from psycopg2.extras import Json, execute_values

from geoingest.configs.settings import Settings, get_settings

from .errors import ConfigurationError, DatastoreConnectionError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
Filter = Dict[str, Any]

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")
UNIQUE_KEYS = ("slug", "external_id")
STATUSES = ("pending", "active", "rejected")


class DocumentCollection(Protocol):
    """Operations the loader and orchestrator need from a collection."""

    name: str

    def find(self, filter: Filter, projection: Optional[Dict[str, int]] = None) -> List[Document]:
        ...

    def insert_many(self, docs: List[Document], ordered: bool = False) -> int:
        ...

    def insert_one(self, doc: Document) -> None:
        ...

    def delete_many(self, filter: Filter) -> int:
        ...

    def count_documents(self, filter: Filter) -> int:
        ...


# ---------------------------------------------------------------------------
# FILTER TRANSLATION
# ---------------------------------------------------------------------------


def _as_text(value: Any) -> str:
    """Render a filter value the way ``doc->>'key'`` renders the stored one."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def build_where(filter: Filter) -> Tuple[sql.Composable, List[Any]]:
    """
    Translate a document filter into a SQL WHERE clause.

    Supports equality on top-level fields and ``{"$in": [...]}``. An empty
    filter matches every document.

    Raises:
        ValueError: On any other operator
    """
    if not filter:
        return sql.SQL("TRUE"), []

    clauses = []
    params: List[Any] = []
    for key, condition in filter.items():
        if isinstance(condition, dict):
            if set(condition) != {"$in"}:
                raise ValueError(f"Unsupported filter operator for '{key}': {list(condition)}")
            clauses.append(sql.SQL("(doc->>%s) = ANY(%s)"))
            params.extend([key, [_as_text(v) for v in condition["$in"]]])
        else:
            clauses.append(sql.SQL("(doc->>%s) = %s"))
            params.extend([key, _as_text(condition)])

    return sql.SQL(" AND ").join(clauses), params


def apply_projection(doc: Document, projection: Optional[Dict[str, int]]) -> Document:
    if not projection:
        return doc
    return {key: doc[key] for key, include in projection.items() if include and key in doc}


# ---------------------------------------------------------------------------
# POSTGRES IMPLEMENTATION
# ---------------------------------------------------------------------------


class PostgresCollection:
    """
    One JSONB-backed table.

    Each call commits on success and rolls back on failure, so no
    transaction spans more than one batch. ``insert_many`` is a single
    statement: any rejected document aborts the whole call and the caller
    falls back to ``insert_one``.
    """

    def __init__(self, conn, name: str, moderated: bool = True):
        if not _IDENTIFIER.match(name):
            raise ValueError(f"Invalid collection name: {name!r}")
        self.conn = conn
        self.name = name
        self.moderated = moderated
        self._table = sql.Identifier(name)

    def _run(self, query: sql.Composable, params: Iterable[Any] = ()) -> Any:
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, list(params))
                result = cur.fetchall() if cur.description else cur.rowcount
            self.conn.commit()
            return result
        except psycopg2.Error:
            self.conn.rollback()
            raise

    def ensure_collection(self) -> None:
        """
        Create the table and its unique key indexes.

        Moderated collections also get a check constraint limiting
        ``status`` to the moderation states.
        """
        constraint = sql.SQL("")
        if self.moderated:
            constraint = sql.SQL(
                ", CONSTRAINT {check} CHECK ((doc->>'status') IS NULL OR (doc->>'status') IN ({statuses}))"
            ).format(
                check=sql.Identifier(f"{self.name}_status_check"),
                statuses=sql.SQL(", ").join(sql.Literal(s) for s in STATUSES),
            )
        statements = [
            sql.SQL(
                "CREATE TABLE IF NOT EXISTS {table} ("
                " id BIGSERIAL PRIMARY KEY,"
                " doc JSONB NOT NULL,"
                " created_at TIMESTAMPTZ NOT NULL DEFAULT now()"
                "{constraint}"
                ")"
            ).format(table=self._table, constraint=constraint)
        ]
        for key in UNIQUE_KEYS:
            statements.append(
                sql.SQL(
                    "CREATE UNIQUE INDEX IF NOT EXISTS {index} ON {table} ((doc->>{key}))"
                    " WHERE (doc->>{key}) IS NOT NULL"
                ).format(
                    index=sql.Identifier(f"{self.name}_{key}_key"),
                    table=self._table,
                    key=sql.Literal(key),
                )
            )
        for statement in statements:
            self._run(statement)

    def find(self, filter: Filter, projection: Optional[Dict[str, int]] = None) -> List[Document]:
        where, params = build_where(filter)
        rows = self._run(
            sql.SQL("SELECT doc FROM {table} WHERE {where} ORDER BY id").format(
                table=self._table, where=where
            ),
            params,
        )
        return [apply_projection(row[0], projection) for row in rows]

    def insert_many(self, docs: List[Document], ordered: bool = False) -> int:
        if not docs:
            return 0
        try:
            with self.conn.cursor() as cur:
                execute_values(
                    cur,
                    sql.SQL("INSERT INTO {table} (doc) VALUES %s").format(table=self._table),
                    [(Json(doc),) for doc in docs],
                )
            self.conn.commit()
        except psycopg2.Error:
            self.conn.rollback()
            raise
        return len(docs)

    def insert_one(self, doc: Document) -> None:
        self._run(
            sql.SQL("INSERT INTO {table} (doc) VALUES (%s)").format(table=self._table),
            [Json(doc)],
        )

    def delete_many(self, filter: Filter) -> int:
        where, params = build_where(filter)
        return self._run(
            sql.SQL("DELETE FROM {table} WHERE {where}").format(table=self._table, where=where),
            params,
        )

    def count_documents(self, filter: Filter) -> int:
        where, params = build_where(filter)
        rows = self._run(
            sql.SQL("SELECT count(*) FROM {table} WHERE {where}").format(
                table=self._table, where=where
            ),
            params,
        )
        return rows[0][0]


class PostgresDatastore:
    """
    Shared connection for one run.

    Opened once at run start and closed at the end; collections are handed
    out lazily and their tables created on first use.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        connect: Callable[..., Any] = psycopg2.connect,
    ):
        self.settings = settings or get_settings()
        self._connect = connect
        self.conn = None
        self._collections: Dict[str, PostgresCollection] = {}

    def connect(self) -> None:
        if self.conn is not None:
            return
        if not self.settings.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL is empty")
        params = self.settings.get_psycopg2_params()
        try:
            self.conn = self._connect(**params)
        except psycopg2.Error as e:
            raise DatastoreConnectionError(
                f"Could not connect to {params.get('host')}:{params.get('port')}/{params.get('dbname')}: {e}"
            ) from e
        logger.info(f"Connected to datastore {params.get('dbname')}")

    def collection(self, name: str, moderated: bool = True) -> PostgresCollection:
        if self.conn is None:
            raise DatastoreConnectionError("Datastore is not connected")
        if name not in self._collections:
            coll = PostgresCollection(self.conn, name, moderated=moderated)
            coll.ensure_collection()
            self._collections[name] = coll
        return self._collections[name]

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            self._collections.clear()
            logger.info("Datastore connection closed")

    def __enter__(self) -> "PostgresDatastore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
