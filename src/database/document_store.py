"""
Document store client using asyncpg.

Documents live in one PostgreSQL table, keyed by collection and document ID,
with the body in a JSONB column:

    CREATE TABLE documents (
        collection TEXT NOT NULL,
        id TEXT NOT NULL,
        data JSONB NOT NULL,
        PRIMARY KEY (collection, id)
    );

The client is read-only. It is constructed once at application startup and
passed to the repositories that need it.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import asyncpg

from ..config.logging import get_logger
from ..exceptions import StoreConnectionError, StoreQueryError

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Document:
    """One stored document."""

    id: str
    data: Dict[str, Any]


class DocumentStore:
    """Manages the asyncpg pool and runs document lookups and queries."""

    def __init__(self, dsn: str, table: str = "documents", min_size: int = 1, max_size: int = 5):
        """
        Initialize store client. No connection is made until `connect()`.

        Args:
            dsn: PostgreSQL connection URL
            table: Documents table name
            min_size: Minimum pool size
            max_size: Maximum pool size
        """
        if not _IDENTIFIER.match(table):
            raise ValueError(f"Invalid documents table name: {table!r}")
        self._dsn = dsn
        self.table = table
        self.min_size = min_size
        self.max_size = max_size
        self._pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        """Create the connection pool."""
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(
                self._dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=30,
            )
            logger.info("document_store_pool_created", table=self.table)
        except Exception as e:
            logger.error("document_store_pool_creation_failed", error=str(e))
            raise StoreConnectionError(f"Failed to create document store pool: {e}") from e

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("document_store_pool_closed")

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def ping(self) -> bool:
        """Run a trivial query to check the store is reachable."""
        pool = self._require_pool()
        try:
            return await pool.fetchval("SELECT 1") == 1
        except Exception as e:
            raise StoreQueryError(f"Document store ping failed: {e}") from e

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """
        Get a single document by key.

        Args:
            collection: Collection name
            doc_id: Document ID

        Returns:
            Document, or None if it does not exist
        """
        pool = self._require_pool()
        query = f"SELECT id, data FROM {self.table} WHERE collection = $1 AND id = $2"
        try:
            row = await pool.fetchrow(query, collection, doc_id)
        except Exception as e:
            logger.error("document_store_get_failed", collection=collection, doc_id=doc_id, error=str(e))
            raise StoreQueryError(f"Failed to get {collection}/{doc_id}: {e}") from e
        return _to_document(row) if row else None

    async def query(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """
        Query documents of a collection.

        Args:
            collection: Collection name
            where: Top-level field equality filters (JSON containment)
            order_by: Top-level field to order by (text ordering, so ISO timestamps sort correctly)
            descending: Order direction
            limit: Maximum number of documents

        Returns:
            Matching documents
        """
        pool = self._require_pool()
        sql = f"SELECT id, data FROM {self.table} WHERE collection = $1"
        params: List[Any] = [collection]

        if where:
            params.append(json.dumps(where))
            sql += f" AND data @> ${len(params)}::jsonb"

        if order_by:
            params.append(order_by)
            direction = "DESC" if descending else "ASC"
            sql += f" ORDER BY data ->> ${len(params)} {direction} NULLS LAST, id {direction}"

        if limit is not None:
            params.append(limit)
            sql += f" LIMIT ${len(params)}"

        try:
            rows = await pool.fetch(sql, *params)
        except Exception as e:
            logger.error(
                "document_store_query_failed",
                collection=collection,
                where=where,
                order_by=order_by,
                error=str(e),
            )
            raise StoreQueryError(f"Failed to query {collection}: {e}") from e

        return [_to_document(row) for row in rows]

    def _require_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StoreConnectionError("Document store is not connected")
        return self._pool


def _to_document(row: Any) -> Document:
    data = row["data"]
    if isinstance(data, (str, bytes)):
        data = json.loads(data)
    return Document(id=str(row["id"]), data=data if isinstance(data, dict) else {})
