"""
System status repository.

Reads the heartbeat document kept up to date by the prediction process.
"""

from typing import Any, Dict, Optional

from ..base import BaseRepository
from ..document_store import DocumentStore


class SystemStatusRepository(BaseRepository[Dict[str, Any]]):
    """Repository for the system status collection."""

    def __init__(self, store: DocumentStore, collection: str = "system_status", heartbeat_id: str = "heartbeat"):
        super().__init__(store)
        self._collection = collection
        self.heartbeat_id = heartbeat_id

    @property
    def collection(self) -> str:
        """Return the collection name."""
        return self._collection

    async def get_heartbeat(self) -> Optional[Dict[str, Any]]:
        """Return the heartbeat document body, or None if it has never been written."""
        document = await self.store.get(self.collection, self.heartbeat_id)
        return document.data if document else None
