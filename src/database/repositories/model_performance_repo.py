"""
Model performance repository.
"""

from typing import Optional

from ..base import BaseRepository
from ..document_store import DocumentStore
from ...models.model_performance import ModelPerformance


class ModelPerformanceRepository(BaseRepository[ModelPerformance]):
    """Repository for model performance documents."""

    def __init__(self, store: DocumentStore, collection: str = "model_performance"):
        super().__init__(store)
        self._collection = collection

    @property
    def collection(self) -> str:
        """Return the collection name."""
        return self._collection

    async def get_latest(self) -> Optional[ModelPerformance]:
        """Return the most recent evaluation, or None if there is none."""
        documents = await self.store.query(self.collection, order_by="timestamp", descending=True, limit=1)
        if not documents:
            return None
        return ModelPerformance.from_document(documents[0].id, documents[0].data)
