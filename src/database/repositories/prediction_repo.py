"""
Prediction repository.

Read access to the predictions collection.
"""

from typing import List, Optional

from ..base import BaseRepository
from ..document_store import DocumentStore
from ...config.logging import get_logger
from ...models.prediction import Prediction

logger = get_logger(__name__)


class PredictionRepository(BaseRepository[Prediction]):
    """Repository for prediction documents."""

    def __init__(self, store: DocumentStore, collection: str = "bitcoin_predictions"):
        super().__init__(store)
        self._collection = collection

    @property
    def collection(self) -> str:
        """Return the collection name."""
        return self._collection

    async def get_recent(self, limit: int) -> List[Prediction]:
        """
        Get the most recent predictions, newest first.

        Args:
            limit: Maximum number of predictions

        Returns:
            Predictions ordered by creation timestamp descending
        """
        documents = await self.store.query(
            self.collection, order_by="timestamp", descending=True, limit=limit
        )
        return [Prediction.from_document(doc.id, doc.data) for doc in documents]

    async def get_unvalidated(self, limit: int) -> List[Prediction]:
        """Get unvalidated predictions, newest first."""
        documents = await self.store.query(
            self.collection,
            where={"validated": False},
            order_by="timestamp",
            descending=True,
            limit=limit,
        )
        return [Prediction.from_document(doc.id, doc.data) for doc in documents]

    async def get_validated(self, limit: Optional[int] = None) -> List[Prediction]:
        """Get validated predictions (unordered unless limited, then newest first)."""
        documents = await self.store.query(
            self.collection,
            where={"validated": True},
            order_by="timestamp" if limit is not None else None,
            descending=True,
            limit=limit,
        )
        predictions = [Prediction.from_document(doc.id, doc.data) for doc in documents]
        logger.debug("validated_predictions_loaded", count=len(predictions))
        return predictions
