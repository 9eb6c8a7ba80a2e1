"""
Document repository base class.

Repositories wrap one collection of the document store and turn raw
documents into models.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .document_store import DocumentStore

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Base class for document repositories."""

    def __init__(self, store: DocumentStore):
        """
        Initialize the repository.

        Args:
            store: Connected document store client
        """
        self.store = store

    @property
    @abstractmethod
    def collection(self) -> str:
        """Return the collection name for this repository."""
        pass
