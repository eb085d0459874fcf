"""
Core interfaces and abstract base classes for the CCRM platform.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Generic, List, Optional, TypeVar

from .enums import PersonType


T = TypeVar('T')


class Persona(ABC):
    """Contract implemented by every kind of person the registrar tracks."""

    @property
    @abstractmethod
    def person_type(self) -> PersonType:
        """Get the kind of person."""
        pass

    @abstractmethod
    def display_info(self) -> str:
        """Get a one-line, variant-specific description."""
        pass


class Auditable(ABC):
    """Interface for entities that keep a timestamped audit trail."""

    @abstractmethod
    def add_audit_entry(self, entry: str) -> None:
        """Append an entry to the audit trail."""
        pass

    @property
    @abstractmethod
    def audit_trail(self) -> List[str]:
        """Get a copy of the audit trail."""
        pass

    @property
    @abstractmethod
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        pass

    @property
    @abstractmethod
    def last_modified(self) -> datetime:
        """Get the timestamp of the latest audited change."""
        pass


class Searchable(ABC, Generic[T]):
    """Abstract base class for in-memory collections of entities."""

    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find entity by ID."""
        pass

    @abstractmethod
    def get_all(self) -> List[T]:
        """Get all entities in insertion order."""
        pass

    def search(self, predicate: Callable[[T], bool]) -> List[T]:
        """Get all entities matching a predicate."""
        return [entity for entity in self.get_all() if predicate(entity)]

    def count(self, predicate: Callable[[T], bool]) -> int:
        """Count entities matching a predicate."""
        return len(self.search(predicate))
