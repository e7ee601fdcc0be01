"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import datetime

from .models import Link


class LinkStoreBase(ABC):
    """Abstract base class for link store operations.

    Implementations own the two guarantees the registry relies on: a
    uniqueness constraint on ``code`` and an atomic click increment. Driver
    errors are raised as ``StorageFailure``.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Store connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def insert_link(self, link: Link) -> bool:
        """Insert a new link if its code is free.

        The existence check and the insert are one atomic step.

        Args:
            link: The link to persist

        Returns:
            True if inserted, False if a live link already has that code
        """
        pass

    @abstractmethod
    async def get_link(self, code: str) -> Optional[Link]:
        """Get the link for a code.

        Args:
            code: The short code to lookup

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def record_hit(self, code: str, at: datetime) -> Optional[str]:
        """Atomically increment clicks and stamp the access time.

        Sets ``clicks = clicks + 1`` and ``last_clicked_at = updated_at = at``
        in a single store-side operation.

        Args:
            code: The short code that was resolved
            at: Resolution timestamp

        Returns:
            The target URL, or None if no link has that code
        """
        pass

    @abstractmethod
    async def list_links(self) -> List[Link]:
        """List all links, newest first.

        Returns:
            Links ordered by created_at descending
        """
        pass

    @abstractmethod
    async def delete_link(self, code: str) -> bool:
        """Delete a link permanently.

        Args:
            code: The short code to delete

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass
