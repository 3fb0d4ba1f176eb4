"""Abstract base class for link index implementations."""

from abc import ABC, abstractmethod
from typing import List

from .models import LinkEntry


class URLIndex(ABC):
    """Keeps track of the ID <-> long URL mapping.

    Implementations must be safe to call concurrently from independent
    requests. The mapping is append-only: an ID, once handed out for a URL,
    keeps pointing at that URL forever.
    """

    @abstractmethod
    async def lookup_id(self, link_id: int) -> str:
        """Get the long URL mapped to an ID.

        Args:
            link_id: The ID to look up

        Returns:
            The stored long URL

        Raises:
            NotFound: If no link has that ID
            StorageError: If the backend fails
        """
        pass

    @abstractmethod
    async def add_url(self, long_url: str) -> int:
        """Make sure a URL is in the index and return its ID.

        Idempotent: adding an already known URL returns the existing ID,
        also when several callers add the same URL at the same time.

        Args:
            long_url: Normalized long URL

        Returns:
            The ID belonging to that URL

        Raises:
            StorageError: If the backend fails
        """
        pass

    @abstractmethod
    async def list_entries(self, limit: int = 100) -> List[LinkEntry]:
        """List the most recently added links, newest first.

        Args:
            limit: Maximum number of entries to return

        Returns:
            List of entries
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the backend handle."""
        pass
