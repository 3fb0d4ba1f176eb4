"""Data models for shortlinks."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LinkEntry:
    """A stored link. Entries are created once and never modified."""

    id: int
    long_url: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "long_url": self.long_url,
        }
