"""Data models for the link store."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Any, Mapping


@dataclass(frozen=True)
class LinkRecord:
    """Represents a short link mapping in the store.

    Persisted field names (``grue_url``, ``short``, ``date``, ``last_visit``,
    ``remove_dt``) are kept for compatibility with existing ShortLinks data.
    """

    long_url: str
    short_code: str
    created_at: datetime
    last_visited_at: datetime
    expires_at: Optional[datetime] = None

    def touched(self, visited_at: datetime, expires_at: Optional[datetime]) -> "LinkRecord":
        """Copy of this record after a visit."""
        return replace(self, last_visited_at=visited_at, expires_at=expires_at)

    def to_document(self) -> dict:
        """Convert to a dictionary keyed by persisted field names."""
        return {
            "grue_url": self.long_url,
            "short": self.short_code,
            "date": self.created_at,
            "last_visit": self.last_visited_at,
            "remove_dt": self.expires_at,
        }

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "short_code": self.short_code,
            "long_url": self.long_url,
            "created_at": self.created_at.isoformat(),
            "last_visited_at": self.last_visited_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "LinkRecord":
        """Create from a row or document keyed by persisted field names."""
        created_at = _as_datetime(data["date"])
        last_visit = data.get("last_visit")
        remove_dt = data.get("remove_dt")
        return cls(
            long_url=data["grue_url"],
            short_code=data["short"],
            created_at=created_at,
            last_visited_at=_as_datetime(last_visit) if last_visit is not None else created_at,
            expires_at=_as_datetime(remove_dt) if remove_dt is not None else None,
        )


def _as_datetime(value: Any) -> datetime:
    return value if isinstance(value, datetime) else datetime.fromisoformat(value)
