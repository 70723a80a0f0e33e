"""Result types for privacy operations."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass
class ErasureResult:
    """Rows affected by an erasure call.

    Attributes:
        operation: Name of the erasure entry point
        contextid: Context the request was scoped to, if any
        userid: User the request was scoped to, if any
        counts: Affected row count per table
        timestamp: When the erasure finished
    """
    operation: str
    contextid: Optional[int] = None
    userid: Optional[int] = None
    counts: Dict[str, int] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add(self, table: str, count: int) -> None:
        self.counts[table] = self.counts.get(table, 0) + count

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "operation": self.operation,
            "contextid": self.contextid,
            "userid": self.userid,
            "counts": dict(self.counts),
            "total": self.total,
            "timestamp": self.timestamp.isoformat(),
        }
