"""Export writers for user data requests.

The provider writes one record per call:

    writer.with_context(context).export_data(["Arlo enrolments", "Contact"], data)

``MemoryExportWriter`` collects those calls into a tree keyed by context
id, then by each label of the path, with the records in a ``data`` list
at the leaf.
"""

import json
from typing import Any, Dict, List, Optional, Protocol, Sequence

from enrol_arlo.privacy.contexts import PrivacyContext


class ContentWriter(Protocol):
    def export_data(self, subcontext: Sequence[str], data: Dict[str, Any]) -> "ContentWriter":
        ...


class ExportWriter(Protocol):
    def with_context(self, context: PrivacyContext) -> ContentWriter:
        ...


class _ContextWriter:
    def __init__(self, owner: "MemoryExportWriter", tree: Dict[str, Any]):
        self._owner = owner
        self._tree = tree

    def export_data(self, subcontext: Sequence[str], data: Dict[str, Any]) -> "_ContextWriter":
        node = self._tree
        for label in subcontext:
            node = node.setdefault(label, {})
        node.setdefault("data", []).append(dict(data))
        self._owner._calls += 1
        return self


class MemoryExportWriter:
    """Collects exported records in memory."""

    def __init__(self):
        self._contexts: Dict[int, Dict[str, Any]] = {}
        self._calls = 0

    def with_context(self, context: PrivacyContext) -> _ContextWriter:
        tree = self._contexts.setdefault(context.id, {})
        return _ContextWriter(self, tree)

    @property
    def call_count(self) -> int:
        return self._calls

    def get_data(self, contextid: int, subcontext: Sequence[str]) -> List[Dict[str, Any]]:
        """Records exported for a context at the given label path."""
        node: Optional[Dict[str, Any]] = self._contexts.get(contextid)
        for label in subcontext:
            if node is None:
                return []
            node = node.get(label)
        if node is None:
            return []
        return list(node.get("data", []))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {str(contextid): tree for contextid, tree in sorted(self._contexts.items())}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)
