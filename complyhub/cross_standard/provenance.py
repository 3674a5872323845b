# -*- coding: utf-8 -*-
"""
Provenance Tracking - Cross-Standard Integration Engine

Chained SHA-256 audit entries for computed summaries and suggestion
lists. Every entry hashes its own fields together with the previous
entry's hash, so any edit to an earlier entry breaks ``verify_chain``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

logger = logging.getLogger(__name__)

__all__ = [
    "GENESIS_HASH",
    "ProvenanceTracker",
    "compute_hash",
]

GENESIS_HASH: str = "0" * 64


def compute_hash(data: Any) -> str:
    """Compute a deterministic SHA-256 hash of arbitrary data.

    Args:
        data: Data to hash (dict, list, str, or Pydantic model).

    Returns:
        SHA-256 hex digest string.
    """
    if hasattr(data, "model_dump"):
        serializable = data.model_dump(mode="json")
    else:
        serializable = data
    raw = json.dumps(serializable, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode()).hexdigest()


def _entry_hash(entry: Dict[str, Any]) -> str:
    body = {k: v for k, v in entry.items() if k != "entry_hash"}
    return hashlib.sha256(
        json.dumps(body, sort_keys=True, default=str).encode()
    ).hexdigest()


class ProvenanceTracker:
    """Append-only provenance chain.

    When ``max_entries`` is set, only the most recent entries are kept;
    the chain still links across evicted entries and ``verify_chain``
    checks the retained window.

    Attributes:
        entry_count: Number of entries recorded, evicted ones included.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self._entries: Deque[Dict[str, Any]] = deque(maxlen=max_entries)
        self._lock = threading.Lock()
        self.entry_count: int = 0

    @property
    def last_hash(self) -> str:
        with self._lock:
            if not self._entries:
                return GENESIS_HASH
            return self._entries[-1]["entry_hash"]

    def record(
        self,
        entity_type: str,
        entity_id: str,
        action: str,
        data_hash: str,
        user_id: str = "system",
    ) -> str:
        """Record a provenance entry and return its hash.

        Args:
            entity_type: Type of entity (summary, document_suggestions,
                equivalent_gaps).
            entity_id: Entity identifier.
            action: Action performed (compute, suggest, lookup).
            data_hash: SHA-256 hash of associated data.
            user_id: User or system that performed the action.

        Returns:
            SHA-256 hash of the provenance entry itself.
        """
        with self._lock:
            previous = (
                self._entries[-1]["entry_hash"] if self._entries else GENESIS_HASH
            )
            entry: Dict[str, Any] = {
                "entity_type": entity_type,
                "entity_id": entity_id,
                "action": action,
                "data_hash": data_hash,
                "user_id": user_id,
                "previous_hash": previous,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            entry["entry_hash"] = _entry_hash(entry)
            self._entries.append(entry)
            self.entry_count += 1
            return entry["entry_hash"]

    def get_entries(self) -> List[Dict[str, Any]]:
        """Return copies of all recorded entries, oldest first."""
        with self._lock:
            return [dict(e) for e in self._entries]

    def verify_chain(self) -> bool:
        """Check every entry's hash and its link to the previous entry."""
        with self._lock:
            previous = GENESIS_HASH
            if self._entries and self.entry_count > len(self._entries):
                previous = self._entries[0]["previous_hash"]
            for index, entry in enumerate(self._entries):
                if entry["previous_hash"] != previous:
                    logger.warning("Provenance chain broken at entry %d", index)
                    return False
                if entry["entry_hash"] != _entry_hash(entry):
                    logger.warning("Provenance entry %d hash mismatch", index)
                    return False
                previous = entry["entry_hash"]
            return True
