"""Content hashing utilities using stdlib hashlib (SHA-256)."""

from __future__ import annotations

import hashlib
import json
from typing import Any


class Hasher:
    """SHA-256 hashing for strings and canonical JSON documents."""

    @staticmethod
    def hash_string(text: str) -> str:
        """Return the SHA-256 hex digest of *text*."""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    @staticmethod
    def canonical_json(data: dict[str, Any]) -> str:
        """Serialise *data* with sorted keys and no insignificant whitespace.

        Equal documents always produce identical text, independent of
        key insertion order.
        """
        return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)

    @staticmethod
    def hash_canonical(data: dict[str, Any]) -> str:
        """Return the SHA-256 hex digest of ``canonical_json(data)``."""
        return Hasher.hash_string(Hasher.canonical_json(data))
