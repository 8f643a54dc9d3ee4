"""Missing translation log.

Records every key a lookup could not translate, per domain, in first-seen
order and without duplicates. Lookups run concurrently, so recording is an
atomic insert-if-absent and reads return snapshots.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pluralexengine.catalog.types import DomainName, MessageKey

__all__ = ["MissingTranslationLog"]

logger = logging.getLogger(__name__)


class MissingTranslationLog:
    """Append-only, deduplicated record of untranslated keys per domain.

    Example:
        >>> log = MissingTranslationLog()
        >>> log.record("app", "Hello")
        True
        >>> log.record("app", "Hello")
        False
        >>> log.get("app")
        ('Hello',)
    """

    __slots__ = ("_entries", "_lock")

    def __init__(self) -> None:
        """Initialize an empty log."""
        # dict keys double as an insertion-ordered set
        self._entries: dict[DomainName, dict[MessageKey, None]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return sum(len(keys) for keys in self._entries.values())

    def record(self, domain: DomainName, key: MessageKey) -> bool:
        """Record key as missing in domain.

        Returns:
            True if the key was new, False if it was already recorded
        """
        with self._lock:
            keys = self._entries.setdefault(domain, {})
            if key in keys:
                return False
            keys[key] = None
        logger.debug("Missing translation in domain '%s': %r", domain, key)
        return True

    def get(self, domain: DomainName) -> tuple[MessageKey, ...]:
        """Snapshot of missing keys for one domain, in first-seen order."""
        with self._lock:
            return tuple(self._entries.get(domain, ()))

    def snapshot(self) -> Mapping[DomainName, tuple[MessageKey, ...]]:
        """Read-only snapshot of every domain's missing keys."""
        with self._lock:
            return MappingProxyType({domain: tuple(keys) for domain, keys in self._entries.items()})

    def reset(self, domain: DomainName | None = None) -> None:
        """Forget recorded keys for one domain, or for all domains."""
        with self._lock:
            if domain is None:
                self._entries.clear()
            else:
                self._entries.pop(domain, None)
