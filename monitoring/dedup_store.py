"""
Deduplication Store

Remembers which call keys have already been relayed during this run.
Nothing is persisted; keys are never removed.
"""

import logging

logger = logging.getLogger(__name__)


class DeduplicationStore:
    """In-memory set of already-seen call keys."""

    def __init__(self, seen=None):
        self._seen = set(seen or ())

    def add_if_absent(self, key):
        """
        Record a key unless it is already known.

        Returns:
            bool: True if the key was new and has now been recorded
        """
        if key in self._seen:
            return False
        self._seen.add(key)
        logger.debug(f"Recorded call key {key} ({len(self._seen)} seen)")
        return True

    def __contains__(self, key):
        return key in self._seen

    def __len__(self):
        return len(self._seen)
