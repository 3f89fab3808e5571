"""
Per-page mutual exclusion for deployment operations
"""

import threading
from contextlib import contextmanager
from typing import FrozenSet, Iterator, Set

from landing_deploy.api.exceptions import DeploymentInProgressError


class PageLockRegistry:
    """
    In-process, non-blocking locks keyed by page id.

    A second operation for a page that is already being worked on is
    rejected instead of interleaving writes on its record. Nothing waits
    on a held page, so only the ids currently held are tracked.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._held: Set[str] = set()

    def held(self) -> FrozenSet[str]:
        """Page ids currently held"""
        with self._guard:
            return frozenset(self._held)

    def is_locked(self, page_id: str) -> bool:
        with self._guard:
            return page_id in self._held

    @contextmanager
    def hold(self, page_id: str) -> Iterator[None]:
        """
        Raises:
            DeploymentInProgressError: Another operation holds the page
        """
        with self._guard:
            if page_id in self._held:
                raise DeploymentInProgressError(
                    f"Another operation is already running for page {page_id}", status_code=409
                )
            self._held.add(page_id)
        try:
            yield
        finally:
            with self._guard:
                self._held.discard(page_id)
