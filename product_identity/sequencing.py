from __future__ import annotations
"""
Last-request-wins bookkeeping for repeated resolutions.

A form re-resolves a product row on every edit and earlier calls are never
cancelled, so responses can arrive out of order. Each call is tagged with a
token issued per record key (e.g. the index of the row being edited); a
response is applied only if its token is still the latest for that key.
"""

from typing import Awaitable, Dict, Hashable, Optional, Tuple, TypeVar

T = TypeVar("T")


class ResolutionSequencer:
    def __init__(self) -> None:
        self._latest: Dict[Hashable, int] = {}

    def issue(self, record_key: Hashable) -> int:
        token = self._latest.get(record_key, 0) + 1
        self._latest[record_key] = token
        return token

    def is_current(self, record_key: Hashable, token: int) -> bool:
        return self._latest.get(record_key) == token

    def accept(self, record_key: Hashable, token: int, result: T) -> Optional[T]:
        """Return ``result`` if the token is current, else None (stale)."""
        return result if self.is_current(record_key, token) else None

    def forget(self, record_key: Hashable) -> None:
        # Row removed from the form; any in-flight response becomes stale.
        self._latest.pop(record_key, None)

    async def run(self, record_key: Hashable, awaitable: Awaitable[T]) -> Tuple[bool, Optional[T]]:
        """
        Issue a token, await the call, and report whether it is still current.

        Returns (accepted, result); result is None when the response is stale.
        """
        token = self.issue(record_key)
        result = await awaitable
        if self.is_current(record_key, token):
            return True, result
        return False, None
