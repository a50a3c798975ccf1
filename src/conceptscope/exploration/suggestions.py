"""Live query completions.

Best effort: failures degrade to an empty list and are never surfaced.
"""

import logging
from dataclasses import replace

from conceptscope.client import APIError, ConceptGraphClient
from conceptscope.config import settings
from conceptscope.exploration.concurrency import Debouncer, RequestSlot
from conceptscope.exploration.store import SessionStore

logger = logging.getLogger(__name__)


class SuggestionFetcher:
    """Debounced, self-cancelling suggestion requests."""

    def __init__(
        self,
        client: ConceptGraphClient,
        store: SessionStore,
        delay: float | None = None,
        limit: int | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.limit = settings.suggest_limit if limit is None else limit
        self._slot = RequestSlot("suggest")
        self._debouncer = Debouncer(
            settings.suggest_debounce if delay is None else delay, name="suggest"
        )

    def _commit(self, token: int, suggestions: tuple[str, ...]) -> None:
        if self._slot.discard(token):
            return
        self.store.update(
            lambda s: s if s.suggestions == suggestions else replace(s, suggestions=suggestions)
        )

    async def _fetch(self, prefix: str, token: int) -> tuple[str, ...]:
        try:
            suggestions = tuple(await self.client.suggest(prefix))
            if self.limit:
                suggestions = suggestions[:self.limit]
        except APIError as e:
            logger.debug(f"Suggestions for {prefix!r} unavailable: {e}")
            suggestions = ()
        self._commit(token, suggestions)
        return suggestions

    async def suggest(self, prefix: str) -> tuple[str, ...]:
        """Fetch suggestions now, superseding any earlier request."""
        prefix = prefix.strip()
        self._debouncer.cancel()
        token = self._slot.begin()
        if not prefix:
            self._commit(token, ())
            return ()
        return await self._fetch(prefix, token)

    def schedule(self, prefix: str) -> None:
        """Fetch suggestions once typing has been quiet for the debounce delay."""
        prefix = prefix.strip()
        token = self._slot.begin()
        if not prefix:
            self._debouncer.cancel()
            self._commit(token, ())
            return
        self._debouncer.schedule(lambda: self._fetch(prefix, token))

    def cancel(self) -> None:
        """Drop pending and in-flight requests."""
        self._debouncer.cancel()
        self._slot.begin()

    async def wait(self) -> None:
        await self._debouncer.wait()
