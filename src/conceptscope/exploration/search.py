"""Search session: committed term, ranked results and pagination.

Only the latest search is ever applied. Starting a search resets the page and
clears previous results and error before the request is sent.
"""

import asyncio
import logging
from dataclasses import replace

from conceptscope.client import APIError, ConceptGraphClient
from conceptscope.config import settings
from conceptscope.exploration.concurrency import Debouncer, RequestSlot
from conceptscope.exploration.store import SessionStore
from conceptscope.models import Pagination, SearchResults, SearchState

logger = logging.getLogger(__name__)


class SearchSession:
    """Runs searches against the backend and owns the search state."""

    def __init__(
        self,
        client: ConceptGraphClient,
        store: SessionStore,
        delay: float | None = None,
        page_size: int | None = None,
        page_window: int | None = None,
        threshold: float | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.page_size = page_size or settings.page_size
        self.page_window = page_window or settings.page_window
        self.threshold = settings.search_threshold if threshold is None else threshold
        self._slot = RequestSlot("search")
        self._debouncer = Debouncer(
            settings.search_debounce if delay is None else delay, name="search"
        )

    def _empty_pagination(self) -> Pagination:
        return Pagination(page_size=self.page_size, window_width=self.page_window)

    def _reset(self, term: str) -> int:
        """Supersede earlier searches and show a clean state for ``term``."""
        token = self._slot.begin()
        state = SearchState(
            term=term,
            loading=bool(term),
            pagination=self._empty_pagination(),
        )
        self.store.update(lambda s: replace(s, search=state))
        return token

    def _set(self, token: int, **changes) -> None:
        if self._slot.discard(token):
            return
        self.store.update(lambda s: replace(s, search=replace(s.search, **changes)))

    async def _run(self, term: str, token: int) -> SearchResults | None:
        logger.info(f"Searching for {term!r}")
        try:
            results = await self.client.search(term, threshold=self.threshold)
        except APIError as e:
            logger.warning(f"Search for {term!r} failed: {e.message}")
            self._set(token, results=SearchResults(), error=e.message, loading=False)
            return None
        except asyncio.CancelledError:
            self._set(token, loading=False)
            raise

        if self._slot.discard(token):
            return None

        logger.info(
            f"Search for {term!r}: exact={results.exact_match is not None}, "
            f"similar={len(results.similar_matches)}"
        )
        pagination = replace(
            self._empty_pagination(), total_items=len(results.similar_matches)
        )
        self._set(token, results=results, error=None, loading=False, pagination=pagination)
        return results

    async def search(self, term: str) -> SearchResults | None:
        """Run a search now. Empty terms clear the results without a request."""
        term = term.strip()
        self._debouncer.cancel()
        token = self._reset(term)
        if not term:
            return None
        return await self._run(term, token)

    def schedule(self, term: str) -> None:
        """Search-as-you-type: state resets now, the request waits for quiet."""
        term = term.strip()
        token = self._reset(term)
        if not term:
            self._debouncer.cancel()
            return
        self._debouncer.schedule(lambda: self._run(term, token))

    def clear(self) -> None:
        """Drop the term, results and error, and any pending search."""
        self._debouncer.cancel()
        self._reset("")

    def go_to_page(self, page: int) -> Pagination:
        """Move the similar-match list to ``page`` (clamped)."""

        def transition(s):
            pagination = s.search.pagination.go_to(page)
            if pagination is s.search.pagination:
                return s
            return replace(s, search=replace(s.search, pagination=pagination))

        return self.store.update(transition).search.pagination

    async def wait(self) -> None:
        await self._debouncer.wait()
