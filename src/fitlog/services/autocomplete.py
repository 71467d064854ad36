"""Debounced typeahead session over the cached food search."""

import asyncio
import logging
from dataclasses import dataclass, field

from fitlog.domain.nutrition import SearchCandidate
from fitlog.services.food_search import FoodSearchService

STATE_IDLE = "idle"
STATE_DEBOUNCING = "debouncing"
STATE_LOADING = "loading"
STATE_DONE = "done"
STATE_ERROR = "error"

DEFAULT_MIN_CHARS = 2
DEFAULT_DEBOUNCE_SECONDS = 0.3

_logger = logging.getLogger(__name__)


@dataclass
class AutocompleteSession:
    """Typeahead state for one search box.

    Every query update gets a new sequence number. A response is applied only
    when its number is still the latest; superseded requests run to completion
    and are dropped. Must be driven from a running event loop.
    """

    search_service: FoodSearchService
    mode: str
    min_chars: int = DEFAULT_MIN_CHARS
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    query: str = ""
    state: str = STATE_IDLE
    results: list[SearchCandidate] = field(default_factory=list)
    error: str | None = None
    is_open: bool = False
    sequence: int = 0
    _debounce: asyncio.Task | None = field(default=None, repr=False)
    _requests: set[asyncio.Task] = field(default_factory=set, repr=False)

    def __post_init__(self) -> None:
        self.search_service.provider_for(self.mode)

    def update_query(self, query: str) -> None:
        """Handle a keystroke."""
        self.query = query
        self.sequence += 1
        self._cancel_debounce()
        trimmed = query.strip()
        if len(trimmed) < self.min_chars:
            self._apply(STATE_IDLE, [], None, is_open=False)
            return

        cached = self.search_service.cached(self.mode, trimmed)
        if cached is not None:
            self._apply(STATE_DONE, cached, None, is_open=True)
            return

        self.state = STATE_DEBOUNCING
        self._debounce = asyncio.get_running_loop().create_task(
            self._dispatch_after_delay(trimmed, self.sequence)
        )

    def set_mode(self, mode: str) -> None:
        """Switch provider; the session starts over."""
        self.search_service.provider_for(mode)
        self.mode = mode
        self.update_query("")

    def close(self) -> None:
        """Hide the suggestion list without touching the results."""
        self.is_open = False

    async def settle(self) -> None:
        """Wait for the pending debounce and every in-flight request."""
        while self._debounce is not None or self._requests:
            pending = [task for task in (self._debounce, *self._requests) if task]
            await asyncio.gather(*pending, return_exceptions=True)

    async def _dispatch_after_delay(self, query: str, request_id: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._debounce = None
        request = asyncio.get_running_loop().create_task(
            self._request(self.mode, query, request_id)
        )
        self._requests.add(request)
        request.add_done_callback(self._requests.discard)
        self._apply(STATE_LOADING, [], None, is_open=True)

    async def _request(self, mode: str, query: str, request_id: int) -> None:
        outcome = await self.search_service.fetch(mode, query)
        if request_id != self.sequence:
            _logger.debug("Dropping stale search response: query=%s", query)
            return
        if outcome.error is not None:
            self._apply(STATE_ERROR, [], outcome.error, is_open=True)
            return
        self.search_service.remember(mode, query, outcome.results)
        self._apply(STATE_DONE, outcome.results, None, is_open=True)

    def _cancel_debounce(self) -> None:
        if self._debounce is not None:
            self._debounce.cancel()
            self._debounce = None

    def _apply(
        self,
        state: str,
        results: list[SearchCandidate],
        error: str | None,
        *,
        is_open: bool,
    ) -> None:
        self.state = state
        self.results = list(results)
        self.error = error
        self.is_open = is_open
