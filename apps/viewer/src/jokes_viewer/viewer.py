from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import logging

from jokes_shared.models import Joke
from jokes_viewer.api_client import JokesApiError, JokesClient, NoJokesError
from jokes_viewer.cancellation import CancellationToken
from jokes_viewer.connectivity import ConnectivityMonitor
from jokes_viewer.storage import JokeCache

logger = logging.getLogger(__name__)

CACHED_DATA_MESSAGE = "Unable to fetch new data. Showing cached data."
CANNOT_CONNECT_MESSAGE = "Unable to connect to server. Please try again later."
OFFLINE_MESSAGE = "You are currently offline. Showing cached data."
OFFLINE_INDICATOR = "You are currently offline"
EMPTY_STATE_TEXT = "No data available"


class FailureKind(str, Enum):
    UNREACHABLE = "unreachable"
    EMPTY = "empty"


@dataclass(frozen=True)
class ViewState:
    loading: bool
    message: str | None
    show_retry: bool
    retry_enabled: bool
    offline_indicator: str | None
    joke: Joke | None
    show_next: bool
    empty_text: str | None
    show_refresh: bool


class JokeViewer:
    """Holds the joke sequence, the cursor and the status flags for one view.

    ``mount`` must be called from a running event loop. After ``unmount``
    the viewer never changes state again, even if a request it started
    completes later.
    """

    def __init__(
        self,
        *,
        client: JokesClient,
        cache: JokeCache,
        connectivity: ConnectivityMonitor,
    ) -> None:
        self._client = client
        self._cache = cache
        self._connectivity = connectivity
        self._token = CancellationToken()
        self._tasks: set[asyncio.Task[None]] = set()
        self._unsubscribe: Callable[[], None] | None = None

        self.jokes: list[Joke] = []
        self.index = 0
        self.message: str | None = None
        self.failure: FailureKind | None = None
        self.loading = True
        self.online = connectivity.is_online()

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None and not self._token.cancelled

    def mount(self) -> None:
        self._unsubscribe = self._connectivity.subscribe(
            on_online=self.handle_online,
            on_offline=self.handle_offline,
        )

        if self._connectivity.is_online():
            self.online = True
            self._start_fetch()
            return

        self.online = False
        self.message = OFFLINE_MESSAGE
        self.loading = False
        cached = self._cache.load()
        if cached:
            self._set_jokes(cached)

    def unmount(self) -> None:
        self._token.cancel()
        for task in list(self._tasks):
            task.cancel()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def wait_idle(self) -> None:
        """Wait for every fetch this viewer started to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def handle_online(self) -> None:
        if self._token.cancelled:
            return
        self.online = True
        self.message = None
        self._start_fetch()

    def handle_offline(self) -> None:
        if self._token.cancelled:
            return
        self.online = False
        self.message = OFFLINE_MESSAGE

    def retry(self) -> None:
        if self._token.cancelled:
            return
        self._start_fetch()

    def next_joke(self) -> None:
        if self._token.cancelled or not self.jokes:
            return
        self.index = (self.index + 1) % len(self.jokes)

    async def refresh(self) -> None:
        await self._fetch(self._token)

    def render(self) -> ViewState:
        joke = None
        if not self.loading and self.jokes:
            joke = self.jokes[self.index]
        empty = not self.loading and not self.jokes
        return ViewState(
            loading=self.loading,
            message=self.message,
            show_retry=self.message is not None,
            retry_enabled=not self.loading,
            offline_indicator=None if self.online else OFFLINE_INDICATOR,
            joke=joke,
            show_next=joke is not None,
            empty_text=EMPTY_STATE_TEXT if empty else None,
            show_refresh=empty,
        )

    def _start_fetch(self) -> None:
        task = asyncio.get_running_loop().create_task(self._fetch(self._token))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _set_jokes(self, jokes: list[Joke]) -> None:
        self.jokes = list(jokes)
        if self.index >= len(self.jokes):
            self.index = 0

    async def _fetch(self, token: CancellationToken) -> None:
        if token.cancelled:
            return
        self.loading = True

        # CancelledError propagates untouched: a cancelled fetch mutates nothing.
        try:
            try:
                jokes = await self._client.fetch_jokes()
            except JokesApiError as exc:
                if token.cancelled:
                    return
                self._recover(exc)
            else:
                if token.cancelled:
                    logger.debug("Discarding jokes fetched after unmount")
                    return
                self._set_jokes(jokes)
                self.message = None
                self.failure = None
                self._persist(jokes)
        finally:
            if not token.cancelled:
                self.loading = False

    def _persist(self, jokes: list[Joke]) -> None:
        try:
            self._cache.save(jokes)
        except OSError as exc:
            logger.warning("Could not write joke cache: %s", exc)

    def _recover(self, exc: JokesApiError) -> None:
        if isinstance(exc, NoJokesError):
            self.failure = FailureKind.EMPTY
            logger.warning("Service reported no jokes: %s", exc)
        else:
            self.failure = FailureKind.UNREACHABLE
            logger.error("Error fetching jokes: %s", exc)

        cached = self._cache.load()
        if cached:
            self._set_jokes(cached)
            self.message = CACHED_DATA_MESSAGE
        else:
            self.message = CANNOT_CONNECT_MESSAGE
