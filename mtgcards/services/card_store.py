"""
Self-refreshing card store.

Keeps the latest card feed in memory and refreshes it from mtgjson on a
fixed interval using conditional requests (ETag / If-None-Match).

INVARIANTS:
- A published Catalog is never modified; each refresh swaps in a new one
- The write lock is held only for the swap, never for network I/O or decoding
- Update waiters are notified only after the new Catalog is visible to cards()
- A failed refresh never changes state and is never surfaced to readers

LIFECYCLE:
    store = new_store()            # starts refreshing in the background
    catalog = store.cards()        # blocks until the first successful load
    future = store.wait_for_update()
    catalog = future.result()      # blocks until the next successful load
    store.close()                  # stops future refreshes
"""

import logging
from collections.abc import Iterator
from concurrent.futures import Future
from contextlib import contextmanager
from threading import Event, Lock, Thread
from types import TracebackType
from typing import cast

import httpx

from mtgcards.config import Settings
from mtgcards.config import settings as default_settings
from mtgcards.models.failure import FailureKind, KnownError
from mtgcards.parsers.mtgjson import CatalogDecodeError, decode_card_feed
from mtgcards.services.catalog import Catalog
from mtgcards.services.locks import ReadWriteLock


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class CatalogFetchError(KnownError):
    """Base class for failures fetching the card feed."""


class CatalogTransportError(CatalogFetchError):
    """The card feed could not be reached."""

    def __init__(self, error: Exception):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message="Could not reach card feed",
            detail=str(error) or type(error).__name__,
        )


class CatalogStatusError(CatalogFetchError):
    """The card feed answered with a non-success status."""

    def __init__(self, status_code: int, body_excerpt: str):
        self.status_code = status_code
        self.body_excerpt = body_excerpt
        super().__init__(
            kind=FailureKind.UNEXPECTED_STATUS,
            message=f"Card feed returned HTTP {status_code}",
        )


class CatalogReadError(CatalogFetchError):
    """The card feed response body could not be read."""

    def __init__(self, error: Exception):
        super().__init__(
            kind=FailureKind.READ_FAILED,
            message="Could not read card feed body",
            detail=str(error) or type(error).__name__,
        )


class StoreClosedError(KnownError):
    """Raised when closing (or starting) a store that is already closed."""

    def __init__(self) -> None:
        super().__init__(kind=FailureKind.ALREADY_CLOSED, message="already closed")


class StoreAlreadyStartedError(KnownError):
    """Raised when starting a store whose refresh loop is already running."""

    def __init__(self) -> None:
        super().__init__(kind=FailureKind.ALREADY_STARTED, message="already started")


class CatalogNotReadyError(KnownError):
    """Raised when no catalog was loaded before a caller's timeout expired."""

    def __init__(self, timeout: float | None):
        super().__init__(
            kind=FailureKind.NOT_READY,
            message="Card catalog not loaded yet",
            detail=f"waited {timeout}s",
        )


def truncate(body: bytes, limit: int) -> str:
    """Decode at most `limit` bytes of a response body for logging."""
    return body[:limit].decode("utf-8", errors="replace")


# =============================================================================
# STORE
# =============================================================================


class CardStore:
    """
    Card catalog that periodically updates itself from the remote feed.

    Args:
        settings: Feed URL, user agent, interval and timeouts.
            Defaults to the environment-loaded settings.
        client: HTTP client used for refreshes. If unset, the store creates
            its own and closes it on close().
        refresh_interval: Seconds between refreshes, overriding settings.
            0 performs the initial refresh only.
        logger: Receives refresh outcomes. Defaults to the module logger.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
        refresh_interval: float | None = None,
        logger: logging.Logger | None = None,
    ):
        self.settings = settings or default_settings
        if refresh_interval is None:
            refresh_interval = self.settings.refresh_interval_seconds
        self.refresh_interval = refresh_interval
        self.logger = logger or logging.getLogger(__name__)

        self._client = client
        self._owns_client = client is None
        self._client_lock = Lock()

        self._lock = ReadWriteLock()
        self._catalog: Catalog | None = None
        self._etag = ""
        self._update_signal: Future[Catalog] = Future()

        self._ready = Event()
        self._closed = Event()
        self._lifecycle_lock = Lock()
        self._thread: Thread | None = None
        self._loop_done = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        Start the background refresh loop.

        The first refresh begins immediately; this method does not wait
        for it.

        Raises:
            StoreAlreadyStartedError: If the loop was already started
            StoreClosedError: If the store was closed
        """
        with self._lifecycle_lock:
            if self._closed.is_set():
                raise StoreClosedError()
            if self._thread is not None:
                raise StoreAlreadyStartedError()
            self._thread = Thread(target=self._watch, name="card-store-refresh", daemon=True)
            self._thread.start()

    def close(self) -> None:
        """
        Prevent future refreshes.

        A refresh already in flight is allowed to finish. An HTTP client
        created by the store is closed once no refresh can use it.

        Raises:
            StoreClosedError: If the store was already closed
        """
        with self._lifecycle_lock:
            if self._closed.is_set():
                raise StoreClosedError()
            self._closed.set()
            loop_active = self._thread is not None and not self._loop_done

        # A running loop closes the client itself once its last refresh ends.
        if not loop_active:
            self._close_owned_client()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def is_ready(self) -> bool:
        """True once a catalog has been loaded."""
        return self._ready.is_set()

    @property
    def is_running(self) -> bool:
        """True while the background refresh loop is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def etag(self) -> str:
        """Cache validator of the current catalog, empty before the first load."""
        with self._lock.read_locked():
            return self._etag

    def __enter__(self) -> "CardStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.closed:
            self.close()

    # -------------------------------------------------------------------------
    # Readers
    # -------------------------------------------------------------------------

    def cards(self, timeout: float | None = None) -> Catalog:
        """
        Get the current catalog.

        Blocks until the first successful refresh. Safe to call from any
        number of threads.

        Args:
            timeout: Seconds to wait for the first load. None waits forever.

        Raises:
            CatalogNotReadyError: If the timeout expired before the first load
        """
        if not self._ready.wait(timeout):
            raise CatalogNotReadyError(timeout)
        with self._lock.read_locked():
            return cast(Catalog, self._catalog)

    def wait_for_update(self) -> Future[Catalog]:
        """
        Get a future for the catalog of the next successful refresh.

        Every call returns an independent future; all futures obtained
        before a refresh resolve when it completes. Use
        asyncio.wrap_future() to await one from a coroutine.

        Example:
            catalog = store.cards()
            while True:
                catalog = store.wait_for_update().result()
                # re-index catalog
        """
        with self._lock.read_locked():
            generation = self._update_signal
        handle: Future[Catalog] = Future()
        generation.add_done_callback(lambda done: _notify(handle, done))
        return handle

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    def _watch(self) -> None:
        try:
            self.refresh()
            while self.refresh_interval > 0:
                if self._closed.wait(self.refresh_interval):
                    return
                self.refresh()
        finally:
            with self._lifecycle_lock:
                self._loop_done = True
                closed = self._closed.is_set()
            if closed:
                self._close_owned_client()

    def refresh(self) -> bool:
        """
        Run one refresh cycle on the calling thread.

        Failures are logged and leave the current catalog in place.

        Returns:
            True if a new catalog was published.
        """
        with self._lock.read_locked():
            etag = self._etag

        limit = self.settings.log_body_limit
        try:
            fetched = self._fetch(etag)
            if fetched is None:
                self.logger.debug("Card feed not modified (etag %r)", etag)
                return False
            body, new_etag = fetched
            try:
                catalog = Catalog(decode_card_feed(body))
            except CatalogDecodeError as e:
                self.logger.error(
                    "Could not decode cards: %s, body:\n---\n%s\n---",
                    e,
                    truncate(body, limit),
                )
                return False
        except CatalogStatusError as e:
            self.logger.error("Card update failed - %s, body:\n---\n%s\n---", e, e.body_excerpt)
            return False
        except CatalogFetchError as e:
            self.logger.error("Could not update cards: %s", e)
            return False
        except Exception:
            self.logger.exception("Unexpected error during card update")
            return False

        self._publish(catalog, new_etag)
        self.logger.info("Card update successful: %d cards", len(catalog))
        return True

    def _fetch(self, etag: str) -> tuple[bytes, str] | None:
        """
        Conditionally download the card feed.

        Returns:
            (body, etag) for a fresh feed, None if it was not modified.

        Raises:
            CatalogTransportError: If the request failed
            CatalogStatusError: If the status is not 2xx or 304
            CatalogReadError: If the body could not be read
        """
        headers = {
            "If-None-Match": etag,
            "User-Agent": self.settings.user_agent,
        }
        try:
            with (
                self._http_client() as client,
                client.stream("GET", self.settings.catalog_url, headers=headers) as response,
            ):
                if response.status_code == httpx.codes.NOT_MODIFIED:
                    return None

                read_error: Exception | None = None
                try:
                    body = response.read()
                except (httpx.HTTPError, httpx.StreamError) as e:
                    body = b""
                    read_error = e

                if not response.is_success:
                    raise CatalogStatusError(
                        response.status_code, truncate(body, self.settings.log_body_limit)
                    )
                if read_error is not None:
                    raise CatalogReadError(read_error) from read_error
                return body, response.headers.get("ETag", "")
        except httpx.HTTPError as e:
            raise CatalogTransportError(e) from e

    def _publish(self, catalog: Catalog, etag: str) -> None:
        with self._lock.write_locked():
            self._catalog = catalog
            self._etag = etag
            fired = self._update_signal
            self._update_signal = Future()

        self._ready.set()
        fired.set_result(catalog)

    def _new_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.settings.request_timeout_seconds,
            follow_redirects=True,
        )

    @contextmanager
    def _http_client(self) -> Iterator[httpx.Client]:
        """
        Yield the client for one request.

        After close(), a store that owns its client uses a throwaway one
        so nothing is left open.
        """
        with self._client_lock:
            client = self._client
            if client is None and not self._closed.is_set():
                client = self._client = self._new_client()
        if client is not None:
            yield client
            return
        with self._new_client() as temporary:
            yield temporary

    def _close_owned_client(self) -> None:
        if not self._owns_client:
            return
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None


def _resolve(handle: Future[Catalog], generation: Future[Catalog]) -> None:
    if handle.set_running_or_notify_cancel():
        handle.set_result(generation.result())


def _notify(handle: Future[Catalog], generation: Future[Catalog]) -> None:
    # Each handle resolves on its own thread; its callbacks never hold up refreshes.
    Thread(
        target=_resolve, args=(handle, generation), name="card-store-notify", daemon=True
    ).start()


def new_store(
    settings: Settings | None = None,
    client: httpx.Client | None = None,
    refresh_interval: float | None = None,
    logger: logging.Logger | None = None,
) -> CardStore:
    """
    Create a card store and start refreshing it in the background.

    Returns without waiting for the first refresh; call cards() to block
    until the catalog is available.
    """
    store = CardStore(
        settings=settings,
        client=client,
        refresh_interval=refresh_interval,
        logger=logger,
    )
    store.start()
    return store
