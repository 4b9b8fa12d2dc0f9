# jobboard/controller.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from math import ceil
from typing import Awaitable, Callable

from .config import settings
from .errors import JobBoardError, NotFound, TransientError
from .providers.base import IdentityProvider, ListingBackend, LocationDirectory, SearchQuery
from .providers.locations import get_directory
from .schemas import City, Country, JobOut, Subdivision
from .services.sanitize import sanitize_html

log = logging.getLogger(__name__)


class Mode(str, Enum):
    PUBLIC = "public"
    DASHBOARD = "dashboard"


class Phase(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    QUERYING = "querying"
    SETTLED = "settled"
    ERRORED = "errored"


@dataclass
class FilterState:
    term: str = ""
    job_type: str = ""
    country: str = ""
    state: str = ""
    city: str = ""
    page: int = 1
    mode: Mode = Mode.PUBLIC


@dataclass
class Notice:
    level: str  # "success" | "error"
    message: str


class Debouncer:
    """Runs ``callback(value)`` once input has paused for ``delay`` seconds.

    Every push while the timer is running restarts it with the newer value.
    A callback that already started is left alone.
    """

    def __init__(self, delay: float, callback: Callable[[str], Awaitable[None]]):
        self.delay = delay
        self._callback = callback
        self._task: asyncio.Task | None = None
        self._armed = False

    def push(self, value: str) -> None:
        self.cancel()
        self._armed = True
        self._task = asyncio.create_task(self._fire(value))

    async def _fire(self, value: str) -> None:
        await asyncio.sleep(self.delay)
        self._armed = False
        await self._callback(value)

    def cancel(self) -> None:
        if self._armed and self._task is not None:
            self._task.cancel()
        self._armed = False

    async def wait(self) -> None:
        while self._task is not None and not self._task.done():
            await asyncio.wait([self._task])


class FilterController:
    """Owns the browse filters and keeps the rendered page in step with them.

    Text input is debounced; select-style filters apply at once. Any
    effective filter change sends the view back to page 1. Each query is
    tagged with a sequence number and only the answer to the most recently
    issued query is rendered, so a slow response can never overwrite a newer
    one.
    """

    def __init__(
        self,
        backend: ListingBackend,
        *,
        identity: IdentityProvider | None = None,
        locations: LocationDirectory | None = None,
        mode: Mode = Mode.PUBLIC,
        page_size: int | None = None,
        debounce: float | None = None,
        timeout: float | None = None,
    ):
        self._backend = backend
        self._identity = identity
        self._locations = locations or get_directory()
        self.page_size = page_size or settings.PAGE_SIZE
        self.timeout = settings.QUERY_TIMEOUT if timeout is None else timeout

        self.filters = FilterState(mode=mode)
        self.term_input = ""
        self.owner_id: str | None = None

        self.rows: list[JobOut] = []
        self.total_count = 0
        self.loading = False
        self.phase = Phase.IDLE
        self.notices: list[Notice] = []
        self.queries_issued = 0

        self._seq = 0
        self._debouncer = Debouncer(
            settings.DEBOUNCE_SECONDS if debounce is None else debounce, self._apply_term
        )

    # -- derived state --------------------------------------------------

    @property
    def total_pages(self) -> int:
        return ceil(self.total_count / self.page_size)

    @property
    def countries(self) -> list[Country]:
        return self._locations.countries()

    @property
    def states(self) -> list[Subdivision]:
        return self._locations.states(self.filters.country)

    @property
    def cities(self) -> list[City]:
        return self._locations.cities(self.filters.country, self.filters.state)

    def can_edit(self, row: JobOut) -> bool:
        # display only; the store enforces ownership on every write
        return (
            self.filters.mode == Mode.DASHBOARD
            and self.owner_id is not None
            and row.user_id == self.owner_id
        )

    def snapshot(self) -> SearchQuery:
        f = self.filters
        return SearchQuery(
            term=f.term,
            job_type=f.job_type,
            country=f.country,
            state=f.state if f.country else "",
            owner_id=self.owner_id if f.mode == Mode.DASHBOARD else None,
            page_size=self.page_size,
            page_number=f.page,
        )

    def notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level, message))

    # -- lifecycle ------------------------------------------------------

    async def start(self) -> None:
        await self.resolve_identity()
        await self.refresh()

    async def resolve_identity(self) -> str | None:
        if self._identity is None:
            return self.owner_id
        try:
            self.owner_id = await self._identity.current_principal()
        except JobBoardError as e:
            log.warning("identity lookup failed: %s", e)
            self.owner_id = None
        return self.owner_id

    async def settle(self) -> None:
        """Wait for a pending debounced term, and the query it triggers."""
        await self._debouncer.wait()

    def close(self) -> None:
        self._debouncer.cancel()

    # -- filter changes -------------------------------------------------

    def set_term(self, text: str) -> None:
        self.term_input = text
        self.phase = Phase.DEBOUNCING
        self._debouncer.push(text)

    async def _apply_term(self, text: str) -> None:
        if text == self.filters.term:
            self.phase = Phase.SETTLED if not self.loading else Phase.QUERYING
            return
        await self._change(term=text)

    async def set_job_type(self, job_type: str) -> None:
        await self._change(job_type=job_type)

    async def set_country(self, country: str) -> None:
        await self._change(country=country, state="", city="")

    async def set_state(self, state: str) -> None:
        if not self.filters.country:
            state = ""
        await self._change(state=state, city="")

    def set_city(self, city: str) -> None:
        # not a search parameter; only kept consistent with its parents
        self.filters.city = city if self.filters.state else ""

    async def set_mode(self, mode: Mode) -> None:
        await self._change(mode=Mode(mode))

    async def _change(self, **fields) -> None:
        new = replace(self.filters, **fields)
        if new == self.filters:
            return
        self.filters = replace(new, page=1)
        await self.refresh()

    # -- pagination -----------------------------------------------------

    async def set_page(self, page: int) -> None:
        page = max(1, min(page, self.total_pages or 1))
        if page == self.filters.page:
            return
        self.filters.page = page
        await self.refresh()

    async def next_page(self) -> None:
        await self.set_page(self.filters.page + 1)

    async def previous_page(self) -> None:
        await self.set_page(self.filters.page - 1)

    # -- querying -------------------------------------------------------

    async def refresh(self) -> None:
        self._seq += 1
        seq = self._seq

        if self.filters.mode == Mode.DASHBOARD and self.owner_id is None:
            # never send an unscoped dashboard query
            self.rows = []
            self.total_count = 0
            self.loading = False
            self.phase = Phase.SETTLED
            return

        query = self.snapshot()
        self.loading = True
        self.phase = Phase.QUERYING
        self.queries_issued += 1

        error: JobBoardError | None = None
        result = None
        try:
            result = await asyncio.wait_for(self._backend.search(query), self.timeout)
        except asyncio.TimeoutError:
            error = TransientError(f"query timed out after {self.timeout}s")
        except JobBoardError as e:
            error = e
        except Exception as e:
            log.exception("unexpected failure while querying listings")
            error = JobBoardError(str(e) or e.__class__.__name__)

        if seq != self._seq:
            log.debug("discarding stale response #%d (latest #%d)", seq, self._seq)
            return

        self.loading = False
        if error is not None:
            log.warning("query failed: %s", error)
            self.phase = Phase.ERRORED
            self.notify("error", f"Could not fetch jobs: {error.message}")
            return

        self.rows = list(result.rows)
        self.total_count = result.total_count
        self.phase = Phase.SETTLED

        last = self.total_pages
        if self.filters.page > 1 and self.filters.page > last:
            # the page we were on no longer exists, e.g. after a delete
            self.filters.page = max(last, 1)
            if last:
                await self.refresh()

    async def delete_listing(self, listing_id: str) -> bool:
        try:
            await self._backend.delete(listing_id)
        except JobBoardError as e:
            log.warning("delete of %s failed: %s", listing_id, e)
            self.notify("error", f"Failed to delete job: {e.message}")
            return False
        self.notify("success", "Job deleted successfully.")
        await self.refresh()
        return True


@dataclass
class ListingDetail:
    """State of the single-listing view."""

    backend: ListingBackend
    identity: IdentityProvider | None = None
    locations: LocationDirectory | None = None
    listing: JobOut | None = None
    principal_id: str | None = None
    loading: bool = False
    not_found: bool = False
    error: str | None = None
    notices: list[Notice] = field(default_factory=list)

    @property
    def is_owner(self) -> bool:
        return (
            self.listing is not None
            and self.principal_id is not None
            and self.listing.user_id == self.principal_id
        )

    @property
    def location_label(self) -> str:
        if self.listing is None:
            return ""
        locations = self.locations or get_directory()
        job = self.listing
        return f"{job.location_city}, {job.location_state}, {locations.country_name(job.location_country)}"

    @property
    def description_html(self) -> str:
        return sanitize_html(self.listing.description) if self.listing else ""

    async def load(self, listing_id: str) -> None:
        self.loading = True
        self.not_found = False
        self.error = None
        if self.identity is not None:
            try:
                self.principal_id = await self.identity.current_principal()
            except JobBoardError as e:
                log.warning("identity lookup failed: %s", e)
                self.principal_id = None
        try:
            self.listing = await self.backend.get(listing_id)
        except NotFound:
            self.listing = None
            self.not_found = True
        except JobBoardError as e:
            self.listing = None
            self.error = e.message
        finally:
            self.loading = False

    async def delete(self) -> bool:
        if self.listing is None or not self.is_owner:
            return False
        try:
            await self.backend.delete(self.listing.id)
        except JobBoardError as e:
            self.notices.append(Notice("error", f"Failed to delete job: {e.message}"))
            return False
        self.notices.append(Notice("success", "Job successfully deleted."))
        self.listing = None
        return True
